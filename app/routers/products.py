import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from app.core.config import settings
from app.core.db import get_products_coll
from app.models import ProductsResponse
from app.services.products import (
    build_filter,
    clamp_page,
    fetch_product_groups,
    flatten_groups,
    parse_positive_int,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("", response_model=ProductsResponse)
async def get_products(
    param: str = Query(""),
    status: str = Query(""),
    page: Optional[str] = Query(None, description="1-based page, defaults to 1"),
    limit: Optional[str] = Query(None, description="Group documents per page, defaults to 10"),
    coll=Depends(get_products_coll),
):
    page_no = parse_positive_int(page, settings.default_page)
    page_size = parse_positive_int(limit, settings.default_limit)
    page_no = clamp_page(page_no, page_size, settings.default_page)

    logger.info("Received param: %s", param)
    logger.info("Received status: %s", status)
    logger.info("Page: %d, Limit: %d", page_no, page_size)

    q = build_filter(param, status)
    logger.info("Filter created: %s", q)

    try:
        docs = await fetch_product_groups(
            coll, q, page_no, page_size, timeout=settings.query_timeout_seconds
        )
    except Exception as e:
        logger.error("Error finding products: %s", e)
        return PlainTextResponse(str(e), status_code=500)

    return ProductsResponse(data=flatten_groups(docs))
