import asyncio
import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ASCENDING

from app.models import Broker, Insurer, Product, ProductGroup, ProductType

logger = logging.getLogger(__name__)

_REGEX_META = re.compile(r"[.*+?^${}()|\[\]\\]")

SEARCH_FIELDS = (
    "productType.key",
    "key",
    "productList.productName",
    "productList.insurer.insurerCode",
    "productList.brokers.key",
)
STATUS_FIELD = "productList.productStatus"
SORT_FIELD = "productList.productName"


class ProductQueryTimeout(Exception):
    pass


def sanitize_string(text: str) -> str:
    """Escape regex metacharacters so user input matches literally."""
    return _REGEX_META.sub(lambda m: "\\" + m.group(0), text)


_INT_RE = re.compile(r"[+-]?[0-9]+")
MAX_INT64 = 2**63 - 1


def parse_positive_int(raw: Optional[str], default: int) -> int:
    if raw is None or not _INT_RE.fullmatch(raw):
        return default
    value = int(raw)
    if value < 1 or value > MAX_INT64:
        return default
    return value


def clamp_page(page: int, limit: int, default: int) -> int:
    """Fall back to default when the page offset would not fit in a BSON int64."""
    if (page - 1) * limit > MAX_INT64:
        return default
    return page


def _regex(pattern: str) -> Dict[str, str]:
    return {"$regex": pattern, "$options": "i"}


def build_filter(param: str = "", status: str = "") -> Dict[str, Any]:
    q: Dict[str, Any] = {}
    if param:
        sanitized_param = sanitize_string(param)
        logger.info("Sanitized param: %s", sanitized_param)
        q["$or"] = [{field: _regex(sanitized_param)} for field in SEARCH_FIELDS]

    if status:
        sanitized_status = sanitize_string(status.upper())
        logger.info("Sanitized status: %s", sanitized_status)
        q[STATUS_FIELD] = _regex(sanitized_status)

    return q


def get_string_field(data: Any, key: str) -> str:
    if isinstance(data, Mapping):
        value = data.get(key)
        if isinstance(value, str):
            return value
    logger.debug("Field %s not found or not a string", key)
    return ""


def _brokers(raw: Any) -> List[Broker]:
    out: List[Broker] = []
    if not isinstance(raw, list):
        return out
    for b in raw:
        if not isinstance(b, Mapping):
            logger.debug("Skipping malformed broker: %r", b)
            continue
        out.append(
            Broker(
                key=get_string_field(b, "key"),
                channelName=get_string_field(b, "channelName"),
            )
        )
    return out


def flatten_group(doc: Mapping[str, Any]) -> List[Product]:
    """
    Expand one product group document into one Product per productList entry.

    Group and product type name/key are copied onto every entry. A group
    without a productList array contributes nothing; malformed entries and
    brokers are dropped one by one.
    """
    product_list = doc.get("productList")
    if not isinstance(product_list, list):
        logger.warning("Skipping group %r: productList is %r", doc.get("_id"), product_list)
        return []

    group = ProductGroup(
        name=get_string_field(doc, "name"),
        key=get_string_field(doc, "key"),
    )
    product_type = doc.get("productType")
    ptype = ProductType(
        name=get_string_field(product_type, "name"),
        key=get_string_field(product_type, "key"),
    )

    out: List[Product] = []
    for item in product_list:
        if not isinstance(item, Mapping):
            logger.debug("Skipping malformed product entry: %r", item)
            continue

        insurer = item.get("insurer")
        out.append(
            Product(
                id=get_string_field(item, "id"),
                productName=get_string_field(item, "productName"),
                productGroup=group.model_copy(),
                productType=ptype.model_copy(),
                insurer=Insurer(
                    id=get_string_field(insurer, "_id"),
                    insurerCode=get_string_field(insurer, "insurerCode"),
                    insurerName=get_string_field(insurer, "insurerName"),
                ),
                brokers=_brokers(item.get("brokers")),
                status=get_string_field(item, "productStatus"),
            )
        )
    return out


def flatten_groups(docs: Iterable[Mapping[str, Any]]) -> List[Product]:
    products: List[Product] = []
    for d in docs:
        products.extend(flatten_group(d))
    return products


async def fetch_product_groups(
    collection,
    q: Dict[str, Any],
    page: int,
    limit: int,
    timeout: float = 10.0,
) -> List[Dict[str, Any]]:
    # pagination applies to group documents, not flattened products
    cursor = collection.find(
        q,
        sort=[(SORT_FIELD, ASCENDING)],
        skip=(page - 1) * limit,
        limit=limit,
        max_time_ms=int(timeout * 1000),
    )
    try:
        return await asyncio.wait_for(cursor.to_list(length=None), timeout=timeout)
    except asyncio.TimeoutError:
        raise ProductQueryTimeout(f"product query exceeded {timeout:g}s deadline")
    finally:
        await cursor.close()
