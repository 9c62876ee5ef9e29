from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.db import get_db

router = APIRouter(prefix="/api/v1/health", tags=["health"])

@router.get("")
async def health(db=Depends(get_db)):
    try:
        await db.command("ping")
    except Exception:
        return JSONResponse({"status": "unavailable"}, status_code=503)
    return {"status": "ok"}
