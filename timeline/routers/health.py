"""
Health Check 라우터.
"""
import asyncio
import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text

from timeline.database import engine

logger = logging.getLogger("timeline.health")
router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    summary="Health check",
)
async def health_check() -> Dict[str, Any]:
    """
    Application and database liveness.

    Returns 503 if the database does not answer within one second.
    """
    async def _check_db():
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    try:
        await asyncio.wait_for(_check_db(), timeout=1.0)
    except asyncio.TimeoutError:
        logger.warning("DB health check timeout", extra={"event": "health"})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection timeout",
        )
    except Exception as e:
        logger.warning("DB health check failed", extra={"event": "health", "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )

    return {"status": "healthy", "database": "ok"}
