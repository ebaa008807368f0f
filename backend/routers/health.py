"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_async_session

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, str]:
    """Liveness: the process is up."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/ready")
async def readiness_check(response: Response, db: AsyncSession = Depends(get_async_session)) -> Dict[str, str]:
    """Readiness: the database answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable", "database": repr(e)}
    return {"status": "ready", "database": "up"}
