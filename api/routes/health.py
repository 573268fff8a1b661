"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from datetime import datetime
import logging
import platform

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker

from api.dependencies import get_session_factory


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": "garmentflow-backend",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(session_factory: async_sessionmaker = Depends(get_session_factory)):
    """
    Readiness check endpoint.

    Ready when the database answers a trivial query.
    """
    database = "ok"
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        database = "unavailable"

    ready = database == "ok"
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.utcnow().isoformat(),
            "checks": {"api": "ok", "database": database},
        },
    )
