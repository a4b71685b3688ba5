"""Health checks.

``/health`` and ``/health/live`` only prove the process answers;
``/health/ready`` also checks the database and the Celery broker.
"""

from datetime import datetime, timezone

import redis.asyncio as aioredis
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from barter import __version__
from barter.config import get_settings
from barter.presentation.api.dependencies import get_session_factory

router = APIRouter(prefix="/health", tags=["Health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("", summary="Health check (liveness)")
async def health_check() -> dict:
    return {
        "success": True,
        "status": "healthy",
        "version": __version__,
        "timestamp": _now(),
        "environment": get_settings().environment,
    }


@router.get("/live", summary="Liveness check")
async def liveness_check() -> dict:
    return {"success": True, "status": "alive"}


async def _check_database() -> str:
    async with get_session_factory()() as session:
        await session.execute(text("SELECT 1"))
    return "healthy"


async def _check_broker() -> str:
    client = aioredis.from_url(get_settings().redis_url)
    try:
        await client.ping()
    finally:
        await client.aclose()
    return "healthy"


@router.get("/ready", summary="Readiness check")
async def readiness_check() -> JSONResponse:
    """Database and broker reachability; 503 while either is down."""
    checks = {}
    for name, check in (("database", _check_database), ("redis", _check_broker)):
        try:
            checks[name] = await check()
        except Exception as e:
            checks[name] = f"unhealthy: {str(e)[:50]}"

    ready = all(state == "healthy" for state in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "success": ready,
            "status": "healthy" if ready else "unhealthy",
            "timestamp": _now(),
            "checks": checks,
        },
    )
