"""Health check endpoint."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache.redis_client import RedisCache
from app.config import settings
from app.db.session import get_db

router = APIRouter()


@router.get(
    "/health",
    summary="Health check",
    description="""
System health check for monitoring and load balancers.

**Checks:**
- Database connectivity
- Redis cache (optional, never degrades the status)

**Status Values:**
- `healthy` - Database reachable
- `degraded` - Database unreachable

**No authentication required.**
    """,
)
async def health_check(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    """Health check endpoint for monitoring and load balancer checks."""
    health_status = {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {},
    }

    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
        health_status["checks"]["database"] = "healthy"
    except Exception as e:
        health_status["status"] = "degraded"
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"

    health_status["checks"]["redis"] = "healthy" if RedisCache.is_connected() else "unavailable"

    return health_status
