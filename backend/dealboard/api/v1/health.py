"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.config import settings
from dealboard.dependencies import get_db
from dealboard.schemas import HealthCheckResponse
from dealboard.services.cache_service import get_cache

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Ping the database and the Redis cache."""
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        database = f"error: {e.__class__.__name__}"

    cache = await get_cache()
    cache_state = "ok" if await cache.health_check() else "unreachable"

    if database != "ok":
        overall = "down"
    elif cache_state != "ok":
        overall = "degraded"
    else:
        overall = "ok"

    return HealthCheckResponse(
        status=overall,
        environment=settings.ENVIRONMENT,
        database=database,
        cache=cache_state,
    )
