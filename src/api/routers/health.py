"""Health check endpoints."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_bookmark_cache
from core.bookmark_cache import BookmarkCache
from db.session import get_async_session


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    cached_bookmarks: int
    cache_refreshing: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    cache: BookmarkCache = Depends(get_bookmark_cache),
) -> HealthResponse:
    """
    Check application and database health.

    Unauthenticated. Reports the cache size so a stale or empty cache is visible.
    """
    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        db_status = "unhealthy"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        database=db_status,
        cached_bookmarks=len(cache.snapshot),
        cache_refreshing=cache.is_refreshing,
    )
