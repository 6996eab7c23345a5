"""Post-write cache refresh scheduling."""
from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession

from core.bookmark_cache import BookmarkCache


async def commit_and_refresh_cache(
    db: AsyncSession,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache,
) -> None:
    """
    Commit the request's write and schedule a cache refresh after the response.

    The commit happens here rather than at session teardown so the refresh,
    which uses its own session, always sees this write.
    """
    await db.commit()
    background_tasks.add_task(cache.trigger_refresh)
