"""
In-memory read cache of all bookmarks with their tags.

The cache holds an immutable snapshot (a tuple of frozen models) and replaces
it wholesale on refresh. Writes trigger a background refresh; refreshes are
single-flight, and triggers that arrive while one is running coalesce into at
most one follow-up refresh, so the snapshot converges once writes settle.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from core.timing import measure
from schemas.bookmark import BookmarkWithTags

logger = logging.getLogger(__name__)

BookmarkLoader = Callable[[], Awaitable[Sequence[BookmarkWithTags]]]


class BookmarkCache:
    """Snapshot of all bookmarks with tags, refreshed in the background after writes."""

    def __init__(self, loader: BookmarkLoader, log_timings: bool = False) -> None:
        self._loader = loader
        self._log_timings = log_timings
        self._snapshot: tuple[BookmarkWithTags, ...] = ()
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._pending = False

    @property
    def snapshot(self) -> tuple[BookmarkWithTags, ...]:
        """Current snapshot. Never mutated; a refresh swaps in a new tuple."""
        return self._snapshot

    @property
    def is_refreshing(self) -> bool:
        """Whether a background refresh is running."""
        return self._task is not None and not self._task.done()

    async def refresh(self) -> None:
        """
        Reload the snapshot now.

        Errors propagate to the caller; the previous snapshot is kept.
        """
        async with self._lock:
            with measure("refresh_bookmarks", enabled=self._log_timings):
                bookmarks = await self._loader()
            self._snapshot = tuple(bookmarks)

    def schedule_refresh(self) -> asyncio.Task[None]:
        """
        Start a background refresh, or mark one pending if a refresh is running.

        No await happens between checking and updating the refresh state, so
        two triggers on the event loop cannot both start a task.
        """
        if self.is_refreshing:
            self._pending = True
            return self._task
        self._pending = False
        self._task = asyncio.create_task(self._run(), name="bookmark-cache-refresh")
        return self._task

    async def trigger_refresh(self) -> None:
        """Schedule a refresh without waiting for it (for FastAPI background tasks)."""
        self.schedule_refresh()

    async def wait_idle(self) -> None:
        """Wait until no refresh is running or pending."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)

    async def close(self) -> None:
        """Cancel an in-flight background refresh."""
        self._pending = False
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:
                logger.exception("Bookmark cache refresh failed; keeping previous snapshot")
            if not self._pending:
                return
            self._pending = False


# Global cache state using a container to avoid global statement
class _BookmarkCacheState:
    """Container for the application's cache instance."""

    cache: BookmarkCache | None = None


_state = _BookmarkCacheState()


def get_bookmark_cache() -> BookmarkCache | None:
    """Get the application's bookmark cache."""
    return _state.cache


def set_bookmark_cache(cache: BookmarkCache | None) -> None:
    """Set the application's bookmark cache."""
    _state.cache = cache
