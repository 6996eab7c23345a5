"""FastAPI dependencies for injection."""
from typing import Annotated

from fastapi import Path

from core.auth import verify_bearer_token
from core.bookmark_cache import BookmarkCache
from core.bookmark_cache import get_bookmark_cache as get_app_bookmark_cache
from core.config import get_settings
from db.session import get_async_session

# Largest value a SQLite INTEGER column can hold
MAX_ROW_ID = 2**63 - 1

# Row id path parameter; out-of-range ids fail validation instead of reaching the driver
RowId = Annotated[int, Path(ge=0, le=MAX_ROW_ID)]


def get_bookmark_cache() -> BookmarkCache:
    """
    Dependency that returns the application's bookmark cache.

    Tests override this to inject an isolated cache instance.
    """
    cache = get_app_bookmark_cache()
    if cache is None:
        raise RuntimeError("Bookmark cache is not initialized")
    return cache


__all__ = [
    "MAX_ROW_ID",
    "RowId",
    "get_async_session",
    "get_bookmark_cache",
    "get_settings",
    "verify_bearer_token",
]
