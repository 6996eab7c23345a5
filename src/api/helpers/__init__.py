"""Helpers shared by API routers."""
from api.helpers.cache_refresh import commit_and_refresh_cache

__all__ = ["commit_and_refresh_cache"]
