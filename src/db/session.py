"""Async engine and session factory for the bookmark store."""
from collections.abc import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import get_settings

# Seconds a SQLite connection waits on another writer's lock before failing
SQLITE_BUSY_TIMEOUT = 30.0


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for a database URL.

    SQLite allows one writer at a time; connections are given a busy timeout
    so concurrent requests queue on the write lock instead of failing with
    "database is locked".
    """
    connect_args = {}
    if make_url(database_url).get_backend_name() == "sqlite":
        connect_args["timeout"] = SQLITE_BUSY_TIMEOUT
    return create_async_engine(database_url, echo=False, connect_args=connect_args)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions keep loaded attributes after commit so responses can be built from them."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(get_settings().database_url)
async_session_factory = build_session_factory(engine)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory for work that runs outside a request (cache refresh)."""
    return async_session_factory


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield a request-scoped session.

    Handlers that refresh the cache commit early themselves; whatever is left
    is committed when the request ends, and any error rolls the work back.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
