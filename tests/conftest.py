"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator
from functools import partial
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

TEST_TOKEN = "test-bearer-token"

# Must be set before any app import triggers Settings validation
os.environ["BEARER_TOKEN"] = TEST_TOKEN
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from core.bookmark_cache import BookmarkCache  # noqa: E402
from core.config import Settings  # noqa: E402
from db.session import build_engine, build_session_factory  # noqa: E402
from models.base import Base  # noqa: E402
from services.bookmark_service import load_bookmarks_with_tags  # noqa: E402


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """A fresh SQLite database file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'bookmarks.db'}"


@pytest.fixture
def test_settings(database_url: str) -> Settings:
    """Settings pointing at the per-test database."""
    return Settings(
        _env_file=None,
        database_url=database_url,
        bearer_token=TEST_TOKEN,
    )


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine with the schema in place."""
    engine = build_engine(database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return build_session_factory(async_engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """A session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def bookmark_cache(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[BookmarkCache]:
    """An isolated cache reading from the test database."""
    cache = BookmarkCache(loader=partial(load_bookmarks_with_tags, session_factory, "desc"))
    await cache.refresh()
    yield cache
    await cache.close()


@pytest.fixture
async def anon_client(
    session_factory: async_sessionmaker[AsyncSession],
    bookmark_cache: BookmarkCache,
    test_settings: Settings,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client without credentials, with session/cache/settings overrides."""
    from api.dependencies import get_async_session, get_bookmark_cache, get_settings
    from api.main import app

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_bookmark_cache] = lambda: bookmark_cache
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def client(anon_client: AsyncClient) -> AsyncClient:
    """Test client that sends the configured bearer token."""
    anon_client.headers["Authorization"] = f"Bearer {TEST_TOKEN}"
    return anon_client
