"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from api.routers import bookmarks, health, tags
from core.auth import AuthenticationError, BearerAuthMiddleware, unauthorized_response
from core.bookmark_cache import BookmarkCache, set_bookmark_cache
from core.config import get_settings
from core.logging_config import configure_logging
from core.timing import RequestTimingMiddleware
from db.session import get_session_factory
from services.bookmark_service import load_bookmarks_with_tags
from services.exceptions import ConstraintError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()
    configure_logging(app_settings.log_level)

    # Startup: build the bookmark cache and populate it once
    cache = BookmarkCache(
        loader=partial(
            load_bookmarks_with_tags,
            get_session_factory(),
            app_settings.bookmark_order,
        ),
        log_timings=not app_settings.is_production,
    )
    try:
        await cache.refresh()
    except Exception:
        logger.exception("Initial bookmark cache load failed; starting with an empty cache")
    set_bookmark_cache(cache)
    logger.info("Bookmark cache loaded with %d bookmarks", len(cache.snapshot))

    yield

    # Shutdown: stop any in-flight refresh
    await cache.close()
    set_bookmark_cache(None)


app_settings = get_settings()

app = FastAPI(
    title="Bookmarks API",
    description="A personal bookmark tracker with tags.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(AuthenticationError)
async def authentication_exception_handler(
    _request: Request, exc: AuthenticationError,
) -> PlainTextResponse:
    """Answer failed bearer auth with a 400 and a challenge header."""
    logger.info("Unauthorized request: %s", exc.reason)
    return unauthorized_response()


@app.exception_handler(ConstraintError)
async def constraint_exception_handler(
    _request: Request, exc: ConstraintError,
) -> JSONResponse:
    """Surface storage constraint violations as conflicts."""
    return JSONResponse(status_code=409, content={"detail": str(exc)})


# Guarded prefixes are checked before the request body is read
app.add_middleware(BearerAuthMiddleware, protected_prefixes=("/bookmarks", "/tags"))

app.add_middleware(RequestTimingMiddleware, enabled=not app_settings.is_production)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    """Liveness check."""
    return "Hello, Bookmarks!"


app.include_router(health.router)
app.include_router(bookmarks.router)
app.include_router(tags.router)
