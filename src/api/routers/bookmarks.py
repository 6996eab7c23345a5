"""Bookmark CRUD endpoints."""
from typing import Literal

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    RowId,
    get_async_session,
    get_bookmark_cache,
    get_settings,
    verify_bearer_token,
)
from api.helpers import commit_and_refresh_cache
from core.bookmark_cache import BookmarkCache
from core.config import Settings
from schemas.bookmark import (
    BookmarkCreate,
    BookmarkResponse,
    BookmarkUpdate,
    BookmarkWithTags,
    UpsertResponse,
)
from schemas.tag import TagResponse
from services import bookmark_service, tag_service
from services.exceptions import BookmarkNotFoundError, TagNotFoundError

router = APIRouter(
    prefix="/bookmarks",
    tags=["bookmarks"],
    dependencies=[Depends(verify_bearer_token)],
)


@router.get("", response_model=list[BookmarkWithTags])
async def list_bookmarks(
    q: str | None = Query(default=None, description="Substring to match against bookmark names"),
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> list[BookmarkWithTags]:
    """
    List bookmarks with their tags.

    Without `q` (or with a blank `q`) the list comes from the in-memory cache and
    may briefly lag behind recent writes. With `q` the store is queried directly.
    """
    if q is None or not q.strip():
        return list(cache.snapshot)

    bookmarks = await bookmark_service.search_bookmarks(db, q, settings.bookmark_order)
    return [BookmarkWithTags.model_validate(b) for b in bookmarks]


@router.post("", response_model=BookmarkResponse)
async def create_bookmark(
    data: BookmarkCreate,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Create a new bookmark."""
    bookmark = await bookmark_service.create_bookmark(db, data)
    response = BookmarkResponse.model_validate(bookmark)
    await commit_and_refresh_cache(db, background_tasks, cache)
    return response


@router.put("", response_model=UpsertResponse)
async def upsert_bookmark(
    data: BookmarkCreate,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> UpsertResponse:
    """Create a bookmark by name, or update the href of the bookmark with that name."""
    _, created = await bookmark_service.upsert_bookmark(db, data)
    await commit_and_refresh_cache(db, background_tasks, cache)
    return UpsertResponse(created=created)


@router.get("/{bookmark_id}", response_model=BookmarkWithTags)
async def get_bookmark(
    bookmark_id: RowId,
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkWithTags:
    """Get a single bookmark by ID, read from the store."""
    bookmark = await bookmark_service.get_bookmark(db, bookmark_id)
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarkWithTags.model_validate(bookmark)


@router.get("/{bookmark_id}/tags", response_model=list[TagResponse])
async def get_bookmark_tags(
    bookmark_id: RowId,
    db: AsyncSession = Depends(get_async_session),
) -> list[TagResponse]:
    """List the tags associated with a bookmark."""
    if await bookmark_service.get_bookmark(db, bookmark_id) is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    tags = await bookmark_service.get_bookmark_tags(db, bookmark_id)
    return [TagResponse.model_validate(t) for t in tags]


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: RowId,
    data: BookmarkUpdate,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Replace a bookmark's name and href."""
    try:
        bookmark = await bookmark_service.update_bookmark(db, bookmark_id, data)
    except BookmarkNotFoundError:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    response = BookmarkResponse.model_validate(bookmark)
    await commit_and_refresh_cache(db, background_tasks, cache)
    return response


@router.put("/{bookmark_id}/check/{finished}", response_model=BookmarkResponse)
async def check_bookmark(
    bookmark_id: RowId,
    finished: Literal["true", "false"],
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Mark a bookmark as finished (`true`) or unfinished (`false`)."""
    try:
        bookmark = await bookmark_service.set_finished(db, bookmark_id, finished == "true")
    except BookmarkNotFoundError:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    response = BookmarkResponse.model_validate(bookmark)
    await commit_and_refresh_cache(db, background_tasks, cache)
    return response


@router.delete("/{bookmark_id}", status_code=204)
async def delete_bookmark(
    bookmark_id: RowId,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Delete a bookmark. Deleting an unknown ID succeeds without changes."""
    deleted = await bookmark_service.delete_bookmark(db, bookmark_id)
    if deleted:
        await commit_and_refresh_cache(db, background_tasks, cache)
    return Response(status_code=204)


@router.put("/{bookmark_id}/tags/{tag_id}", status_code=204)
async def add_bookmark_tag(
    bookmark_id: RowId,
    tag_id: RowId,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Associate a tag with a bookmark. Associating the same pair twice is a 409."""
    try:
        await tag_service.add_tag_to_bookmark(db, bookmark_id, tag_id)
    except BookmarkNotFoundError:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    except TagNotFoundError:
        raise HTTPException(status_code=404, detail="Tag not found")
    await commit_and_refresh_cache(db, background_tasks, cache)
    return Response(status_code=204)


@router.delete("/{bookmark_id}/tags/{tag_id}", status_code=204)
async def remove_bookmark_tag(
    bookmark_id: RowId,
    tag_id: RowId,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Remove a tag from a bookmark. Removing a missing association succeeds."""
    removed = await tag_service.remove_tag_from_bookmark(db, bookmark_id, tag_id)
    if removed:
        await commit_and_refresh_cache(db, background_tasks, cache)
    return Response(status_code=204)
