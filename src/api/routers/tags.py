"""Tag management endpoints."""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    RowId,
    get_async_session,
    get_bookmark_cache,
    verify_bearer_token,
)
from api.helpers import commit_and_refresh_cache
from core.bookmark_cache import BookmarkCache
from schemas.tag import TagCreate, TagResponse, TagUpdate
from services import tag_service
from services.exceptions import TagNotFoundError

router = APIRouter(
    prefix="/tags",
    tags=["tags"],
    dependencies=[Depends(verify_bearer_token)],
)


@router.get("", response_model=list[TagResponse])
async def list_tags(
    db: AsyncSession = Depends(get_async_session),
) -> list[TagResponse]:
    """List all tags."""
    tags = await tag_service.list_tags(db)
    return [TagResponse.model_validate(t) for t in tags]


@router.post("", response_model=TagResponse)
async def create_tag(
    data: TagCreate,
    db: AsyncSession = Depends(get_async_session),
) -> TagResponse:
    """
    Create a tag.

    A new tag has no bookmarks yet, so the bookmark cache is unaffected.
    """
    tag = await tag_service.create_tag(db, data)
    return TagResponse.model_validate(tag)


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: RowId,
    data: TagUpdate,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> TagResponse:
    """Replace a tag's name and variant."""
    try:
        tag = await tag_service.update_tag(db, tag_id, data)
    except TagNotFoundError:
        raise HTTPException(status_code=404, detail="Tag not found")
    response = TagResponse.model_validate(tag)
    # Cached bookmarks embed their tags
    await commit_and_refresh_cache(db, background_tasks, cache)
    return response


@router.delete("/{tag_id}", status_code=204)
async def delete_tag(
    tag_id: RowId,
    background_tasks: BackgroundTasks,
    cache: BookmarkCache = Depends(get_bookmark_cache),
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Delete a tag. Deleting an unknown ID succeeds without changes."""
    deleted = await tag_service.delete_tag(db, tag_id)
    if deleted:
        await commit_and_refresh_cache(db, background_tasks, cache)
    return Response(status_code=204)
