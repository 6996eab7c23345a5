"""Service layer for tag operations."""
import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import now_ms
from models.bookmark import Bookmark
from models.tag import Tag, bookmark_tag
from schemas.tag import TagCreate, TagUpdate
from services.exceptions import BookmarkNotFoundError, ConstraintError, TagNotFoundError

logger = logging.getLogger(__name__)


async def list_tags(db: AsyncSession) -> list[Tag]:
    """Return all tags ordered by id."""
    result = await db.execute(select(Tag).order_by(Tag.id))
    return list(result.scalars().all())


async def get_tag(db: AsyncSession, tag_id: int) -> Tag | None:
    """Get a tag by id."""
    return await db.get(Tag, tag_id)


async def create_tag(db: AsyncSession, data: TagCreate) -> Tag:
    """Insert a new tag; variant defaults to 'default'."""
    now = now_ms()
    tag = Tag(name=data.name, variant=data.variant, created_at=now, updated_at=now)
    db.add(tag)
    try:
        await db.flush()
    except IntegrityError as e:
        logger.warning("Tag insert rejected: %s", e.orig)
        raise ConstraintError("Tag violates a storage constraint") from e
    return tag


async def update_tag(db: AsyncSession, tag_id: int, data: TagUpdate) -> Tag:
    """
    Replace a tag's name and variant.

    Raises:
        TagNotFoundError: If the tag does not exist.
    """
    tag = await db.get(Tag, tag_id)
    if tag is None:
        raise TagNotFoundError(tag_id)

    tag.name = data.name
    tag.variant = data.variant
    tag.updated_at = now_ms()
    await db.flush()
    return tag


async def delete_tag(db: AsyncSession, tag_id: int) -> bool:
    """Delete a tag by id. Missing ids are a no-op; associations are left in place."""
    result = await db.execute(delete(Tag).where(Tag.id == tag_id))
    return result.rowcount > 0


async def add_tag_to_bookmark(db: AsyncSession, bookmark_id: int, tag_id: int) -> None:
    """
    Associate a tag with a bookmark.

    Raises:
        BookmarkNotFoundError: If the bookmark does not exist.
        TagNotFoundError: If the tag does not exist.
        ConstraintError: If the pair is already associated.
    """
    if await db.get(Bookmark, bookmark_id) is None:
        raise BookmarkNotFoundError(bookmark_id)
    if await db.get(Tag, tag_id) is None:
        raise TagNotFoundError(tag_id)

    try:
        await db.execute(
            insert(bookmark_tag).values(
                bookmark_id=bookmark_id,
                tag_id=tag_id,
                created_at=now_ms(),
            ),
        )
    except IntegrityError as e:
        raise ConstraintError(
            f"Tag {tag_id} is already associated with bookmark {bookmark_id}",
        ) from e


async def remove_tag_from_bookmark(db: AsyncSession, bookmark_id: int, tag_id: int) -> bool:
    """Remove a bookmark/tag association. Returns False if it did not exist."""
    result = await db.execute(
        delete(bookmark_tag).where(
            bookmark_tag.c.bookmark_id == bookmark_id,
            bookmark_tag.c.tag_id == tag_id,
        ),
    )
    return result.rowcount > 0
