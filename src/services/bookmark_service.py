"""Service layer for bookmark CRUD operations."""
import logging
from typing import Literal

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import UnaryExpression

from models.base import now_ms
from models.bookmark import Bookmark
from models.tag import Tag, bookmark_tag
from schemas.bookmark import BookmarkCreate, BookmarkUpdate, BookmarkWithTags
from services.exceptions import BookmarkNotFoundError, ConstraintError

logger = logging.getLogger(__name__)

SortOrder = Literal["asc", "desc"]


def _id_order(order: SortOrder) -> UnaryExpression:
    """Order bookmarks by id; 'desc' is most-recent-first."""
    return Bookmark.id.desc() if order == "desc" else Bookmark.id.asc()


async def list_bookmarks(db: AsyncSession, order: SortOrder = "desc") -> list[Bookmark]:
    """Return every bookmark with its tags loaded."""
    result = await db.execute(
        select(Bookmark).options(selectinload(Bookmark.tags)).order_by(_id_order(order)),
    )
    return list(result.scalars().all())


async def search_bookmarks(
    db: AsyncSession,
    query: str,
    order: SortOrder = "desc",
) -> list[Bookmark]:
    """
    Return bookmarks whose name contains `query` as a literal substring.

    LIKE wildcards in the query are escaped. An empty or whitespace-only query
    returns the unfiltered list.
    """
    if not query.strip():
        return await list_bookmarks(db, order)

    result = await db.execute(
        select(Bookmark)
        .options(selectinload(Bookmark.tags))
        .where(Bookmark.name.contains(query, autoescape=True))
        .order_by(_id_order(order)),
    )
    return list(result.scalars().all())


async def get_bookmark(db: AsyncSession, bookmark_id: int) -> Bookmark | None:
    """Get a single bookmark (with tags) by id."""
    result = await db.execute(
        select(Bookmark)
        .options(selectinload(Bookmark.tags))
        .where(Bookmark.id == bookmark_id),
    )
    return result.scalar_one_or_none()


async def get_bookmark_tags(db: AsyncSession, bookmark_id: int) -> list[Tag]:
    """Return the tags associated with a bookmark, joined through bookmark_tag."""
    result = await db.execute(
        select(Tag)
        .join(bookmark_tag, Tag.id == bookmark_tag.c.tag_id)
        .where(bookmark_tag.c.bookmark_id == bookmark_id)
        .order_by(Tag.id),
    )
    return list(result.scalars().all())


async def create_bookmark(db: AsyncSession, data: BookmarkCreate) -> Bookmark:
    """
    Insert a new bookmark.

    finished starts false and created_at == updated_at.

    Raises:
        ConstraintError: If the store rejects the row.
    """
    now = now_ms()
    bookmark = Bookmark(
        name=data.name,
        href=data.href,
        finished=False,
        created_at=now,
        updated_at=now,
    )
    db.add(bookmark)
    try:
        await db.flush()
    except IntegrityError as e:
        logger.warning("Bookmark insert rejected: %s", e.orig)
        raise ConstraintError("Bookmark violates a storage constraint") from e
    await db.refresh(bookmark)
    return bookmark


async def upsert_bookmark(db: AsyncSession, data: BookmarkCreate) -> tuple[Bookmark, bool]:
    """
    Insert a bookmark by name, or update the href of the existing one.

    The UPDATE runs first so the store's write lock is held before deciding to
    insert; two racing upserts for the same name therefore cannot both insert.
    When several rows share the name, the lowest id is updated.

    Returns:
        Tuple of (bookmark, created).
    """
    now = now_ms()
    target_id = (
        select(Bookmark.id)
        .where(Bookmark.name == data.name)
        .order_by(Bookmark.id)
        .limit(1)
        .scalar_subquery()
    )
    result = await db.execute(
        update(Bookmark)
        .where(Bookmark.id == target_id)
        .values(href=data.href, updated_at=now)
        .returning(Bookmark.id)
        .execution_options(synchronize_session=False),
    )
    updated_id = result.scalar_one_or_none()
    if updated_id is None:
        return await create_bookmark(db, data), True

    # Identity map was not synchronized by the bulk UPDATE
    bookmark = await db.get(Bookmark, updated_id, populate_existing=True)
    return bookmark, False


async def update_bookmark(
    db: AsyncSession,
    bookmark_id: int,
    data: BookmarkUpdate,
) -> Bookmark:
    """
    Replace a bookmark's name and href.

    Raises:
        BookmarkNotFoundError: If the bookmark does not exist.
    """
    bookmark = await db.get(Bookmark, bookmark_id)
    if bookmark is None:
        raise BookmarkNotFoundError(bookmark_id)

    bookmark.name = data.name
    bookmark.href = data.href
    bookmark.updated_at = now_ms()
    await db.flush()
    return bookmark


async def set_finished(db: AsyncSession, bookmark_id: int, finished: bool) -> Bookmark:
    """
    Set the finished flag on a bookmark.

    Raises:
        BookmarkNotFoundError: If the bookmark does not exist.
    """
    bookmark = await db.get(Bookmark, bookmark_id)
    if bookmark is None:
        raise BookmarkNotFoundError(bookmark_id)

    bookmark.finished = finished
    bookmark.updated_at = now_ms()
    await db.flush()
    return bookmark


async def delete_bookmark(db: AsyncSession, bookmark_id: int) -> bool:
    """
    Delete a bookmark by id.

    Deleting a missing id is a no-op. Association rows in bookmark_tag are
    left in place.

    Returns:
        True if a row was deleted.
    """
    result = await db.execute(delete(Bookmark).where(Bookmark.id == bookmark_id))
    return result.rowcount > 0


async def load_bookmarks_with_tags(
    session_factory: async_sessionmaker[AsyncSession],
    order: SortOrder = "desc",
) -> list[BookmarkWithTags]:
    """Load the full bookmark list in a dedicated session, for the read cache."""
    async with session_factory() as session:
        bookmarks = await list_bookmarks(session, order)
        return [BookmarkWithTags.model_validate(b) for b in bookmarks]
