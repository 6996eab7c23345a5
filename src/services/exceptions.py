"""Shared exceptions for service layer operations."""


class ConstraintError(Exception):
    """
    Raised when a write violates a storage-level constraint.

    Wraps SQLAlchemy's IntegrityError (NOT NULL, primary key / uniqueness)
    so routers can answer 409 instead of failing the request with a 500.
    """


class BookmarkNotFoundError(Exception):
    """Raised when a bookmark id does not exist."""

    def __init__(self, bookmark_id: int) -> None:
        self.bookmark_id = bookmark_id
        super().__init__(f"Bookmark {bookmark_id} not found")


class TagNotFoundError(Exception):
    """Raised when a tag id does not exist."""

    def __init__(self, tag_id: int) -> None:
        self.tag_id = tag_id
        super().__init__(f"Tag {tag_id} not found")
