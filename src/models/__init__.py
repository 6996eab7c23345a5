"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, now_ms
from models.bookmark import Bookmark
from models.tag import Tag, bookmark_tag

__all__ = ["Base", "Bookmark", "Tag", "TimestampMixin", "bookmark_tag", "now_ms"]
