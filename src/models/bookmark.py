"""Bookmark model."""
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, Integer, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin
from models.tag import bookmark_tag

if TYPE_CHECKING:
    from models.tag import Tag


class Bookmark(Base, TimestampMixin):
    """Bookmark model - a named link with a completion flag."""

    __tablename__ = "bookmark"
    __table_args__ = (
        # Partial index for "unfinished/finished" lookups
        Index(
            "bookmark_finished_index",
            "finished",
            sqlite_where=text("finished = 1"),
            postgresql_where=text("finished = true"),
        ),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    href: Mapped[str] = mapped_column(Text, nullable=False)
    finished: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )

    tags: Mapped[list["Tag"]] = relationship(
        secondary=bookmark_tag,
        order_by="Tag.id",
        viewonly=True,
    )
