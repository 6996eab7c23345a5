"""Tag model and the bookmark/tag junction table."""
from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, now_ms

# Junction table for many-to-many relationship between bookmarks and tags.
# Foreign keys are declared without cascade: deleting a bookmark or tag leaves
# its association rows in place.
bookmark_tag = Table(
    "bookmark_tag",
    Base.metadata,
    Column(
        "bookmark_id",
        Integer,
        ForeignKey("bookmark.id"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tag.id"),
        primary_key=True,
    ),
    Column("created_at", BigInteger, nullable=False, default=now_ms),
)


class Tag(Base, TimestampMixin):
    """Tag model - a labeled category assignable to bookmarks."""

    __tablename__ = "tag"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # Display-style discriminator used by clients (e.g. badge colour)
    variant: Mapped[str] = mapped_column(
        String, nullable=False, default="default", server_default="default",
    )
