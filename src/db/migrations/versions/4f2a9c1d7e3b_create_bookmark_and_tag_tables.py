"""
Create bookmark, tag and bookmark_tag tables.

Foreign keys on bookmark_tag are declared without ON DELETE CASCADE, so
deleting a bookmark or tag leaves its association rows in place.

Revision ID: 4f2a9c1d7e3b
Revises:
Create Date: 2026-10-19 10:12:31.204518
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e3b"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the bookmark schema."""
    op.create_table(
        "bookmark",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("href", sa.Text(), nullable=False),
        sa.Column("finished", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_table(
        "tag",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("variant", sa.String(), server_default="default", nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_table(
        "bookmark_tag",
        sa.Column("bookmark_id", sa.Integer(), sa.ForeignKey("bookmark.id"), nullable=False),
        sa.Column("tag_id", sa.Integer(), sa.ForeignKey("tag.id"), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("bookmark_id", "tag_id"),
    )
    # Partial index: only finished bookmarks are indexed
    op.create_index(
        "bookmark_finished_index",
        "bookmark",
        ["finished"],
        sqlite_where=sa.text("finished = 1"),
        postgresql_where=sa.text("finished = true"),
    )


def downgrade() -> None:
    """Drop the bookmark schema."""
    op.drop_index("bookmark_finished_index", table_name="bookmark")
    op.drop_table("bookmark_tag")
    op.drop_table("tag")
    op.drop_table("bookmark")
