"""SQLAlchemy declarative base with common mixins."""
import time

from sqlalchemy import BigInteger
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at columns.

    Timestamps are stored as integer epoch milliseconds. Services set both
    explicitly so created_at == updated_at on insert; the column defaults only
    cover rows added directly through the ORM.
    """

    created_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)
