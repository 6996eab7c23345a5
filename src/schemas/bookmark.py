"""Pydantic schemas for bookmark endpoints."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from schemas.tag import TagResponse


class BookmarkCreate(BaseModel):
    """Schema for creating a bookmark (also used by the upsert-by-name endpoint)."""

    name: str = Field(min_length=1)
    href: str = Field(min_length=1)


class BookmarkUpdate(BaseModel):
    """Schema for replacing a bookmark's name and href."""

    name: str = Field(min_length=1)
    href: str = Field(min_length=1)


class BookmarkResponse(BaseModel):
    """Schema for a single bookmark row. Serialized with camelCase keys."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: int
    name: str
    href: str
    finished: bool
    created_at: int
    updated_at: int


class BookmarkWithTags(BookmarkResponse):
    """
    Bookmark enriched with its tags.

    Cache snapshots are tuples of these; the model is frozen so a snapshot
    handed to a reader cannot be mutated behind the cache's back.
    """

    tags: tuple[TagResponse, ...] = ()


class UpsertResponse(BaseModel):
    """Result of the upsert-by-name endpoint."""

    created: bool
