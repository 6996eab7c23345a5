"""Pydantic schemas for tag endpoints."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(min_length=1)
    variant: str = Field(default="default", min_length=1)


class TagUpdate(BaseModel):
    """Schema for replacing a tag's name and variant."""

    name: str = Field(min_length=1)
    variant: str = Field(default="default", min_length=1)


class TagResponse(BaseModel):
    """Schema for a tag row."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: int
    name: str
    variant: str
    created_at: int
    updated_at: int
