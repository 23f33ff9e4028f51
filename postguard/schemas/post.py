"""
Post, category and tag schemas.
"""

from datetime import datetime, timezone
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fields a post can never be without
REQUIRED_POST_FIELDS = ("title", "body", "published_at", "user_id", "category_id")


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PostCreate(BaseModel):
    """Post creation schema."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    body: str = Field(min_length=1)
    published_at: datetime
    user_id: UUID
    category_id: UUID
    tag_ids: list[UUID] = Field(default_factory=list)

    @field_validator("published_at")
    @classmethod
    def published_at_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class PostUpdate(BaseModel):
    """
    Post update schema.

    Every field is optional, but a required field that is supplied must
    not be null; the service rejects explicit nulls.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=255)
    body: str | None = Field(None, min_length=1)
    published_at: datetime | None = None
    category_id: UUID | None = None
    tag_ids: list[UUID] | None = None

    @field_validator("published_at")
    @classmethod
    def published_at_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class PostResponse(BaseModel):
    """Post response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    body: str
    published_at: datetime
    user_id: UUID
    category_id: UUID
    created_at: datetime


class TaxonomyName(BaseModel):
    """Name of a category or tag."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
