"""
Category and tag service.
"""

from typing import Iterable
from uuid import UUID

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from postguard.core.exceptions import NotFound, ValidationError
from postguard.models.post import Category, Tag
from postguard.repositories.posts import CategoryRepository, TagRepository
from postguard.schemas.post import TaxonomyName


def _clean_name(name: str) -> str:
    try:
        return TaxonomyName(name=name).name
    except SchemaValidationError as exc:
        raise ValidationError(["name"]) from exc


class TaxonomyService:
    """Manages the categories and tags posts refer to."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.categories = CategoryRepository(db)
        self.tags = TagRepository(db)

    async def create_category(self, name: str) -> Category:
        name = _clean_name(name)
        if await self.categories.exists(name=name):
            raise ValidationError(["name"], f"Category already exists: {name}")
        return await self.categories.create(name=name)

    async def get_category(self, category_id: UUID) -> Category:
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise NotFound("Category", category_id)
        return category

    async def create_tag(self, name: str) -> Tag:
        name = _clean_name(name)
        if await self.tags.exists(name=name):
            raise ValidationError(["name"], f"Tag already exists: {name}")
        return await self.tags.create(name=name)

    async def get_tag(self, tag_id: UUID) -> Tag:
        tag = await self.tags.get_by_id(tag_id)
        if tag is None:
            raise NotFound("Tag", tag_id)
        return tag

    async def get_or_create_tags(self, names: Iterable[str]) -> list[Tag]:
        """Tags for ``names`` in order, creating the missing ones."""
        tags: list[Tag] = []
        seen: set[str] = set()
        for raw in names:
            name = _clean_name(raw)
            if name in seen:
                continue
            seen.add(name)
            tag = await self.tags.get_by_name(name)
            if tag is None:
                tag = await self.tags.create(name=name)
            tags.append(tag)
        return tags
