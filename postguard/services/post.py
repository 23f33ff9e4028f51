"""
Post service - create, read, update and delete blog posts.

Validation runs before anything is written. Deleting a post removes its
tag links in the same flush; the caller's transaction (see
``session_scope``) makes the pair all-or-nothing.
"""

from typing import Any, Iterable, Mapping
from uuid import UUID

import structlog
from pydantic import BaseModel, ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from postguard.core.exceptions import NotFound, ValidationError
from postguard.models.post import Post, PostTag
from postguard.repositories.posts import (
    CategoryRepository,
    PostRepository,
    TagRepository,
)
from postguard.repositories.users import UserRepository
from postguard.schemas.post import PostCreate, PostUpdate, REQUIRED_POST_FIELDS

logger = structlog.get_logger(__name__)


def _parse(schema: type[BaseModel], data: Any) -> Any:
    """Validate input into ``schema``, reporting every offending field."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except SchemaValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ValidationError(fields) from exc


class PostService:
    """Post management service."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.posts = PostRepository(db)
        self.users = UserRepository(db)
        self.categories = CategoryRepository(db)
        self.tags = TagRepository(db)

    async def _require(self, repo: Any, entity: str, entity_id: UUID) -> None:
        if not await repo.exists(id=entity_id):
            raise NotFound(entity, entity_id)

    async def _tag_links(
        self,
        tag_ids: Iterable[UUID],
        current: Iterable[PostTag] = (),
    ) -> list[PostTag]:
        """Link rows for ``tag_ids``, reusing rows that already exist."""
        unique_ids = list(dict.fromkeys(tag_ids))
        found = {tag.id for tag in await self.tags.get_by_ids(unique_ids)}
        for tag_id in unique_ids:
            if tag_id not in found:
                raise NotFound("Tag", tag_id)
        existing = {link.tag_id: link for link in current}
        return [existing.get(tag_id) or PostTag(tag_id=tag_id) for tag_id in unique_ids]

    # ============================================================
    # READ
    # ============================================================

    async def get(self, post_id: UUID) -> Post:
        post = await self.posts.get_by_id(post_id)
        if post is None:
            raise NotFound("Post", post_id)
        return post

    async def list_for(self, user_id: UUID) -> list[Post]:
        """Posts owned by a user."""
        return await self.posts.list_for_owner(user_id)

    async def list_all(self) -> list[Post]:
        return await self.posts.all()

    # ============================================================
    # WRITE
    # ============================================================

    async def create(self, data: PostCreate | Mapping[str, Any]) -> Post:
        """
        Create a post.

        Raises:
            ValidationError: title, body, published_at, user_id or
                category_id missing or empty (all offenders listed)
            NotFound: Owner, category or a tag does not exist
        """
        data = _parse(PostCreate, data)

        await self._require(self.users, "User", data.user_id)
        await self._require(self.categories, "Category", data.category_id)
        links = await self._tag_links(data.tag_ids)

        post = Post(**data.model_dump(exclude={"tag_ids"}))
        post.post_tags = links
        self.db.add(post)
        await self.db.flush()

        logger.info(
            "post_created",
            post_id=str(post.id),
            user_id=str(post.user_id),
            tags=len(links),
        )
        return await self.get(post.id)

    async def update(self, post_id: UUID, data: PostUpdate | Mapping[str, Any]) -> Post:
        """
        Partially update a post.

        A required field may be changed but not cleared; ``tag_ids``
        replaces the full tag set.

        Raises:
            ValidationError: A required field set to null/empty
            NotFound: Post, category or a tag does not exist
        """
        data = _parse(PostUpdate, data)
        changes = data.model_dump(exclude_unset=True)

        cleared = sorted(
            field for field in REQUIRED_POST_FIELDS
            if field in changes and changes[field] is None
        )
        if cleared:
            raise ValidationError(cleared)

        post = await self.get(post_id)

        if "category_id" in changes:
            await self._require(self.categories, "Category", changes["category_id"])

        tag_ids = changes.pop("tag_ids", None)
        if tag_ids is not None:
            post.post_tags = await self._tag_links(tag_ids, post.post_tags)

        for field, value in changes.items():
            setattr(post, field, value)

        await self.db.flush()
        logger.info("post_updated", post_id=str(post.id), fields=sorted(changes))
        return await self.get(post.id)

    async def delete(self, post_id: UUID) -> None:
        """
        Delete a post together with its tag links.

        Raises:
            NotFound: If the post does not exist
        """
        post = await self.get(post_id)
        tag_links = len(post.post_tags)

        await self.posts.delete(post)

        logger.info("post_deleted", post_id=str(post_id), tag_links=tag_links)
