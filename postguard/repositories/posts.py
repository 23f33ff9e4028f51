"""
Post, category and tag repositories.
"""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from postguard.models.post import Category, Post, PostTag, Tag

from .base import BaseRepository


class PostRepository(BaseRepository[Post]):
    model = Post

    def _base_query(self) -> Select:
        """Always load tag links; delete relies on them for its cascade."""
        return (
            select(Post)
            .options(
                selectinload(Post.category),
                selectinload(Post.post_tags).selectinload(PostTag.tag),
            )
            .execution_options(populate_existing=True)
        )

    async def list_for_owner(self, user_id: UUID) -> list[Post]:
        return await self.all(user_id=user_id)

    async def count_tag_links(self, post_id: UUID) -> int:
        return await PostTagRepository(self.db).count(post_id=post_id)


class PostTagRepository(BaseRepository[PostTag]):
    model = PostTag


class CategoryRepository(BaseRepository[Category]):
    model = Category

    async def get_by_name(self, name: str) -> Category | None:
        return await self.get_one(name=name)


class TagRepository(BaseRepository[Tag]):
    model = Tag

    async def get_by_name(self, name: str) -> Tag | None:
        return await self.get_one(name=name)
