"""
Tests for transactional session handling.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from postguard.core.config import DatabaseSettings, Settings
from postguard.models.database import (
    close_db,
    create_engine_from_settings,
    init_db,
    make_session_factory,
    session_scope,
)
from postguard.repositories import PostRepository, PostTagRepository, UserRepository
from postguard.services import PostService, TaxonomyService, UserService


async def _seed_post(session_factory: async_sessionmaker[AsyncSession], settings):
    async with session_scope(session_factory) as db:
        user = await UserService(db, settings).create(
            {"email": "writer@example.com", "name": "Writer"}
        )
        taxonomy = TaxonomyService(db)
        category = await taxonomy.create_category("Ruby")
        tags = await taxonomy.get_or_create_tags(["rails", "pundit"])
        post = await PostService(db).create(
            {
                "title": "Policies",
                "body": "Thin controllers.",
                "published_at": "2025-03-14T08:33:00Z",
                "user_id": user.id,
                "category_id": category.id,
                "tag_ids": [tag.id for tag in tags],
            }
        )
    return post.id


@pytest.mark.asyncio
async def test_session_scope_commits(session_factory, settings):
    async with session_scope(session_factory) as db:
        await UserService(db, settings).create({"email": "a@example.com", "name": "A"})

    async with session_factory() as db:
        assert await UserRepository(db).get_by_email("a@example.com") is not None


@pytest.mark.asyncio
async def test_session_scope_rolls_back_on_error(session_factory, settings):
    with pytest.raises(RuntimeError):
        async with session_scope(session_factory) as db:
            await UserService(db, settings).create({"email": "b@example.com", "name": "B"})
            raise RuntimeError("boom")

    async with session_factory() as db:
        assert await UserRepository(db).get_by_email("b@example.com") is None


@pytest.mark.asyncio
async def test_delete_commits_post_and_links_together(session_factory, settings):
    post_id = await _seed_post(session_factory, settings)

    async with session_scope(session_factory) as db:
        await PostService(db).delete(post_id)

    async with session_factory() as db:
        assert await PostRepository(db).get_by_id(post_id) is None
        assert await PostTagRepository(db).count(post_id=post_id) == 0


@pytest.mark.asyncio
async def test_failed_delete_keeps_post_and_links(session_factory, settings):
    post_id = await _seed_post(session_factory, settings)

    with pytest.raises(RuntimeError):
        async with session_scope(session_factory) as db:
            await PostService(db).delete(post_id)
            raise RuntimeError("interrupted")

    async with session_factory() as db:
        assert await PostRepository(db).get_by_id(post_id) is not None
        assert await PostTagRepository(db).count(post_id=post_id) == 2


@pytest.mark.asyncio
async def test_engine_lifecycle_from_settings():
    settings = Settings(database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"))
    engine = create_engine_from_settings(settings)
    try:
        await init_db(engine)
        factory = make_session_factory(engine)

        async with session_scope(factory) as db:
            category = await TaxonomyService(db).create_category("Ruby")

        assert category.id is not None
    finally:
        await close_db(engine)
