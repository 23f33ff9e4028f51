"""
Pytest fixtures for testing.

Provides:
- Async database session on a fresh in-memory SQLite database per test
- A policy registry with the default policies, and a gateway bound to it
- Factory fixtures for users, categories, tags and posts
"""

from datetime import datetime, timezone
from typing import AsyncGenerator, Iterable
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from postguard.core.auth import (
    AuthorizationGateway,
    PolicyEngine,
    PolicyRegistry,
    register_default_policies,
)
from postguard.core.config import DatabaseSettings, Settings
from postguard.models.base import Base
from postguard.models.post import Category, Post, Tag
from postguard.models.user import User
from postguard.services import PostService, RoleStore, TaxonomyService, UserService


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="testing",
        database=DatabaseSettings(url=TEST_DATABASE_URL),
    )


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Create database session with automatic rollback.

    Each test gets a fresh transaction that's rolled back after.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


# ============ Authorization ============


@pytest.fixture
def registry(settings: Settings) -> PolicyRegistry:
    """A registry of its own, so tests never touch the process-wide one."""
    return register_default_policies(PolicyRegistry(), settings)


@pytest.fixture
def engine(registry: PolicyRegistry) -> PolicyEngine:
    return PolicyEngine(registry)


@pytest_asyncio.fixture
async def gateway(db: AsyncSession, engine: PolicyEngine) -> AuthorizationGateway:
    return AuthorizationGateway(db, engine=engine)


@pytest_asyncio.fixture
async def role_store(db: AsyncSession) -> RoleStore:
    return RoleStore(db)


# ============ Factory Fixtures ============


class BlogFactory:
    """Factory for creating test users, taxonomy and posts."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.users = UserService(db, settings)
        self.posts = PostService(db)
        self.taxonomy = TaxonomyService(db)

    async def user(
        self,
        roles: Iterable[str] | None = None,
        email: str | None = None,
        name: str = "Test User",
    ) -> User:
        """Create a user through the normal creation workflow."""
        email = email or f"user-{uuid4().hex[:8]}@example.com"
        return await self.users.create({"email": email, "name": name}, roles=roles)

    async def category(self, name: str | None = None) -> Category:
        return await self.taxonomy.create_category(name or f"category-{uuid4().hex[:8]}")

    async def tag(self, name: str | None = None) -> Tag:
        return await self.taxonomy.create_tag(name or f"tag-{uuid4().hex[:8]}")

    def post_data(self, owner: User, category: Category, **overrides) -> dict:
        data = {
            "title": "Hello Pundit",
            "body": "Policies keep controllers thin.",
            "published_at": datetime(2025, 3, 14, 8, 33, tzinfo=timezone.utc),
            "user_id": owner.id,
            "category_id": category.id,
        }
        data.update(overrides)
        return data

    async def post(
        self,
        owner: User,
        category: Category | None = None,
        tags: Iterable[Tag] = (),
        **overrides,
    ) -> Post:
        category = category or await self.category()
        data = self.post_data(owner, category, tag_ids=[tag.id for tag in tags], **overrides)
        return await self.posts.create(data)


@pytest_asyncio.fixture
async def factory(db: AsyncSession, settings: Settings) -> BlogFactory:
    """Fixture that provides BlogFactory."""
    return BlogFactory(db, settings)


@pytest_asyncio.fixture
async def s1(factory: BlogFactory) -> User:
    """Plain user created without roles (ends up with "user")."""
    return await factory.user(email="s1@example.com")


@pytest_asyncio.fixture
async def s2(factory: BlogFactory) -> User:
    """Admin."""
    return await factory.user(roles=["admin"], email="s2@example.com")


@pytest_asyncio.fixture
async def s3(factory: BlogFactory) -> User:
    """Moderator."""
    return await factory.user(roles=["moderator"], email="s3@example.com")


@pytest_asyncio.fixture
async def r1(factory: BlogFactory, s1: User) -> Post:
    """Post owned by s1, with two tags."""
    tags = [await factory.tag("rails"), await factory.tag("pundit")]
    return await factory.post(s1, tags=tags)
