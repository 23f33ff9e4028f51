"""
Database engine and session management.

The caller owns the transaction. Services only flush; ``session_scope``
commits when the block succeeds and rolls everything back otherwise, so a
multi-statement operation such as deleting a post with its tag links is
all-or-nothing.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from postguard.core.config import Settings, get_settings


def create_engine_from_settings(settings: Settings | None = None) -> AsyncEngine:
    """Create an async engine from database settings."""
    settings = settings or get_settings()
    url = str(settings.database.url)

    # SQLite uses a single-connection pool; pool sizing does not apply
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.database.echo)

    return create_async_engine(
        url,
        echo=settings.database.echo,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.pool_overflow,
        pool_timeout=settings.database.pool_timeout,
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database (create tables)."""
    from .base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Transactional session.

    Usage:
        async with session_scope(factory) as db:
            await PostService(db).delete(post_id)
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
