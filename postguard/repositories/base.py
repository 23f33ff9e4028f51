"""
Generic repository over one model.

Every read is issued with ``populate_existing``: an object already in the
session is overwritten with the row as it is now. Authorization decisions
depend on this, since a grant or an ownership change made elsewhere must
show up on the next check.
"""

from typing import Any, Generic, Iterable, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from postguard.core.resources import parse_id
from postguard.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Lookups, counts and writes for ``model``.

    Usage:
        class TagRepository(BaseRepository[Tag]):
            model = Tag

        tags = TagRepository(db)
        rails = await tags.get_one(name="rails")
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        """Select with fresh reads; subclasses add eager loads."""
        return select(self.model).execution_options(populate_existing=True)

    def _filter(self, stmt: Select, filters: dict[str, Any]) -> Select:
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        return stmt

    async def _fetch(self, stmt: Select) -> list[ModelT]:
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # ============================================================
    # READ
    # ============================================================

    async def get_by_id(self, id: UUID | str) -> ModelT | None:
        """None for a missing row or an id that is not a UUID."""
        parsed = parse_id(id)
        if parsed is None:
            return None
        stmt = self._base_query().where(self.model.id == parsed)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: Iterable[UUID | str]) -> list[ModelT]:
        wanted = [parsed for parsed in map(parse_id, ids) if parsed is not None]
        if not wanted:
            return []
        return await self._fetch(self._base_query().where(self.model.id.in_(wanted)))

    async def get_one(self, **filters: Any) -> ModelT | None:
        result = await self.db.execute(self._filter(self._base_query(), filters))
        return result.scalar_one_or_none()

    async def all(self, **filters: Any) -> list[ModelT]:
        """Rows matching ``filters``; a None filter value is ignored."""
        given = {field: value for field, value in filters.items() if value is not None}
        return await self._fetch(self._filter(self._base_query(), given))

    async def count(self, **filters: Any) -> int:
        stmt = self._filter(select(func.count()).select_from(self.model), filters)
        return await self.db.scalar(stmt) or 0

    async def exists(self, **filters: Any) -> bool:
        return await self.count(**filters) > 0

    # ============================================================
    # WRITE
    # ============================================================

    async def create(self, **data: Any) -> ModelT:
        """Insert and return the row with server defaults loaded."""
        entity = self.model(**data)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def delete(self, entity: ModelT) -> None:
        """Hard delete; ORM cascades run in the same flush."""
        await self.db.delete(entity)
        await self.db.flush()
