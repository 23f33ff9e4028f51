"""
Declarative base and the columns every blog table shares.

Every table gets a UUID primary key and created/updated timestamps through
StandardMixin. The key uses the generic ``Uuid`` type: native uuid on
PostgreSQL, CHAR(32) on SQLite.
"""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4
from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    # Mapped[datetime] columns are timezone-aware unless stated otherwise
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }

    def to_dict(self) -> dict[str, Any]:
        """Column values keyed by column name (relationships excluded)."""
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}


class UUIDMixin:
    """UUID primary key generated client-side, so it is known before flush."""

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)


class TimestampMixin:
    """created_at / updated_at, both set by the database."""

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )


class StandardMixin(UUIDMixin, TimestampMixin):
    """
    Id plus timestamps.

    Usage:
        class Tag(Base, StandardMixin):
            __tablename__ = "tags"
            name: Mapped[str] = mapped_column(String(100), unique=True)
    """

    pass
