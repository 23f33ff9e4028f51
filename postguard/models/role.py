"""
Role models - named roles and their assignments to users.

A role assignment is either global (no resource columns) or scoped:
- to a resource type:      resource_type="Post", resource_id=None
- to a single resource:    resource_type="Post", resource_id=<post id>

Usage:
    admin = Role(name="admin")
    UserRole(user_id=user.id, role_id=admin.id)
    UserRole(user_id=user.id, role_id=admin.id, resource_type="Post", resource_id=post.id)
"""

from uuid import UUID
from sqlalchemy import Index, String, ForeignKey, UniqueConstraint, Uuid, and_
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, StandardMixin


class Role(Base, StandardMixin):
    """
    Role definition.

    Roles are a flat namespace of names; there is no hierarchy.
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class UserRole(Base, StandardMixin):
    """User role assignment, optionally scoped to a resource."""

    __tablename__ = "user_roles"
    __table_args__ = (
        # Covers instance-scoped rows; see the partial indexes below the class
        UniqueConstraint(
            "user_id", "role_id", "resource_type", "resource_id",
            name="uq_user_role_scope",
        ),
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Optional scoping
    resource_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    resource_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)

    role: Mapped["Role"] = relationship("Role", lazy="selectin")

    @property
    def is_global(self) -> bool:
        return self.resource_type is None

    def __repr__(self) -> str:
        scope = f" ({self.resource_type}:{self.resource_id})" if self.resource_type else ""
        return f"<UserRole user={self.user_id} role={self.role_id}{scope}>"


# NULLs never collide in a unique constraint, so the global and type-scoped
# assignments need partial indexes of their own.
Index(
    "uq_user_role_global",
    UserRole.user_id,
    UserRole.role_id,
    unique=True,
    postgresql_where=UserRole.resource_type.is_(None),
    sqlite_where=UserRole.resource_type.is_(None),
)
Index(
    "uq_user_role_type",
    UserRole.user_id,
    UserRole.role_id,
    UserRole.resource_type,
    unique=True,
    postgresql_where=and_(UserRole.resource_type.is_not(None), UserRole.resource_id.is_(None)),
    sqlite_where=and_(UserRole.resource_type.is_not(None), UserRole.resource_id.is_(None)),
)
