"""
Role store - grant, revoke and query a user's roles.

Usage:
    store = RoleStore(db)

    await store.grant(user, "admin")
    await store.grant(user, "moderator", post)      # scoped to one post
    await store.grant(user, "moderator", Post)      # scoped to all posts

    await store.has_role(user, "admin")             # global only
    await store.has_role(user, "moderator", post)   # global, Post or this post
"""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import ColumnElement, and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from postguard.core.exceptions import NotFound, ValidationError
from postguard.core.resources import (
    parse_id,
    resource_id_of,
    resource_name_of,
    subject_id_of,
)
from postguard.models.role import Role, UserRole
from postguard.models.user import User
from postguard.repositories.users import RoleRepository, UserRepository

logger = structlog.get_logger(__name__)


def _normalize_role(role: Any) -> str:
    name = str(getattr(role, "value", role)).strip()
    if not name:
        raise ValidationError(["role"], "Role name must not be empty")
    return name


def _match(column: Any, value: Any) -> ColumnElement[bool]:
    return column.is_(None) if value is None else column == value


def _applicable_scopes(resource: Any | None) -> ColumnElement[bool]:
    """
    Assignments that count for ``resource``.

    Global assignments always count. With a resource, assignments scoped
    to its type, and to the instance itself, count as well.
    """
    conditions = [UserRole.resource_type.is_(None)]
    if resource is not None:
        resource_type = resource_name_of(resource)
        conditions.append(
            and_(UserRole.resource_type == resource_type, UserRole.resource_id.is_(None))
        )
        resource_id = resource_id_of(resource)
        if resource_id is not None:
            conditions.append(
                and_(UserRole.resource_type == resource_type, UserRole.resource_id == resource_id)
            )
    return or_(*conditions)


class RoleStore:
    """
    Owns the user -> roles mapping.

    Every read goes to the database; nothing is cached between calls, so
    a grant made by another request is visible to the next check.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.roles = RoleRepository(db)

    async def require_subject(self, subject: Any) -> UUID:
        """
        Id of an existing subject, given a user or a user id.

        Raises:
            NotFound: If the subject does not exist
        """
        raw_id = subject_id_of(subject)
        subject_id = parse_id(raw_id)
        if subject_id is None or not await self.users.exists(id=subject_id):
            raise NotFound("User", raw_id)
        return subject_id

    @staticmethod
    def _scope(resource: Any | None) -> tuple[str | None, Any]:
        if resource is None:
            return None, None
        return resource_name_of(resource), resource_id_of(resource)

    # ============================================================
    # MUTATION
    # ============================================================

    async def grant(self, subject: Any, role: Any, resource: Any | None = None) -> bool:
        """
        Grant a role, optionally scoped to a resource type or instance.

        Idempotent. Returns True if a new assignment was created.

        Raises:
            NotFound: If the subject does not exist
            ValidationError: If the role name is empty
        """
        subject_id = await self.require_subject(subject)
        name = _normalize_role(role)
        resource_type, resource_id = self._scope(resource)

        role_row = await self.roles.get_or_create(name)
        existing = await self.db.scalar(
            select(func.count())
            .select_from(UserRole)
            .where(
                UserRole.user_id == subject_id,
                UserRole.role_id == role_row.id,
                _match(UserRole.resource_type, resource_type),
                _match(UserRole.resource_id, resource_id),
            )
        )
        if existing:
            return False

        self.db.add(
            UserRole(
                user_id=subject_id,
                role_id=role_row.id,
                resource_type=resource_type,
                resource_id=resource_id,
            )
        )
        await self.db.flush()

        logger.info(
            "role_granted",
            user_id=str(subject_id),
            role=name,
            resource_type=resource_type,
            resource_id=None if resource_id is None else str(resource_id),
        )
        return True

    async def revoke(self, subject: Any, role: Any, resource: Any | None = None) -> bool:
        """
        Revoke the assignment with exactly this scope.

        No-op if the subject does not hold it. Returns True if something
        was removed.

        Raises:
            NotFound: If the subject does not exist
        """
        subject_id = await self.require_subject(subject)
        name = _normalize_role(role)
        resource_type, resource_id = self._scope(resource)

        role_row = await self.roles.get_by_name(name)
        if role_row is None:
            return False

        result = await self.db.execute(
            delete(UserRole).where(
                UserRole.user_id == subject_id,
                UserRole.role_id == role_row.id,
                _match(UserRole.resource_type, resource_type),
                _match(UserRole.resource_id, resource_id),
            )
        )
        await self.db.flush()

        removed = result.rowcount > 0
        if removed:
            logger.info(
                "role_revoked",
                user_id=str(subject_id),
                role=name,
                resource_type=resource_type,
                resource_id=None if resource_id is None else str(resource_id),
            )
        return removed

    # ============================================================
    # QUERIES
    # ============================================================

    async def has_role(self, subject: Any, role: Any, resource: Any | None = None) -> bool:
        """
        Check role membership.

        Without ``resource`` only global assignments count.

        Raises:
            NotFound: If the subject does not exist
        """
        subject_id = await self.require_subject(subject)
        name = _normalize_role(role)

        count = await self.db.scalar(
            select(func.count())
            .select_from(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .where(
                UserRole.user_id == subject_id,
                Role.name == name,
                _applicable_scopes(resource),
            )
        )
        return bool(count)

    async def roles_of(self, subject: Any, resource: Any | None = None) -> frozenset[str]:
        """
        Names of the roles a subject holds.

        Without ``resource``: global roles. With it: global roles plus the
        ones scoped to the resource's type or to the resource itself.

        Raises:
            NotFound: If the subject does not exist
        """
        subject_id = await self.require_subject(subject)
        result = await self.db.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == subject_id, _applicable_scopes(resource))
            .distinct()
        )
        return frozenset(result.scalars().all())

    async def subjects_with_role(self, role: Any) -> list[User]:
        """Users holding a global assignment of ``role``."""
        name = _normalize_role(role)
        result = await self.db.execute(
            select(User)
            .join(UserRole, UserRole.user_id == User.id)
            .join(Role, Role.id == UserRole.role_id)
            .where(Role.name == name, UserRole.resource_type.is_(None))
            .order_by(User.email)
        )
        return list(result.scalars().unique().all())
