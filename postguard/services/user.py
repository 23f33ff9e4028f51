"""
User service - subject creation workflow.

Creating a user is two explicit steps: insert the row (granting any roles
supplied up front), then assign the default role if the user ended up
with none.
"""

from typing import Any, Iterable
from uuid import UUID

import structlog
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from postguard.core.config import Settings, get_settings
from postguard.core.exceptions import NotFound, ValidationError
from postguard.models.user import User
from postguard.repositories.users import UserRepository
from postguard.schemas.user import UserCreate

from .roles import RoleStore

logger = structlog.get_logger(__name__)


class UserService:
    """User management service."""

    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.users = UserRepository(db)
        self.role_store = RoleStore(db)

    async def get(self, user_id: UUID) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user

    async def get_by_email(self, email: str) -> User | None:
        return await self.users.get_by_email(email)

    async def create(
        self,
        data: UserCreate | dict[str, Any],
        roles: Iterable[str] | None = None,
    ) -> User:
        """
        Create a user.

        Args:
            data: Email and name
            roles: Roles to grant at creation; the default role is only
                added when this leaves the user with no roles

        Raises:
            ValidationError: Invalid email/name, or email already taken
        """
        if not isinstance(data, UserCreate):
            try:
                data = UserCreate.model_validate(data)
            except SchemaValidationError as exc:
                raise ValidationError(sorted({str(err["loc"][0]) for err in exc.errors()})) from exc

        if await self.users.exists(email=data.email):
            raise ValidationError(["email"], f"Email already registered: {data.email}")

        user = await self.users.create(**data.model_dump())
        for role in roles or ():
            await self.role_store.grant(user, role)

        await self.assign_default_role(user)

        logger.info("user_created", user_id=str(user.id), email=user.email)
        return user

    async def assign_default_role(self, user: User) -> bool:
        """
        Grant the default role if the user holds no global roles.

        Returns True if the role was granted.
        """
        if await self.role_store.roles_of(user):
            return False
        return await self.role_store.grant(user, self.settings.auth.default_role)
