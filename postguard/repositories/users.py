"""
User and role repositories.
"""

from postguard.models.role import Role, UserRole
from postguard.models.user import User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        return await self.get_one(email=email)


class RoleRepository(BaseRepository[Role]):
    model = Role

    async def get_by_name(self, name: str) -> Role | None:
        return await self.get_one(name=name)

    async def get_or_create(self, name: str) -> Role:
        role = await self.get_by_name(name)
        if role is None:
            role = await self.create(name=name)
        return role


class UserRoleRepository(BaseRepository[UserRole]):
    model = UserRole
