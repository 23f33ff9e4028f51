"""
Repository pattern for data access.
"""

from .base import BaseRepository
from .users import UserRepository, RoleRepository, UserRoleRepository
from .posts import (
    PostRepository,
    PostTagRepository,
    CategoryRepository,
    TagRepository,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "RoleRepository",
    "UserRoleRepository",
    "PostRepository",
    "PostTagRepository",
    "CategoryRepository",
    "TagRepository",
]
