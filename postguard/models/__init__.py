"""
Database models.
"""

from .base import (
    Base,
    TimestampMixin,
    UUIDMixin,
    StandardMixin,
)
from .user import User
from .role import Role, UserRole
from .post import Post, Category, Tag, PostTag

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "StandardMixin",
    # Models
    "User",
    "Role",
    "UserRole",
    "Post",
    "Category",
    "Tag",
    "PostTag",
]
