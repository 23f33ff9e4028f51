"""
Services - the operations request handlers call.
"""

from .roles import RoleStore
from .user import UserService
from .post import PostService
from .taxonomy import TaxonomyService

__all__ = [
    "RoleStore",
    "UserService",
    "PostService",
    "TaxonomyService",
]
