"""
Input and output schemas.
"""

from .post import (
    PostCreate,
    PostUpdate,
    PostResponse,
    TaxonomyName,
    REQUIRED_POST_FIELDS,
)
from .user import UserCreate, UserResponse

__all__ = [
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "TaxonomyName",
    "REQUIRED_POST_FIELDS",
    "UserCreate",
    "UserResponse",
]
