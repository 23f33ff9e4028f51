"""
Resource policies.

Available policies:
- PostPolicy: blog posts
"""

from .base import Policy, predicate
from .post import PostPolicy

__all__ = ["Policy", "predicate", "PostPolicy"]
