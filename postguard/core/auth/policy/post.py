"""
Post policy.

| action  | allowed when                    |
|---------|---------------------------------|
| show    | admin, or owner of the post     |
| create  | admin or moderator              |
| update  | admin, or owner of the post     |
| destroy | admin                           |

Role checks run before ownership checks. Only global role assignments
count here.
"""

from typing import Any

from sqlalchemy import Select

from postguard.core.config import Settings, get_settings
from postguard.models.post import Post

from ..interfaces import AuthSubject
from .base import Policy, predicate


class PostPolicy(Policy):
    """Authorization rules for blog posts."""

    owner_attribute = "user_id"

    def __init__(self, settings: Settings | None = None):
        auth = (settings or get_settings()).auth
        self.admin_role = auth.admin_role
        self.moderator_role = auth.moderator_role

    def _is_admin(self, subject: AuthSubject) -> bool:
        return subject.has_role(self.admin_role)

    @predicate
    def show(self, subject: AuthSubject, post: Any) -> bool:
        return self._is_admin(subject) or subject.owns(post, self.owner_attribute)

    @predicate
    def create(self, subject: AuthSubject, post: Any) -> bool:
        return self._is_admin(subject) or subject.has_role(self.moderator_role)

    @predicate
    def update(self, subject: AuthSubject, post: Any) -> bool:
        return self._is_admin(subject) or subject.owns(post, self.owner_attribute)

    @predicate
    def destroy(self, subject: AuthSubject, post: Any) -> bool:
        return self._is_admin(subject)

    def scope(self, subject: AuthSubject, query: Select) -> Select:
        """Admins list every post; everyone else lists their own."""
        if self._is_admin(subject):
            return query
        return query.where(Post.user_id == subject.id)
