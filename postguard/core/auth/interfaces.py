"""
Authorization value types.

These are plain values: no database access, no mutation. A PolicyDecision
is computed per (subject, action, resource) and never stored; an
AuthSubject is the snapshot of a user's roles taken for one evaluation.
"""

from dataclasses import dataclass, field
from typing import Any

from postguard.core.resources import (
    resource_id_of,
    resource_name_of,
    resource_type_of,
    subject_id_of,
)

__all__ = [
    "AuthSubject",
    "PolicyDecision",
    "resource_type_of",
    "resource_id_of",
    "resource_name_of",
    "subject_id_of",
]


# ============================================================
# POLICY DECISION
# ============================================================

@dataclass(frozen=True)
class PolicyDecision:
    """
    Result of a policy evaluation.

    Attributes:
        allowed: Whether the action is permitted
        action: The action that was evaluated (for diagnostics)
        resource_type: Name of the resource type evaluated against
        reason: Human-readable explanation
    """
    allowed: bool
    action: str
    resource_type: str | None = None
    reason: str | None = None

    @classmethod
    def allow(cls, action: str, resource_type: str | None = None) -> "PolicyDecision":
        return cls(allowed=True, action=action, resource_type=resource_type)

    @classmethod
    def deny(
        cls,
        action: str,
        resource_type: str | None = None,
        reason: str = "Permission denied",
    ) -> "PolicyDecision":
        return cls(allowed=False, action=action, resource_type=resource_type, reason=reason)


# ============================================================
# SUBJECT SNAPSHOT
# ============================================================

@dataclass(frozen=True)
class AuthSubject:
    """
    Roles of a subject at decision time.

    ``roles`` holds global assignments only. ``scoped_roles`` holds the
    assignments scoped to the resource under evaluation (by type or by
    instance); predicates opt into them explicitly.
    """
    id: Any
    roles: frozenset[str] = field(default_factory=frozenset)
    scoped_roles: frozenset[str] = field(default_factory=frozenset)

    def has_role(self, role: str, *, scoped: bool = False) -> bool:
        if role in self.roles:
            return True
        return scoped and role in self.scoped_roles

    def has_any_role(self, *roles: str) -> bool:
        return any(role in self.roles for role in roles)

    def owns(self, resource: Any, owner_attribute: str = "user_id") -> bool:
        """Ownership by identifier equality, never object identity."""
        if isinstance(resource, type):
            return False
        owner_id = getattr(resource, owner_attribute, None)
        return owner_id is not None and self.id is not None and owner_id == self.id
