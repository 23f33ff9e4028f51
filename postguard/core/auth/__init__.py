"""
Authorization - roles, policies and the gateway handlers call.

Usage:
=====

Startup:
    from postguard.core.auth import policies, register_default_policies
    register_default_policies(policies)

In a request handler:
    gateway = AuthorizationGateway(db)
    await gateway.authorize(current_user, "update", post)   # NotAuthorizedError on deny
    await gateway.authorize(current_user, "create", Post)   # class as placeholder

Listing:
    query = await gateway.scoped(current_user, select(Post), Post)

Extensibility:
=============

One policy per resource type, registered explicitly:

    class CommentPolicy(Policy):
        @predicate
        def show(self, subject, comment):
            return subject.has_role("admin") or subject.owns(comment)

    policies.register(Comment, CommentPolicy())
"""

# Value types
from .interfaces import (
    AuthSubject,
    PolicyDecision,
)

# Policies
from .policy import Policy, PostPolicy, predicate

# Registry
from .registry import PolicyRegistry, policies, register_default_policies

# Engine
from .engine import PolicyEngine

# Gateway (main facade)
from .service import AuthorizationGateway

__all__ = [
    # Values
    "AuthSubject",
    "PolicyDecision",
    # Policies
    "Policy",
    "PostPolicy",
    "predicate",
    # Registry
    "PolicyRegistry",
    "policies",
    "register_default_policies",
    # Engine
    "PolicyEngine",
    # Gateway
    "AuthorizationGateway",
]
