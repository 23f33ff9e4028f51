"""
Policy engine.

Resolves the policy for a resource's runtime type and evaluates one
action. Synchronous and side-effect free: all state it reads is already
in the AuthSubject snapshot and the resource object.
"""

from typing import Any

from .interfaces import AuthSubject, PolicyDecision
from .policy import Policy
from .registry import PolicyRegistry, policies


class PolicyEngine:
    """
    Evaluates (subject, action, resource) against registered policies.

    Usage:
        engine = PolicyEngine(registry)
        decision = engine.decide(AuthSubject(id=uid, roles=frozenset({"admin"})), "destroy", post)
    """

    def __init__(self, registry: PolicyRegistry | None = None):
        self.registry = registry if registry is not None else policies

    def policy_for(self, resource: Any) -> Policy:
        """Raises PolicyNotFound if the resource type has no policy."""
        return self.registry.resolve(resource)

    def decide(self, subject: AuthSubject, action: str, resource: Any) -> PolicyDecision:
        """
        Evaluate one action.

        Raises:
            PolicyNotFound: No policy for the resource type
            UnknownAction: The policy has no predicate for ``action``
        """
        return self.policy_for(resource).decide(subject, action, resource)
