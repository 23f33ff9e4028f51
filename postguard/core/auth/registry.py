"""
Policy registry.

Maps resource types to their policy. Populated explicitly at startup,
then read by the engine for every decision.

Usage:
    registry = PolicyRegistry()
    registry.register(Post, PostPolicy())

    # or, for policies without constructor arguments:
    @registry.policy_for(Comment)
    class CommentPolicy(Policy):
        ...

    policy = registry.resolve(post)     # instance
    policy = registry.resolve(Post)     # class placeholder
"""

from typing import Any, Callable, Type

import structlog

from postguard.core.config import Settings
from postguard.core.exceptions import PolicyNotFound
from postguard.models.post import Post

from .interfaces import resource_type_of
from .policy import Policy, PostPolicy

logger = structlog.get_logger(__name__)


class PolicyRegistry:
    """
    Registry of one policy per resource type.

    Lookup walks the resource type's MRO, so a subclass of a registered
    model uses its base's policy unless it has its own.
    """

    def __init__(self) -> None:
        self._policies: dict[type, Policy] = {}

    # ============================================================
    # REGISTRATION
    # ============================================================

    def register(self, resource_type: type, policy: Policy) -> Policy:
        """
        Register ``policy`` for ``resource_type``.

        Raises:
            ValueError: If the type already has a policy
        """
        if resource_type in self._policies:
            existing = type(self._policies[resource_type]).__name__
            raise ValueError(
                f"{resource_type.__name__} already has a policy: {existing}"
            )
        self._policies[resource_type] = policy
        logger.debug(
            "policy_registered",
            resource_type=resource_type.__name__,
            policy=type(policy).__name__,
            actions=sorted(policy.actions),
        )
        return policy

    def policy_for(self, resource_type: type) -> Callable[[Type[Policy]], Type[Policy]]:
        """
        Decorator to register a policy class for a resource type.

        The class is instantiated without arguments.
        """
        def decorator(policy_class: Type[Policy]) -> Type[Policy]:
            self.register(resource_type, policy_class())
            return policy_class
        return decorator

    def unregister(self, resource_type: type) -> bool:
        """Remove the policy for a resource type."""
        return self._policies.pop(resource_type, None) is not None

    def clear(self) -> None:
        self._policies.clear()

    # ============================================================
    # LOOKUP
    # ============================================================

    def resolve(self, resource: Any) -> Policy:
        """
        Policy for a resource instance or class.

        Raises:
            PolicyNotFound: If no policy covers the resource's type
        """
        resource_type = resource_type_of(resource)
        for klass in resource_type.__mro__:
            policy = self._policies.get(klass)
            if policy is not None:
                return policy
        raise PolicyNotFound(resource_type.__name__)

    def has_policy(self, resource_type: type) -> bool:
        """Check if a policy is registered for exactly this type."""
        return resource_type in self._policies

    def list_resource_types(self) -> list[str]:
        """Names of all registered resource types."""
        return [klass.__name__ for klass in self._policies]


# Process-wide default registry
policies = PolicyRegistry()


def register_default_policies(
    registry: PolicyRegistry | None = None,
    settings: Settings | None = None,
) -> PolicyRegistry:
    """Register the built-in policies. Safe to call more than once."""
    registry = registry if registry is not None else policies
    if not registry.has_policy(Post):
        registry.register(Post, PostPolicy(settings))
    return registry
