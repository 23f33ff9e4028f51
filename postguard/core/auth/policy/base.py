"""
Policy base class.

A policy is the table of action predicates for one resource type. Each
predicate is a method taking (subject, resource) and returning a bool;
the table is built once, when the subclass is defined.

Usage:
    class CommentPolicy(Policy):
        @predicate
        def show(self, subject, comment):
            return True

        @predicate("destroy")
        def can_destroy(self, subject, comment):
            return subject.has_role("admin")
"""

from typing import Any, Callable, TypeVar

from sqlalchemy import Select, false

from ..interfaces import AuthSubject, PolicyDecision, resource_type_of
from ...exceptions import UnknownAction

F = TypeVar("F", bound=Callable[..., bool])

_ACTION_ATTR = "__policy_action__"


def predicate(action: str | F | None = None) -> Any:
    """
    Declare a method as the predicate for an action.

    ``@predicate`` uses the method name; ``@predicate("name")`` names the
    action explicitly.
    """
    if callable(action):
        setattr(action, _ACTION_ATTR, action.__name__)
        return action

    def decorator(func: F) -> F:
        setattr(func, _ACTION_ATTR, action or func.__name__)
        return func
    return decorator


class Policy:
    """
    Base class for resource policies.

    Subclasses declare predicates with @predicate. Actions without a
    predicate are rejected with UnknownAction; nothing is allowed or
    denied by default.

    Configuration:
        owner_attribute: Attribute on the resource holding the owner id
    """

    owner_attribute: str = "user_id"

    # action name -> method name, filled per subclass
    predicates: dict[str, str] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            for attr_name, attr in vars(klass).items():
                action = getattr(attr, _ACTION_ATTR, None)
                if action is not None:
                    table[action] = attr_name
        cls.predicates = table

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(self.predicates)

    def decide(self, subject: AuthSubject, action: str, resource: Any) -> PolicyDecision:
        """
        Evaluate the predicate for ``action``.

        Pure: reads the subject snapshot and the resource attributes, and
        nothing else.
        """
        resource_type = resource_type_of(resource).__name__
        method_name = self.predicates.get(action)
        if method_name is None:
            raise UnknownAction(action, resource_type)

        if getattr(self, method_name)(subject, resource):
            return PolicyDecision.allow(action, resource_type)
        return PolicyDecision.deny(
            action,
            resource_type,
            reason=f"{type(self).__name__} denies '{action}'",
        )

    def scope(self, subject: AuthSubject, query: Select) -> Select:
        """Restrict ``query`` to rows the subject may list. Default: none."""
        return query.where(false())
