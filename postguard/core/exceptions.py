"""
Error hierarchy.

Two families, so callers can log them differently:

- Expected during normal operation: ValidationError, NotAuthorizedError
- Programming/configuration mistakes: UnknownAction, PolicyNotFound
  (both ConfigurationError)

NotFound sits on its own: a missing row may be either.
"""

from typing import Any


class PostguardError(Exception):
    """Base exception for postguard."""

    pass


class ValidationError(PostguardError):
    """One or more required fields are missing or invalid."""

    def __init__(self, fields: list[str], message: str | None = None):
        self.fields = list(fields)
        super().__init__(message or f"Invalid or missing fields: {', '.join(self.fields)}")


class NotFound(PostguardError):
    """Requested subject, resource or role does not exist."""

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class NotAuthorizedError(PostguardError):
    """The policy denied the requested action."""

    def __init__(
        self,
        subject_id: Any,
        action: str,
        resource_type: str,
        resource_id: Any = None,
        reason: str | None = None,
    ):
        self.subject_id = subject_id
        self.action = action
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.reason = reason
        target = resource_type if resource_id is None else f"{resource_type}:{resource_id}"
        super().__init__(f"Subject {subject_id} is not allowed to {action} {target}")

    def as_audit_dict(self) -> dict[str, Any]:
        """Fields for an audit log record."""
        return {
            "subject_id": str(self.subject_id),
            "action": self.action,
            "resource_type": self.resource_type,
            "resource_id": None if self.resource_id is None else str(self.resource_id),
            "reason": self.reason,
        }


class ConfigurationError(PostguardError):
    """Authorization is misconfigured for the request."""

    pass


class UnknownAction(ConfigurationError):
    """No predicate is declared for the action."""

    def __init__(self, action: str, resource_type: str):
        self.action = action
        self.resource_type = resource_type
        super().__init__(f"No predicate for action '{action}' on {resource_type}")


class PolicyNotFound(ConfigurationError):
    """No policy is registered for the resource type."""

    def __init__(self, resource_type: str):
        self.resource_type = resource_type
        super().__init__(f"No policy registered for {resource_type}")
