"""
Helpers for identifying subjects and resources.

Callers may pass ORM objects or bare ids for subjects, and instances or
classes for resources (a class stands in for "some resource of this type",
e.g. when checking ``create``).
"""

from typing import Any
from uuid import UUID


def resource_type_of(resource: Any) -> type:
    """Runtime type of a resource; a class passed as placeholder is its own type."""
    return resource if isinstance(resource, type) else type(resource)


def resource_name_of(resource: Any) -> str:
    return resource_type_of(resource).__name__


def resource_id_of(resource: Any) -> Any:
    """Identifier of a resource instance, or None for a class placeholder."""
    if isinstance(resource, type):
        return None
    return getattr(resource, "id", None)


def subject_id_of(subject: Any) -> Any:
    """Accept either a user object or a bare user id."""
    return getattr(subject, "id", subject)


def parse_id(value: Any) -> UUID | None:
    """UUID for ``value``, or None when it cannot be one."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None
