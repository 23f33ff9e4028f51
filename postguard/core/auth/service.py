"""
Authorization gateway - the single entry point for request handlers.

Usage:
    gateway = AuthorizationGateway(db)

    await gateway.authorize(current_user, "update", post)   # raises on deny
    if await gateway.can(current_user, "destroy", post):
        ...
    query = await gateway.scoped(current_user, select(Post), Post)
"""

from typing import Any, Sequence

import structlog
from sqlalchemy import Select, inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession

from postguard.core.exceptions import ConfigurationError, NotAuthorizedError, NotFound
from postguard.services.roles import RoleStore

from .engine import PolicyEngine
from .interfaces import (
    AuthSubject,
    PolicyDecision,
    resource_id_of,
    resource_name_of,
    resource_type_of,
    subject_id_of,
)
from .policy import Policy

logger = structlog.get_logger(__name__)


class AuthorizationGateway:
    """
    Enforces policies before protected operations.

    Each call takes a fresh snapshot: the subject's roles are re-read from
    the role store and a stored resource is re-read (in place when it
    belongs to this session, as a new copy otherwise), then the engine
    decides. The gateway itself never writes.
    """

    def __init__(
        self,
        db: AsyncSession,
        engine: PolicyEngine | None = None,
        role_store: RoleStore | None = None,
    ):
        self.db = db
        self.engine = engine or PolicyEngine()
        self.role_store = role_store or RoleStore(db)

    # ============================================================
    # SNAPSHOT
    # ============================================================

    async def snapshot(self, subject: Any, resource: Any | None = None) -> AuthSubject:
        """
        Current roles of ``subject``.

        Raises:
            NotFound: If the subject does not exist
        """
        subject_id = await self.role_store.require_subject(subject)
        roles = await self.role_store.roles_of(subject_id)
        scoped: frozenset[str] = frozenset()
        if resource is not None:
            scoped = await self.role_store.roles_of(subject_id, resource) - roles
        return AuthSubject(id=subject_id, roles=roles, scoped_roles=scoped)

    async def _current(self, policy: Policy, resource: Any) -> Any:
        """
        Resource as stored now.

        A row in this session has its owner column refreshed in place. A
        row that is detached or belongs to another session is loaded again
        by primary key, and the caller's object is left untouched. Classes,
        unsaved objects and non-ORM values are used as given.

        Raises:
            NotFound: The row no longer exists
        """
        if isinstance(resource, type):
            return resource
        state = sa_inspect(resource, raiseerr=False)
        if state is None or state.key is None:
            return resource
        if resource in self.db:
            await self.db.refresh(resource, attribute_names=[policy.owner_attribute])
            return resource

        current = await self.db.get(state.mapper.class_, state.identity, populate_existing=True)
        if current is None:
            raise NotFound(resource_name_of(resource), resource_id_of(resource))
        return current

    def _policy_for(self, resource: Any) -> Policy:
        try:
            return self.engine.policy_for(resource)
        except ConfigurationError as exc:
            logger.error("authorization_misconfigured", error=str(exc))
            raise

    # ============================================================
    # DECISIONS
    # ============================================================

    async def decision(self, subject: Any, action: str, resource: Any) -> PolicyDecision:
        """
        Evaluate without raising on deny.

        Raises:
            PolicyNotFound: No policy for the resource type
            UnknownAction: No predicate for ``action``
            NotFound: The subject, or the stored resource row, does not exist
        """
        policy = self._policy_for(resource)
        auth_subject = await self.snapshot(subject, resource)
        current = await self._current(policy, resource)

        try:
            return self.engine.decide(auth_subject, action, current)
        except ConfigurationError as exc:
            logger.error("authorization_misconfigured", error=str(exc))
            raise

    async def authorize(self, subject: Any, action: str, resource: Any) -> None:
        """
        Allow or raise.

        Raises:
            NotAuthorizedError: The policy denied the action
            PolicyNotFound, UnknownAction, NotFound: see ``decision``
        """
        decision = await self.decision(subject, action, resource)

        if not decision.allowed:
            error = NotAuthorizedError(
                subject_id=subject_id_of(subject),
                action=action,
                resource_type=resource_type_of(resource).__name__,
                resource_id=resource_id_of(resource),
                reason=decision.reason,
            )
            logger.info("authorization_denied", **error.as_audit_dict())
            raise error

        logger.debug(
            "authorization_granted",
            subject_id=str(subject_id_of(subject)),
            action=action,
            resource_type=decision.resource_type,
        )

    async def can(self, subject: Any, action: str, resource: Any) -> bool:
        """
        Check if action is allowed (returns bool, no exception on deny).

        Usage:
            if await gateway.can(user, "destroy", post):
                # show delete button
        """
        decision = await self.decision(subject, action, resource)
        return decision.allowed

    # ============================================================
    # COLLECTIONS
    # ============================================================

    async def scoped(self, subject: Any, query: Select, model: type) -> Select:
        """Apply the model policy's scope to ``query``."""
        policy = self._policy_for(model)
        auth_subject = await self.snapshot(subject)
        return policy.scope(auth_subject, query)

    async def filter_authorized(
        self,
        subject: Any,
        action: str,
        resources: Sequence[Any],
    ) -> list[Any]:
        """Filter a list of resources to only those the subject may act on."""
        authorized = []
        for resource in resources:
            if await self.can(subject, action, resource):
                authorized.append(resource)
        return authorized
