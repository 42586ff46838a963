from __future__ import annotations

import logging
from typing import Optional

from ..errors import AuthorizationDenied
from ..models.committee import Committee
from ..models.membership import Role
from .policy import DEFAULT_POLICY, AccessPolicy
from .roles import Action, role_of

logger = logging.getLogger(__name__)


class ActionAuthorizer:
    """Check mutating actions against the policy's capability table."""

    def __init__(self, policy: AccessPolicy = DEFAULT_POLICY) -> None:
        self.policy = policy

    def is_granted(self, role: Role, action: Action) -> bool:
        return self.policy.allows(role, action)

    def can(self, committee: Committee, actor_uuid: Optional[str], action: Action) -> bool:
        return self.is_granted(role_of(committee, actor_uuid), action)

    def authorize(
        self, committee: Committee, actor_uuid: Optional[str], action: Action
    ) -> Role:
        """Return the actor's role or raise :class:`AuthorizationDenied`."""
        role = role_of(committee, actor_uuid)
        if not self.is_granted(role, action):
            logger.warning(
                "Denied %s on committee %s for %s (%s)",
                action.value,
                committee.uuid,
                actor_uuid or "anonymous",
                role.label,
            )
            raise AuthorizationDenied(action.value, role.label)
        return role
