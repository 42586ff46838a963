from __future__ import annotations

from typing import List

from ..models.committee import Committee
from ..models.membership import Membership, Role
from .policy import DEFAULT_POLICY, AccessPolicy
from .roles import Action, Affordance, AffordanceSet


def resolve_affordances(role: Role, policy: AccessPolicy = DEFAULT_POLICY) -> AffordanceSet:
    """Return the affordances a viewer holding ``role`` sees on a committee page."""
    return policy.affordances_for(role)


def promotion_candidates(
    committee: Committee, viewer_role: Role, policy: AccessPolicy = DEFAULT_POLICY
) -> List[Membership]:
    """Return the members a viewer may promote to host.

    Only viewers both allowed to promote and shown the promotion affordance
    get candidates; everyone else gets an empty list rather than an error.
    """
    if not policy.allows(viewer_role, Action.PROMOTE_HOST):
        return []
    if Affordance.PROMOTE_HOST not in policy.affordances_for(viewer_role):
        return []
    return [m for m in committee.members() if m.role == Role.FOLLOWER]
