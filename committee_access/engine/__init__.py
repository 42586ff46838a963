"""Pure decision functions of the committee access model."""

from .affordances import promotion_candidates, resolve_affordances
from .authorizer import ActionAuthorizer
from .policy import DEFAULT_POLICY, AccessPolicy
from .roles import Action, Affordance, AffordanceSet, role_of
from .selection import parse_identifiers, select_members
from .timeline import TimelineEntry, visible_timeline
from .visibility import Visibility, ensure_visible, resolve_visibility

__all__ = [
    "AccessPolicy",
    "Action",
    "ActionAuthorizer",
    "Affordance",
    "AffordanceSet",
    "DEFAULT_POLICY",
    "TimelineEntry",
    "Visibility",
    "ensure_visible",
    "parse_identifiers",
    "promotion_candidates",
    "resolve_affordances",
    "resolve_visibility",
    "role_of",
    "select_members",
    "visible_timeline",
]
