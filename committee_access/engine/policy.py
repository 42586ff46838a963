"""Capability and affordance tables keyed by role."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet

from ..models.membership import Role
from .roles import MEMBERSHIP_LINKS, Action, Affordance, AffordanceSet

_MANAGE = frozenset(
    {
        Action.EDIT_INFO,
        Action.PUBLISH_EVENT,
        Action.POST_MESSAGE,
        Action.VIEW_MEMBERS,
        Action.EXPORT_MEMBERS,
        Action.CONTACT_MEMBERS,
    }
)

# Follow and unfollow are membership-state transitions, so they are listed per
# role instead of being inherited from lower roles.
DEFAULT_CAPABILITIES: Dict[Role, FrozenSet[Action]] = {
    Role.ANONYMOUS: frozenset(),
    Role.ADHERENT: frozenset({Action.FOLLOW}),
    Role.FOLLOWER: frozenset({Action.UNFOLLOW}),
    Role.HOST: _MANAGE,
    Role.SUPERVISOR: _MANAGE | {Action.PROMOTE_HOST},
}

_HOST_AFFORDANCES = frozenset(
    {Affordance.UNFOLLOW_LINK, Affordance.HOST_NAV, Affordance.MESSAGE_FORM}
)

DEFAULT_AFFORDANCES: Dict[Role, AffordanceSet] = {
    Role.ANONYMOUS: AffordanceSet(frozenset({Affordance.REGISTER_LINK})),
    Role.ADHERENT: AffordanceSet(frozenset({Affordance.REGISTER_LINK})),
    Role.FOLLOWER: AffordanceSet(frozenset({Affordance.UNFOLLOW_LINK})),
    Role.HOST: AffordanceSet(
        _HOST_AFFORDANCES, frozenset({Affordance.UNFOLLOW_LINK})
    ),
    Role.SUPERVISOR: AffordanceSet(
        _HOST_AFFORDANCES | {Affordance.PROMOTE_HOST},
        frozenset({Affordance.UNFOLLOW_LINK}),
    ),
}


@dataclass(frozen=True)
class AccessPolicy:
    """Role to capability and role to affordance lookup tables.

    Whatever the tables contain, viewers below :attr:`Role.HOST` must have
    exactly one active membership link and hosts must see the unfollow link
    disabled.
    """

    capabilities: Dict[Role, FrozenSet[Action]] = field(
        default_factory=lambda: dict(DEFAULT_CAPABILITIES)
    )
    affordances: Dict[Role, AffordanceSet] = field(
        default_factory=lambda: dict(DEFAULT_AFFORDANCES)
    )

    def __post_init__(self) -> None:
        for role in Role:
            if role not in self.capabilities:
                raise ValueError(f"No capabilities defined for {role.label}")
            if role not in self.affordances:
                raise ValueError(f"No affordances defined for {role.label}")

            affordances = self.affordances[role]
            links = affordances.active() & MEMBERSHIP_LINKS
            if role < Role.HOST and len(links) != 1:
                raise ValueError(
                    f"{role.label} must have exactly one active membership link"
                )
            if role >= Role.HOST and (
                links or not affordances.is_disabled(Affordance.UNFOLLOW_LINK)
            ):
                raise ValueError(
                    f"{role.label} must only see a disabled unfollow link"
                )

    def allows(self, role: Role, action: Action) -> bool:
        return action in self.capabilities[role]

    def affordances_for(self, role: Role) -> AffordanceSet:
        return self.affordances[role]


DEFAULT_POLICY = AccessPolicy()
