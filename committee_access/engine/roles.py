from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from ..models.committee import Committee
from ..models.membership import Role


class Action(str, Enum):
    """Mutating operations guarded by the capability table."""

    FOLLOW = "follow"
    UNFOLLOW = "unfollow"
    EDIT_INFO = "edit_info"
    PUBLISH_EVENT = "publish_event"
    POST_MESSAGE = "post_message"
    VIEW_MEMBERS = "view_members"
    EXPORT_MEMBERS = "export_members"
    CONTACT_MEMBERS = "contact_members"
    PROMOTE_HOST = "promote_host"


class Affordance(str, Enum):
    """UI elements rendered on a committee page."""

    REGISTER_LINK = "show-register-link"
    FOLLOW_LINK = "show-follow-link"
    UNFOLLOW_LINK = "show-unfollow-link"
    MESSAGE_FORM = "show-message-form"
    HOST_NAV = "show-host-nav"
    PROMOTE_HOST = "promote-host"


MEMBERSHIP_LINKS = frozenset(
    {Affordance.REGISTER_LINK, Affordance.FOLLOW_LINK, Affordance.UNFOLLOW_LINK}
)


@dataclass(frozen=True)
class AffordanceSet:
    """Affordances shown to a viewer; ``disabled`` ones render inert."""

    shown: FrozenSet[Affordance] = frozenset()
    disabled: FrozenSet[Affordance] = frozenset()

    def __post_init__(self) -> None:
        if not self.disabled <= self.shown:
            raise ValueError("Disabled affordances must also be shown")

    def __contains__(self, affordance: object) -> bool:
        return affordance in self.shown

    def active(self) -> FrozenSet[Affordance]:
        return self.shown - self.disabled

    def is_active(self, affordance: Affordance) -> bool:
        return affordance in self.shown and affordance not in self.disabled

    def is_disabled(self, affordance: Affordance) -> bool:
        return affordance in self.disabled


def role_of(committee: Committee, adherent_uuid: Optional[str]) -> Role:
    """Return the role ``adherent_uuid`` holds for ``committee``.

    ``None`` stands for an anonymous visitor; an authenticated adherent
    without membership is :attr:`Role.ADHERENT`.
    """
    if adherent_uuid is None:
        return Role.ANONYMOUS
    membership = committee.membership_for(adherent_uuid)
    if membership is None:
        return Role.ADHERENT
    return membership.role
