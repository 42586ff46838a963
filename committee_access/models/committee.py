from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from .feed import FeedItem
from .membership import Membership, Role


class ApprovalState(str, Enum):
    APPROVED = "approved"
    PENDING = "pending"


@dataclass
class Committee:
    """A local chapter with memberships and a timeline."""

    uuid: str
    name: str
    slug: str
    creator_uuid: str
    approval: ApprovalState = ApprovalState.PENDING
    description: str = ""
    address: Dict[str, str] = field(default_factory=dict)
    facebook_page_url: str = ""
    twitter_nickname: str = ""
    google_plus_page_url: str = ""
    memberships: Dict[str, Membership] = field(default_factory=dict)
    feed: List[FeedItem] = field(default_factory=list)

    def is_approved(self) -> bool:
        return self.approval == ApprovalState.APPROVED

    def is_creator(self, adherent_uuid: Optional[str]) -> bool:
        return adherent_uuid is not None and adherent_uuid == self.creator_uuid

    def membership_for(self, adherent_uuid: Optional[str]) -> Optional[Membership]:
        """Return the membership of ``adherent_uuid`` or ``None``."""
        if adherent_uuid is None:
            return None
        return self.memberships.get(adherent_uuid)

    def add_membership(
        self, adherent_uuid: str, role: Role, subscribed_at: datetime
    ) -> Membership:
        if adherent_uuid in self.memberships:
            raise ValueError(f"{adherent_uuid} is already a member of {self.name}")
        if role == Role.SUPERVISOR and self.supervisor() is not None:
            raise ValueError(f"{self.name} already has a supervisor")
        membership = Membership(
            adherent_uuid=adherent_uuid,
            committee_uuid=self.uuid,
            role=role,
            subscribed_at=subscribed_at,
        )
        self.memberships[adherent_uuid] = membership
        return membership

    def remove_membership(self, adherent_uuid: str) -> Membership:
        try:
            return self.memberships.pop(adherent_uuid)
        except KeyError as exc:
            raise ValueError(f"{adherent_uuid} is not a member of {self.name}") from exc

    def members(self) -> List[Membership]:
        """Return memberships ordered by subscription date."""
        return sorted(
            self.memberships.values(),
            key=lambda m: (m.subscribed_at, m.adherent_uuid),
        )

    def hosts(self) -> List[Membership]:
        """Return the supervisor and hosts, supervisor first."""
        return sorted(
            (m for m in self.memberships.values() if m.is_host()),
            key=lambda m: (-m.role, m.subscribed_at, m.adherent_uuid),
        )

    def supervisor(self) -> Optional[Membership]:
        for membership in self.memberships.values():
            if membership.is_supervisor():
                return membership
        return None

    def members_count(self) -> int:
        return len(self.memberships)

    def add_feed_item(self, item: FeedItem) -> None:
        self.feed.append(item)

    def timeline(self) -> List[FeedItem]:
        """Return every feed item, most recent first."""
        return sorted(self.feed, key=lambda item: item.created_at, reverse=True)
