"""Notification dispatch.

The committee service only decides who gets notified and when; delivery is
left to a :class:`Notifier` implementation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from .models.committee import Committee
from .models.membership import Membership

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    NEW_FOLLOWER = "new-follower"
    EVENT_PUBLISHED = "event-published"
    FEED_MESSAGE = "feed-message-published"
    MEMBERS_CONTACT = "members-contact"


@dataclass
class Notification:
    kind: NotificationKind
    committee_uuid: str
    recipients: List[str]
    subject_uuid: str = ""
    payload: Dict[str, str] = field(default_factory=dict)


class Notifier:
    """Base dispatcher; subclasses deliver notifications."""

    def send(self, notification: Notification) -> None:
        raise NotImplementedError


class MemoryNotifier(Notifier):
    """Keep every notification in memory and log it."""

    def __init__(self) -> None:
        self.sent: List[Notification] = []

    def send(self, notification: Notification) -> None:
        logger.info(
            "Dispatching %s for committee %s to %d recipient(s)",
            notification.kind.value,
            notification.committee_uuid,
            len(notification.recipients),
        )
        self.sent.append(notification)

    def count(self, kind: NotificationKind, recipient: str | None = None) -> int:
        """Count sent notifications of ``kind``, optionally for one recipient."""
        return sum(
            1
            for n in self.sent
            if n.kind == kind and (recipient is None or recipient in n.recipients)
        )


def host_recipients(committee: Committee) -> List[str]:
    """Supervisor and hosts of the committee."""
    return [m.adherent_uuid for m in committee.hosts()]


def subscriber_recipients(committee: Committee, subscribed: Dict[str, bool]) -> List[str]:
    """Members who accept committee notifications.

    ``subscribed`` maps adherent uuid to the adherent's notification flag;
    members missing from it are skipped.
    """
    return [
        m.adherent_uuid for m in committee.members() if subscribed.get(m.adherent_uuid)
    ]


def selected_recipients(members: List[Membership]) -> List[str]:
    return [m.adherent_uuid for m in members]
