from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..models.committee import Committee
from ..models.feed import FeedEvent, FeedItem, FeedMessage
from ..models.membership import Role

LOGIN_INVITATION = "Log in to read the messages of this committee."


@dataclass
class TimelineEntry:
    item: FeedItem
    content: str
    masked: bool = False


def visible_timeline(committee: Committee, role: Role) -> List[TimelineEntry]:
    """Return the timeline entries a viewer holding ``role`` may read.

    Drafts are only listed for hosts. Anonymous visitors see the entries but
    not the content of messages.
    """
    entries: List[TimelineEntry] = []
    for item in committee.timeline():
        if not item.is_published() and role < Role.HOST:
            continue
        if isinstance(item, FeedMessage):
            if role == Role.ANONYMOUS:
                entries.append(TimelineEntry(item, LOGIN_INVITATION, masked=True))
            else:
                entries.append(TimelineEntry(item, item.content))
        elif isinstance(item, FeedEvent) and item.event is not None:
            entries.append(TimelineEntry(item, item.event.name))
    return entries
