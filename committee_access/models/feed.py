from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .event import Event


@dataclass
class FeedItem:
    """Entry of a committee timeline."""

    uuid: str
    author_uuid: str
    created_at: datetime

    kind = "item"

    def is_published(self) -> bool:
        return True


@dataclass
class FeedMessage(FeedItem):
    """A message written by a host, either a draft or published."""

    content: str = ""
    published: bool = False

    kind = "message"

    def is_published(self) -> bool:
        return self.published

    def publish(self) -> None:
        self.published = True


@dataclass
class FeedEvent(FeedItem):
    """Timeline entry announcing a newly published event."""

    event: Event | None = None

    kind = "event"
