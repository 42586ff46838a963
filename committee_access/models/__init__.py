"""Data models for committee_access."""

from .adherent import Adherent
from .committee import ApprovalState, Committee
from .event import Event
from .feed import FeedEvent, FeedItem, FeedMessage
from .membership import Membership, Role

__all__ = [
    "Adherent",
    "ApprovalState",
    "Committee",
    "Event",
    "FeedEvent",
    "FeedItem",
    "FeedMessage",
    "Membership",
    "Role",
]
