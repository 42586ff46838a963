from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum


class Role(IntEnum):
    """Ordered viewer roles; a higher value means more privileges."""

    ANONYMOUS = 0
    ADHERENT = 1
    FOLLOWER = 2
    HOST = 3
    SUPERVISOR = 4

    @classmethod
    def parse(cls, value: str) -> "Role":
        try:
            return cls[value.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown role: {value}") from exc

    @property
    def label(self) -> str:
        return self.name.lower()


MEMBERSHIP_ROLES = (Role.FOLLOWER, Role.HOST, Role.SUPERVISOR)


@dataclass
class Membership:
    """Links one adherent to one committee with a role."""

    adherent_uuid: str
    committee_uuid: str
    role: Role
    subscribed_at: datetime

    def __post_init__(self) -> None:
        if self.role not in MEMBERSHIP_ROLES:
            raise ValueError(f"{self.role.label} is not a membership role")

    def is_host(self) -> bool:
        """Return True for hosts and the supervisor."""
        return self.role >= Role.HOST

    def is_supervisor(self) -> bool:
        return self.role == Role.SUPERVISOR
