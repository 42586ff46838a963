from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class Adherent:
    """A registered member identity of the platform."""

    uuid: str
    first_name: str
    last_name: str
    email: str
    postal_code: str = ""
    city_name: str = ""
    committee_notifications: bool = True

    def __post_init__(self) -> None:
        if not self.uuid:
            raise ValueError("Adherent uuid is required")
        self.email = self.email.strip().lower()

    def __hash__(self) -> int:
        return hash(self.uuid)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def short_last_name(self) -> str:
        """Return the last name reduced to its initial, e.g. ``P.``."""
        return f"{self.last_name[:1].upper()}." if self.last_name else ""
