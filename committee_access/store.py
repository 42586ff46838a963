"""In-memory entity store standing in for the persistence layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import NotFound
from .models.adherent import Adherent
from .models.committee import Committee
from .models.event import Event


@dataclass
class InMemoryStore:
    adherents: Dict[str, Adherent] = field(default_factory=dict)
    committees: Dict[str, Committee] = field(default_factory=dict)
    events: List[Event] = field(default_factory=list)

    def add_adherent(self, adherent: Adherent) -> None:
        if adherent.uuid in self.adherents:
            raise ValueError(f"Duplicate adherent {adherent.uuid}")
        self.adherents[adherent.uuid] = adherent

    def add_committee(self, committee: Committee) -> None:
        if committee.uuid in self.committees:
            raise ValueError(f"Duplicate committee {committee.uuid}")
        self.committees[committee.uuid] = committee

    def add_event(self, event: Event) -> None:
        self.events.append(event)

    def get_adherent(self, uuid: str) -> Adherent:
        try:
            return self.adherents[uuid]
        except KeyError as exc:
            raise NotFound(f"Unknown adherent {uuid}") from exc

    def get_committee(self, uuid: str) -> Committee:
        try:
            return self.committees[uuid]
        except KeyError as exc:
            raise NotFound(f"Unknown committee {uuid}") from exc

    def find_adherent_by_email(self, email: str) -> Optional[Adherent]:
        email = email.strip().lower()
        for adherent in self.adherents.values():
            if adherent.email == email:
                return adherent
        return None

    def find_most_recent_event(self) -> Optional[Event]:
        if not self.events:
            return None
        return max(self.events, key=lambda e: e.begin_at)
