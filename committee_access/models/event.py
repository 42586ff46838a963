from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional


@dataclass
class Event:
    """An event published under a committee."""

    uuid: str
    committee_uuid: str
    organizer_uuid: str
    name: str
    description: str
    begin_at: datetime
    finish_at: datetime
    category: str = ""
    address: Dict[str, str] = field(default_factory=dict)
    # None means unlimited
    capacity: Optional[int] = None

    def __str__(self) -> str:
        return self.name
