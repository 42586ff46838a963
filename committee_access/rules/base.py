from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from .text import lookup


@dataclass
class FieldRule(ABC):
    """Base class for all field validation rules.

    ``field_name`` may be a dotted path into nested submissions, such as
    ``address.postal_code``.
    """

    field_name: str
    priority: int = 0
    params: Dict[str, Any] = field(default_factory=dict)
    message: str | None = None

    default_message = "This value is not valid."

    def value(self, data: Mapping[str, Any]) -> Any:
        return lookup(data, self.field_name)

    def evaluate(self, data: Mapping[str, Any]) -> Tuple[bool, str]:
        """Return ``(valid, message)`` for the submission ``data``."""
        valid = self.check(data)
        message = ""
        if not valid:
            template = self.message or self.default_message
            message = template.format(field=self.field_name, params=self.params)
        return valid, message

    @abstractmethod
    def check(self, data: Mapping[str, Any]) -> bool:
        """Return ``True`` if the field is valid."""
