from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlparse

from .base import FieldRule
from .text import clean_text, lookup, parse_datetime

TWITTER_NICKNAME = re.compile(r"^@?[A-Za-z0-9_]+$")

# Opaque postal address check: returns an error message or None.
AddressValidator = Callable[[Mapping[str, Any]], Optional[str]]


@dataclass
class NotBlankRule(FieldRule):
    """Reject missing or whitespace-only values."""

    default_message = "This value should not be blank."

    def check(self, data: Mapping[str, Any]) -> bool:
        return bool(clean_text(self.value(data)))


@dataclass
class MinLengthRule(FieldRule):
    """Require at least ``params['min']`` characters once cleaned."""

    default_message = (
        "This value is too short. It should have {params[min]} characters or more."
    )

    def check(self, data: Mapping[str, Any]) -> bool:
        return len(clean_text(self.value(data))) >= int(self.params["min"])


@dataclass
class DateTimeRule(FieldRule):
    default_message = "This value is not a valid datetime."

    def check(self, data: Mapping[str, Any]) -> bool:
        return parse_datetime(self.value(data)) is not None


@dataclass
class FinishAfterBeginRule(FieldRule):
    """The finish timestamp must be strictly after ``params['begin']``.

    Unreadable timestamps are left to :class:`DateTimeRule`.
    """

    default_message = "The end date of the event must be after its start date."

    def check(self, data: Mapping[str, Any]) -> bool:
        begin = parse_datetime(lookup(data, self.params.get("begin", "begin_at")))
        finish = parse_datetime(self.value(data))
        if begin is None or finish is None:
            return True
        return finish > begin


@dataclass
class CapacityRule(FieldRule):
    """Accept a non-negative integer, or an empty value meaning unlimited."""

    def check(self, data: Mapping[str, Any]) -> bool:
        value = self.value(data)
        if value is None or value == "":
            return True
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return value >= 0
        return isinstance(value, str) and value.strip().isdecimal()


@dataclass
class UrlRule(FieldRule):
    """Optional http(s) URL."""

    def check(self, data: Mapping[str, Any]) -> bool:
        value = clean_text(self.value(data))
        if not value:
            return True
        parsed = urlparse(value)
        return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


@dataclass
class TwitterNicknameRule(FieldRule):
    default_message = (
        "A Twitter nickname can only contain letters, digits and underscores."
    )

    def check(self, data: Mapping[str, Any]) -> bool:
        value = clean_text(self.value(data))
        return not value or bool(TWITTER_NICKNAME.match(value))


def accept_any_address(address: Mapping[str, Any]) -> Optional[str]:
    """Default address validator; geocoding is delegated elsewhere."""
    return None


@dataclass
class AddressRule(FieldRule):
    """Delegate the whole address mapping to an opaque validator."""

    validator: AddressValidator = accept_any_address

    def evaluate(self, data: Mapping[str, Any]):
        address = self.value(data)
        if not isinstance(address, Mapping):
            return False, self.message or "The address is required."
        error = self.validator(address)
        if error:
            return False, error
        return True, ""

    def check(self, data: Mapping[str, Any]) -> bool:
        return self.evaluate(data)[0]
