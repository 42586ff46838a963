"""Helpers shared by the field rules."""
from __future__ import annotations

import unicodedata
from datetime import datetime
from typing import Any, Mapping


def lookup(data: Mapping[str, Any], path: str) -> Any:
    """Return the value at dotted ``path`` or ``None`` when missing."""
    value: Any = data
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _is_decoration(char: str) -> bool:
    return unicodedata.category(char)[0] in {"S", "Z"} or char.isspace()


def clean_text(value: Any) -> str:
    """Strip whitespace and decorative symbols around ``value``.

    ``" ♻ Débat ♻ "`` becomes ``"Débat"``; inner characters are kept.
    """
    if value is None:
        return ""
    text = str(value)
    start, end = 0, len(text)
    while start < end and _is_decoration(text[start]):
        start += 1
    while end > start and _is_decoration(text[end - 1]):
        end -= 1
    return text[start:end]


def parse_datetime(value: Any) -> datetime | None:
    """Return ``value`` as a datetime, or ``None`` if it cannot be read.

    Accepts naive datetimes and ISO 8601 strings such as ``2022-03-02T09:30``.
    Event times are local wall-clock times, so values carrying a UTC offset
    are not accepted.
    """
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    if not isinstance(value, datetime) or value.tzinfo is not None:
        return None
    return value
