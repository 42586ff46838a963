"""Field validation rules for committee_access submissions."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..errors import ValidationFailed
from .base import FieldRule
from .library import (
    AddressRule,
    AddressValidator,
    CapacityRule,
    DateTimeRule,
    FinishAfterBeginRule,
    MinLengthRule,
    NotBlankRule,
    TwitterNicknameRule,
    UrlRule,
    accept_any_address,
)
from .text import clean_text, parse_datetime


def event_rules(address_validator: AddressValidator = accept_any_address) -> List[FieldRule]:
    """Rules for publishing an event under a committee."""
    return sorted(
        [
            MinLengthRule("name", priority=1, params={"min": 5}),
            MinLengthRule("description", priority=2, params={"min": 10}),
            NotBlankRule(
                "address.address", priority=3, message="The address is required."
            ),
            AddressRule("address", priority=4, validator=address_validator),
            DateTimeRule("begin_at", priority=5),
            DateTimeRule("finish_at", priority=6),
            FinishAfterBeginRule("finish_at", priority=7, params={"begin": "begin_at"}),
            CapacityRule("capacity", priority=8),
        ],
        key=lambda r: r.priority,
    )


def committee_rules(address_validator: AddressValidator = accept_any_address) -> List[FieldRule]:
    """Rules for editing committee information."""
    return sorted(
        [
            MinLengthRule("name", priority=1, params={"min": 2}),
            MinLengthRule(
                "description",
                priority=2,
                params={"min": 5},
                message="The description is too short. It should have {params[min]} characters or more.",
            ),
            NotBlankRule(
                "address.address", priority=3, message="The address is required."
            ),
            AddressRule("address", priority=4, validator=address_validator),
            UrlRule("facebook_page_url", priority=5),
            TwitterNicknameRule("twitter_nickname", priority=6),
            UrlRule("google_plus_page_url", priority=7),
        ],
        key=lambda r: r.priority,
    )


def message_rules() -> List[FieldRule]:
    return [
        MinLengthRule(
            "content",
            params={"min": 10},
            message="The message must contain at least {params[min]} characters.",
        )
    ]


def contact_rules() -> List[FieldRule]:
    return [NotBlankRule("message")]


def collect_errors(data: Mapping[str, Any], rules: List[FieldRule]) -> Dict[str, List[str]]:
    """Evaluate every rule and group the failures by field."""
    errors: Dict[str, List[str]] = {}
    for rule in rules:
        valid, message = rule.evaluate(data)
        if not valid:
            errors.setdefault(rule.field_name, []).append(message)
    return errors


def ensure_valid(data: Mapping[str, Any], rules: List[FieldRule]) -> None:
    """Raise :class:`ValidationFailed` carrying every field error."""
    errors = collect_errors(data, rules)
    if errors:
        raise ValidationFailed(errors)


__all__ = [
    "AddressRule",
    "AddressValidator",
    "CapacityRule",
    "DateTimeRule",
    "FieldRule",
    "FinishAfterBeginRule",
    "MinLengthRule",
    "NotBlankRule",
    "TwitterNicknameRule",
    "UrlRule",
    "accept_any_address",
    "clean_text",
    "collect_errors",
    "committee_rules",
    "contact_rules",
    "ensure_valid",
    "event_rules",
    "message_rules",
    "parse_datetime",
]
