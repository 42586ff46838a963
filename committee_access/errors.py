"""Error kinds raised by committee operations.

Visibility and authorization failures are terminal verdicts raised before any
mutation takes place. Validation failures carry every field error found in a
submission, not only the first one.
"""
from __future__ import annotations

from typing import Dict, List


class CommitteeAccessError(Exception):
    """Base class for all domain errors."""


class NotFound(CommitteeAccessError):
    """An adherent, committee or member identifier does not exist."""


class VisibilityDenied(CommitteeAccessError):
    """The viewer is not allowed to see the committee page."""


class AuthorizationDenied(CommitteeAccessError):
    """The actor lacks the role required for an action."""

    def __init__(self, action: str, role: str) -> None:
        super().__init__(f"Role {role} is not allowed to {action}")
        self.action = action
        self.role = role


class ValidationFailed(CommitteeAccessError):
    """One or more submitted fields are invalid."""

    def __init__(self, errors: Dict[str, List[str]]) -> None:
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid fields: {fields}")
        self.errors = errors

    def count(self) -> int:
        """Return the total number of field errors."""
        return sum(len(messages) for messages in self.errors.values())
