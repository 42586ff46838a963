from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from ..errors import VisibilityDenied
from ..models.committee import Committee
from ..models.membership import Role
from .roles import role_of

logger = logging.getLogger(__name__)


class Visibility(str, Enum):
    VISIBLE = "visible"
    FORBIDDEN = "forbidden"


def resolve_visibility(committee: Committee, viewer_uuid: Optional[str]) -> Visibility:
    """Decide whether ``viewer_uuid`` may see the committee page.

    Approved committees are public. A pending committee is only shown to its
    creator and to its hosts and supervisor.
    """
    if committee.is_approved():
        return Visibility.VISIBLE
    if committee.is_creator(viewer_uuid):
        return Visibility.VISIBLE
    if role_of(committee, viewer_uuid) >= Role.HOST:
        return Visibility.VISIBLE
    return Visibility.FORBIDDEN


def ensure_visible(committee: Committee, viewer_uuid: Optional[str]) -> None:
    """Raise :class:`VisibilityDenied` unless the page is visible."""
    if resolve_visibility(committee, viewer_uuid) == Visibility.FORBIDDEN:
        logger.info(
            "Committee %s hidden from %s", committee.uuid, viewer_uuid or "anonymous"
        )
        raise VisibilityDenied(f"Committee {committee.uuid} is not approved yet")
