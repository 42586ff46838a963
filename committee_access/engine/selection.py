from __future__ import annotations

import json
import logging
from typing import Iterable, List

from ..models.committee import Committee
from ..models.membership import Membership

logger = logging.getLogger(__name__)


def parse_identifiers(raw: str | None) -> List[str]:
    """Decode a JSON list of member identifiers submitted by a client.

    Anything other than a JSON list of strings is treated as an empty
    request.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed member list: %r", raw[:80])
        return []
    if not isinstance(data, list):
        logger.warning("Ignoring member list that is not an array")
        return []
    return [item for item in data if isinstance(item, str)]


def select_members(committee: Committee, requested: Iterable[str]) -> List[Membership]:
    """Return the committee memberships whose adherent was requested.

    Identifiers that do not belong to the committee are dropped without
    error, so a client cannot reach adherents outside the committee.
    """
    wanted = set(requested)
    selected = [m for m in committee.members() if m.adherent_uuid in wanted]
    dropped = len(wanted) - len(selected)
    if dropped:
        logger.info(
            "Dropped %d identifier(s) foreign to committee %s", dropped, committee.uuid
        )
    return selected
