"""Member list rows and CSV export.

Rows only hold what a committee host may see about a member: first name,
last name initial, postal code, city and subscription date.
"""
from __future__ import annotations

import csv
from io import StringIO
from typing import Dict, List, Mapping

from ..models.adherent import Adherent
from ..models.membership import Membership

MEMBER_COLUMNS = [
    "first_name",
    "last_name",
    "postal_code",
    "city_name",
    "subscription_date",
    "role",
]


def member_rows(
    members: List[Membership], adherents: Mapping[str, Adherent]
) -> List[Dict[str, str]]:
    """Return one row per membership in the order given.

    Parameters
    ----------
    members:
        Memberships to describe, typically already filtered by selection.
    adherents:
        Mapping of adherent uuid to :class:`Adherent`.
    """
    rows = []
    for membership in members:
        adherent = adherents[membership.adherent_uuid]
        rows.append(
            {
                "first_name": adherent.first_name,
                "last_name": adherent.short_last_name(),
                "postal_code": adherent.postal_code,
                "city_name": adherent.city_name,
                "subscription_date": membership.subscribed_at.strftime("%d/%m/%Y"),
                "role": membership.role.label,
            }
        )
    return rows


def export_members_csv(
    members: List[Membership], adherents: Mapping[str, Adherent]
) -> str:
    """Render members as CSV text.

    The header row is always written, so an empty selection yields a document
    with the header only. Lines end with ``\\n``.
    """
    buffer = StringIO()
    writer = csv.DictWriter(buffer, fieldnames=MEMBER_COLUMNS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(member_rows(members, adherents))
    return buffer.getvalue()
