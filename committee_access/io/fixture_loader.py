"""Load adherents, committees, memberships and feeds from YAML fixtures."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List

import yaml

from ..models.adherent import Adherent
from ..models.committee import ApprovalState, Committee
from ..models.feed import FeedMessage
from ..models.membership import Role
from ..store import InMemoryStore


def _timestamp(value: Any, where: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValueError(f"{where}: invalid timestamp {value!r}") from exc
    raise ValueError(f"{where}: timestamp is required")


def _require(data: Dict[str, Any], keys: List[str], where: str) -> None:
    missing = [k for k in keys if not data.get(k)]
    if missing:
        raise ValueError(f"{where}: missing required fields: {', '.join(sorted(missing))}")


def _load_adherent(index: int, data: Dict[str, Any]) -> Adherent:
    where = f"Adherent {index}"
    _require(data, ["uuid", "first_name", "last_name", "email"], where)
    return Adherent(
        uuid=str(data["uuid"]),
        first_name=data["first_name"],
        last_name=data["last_name"],
        email=data["email"],
        postal_code=str(data.get("postal_code", "")),
        city_name=data.get("city_name", ""),
        committee_notifications=bool(data.get("committee_notifications", True)),
    )


def _load_committee(index: int, data: Dict[str, Any], store: InMemoryStore) -> Committee:
    where = f"Committee {index}"
    _require(data, ["uuid", "name", "slug", "creator"], where)
    if data["creator"] not in store.adherents:
        raise ValueError(f"{where}: creator '{data['creator']}' not found in adherents")
    try:
        approval = ApprovalState(data.get("approval", "pending"))
    except ValueError as exc:
        raise ValueError(f"{where}: approval must be 'approved' or 'pending'") from exc

    committee = Committee(
        uuid=str(data["uuid"]),
        name=data["name"],
        slug=data["slug"],
        creator_uuid=data["creator"],
        approval=approval,
        description=data.get("description", ""),
        address=dict(data.get("address") or {}),
        facebook_page_url=data.get("facebook_page_url", ""),
        twitter_nickname=data.get("twitter_nickname", ""),
        google_plus_page_url=data.get("google_plus_page_url", ""),
    )

    for pos, member in enumerate(data.get("members") or [], start=1):
        member_where = f"{where}, member {pos}"
        _require(member, ["adherent", "role"], member_where)
        if member["adherent"] not in store.adherents:
            raise ValueError(
                f"{member_where}: adherent '{member['adherent']}' not found in adherents"
            )
        role = Role.parse(member["role"])
        committee.add_membership(
            member["adherent"], role, _timestamp(member.get("subscribed_at"), member_where)
        )

    for pos, item in enumerate(data.get("feed") or [], start=1):
        item_where = f"{where}, feed item {pos}"
        _require(item, ["uuid", "author", "content"], item_where)
        committee.add_feed_item(
            FeedMessage(
                uuid=str(item["uuid"]),
                author_uuid=item["author"],
                created_at=_timestamp(item.get("created_at"), item_where),
                content=item["content"],
                published=bool(item.get("published", True)),
            )
        )
    return committee


def load_fixtures(data: Dict[str, Any]) -> InMemoryStore:
    """Build an :class:`InMemoryStore` from already parsed fixture data.

    Raises
    ------
    ValueError
        If an entry misses required fields, references an unknown adherent or
        breaks a membership invariant.
    """
    if not isinstance(data, dict):
        raise ValueError("Fixture file must contain a mapping")

    store = InMemoryStore()
    for idx, item in enumerate(data.get("adherents") or [], start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Adherent {idx}: expected mapping but found {type(item).__name__}")
        store.add_adherent(_load_adherent(idx, item))

    for idx, item in enumerate(data.get("committees") or [], start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Committee {idx}: expected mapping but found {type(item).__name__}")
        store.add_committee(_load_committee(idx, item, store))
    return store


def load_store(path: str) -> InMemoryStore:
    """Parse the YAML fixture file at ``path`` into a store."""
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle)
    return load_fixtures(data or {})
