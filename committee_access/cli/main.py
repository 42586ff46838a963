from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional

import yaml

from ..config import load_settings
from ..engine.affordances import promotion_candidates, resolve_affordances
from ..engine.authorizer import ActionAuthorizer
from ..engine.policy import DEFAULT_POLICY, AccessPolicy
from ..engine.roles import Action, role_of
from ..engine.timeline import visible_timeline
from ..engine.visibility import Visibility, resolve_visibility
from ..errors import CommitteeAccessError
from ..io.fixture_loader import load_store
from ..io.policy_loader import load_policy
from ..rules import collect_errors, event_rules
from ..service import CommitteeService
from ..store import InMemoryStore


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _open(args: argparse.Namespace) -> tuple[InMemoryStore, AccessPolicy]:
    """Load the fixture store and policy named by ``args`` or the settings."""
    settings = load_settings(args.config)
    logging.getLogger("committee_access").setLevel(settings.log_level)
    fixtures = args.fixtures or settings.fixtures_path
    if not fixtures:
        raise ValueError("No fixtures file given (use --fixtures)")
    policy_path = args.policy or settings.policy_path
    policy = load_policy(policy_path) if policy_path else DEFAULT_POLICY
    return load_store(fixtures), policy


def _resolve_viewer(store: InMemoryStore, viewer: Optional[str]) -> Optional[str]:
    """Accept either an adherent uuid or an email address."""
    if viewer is None:
        return None
    if viewer in store.adherents:
        return viewer
    adherent = store.find_adherent_by_email(viewer)
    if adherent is None:
        raise ValueError(f"Unknown adherent: {viewer}")
    return adherent.uuid


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------

def cmd_show(args: argparse.Namespace) -> None:
    store, policy = _open(args)
    viewer = _resolve_viewer(store, args.viewer)
    committee = store.get_committee(args.committee)
    visibility = resolve_visibility(committee, viewer)
    print(f"{committee.name}: {visibility.value}")
    if visibility == Visibility.FORBIDDEN:
        return

    role = role_of(committee, viewer)
    affordances = resolve_affordances(role, policy)
    print(f"role: {role.label}")
    print(f"members: {committee.members_count()}")
    for affordance in sorted(affordances.shown, key=lambda a: a.value):
        state = " (disabled)" if affordances.is_disabled(affordance) else ""
        print(f"  {affordance.value}{state}")
    candidates = promotion_candidates(committee, role, policy)
    if candidates:
        print(f"promotable: {'; '.join(m.adherent_uuid for m in candidates)}")
    for entry in visible_timeline(committee, role):
        author = store.adherents.get(entry.item.author_uuid)
        name = author.full_name if author else entry.item.author_uuid
        print(f"  [{entry.item.created_at:%Y-%m-%d %H:%M}] {name}: {entry.content}")


def cmd_authorize(args: argparse.Namespace) -> None:
    store, policy = _open(args)
    viewer = _resolve_viewer(store, args.viewer)
    committee = store.get_committee(args.committee)
    action = Action(args.action)
    allowed = ActionAuthorizer(policy).can(committee, viewer, action)
    print(f"{action.value}: {'allowed' if allowed else 'denied'}")
    if not allowed:
        sys.exit(1)


def cmd_export_members(args: argparse.Namespace) -> None:
    store, policy = _open(args)
    service = CommitteeService(store, policy=policy)
    viewer = _resolve_viewer(store, args.viewer)
    requested = args.member or []
    if args.all:
        requested = list(store.get_committee(args.committee).memberships)
    content = service.export_members(args.committee, viewer, requested)
    if args.output:
        with open(args.output, "w", newline="", encoding="utf8") as handle:
            handle.write(content)
        print(f"Wrote members to {args.output}")
    else:
        sys.stdout.write(content)


def cmd_validate_event(args: argparse.Namespace) -> None:
    with open(args.event, "r", encoding="utf8") as handle:
        data: Dict = yaml.safe_load(handle) or {}
    errors = collect_errors(data, event_rules())
    if not errors:
        print("Event is valid")
        return
    for field_name in sorted(errors):
        for message in errors[field_name]:
            print(f"{field_name}: {message}")
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parser setup
# ---------------------------------------------------------------------------

def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--fixtures", help="Fixtures YAML path")
    parser.add_argument("--policy", help="Policy YAML path")
    parser.add_argument("--config", help="Settings YAML path")
    parser.add_argument("--as", dest="viewer", help="Adherent uuid or email (default: anonymous)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="committee-access")
    sub = parser.add_subparsers(dest="command", required=True)

    # show
    p_show = sub.add_parser("show", help="Show a committee page as seen by a viewer")
    p_show.add_argument("committee", help="Committee uuid")
    _add_source_args(p_show)
    p_show.set_defaults(func=cmd_show)

    # authorize
    p_auth = sub.add_parser("authorize", help="Check whether a viewer may perform an action")
    p_auth.add_argument("committee", help="Committee uuid")
    p_auth.add_argument("action", choices=[a.value for a in Action], help="Action name")
    _add_source_args(p_auth)
    p_auth.set_defaults(func=cmd_authorize)

    # export-members
    p_export = sub.add_parser("export-members", help="Export committee members as CSV")
    p_export.add_argument("committee", help="Committee uuid")
    p_export.add_argument("--member", action="append", help="Member uuid (repeatable)")
    p_export.add_argument("--all", action="store_true", help="Export every member")
    p_export.add_argument("--output", help="CSV output path (default: stdout)")
    _add_source_args(p_export)
    p_export.set_defaults(func=cmd_export_members)

    # validate-event
    p_event = sub.add_parser("validate-event", help="Validate an event submission")
    p_event.add_argument("event", help="Event YAML path")
    p_event.set_defaults(func=cmd_validate_event)

    return parser


def main(argv: List[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (CommitteeAccessError, ValueError) as exc:
        parser.exit(2, f"error: {exc}\n")


if __name__ == "__main__":
    main()
