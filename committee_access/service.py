"""Committee operations built on the pure access engine.

Every operation loads the entities it needs, checks visibility and the
actor's capability, validates the submission and only then mutates the
store. Failed checks raise before anything is written.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional
from uuid import uuid4

from .engine.affordances import promotion_candidates, resolve_affordances
from .engine.authorizer import ActionAuthorizer
from .engine.policy import DEFAULT_POLICY, AccessPolicy
from .engine.roles import Action, AffordanceSet, role_of
from .engine.selection import select_members
from .engine.timeline import TimelineEntry, visible_timeline
from .engine.visibility import ensure_visible
from .errors import NotFound, ValidationFailed
from .models.committee import Committee
from .models.event import Event
from .models.feed import FeedEvent, FeedMessage
from .models.membership import Membership, Role
from .notifications import (
    MemoryNotifier,
    Notification,
    NotificationKind,
    Notifier,
    host_recipients,
    selected_recipients,
    subscriber_recipients,
)
from .reporting.members import export_members_csv
from .rules import (
    AddressValidator,
    accept_any_address,
    clean_text,
    committee_rules,
    contact_rules,
    ensure_valid,
    event_rules,
    message_rules,
    parse_datetime,
)
from .store import InMemoryStore

logger = logging.getLogger(__name__)


@dataclass
class CommitteePage:
    """Everything a committee page shows to one viewer."""

    committee: Committee
    role: Role
    affordances: AffordanceSet
    timeline: List[TimelineEntry]
    hosts: List[Membership]
    members_count: int


@dataclass
class MemberList:
    committee: Committee
    role: Role
    members: List[Membership]
    promotable: List[Membership]


class CommitteeService:
    """Request-scoped committee operations over an :class:`InMemoryStore`."""

    def __init__(
        self,
        store: InMemoryStore,
        notifier: Notifier | None = None,
        policy: AccessPolicy = DEFAULT_POLICY,
        address_validator: AddressValidator = accept_any_address,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.notifier = notifier if notifier is not None else MemoryNotifier()
        self.policy = policy
        self.authorizer = ActionAuthorizer(policy)
        self.address_validator = address_validator
        self.clock = clock

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self, committee_uuid: str, actor_uuid: Optional[str]) -> Committee:
        committee = self.store.get_committee(committee_uuid)
        if actor_uuid is not None:
            self.store.get_adherent(actor_uuid)
        ensure_visible(committee, actor_uuid)
        return committee

    def authorize(
        self, committee_uuid: str, actor_uuid: Optional[str], action: Action
    ) -> Committee:
        """Load a committee and check that the actor may perform ``action``.

        Used by boundaries that render a form before submitting it.
        """
        committee = self._load(committee_uuid, actor_uuid)
        self.authorizer.authorize(committee, actor_uuid, action)
        return committee

    def _subscriptions(self, committee: Committee) -> Dict[str, bool]:
        return {
            uuid: self.store.adherents[uuid].committee_notifications
            for uuid in committee.memberships
            if uuid in self.store.adherents
        }

    def _notify(
        self,
        kind: NotificationKind,
        committee: Committee,
        recipients: List[str],
        subject_uuid: str = "",
        payload: Dict[str, str] | None = None,
    ) -> Notification:
        notification = Notification(
            kind=kind,
            committee_uuid=committee.uuid,
            recipients=recipients,
            subject_uuid=subject_uuid,
            payload=payload or {},
        )
        self.notifier.send(notification)
        return notification

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def view(self, committee_uuid: str, viewer_uuid: Optional[str]) -> CommitteePage:
        committee = self._load(committee_uuid, viewer_uuid)
        role = role_of(committee, viewer_uuid)
        return CommitteePage(
            committee=committee,
            role=role,
            affordances=resolve_affordances(role, self.policy),
            timeline=visible_timeline(committee, role),
            hosts=committee.hosts(),
            members_count=committee.members_count(),
        )

    def list_members(self, committee_uuid: str, actor_uuid: Optional[str]) -> MemberList:
        committee = self._load(committee_uuid, actor_uuid)
        role = self.authorizer.authorize(committee, actor_uuid, Action.VIEW_MEMBERS)
        return MemberList(
            committee=committee,
            role=role,
            members=committee.members(),
            promotable=promotion_candidates(committee, role, self.policy),
        )

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def follow(self, committee_uuid: str, adherent_uuid: Optional[str]) -> Membership:
        committee = self._load(committee_uuid, adherent_uuid)
        self.authorizer.authorize(committee, adherent_uuid, Action.FOLLOW)
        membership = committee.add_membership(adherent_uuid, Role.FOLLOWER, self.clock())
        logger.info("%s now follows committee %s", adherent_uuid, committee.uuid)
        self._notify(
            NotificationKind.NEW_FOLLOWER,
            committee,
            host_recipients(committee),
            subject_uuid=adherent_uuid,
        )
        return membership

    def unfollow(self, committee_uuid: str, adherent_uuid: Optional[str]) -> None:
        committee = self._load(committee_uuid, adherent_uuid)
        self.authorizer.authorize(committee, adherent_uuid, Action.UNFOLLOW)
        committee.remove_membership(adherent_uuid)
        logger.info("%s stopped following committee %s", adherent_uuid, committee.uuid)

    def promote_host(
        self, committee_uuid: str, actor_uuid: Optional[str], member_uuid: str
    ) -> Membership:
        committee = self._load(committee_uuid, actor_uuid)
        role = self.authorizer.authorize(committee, actor_uuid, Action.PROMOTE_HOST)
        membership = committee.membership_for(member_uuid)
        if membership is None:
            raise NotFound(f"{member_uuid} is not a member of {committee.uuid}")
        if membership not in promotion_candidates(committee, role, self.policy):
            raise ValidationFailed({"member": ["This member cannot be promoted."]})
        membership.role = Role.HOST
        logger.info("%s promoted %s to host of %s", actor_uuid, member_uuid, committee.uuid)
        return membership

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def edit_info(
        self, committee_uuid: str, actor_uuid: Optional[str], data: Mapping[str, Any]
    ) -> Committee:
        committee = self._load(committee_uuid, actor_uuid)
        self.authorizer.authorize(committee, actor_uuid, Action.EDIT_INFO)
        ensure_valid(data, committee_rules(self.address_validator))

        committee.name = clean_text(data["name"])
        committee.description = clean_text(data["description"])
        committee.address = dict(data["address"])
        committee.facebook_page_url = clean_text(data.get("facebook_page_url"))
        committee.twitter_nickname = clean_text(data.get("twitter_nickname")).lstrip("@")
        committee.google_plus_page_url = clean_text(data.get("google_plus_page_url"))
        logger.info("Committee %s updated by %s", committee.uuid, actor_uuid)
        return committee

    def publish_event(
        self, committee_uuid: str, actor_uuid: Optional[str], data: Mapping[str, Any]
    ) -> Event:
        committee = self._load(committee_uuid, actor_uuid)
        self.authorizer.authorize(committee, actor_uuid, Action.PUBLISH_EVENT)
        ensure_valid(data, event_rules(self.address_validator))

        capacity = data.get("capacity")
        event = Event(
            uuid=str(uuid4()),
            committee_uuid=committee.uuid,
            organizer_uuid=actor_uuid,
            name=clean_text(data["name"]),
            description=clean_text(data["description"]),
            category=data.get("category") or "",
            address=dict(data["address"]),
            begin_at=parse_datetime(data["begin_at"]),
            finish_at=parse_datetime(data["finish_at"]),
            capacity=int(capacity) if capacity not in (None, "") else None,
        )
        self.store.add_event(event)
        committee.add_feed_item(
            FeedEvent(
                uuid=str(uuid4()),
                author_uuid=actor_uuid,
                created_at=self.clock(),
                event=event,
            )
        )
        logger.info("Event %s published under committee %s", event.uuid, committee.uuid)
        self._notify(
            NotificationKind.EVENT_PUBLISHED,
            committee,
            subscriber_recipients(committee, self._subscriptions(committee)),
            subject_uuid=event.uuid,
        )
        return event

    def post_message(
        self,
        committee_uuid: str,
        actor_uuid: Optional[str],
        content: str,
        published: bool = False,
    ) -> FeedMessage:
        committee = self._load(committee_uuid, actor_uuid)
        self.authorizer.authorize(committee, actor_uuid, Action.POST_MESSAGE)
        ensure_valid({"content": content}, message_rules())

        message = FeedMessage(
            uuid=str(uuid4()),
            author_uuid=actor_uuid,
            created_at=self.clock(),
            content=clean_text(content),
            published=published,
        )
        committee.add_feed_item(message)
        self._notify(
            NotificationKind.FEED_MESSAGE,
            committee,
            subscriber_recipients(committee, self._subscriptions(committee)),
            subject_uuid=message.uuid,
        )
        return message

    def publish_message(
        self, committee_uuid: str, actor_uuid: Optional[str], message_uuid: str
    ) -> FeedMessage:
        """Turn a draft into a published message."""
        committee = self._load(committee_uuid, actor_uuid)
        self.authorizer.authorize(committee, actor_uuid, Action.POST_MESSAGE)
        for item in committee.feed:
            if isinstance(item, FeedMessage) and item.uuid == message_uuid:
                item.publish()
                return item
        raise NotFound(f"Unknown message {message_uuid}")

    # ------------------------------------------------------------------
    # Member export and contact
    # ------------------------------------------------------------------

    def export_members(
        self, committee_uuid: str, actor_uuid: Optional[str], requested: Iterable[str]
    ) -> str:
        committee = self._load(committee_uuid, actor_uuid)
        self.authorizer.authorize(committee, actor_uuid, Action.EXPORT_MEMBERS)
        members = select_members(committee, requested)
        return export_members_csv(members, self.store.adherents)

    def select_contacts(
        self, committee_uuid: str, actor_uuid: Optional[str], requested: Iterable[str]
    ) -> List[Membership]:
        """Return the members a contact form would address."""
        committee = self._load(committee_uuid, actor_uuid)
        self.authorizer.authorize(committee, actor_uuid, Action.CONTACT_MEMBERS)
        return select_members(committee, requested)

    def contact_members(
        self,
        committee_uuid: str,
        actor_uuid: Optional[str],
        requested: Iterable[str],
        message: str,
    ) -> Notification:
        committee = self._load(committee_uuid, actor_uuid)
        self.authorizer.authorize(committee, actor_uuid, Action.CONTACT_MEMBERS)
        ensure_valid({"message": message}, contact_rules())
        members = select_members(committee, requested)
        return self._notify(
            NotificationKind.MEMBERS_CONTACT,
            committee,
            selected_recipients(members),
            subject_uuid=actor_uuid,
            payload={"message": message.strip()},
        )
