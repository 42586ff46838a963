from datetime import datetime

import pytest

from committee_access.engine import (
    Affordance,
    promotion_candidates,
    resolve_affordances,
)
from committee_access.engine.roles import MEMBERSHIP_LINKS
from committee_access.models import Committee, Role


def test_anonymous_and_non_member_see_register_link_only():
    for role in (Role.ANONYMOUS, Role.ADHERENT):
        affordances = resolve_affordances(role)
        assert affordances.active() == {Affordance.REGISTER_LINK}


def test_follower_sees_unfollow_only():
    affordances = resolve_affordances(Role.FOLLOWER)
    assert Affordance.REGISTER_LINK not in affordances
    assert Affordance.FOLLOW_LINK not in affordances
    assert affordances.is_active(Affordance.UNFOLLOW_LINK)
    assert Affordance.MESSAGE_FORM not in affordances
    assert Affordance.HOST_NAV not in affordances


@pytest.mark.parametrize("role", [Role.HOST, Role.SUPERVISOR])
def test_hosts_see_disabled_unfollow_and_management(role):
    affordances = resolve_affordances(role)
    assert Affordance.UNFOLLOW_LINK in affordances
    assert affordances.is_disabled(Affordance.UNFOLLOW_LINK)
    assert not affordances.is_active(Affordance.UNFOLLOW_LINK)
    assert Affordance.HOST_NAV in affordances
    assert Affordance.MESSAGE_FORM in affordances
    assert not affordances.active() & MEMBERSHIP_LINKS


def test_only_supervisor_gets_promotion_affordance():
    assert Affordance.PROMOTE_HOST in resolve_affordances(Role.SUPERVISOR)
    assert Affordance.PROMOTE_HOST not in resolve_affordances(Role.HOST)


@pytest.mark.parametrize("role", [Role.ANONYMOUS, Role.ADHERENT, Role.FOLLOWER])
def test_exactly_one_membership_link_is_active(role):
    assert len(resolve_affordances(role).active() & MEMBERSHIP_LINKS) == 1


def _committee():
    committee = Committee(uuid="c1", name="Paris 8", slug="paris-8", creator_uuid="s")
    committee.add_membership("s", Role.SUPERVISOR, datetime(2017, 1, 1))
    committee.add_membership("h", Role.HOST, datetime(2017, 1, 2))
    committee.add_membership("f1", Role.FOLLOWER, datetime(2017, 1, 3))
    committee.add_membership("f2", Role.FOLLOWER, datetime(2017, 1, 4))
    return committee


def test_promotion_candidates_for_supervisor():
    candidates = promotion_candidates(_committee(), Role.SUPERVISOR)
    assert [m.adherent_uuid for m in candidates] == ["f1", "f2"]


@pytest.mark.parametrize("role", [Role.HOST, Role.FOLLOWER, Role.ADHERENT, Role.ANONYMOUS])
def test_no_promotion_candidates_below_supervisor(role):
    assert promotion_candidates(_committee(), role) == []
