from datetime import datetime

import pytest

from committee_access.io import load_fixtures
from committee_access.models import ApprovalState, FeedMessage, Role

from conftest import CARL, GISELE, JACQUES, MARSEILLE_3, PARIS_8


def test_example_fixtures(store):
    assert len(store.adherents) == 7
    paris = store.get_committee(PARIS_8)
    assert paris.is_approved()
    assert paris.members_count() == 4
    assert paris.supervisor().adherent_uuid == JACQUES
    assert paris.membership_for(GISELE).role == Role.HOST
    assert paris.membership_for(JACQUES).subscribed_at == datetime(2017, 1, 12, 13, 25, 54)
    assert not store.adherents[CARL].committee_notifications
    assert store.get_committee(MARSEILLE_3).approval == ApprovalState.PENDING

    drafts = [i for i in paris.feed if isinstance(i, FeedMessage) and not i.published]
    assert len(drafts) == 1


def _adherent(uuid="a1"):
    return {"uuid": uuid, "first_name": "A", "last_name": "B", "email": f"{uuid}@example.fr"}


def test_minimal_fixture():
    store = load_fixtures(
        {
            "adherents": [_adherent()],
            "committees": [
                {
                    "uuid": "c1",
                    "name": "C",
                    "slug": "c",
                    "creator": "a1",
                    "members": [{"adherent": "a1", "role": "host", "subscribed_at": "2017-01-01"}],
                }
            ],
        }
    )
    committee = store.get_committee("c1")
    assert committee.approval == ApprovalState.PENDING
    assert committee.membership_for("a1").subscribed_at == datetime(2017, 1, 1)


@pytest.mark.parametrize(
    "committee",
    [
        {"uuid": "c1", "name": "C", "slug": "c"},
        {"uuid": "c1", "name": "C", "slug": "c", "creator": "ghost"},
        {"uuid": "c1", "name": "C", "slug": "c", "creator": "a1", "approval": "maybe"},
        {"uuid": "c1", "name": "C", "slug": "c", "creator": "a1",
         "members": [{"adherent": "ghost", "role": "host", "subscribed_at": "2017-01-01"}]},
        {"uuid": "c1", "name": "C", "slug": "c", "creator": "a1",
         "members": [{"adherent": "a1", "role": "adherent", "subscribed_at": "2017-01-01"}]},
        {"uuid": "c1", "name": "C", "slug": "c", "creator": "a1",
         "members": [{"adherent": "a1", "role": "host", "subscribed_at": "soon"}]},
        {"uuid": "c1", "name": "C", "slug": "c", "creator": "a1",
         "members": [
             {"adherent": "a1", "role": "host", "subscribed_at": "2017-01-01"},
             {"adherent": "a1", "role": "follower", "subscribed_at": "2017-01-02"},
         ]},
    ],
)
def test_invalid_committees(committee):
    with pytest.raises(ValueError):
        load_fixtures({"adherents": [_adherent()], "committees": [committee]})


def test_duplicate_adherents():
    with pytest.raises(ValueError):
        load_fixtures({"adherents": [_adherent(), _adherent()]})
