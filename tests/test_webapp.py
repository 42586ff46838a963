from __future__ import annotations

import json
import re

import pytest

from committee_access.config import Settings
from committee_access.notifications import MemoryNotifier, NotificationKind
from committee_access.web import create_app

from conftest import (
    CARL,
    DAMMARIE,
    FIXTURES,
    FOREIGNER,
    JACQUES,
    LUCIE,
    MARSEILLE_3,
    PARIS_8,
    POLICY,
)

PARIS_URL = f"/comites/{PARIS_8}/en-marche-paris-8"
DAMMARIE_URL = f"/comites/{DAMMARIE}/en-marche-dammarie-les-lys"


@pytest.fixture
def notifier():
    return MemoryNotifier()


@pytest.fixture
def app(store, notifier):
    app = create_app(Settings(secret_key="test"), store=store, notifier=notifier)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email):
    resp = client.post("/connexion", data={"email": email})
    assert resp.status_code == 302


def test_anonymous_page(client):
    resp = client.get(PARIS_URL)
    assert resp.status_code == 200
    assert b'id="committee-register-link"' in resp.data
    assert b'class="committee-follow"' not in resp.data
    assert b'class="committee-unfollow"' not in resp.data
    assert b"4 adherents" in resp.data
    assert resp.data.count(b'class="committee-host"') == 2
    assert b'id="committee-host-nav"' not in resp.data
    assert b'name="committee_feed_message"' not in resp.data
    assert b"https://twitter.com/enmarche75008" in resp.data


def test_unknown_login(client):
    assert client.post("/connexion", data={"email": "ghost@example.fr"}).status_code == 401


def test_login_always_redirects_home(client):
    resp = client.post(
        "/connexion",
        data={"email": "carl999@example.fr", "next": "https://evil.example/"},
    )
    assert resp.status_code == 302
    assert "evil.example" not in resp.headers["Location"]
    assert resp.headers["Location"].endswith("/")


def test_host_page(client):
    login(client, "gisele-berthoux@caramail.com")
    resp = client.get(PARIS_URL)
    html = resp.get_data(as_text=True)
    assert re.search(r'class="committee-unfollow" type=submit disabled="disabled"', html)
    assert 'id="committee-register-link"' not in html
    assert 'id="committee-host-nav"' in html
    assert 'name="committee_feed_message"' in html
    assert "Gisele Berthoux (you)" in html


def test_follow_then_unfollow(client, notifier):
    login(client, "francis.brioul@yahoo.com")
    resp = client.get(DAMMARIE_URL)
    assert b"2 adherents" in resp.data

    resp = client.post(DAMMARIE_URL + "/rejoindre", follow_redirects=True)
    assert resp.status_code == 200
    assert b"3 adherents" in resp.data
    assert b'class="committee-unfollow" type=submit>' in resp.data
    assert notifier.count(NotificationKind.NEW_FOLLOWER, JACQUES) == 1

    resp = client.post(DAMMARIE_URL + "/quitter", follow_redirects=True)
    assert b"2 adherents" in resp.data


def test_anonymous_cannot_follow(client):
    assert client.post(DAMMARIE_URL + "/rejoindre").status_code == 403


def test_pending_committee(client):
    url = f"/comites/{MARSEILLE_3}/en-marche-marseille-3"
    assert client.get(url).status_code == 403
    login(client, "carl999@example.fr")
    assert client.get(url).status_code == 403
    login(client, "benjyd@aol.com")
    assert client.get(url).status_code == 200


def test_unknown_committee(client):
    assert client.get("/comites/unknown/slug").status_code == 404


def test_index_lists_approved_committees(client):
    resp = client.get("/")
    assert b"En Marche Paris 8" in resp.data
    assert b"En Marche Marseille 3" not in resp.data


@pytest.mark.parametrize("path", ["/editer", "/evenements/ajouter", "/membres"])
def test_follower_is_forbidden(client, path):
    login(client, "carl999@example.fr")
    assert client.get(PARIS_URL + path).status_code == 403


def test_host_edits_committee(client, store):
    login(client, "gisele-berthoux@caramail.com")
    assert client.get(PARIS_URL + "/editer").status_code == 200

    resp = client.post(
        PARIS_URL + "/editer",
        data={"name": "F", "description": "F", "facebook_page_url": "yo", "twitter_nickname": "@!!"},
    )
    assert resp.status_code == 200
    assert resp.data.count(b'class="form__error"') == 5

    resp = client.post(
        PARIS_URL + "/editer",
        data={
            "name": "Clichy est En Marche !",
            "description": "Comité français En Marche ! de la ville de Clichy",
            "address.address": "92 bld victor hugo",
            "address.postal_code": "92110",
            "address.country": "FR",
            "facebook_page_url": "https://www.facebook.com/EnMarcheClichy",
            "twitter_nickname": "@enmarcheclichy",
        },
        follow_redirects=True,
    )
    assert resp.status_code == 200
    assert b"The committee information has been updated." in resp.data
    assert store.get_committee(PARIS_8).name == "Clichy est En Marche !"


def test_host_publishes_event(client, store, notifier):
    login(client, "gisele-berthoux@caramail.com")
    resp = client.post(
        PARIS_URL + "/evenements/ajouter",
        data={
            "name": "F",
            "description": "F",
            "begin_at": "2017-03-02T14:30",
            "finish_at": "2017-03-01T19:00",
            "capacity": "zero",
        },
    )
    assert resp.status_code == 200
    assert b"The end date of the event must be after its start date." in resp.data
    assert resp.data.count(b'class="form__error"') == 5

    resp = client.post(
        PARIS_URL + "/evenements/ajouter",
        data={
            "name": " ♻ Débat sur l'écologie ♻ ",
            "description": " ♻ Cette journée sera consacrée à un grand débat sur la question écologique. ♻ ",
            "address.address": "6 rue Neyret",
            "address.postal_code": "69001",
            "address.country": "FR",
            "begin_at": "2022-03-02T09:30",
            "finish_at": "2022-03-02T19:00",
            "capacity": "1500",
        },
    )
    assert resp.status_code == 302
    assert store.find_most_recent_event().name == "Débat sur l'écologie"
    assert notifier.count(NotificationKind.EVENT_PUBLISHED, CARL) == 0
    assert notifier.count(NotificationKind.EVENT_PUBLISHED, LUCIE) == 1


def test_host_posts_messages(client):
    login(client, "gisele-berthoux@caramail.com")
    resp = client.post(PARIS_URL + "/messages", data={"content": "yo"})
    assert resp.status_code == 200
    assert b"The message must contain at least 10 characters." in resp.data

    resp = client.post(PARIS_URL + "/messages", data={"content": "Bienvenue !"}, follow_redirects=True)
    assert b"Your message has been sent." in resp.data

    resp = client.post(
        PARIS_URL + "/messages",
        data={"content": "Première publication !", "published": "1"},
        follow_redirects=True,
    )
    assert "Your message has been published." in resp.get_data(as_text=True)

    client.get("/deconnexion")
    login(client, "carl999@example.fr")
    html = client.get(PARIS_URL).get_data(as_text=True)
    assert html.count('class="committee__timeline__message"') == 2
    assert "Bienvenue !" not in html


def test_members_page(client):
    login(client, "jacques.picard@en-marche.fr")
    resp = client.get(PARIS_URL + "/membres")
    assert resp.status_code == 200
    assert resp.data.count(b"<tr>") == 5
    assert resp.data.count(b'class="promote-host-link"') == 2
    assert b'<td class="member-last-name">P.</td>' in resp.data
    assert b"12/01/2017" in resp.data

    client.get("/deconnexion")
    login(client, "gisele-berthoux@caramail.com")
    resp = client.get(PARIS_URL + "/membres")
    assert resp.data.count(b'class="promote-host-link"') == 0


def test_promote_host(client):
    login(client, "jacques.picard@en-marche.fr")
    url = f"{PARIS_URL}/promouvoir-animateur/{CARL}"
    assert client.get(url).status_code == 200
    resp = client.post(url, follow_redirects=True)
    assert b"The member has been promoted to committee host." in resp.data
    assert resp.data.count(b'class="promote-host-link"') == 1


def test_host_cannot_promote(client):
    login(client, "gisele-berthoux@caramail.com")
    url = f"{PARIS_URL}/promouvoir-animateur/{CARL}"
    assert client.get(url).status_code == 403
    assert client.post(url).status_code == 403


def test_export_members(client):
    login(client, "jacques.picard@en-marche.fr")
    url = PARIS_URL + "/membres/export"

    resp = client.post(url, data={"exports": json.dumps([CARL])})
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert len(resp.get_data(as_text=True).split("\n")) == 3

    resp = client.post(url, data={"exports": json.dumps([CARL, FOREIGNER])})
    assert len(resp.get_data(as_text=True).split("\n")) == 3

    resp = client.post(url, data={"exports": json.dumps([])})
    assert resp.status_code == 200
    assert len(resp.get_data(as_text=True).split("\n")) == 2


def test_contact_members(client, notifier):
    login(client, "jacques.picard@en-marche.fr")
    url = PARIS_URL + "/membres/contact"

    resp = client.post(url, data={"contacts": json.dumps([CARL, FOREIGNER])})
    assert resp.status_code == 200
    assert b"Contact 1 member(s)" in resp.data

    resp = client.post(url, data={"contacts": json.dumps([CARL]), "message": " "})
    assert resp.status_code == 200
    assert b"This value should not be blank." in resp.data

    resp = client.post(
        url,
        data={"contacts": json.dumps([CARL, FOREIGNER]), "message": "Hello à tous !"},
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith(PARIS_URL + "/membres")
    assert notifier.sent[-1].recipients == [CARL]


def test_policy_from_settings():
    app = create_app(
        Settings(secret_key="test", fixtures_path=str(FIXTURES), policy_path=str(POLICY))
    )
    client = app.test_client()
    login(client, "michelle.dufour@example.ch")
    resp = client.get(PARIS_URL)
    assert b'class="committee-follow"' in resp.data
    assert b'id="committee-register-link"' not in resp.data
