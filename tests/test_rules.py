from datetime import datetime, timezone

from committee_access.rules import (
    clean_text,
    collect_errors,
    committee_rules,
    contact_rules,
    event_rules,
    message_rules,
)


def _event(**overrides):
    data = {
        "name": "Débat sur l'écologie",
        "description": "Cette journée sera consacrée à un grand débat.",
        "address": {"address": "6 rue Neyret", "postal_code": "69001", "country": "FR"},
        "begin_at": "2022-03-02T09:30",
        "finish_at": "2022-03-02T19:00",
        "capacity": "1500",
    }
    data.update(overrides)
    return data


def test_valid_event_has_no_errors():
    assert collect_errors(_event(), event_rules()) == {}


def test_finish_before_begin_is_reported_on_finish_field():
    errors = collect_errors(_event(finish_at="2022-03-01T19:00"), event_rules())
    assert errors == {
        "finish_at": ["The end date of the event must be after its start date."]
    }


def test_finish_equal_to_begin_is_rejected():
    errors = collect_errors(_event(finish_at="2022-03-02T09:30"), event_rules())
    assert "finish_at" in errors


def test_datetime_objects_are_accepted():
    data = _event(begin_at=datetime(2022, 3, 2, 9, 30), finish_at=datetime(2022, 3, 2, 19, 0))
    assert collect_errors(data, event_rules()) == {}


def test_capacity_values():
    for capacity in (None, "", 0, "0", 1500, "1500"):
        assert "capacity" not in collect_errors(_event(capacity=capacity), event_rules())
    for capacity in ("zero", "-1", -1, "1.5", True, "²"):
        assert "capacity" in collect_errors(_event(capacity=capacity), event_rules())


def test_event_errors_accumulate():
    data = {
        "name": "F",
        "description": "F",
        "address": {"address": "", "postal_code": "99999"},
        "begin_at": "2017-03-02T14:30",
        "finish_at": "2017-03-01T19:00",
        "capacity": "zero",
    }

    def reject(address):
        return "Your address is not recognized."

    errors = collect_errors(data, event_rules(reject))
    assert sorted(errors) == [
        "address",
        "address.address",
        "capacity",
        "description",
        "finish_at",
        "name",
    ]
    assert errors["address"] == ["Your address is not recognized."]
    assert errors["name"] == ["This value is too short. It should have 5 characters or more."]


def test_unreadable_dates_are_reported_on_their_field():
    errors = collect_errors(_event(begin_at="tomorrow"), event_rules())
    assert list(errors) == ["begin_at"]


def test_offset_aware_dates_are_reported_on_their_field():
    errors = collect_errors(_event(begin_at="2022-03-02T09:30+01:00"), event_rules())
    assert errors == {"begin_at": ["This value is not a valid datetime."]}

    aware = datetime(2022, 3, 2, 19, 0, tzinfo=timezone.utc)
    errors = collect_errors(_event(finish_at=aware), event_rules())
    assert list(errors) == ["finish_at"]


def test_decorations_do_not_count_towards_length():
    assert clean_text(" ♻ Débat sur l'écologie ♻ ") == "Débat sur l'écologie"
    errors = collect_errors(_event(name=" ♻ ab ♻ "), event_rules())
    assert "name" in errors


def test_committee_rules():
    data = {
        "name": "F",
        "description": "F",
        "address": {"address": "", "postal_code": "99999"},
        "facebook_page_url": "yo",
        "twitter_nickname": "@!!",
        "google_plus_page_url": "yo",
    }
    errors = collect_errors(data, committee_rules())
    assert sorted(errors) == [
        "address.address",
        "description",
        "facebook_page_url",
        "google_plus_page_url",
        "name",
        "twitter_nickname",
    ]

    valid = {
        "name": "Clichy est En Marche !",
        "description": "Comité français En Marche ! de la ville de Clichy",
        "address": {"address": "92 bld victor hugo", "postal_code": "92110"},
        "facebook_page_url": "https://www.facebook.com/EnMarcheClichy",
        "twitter_nickname": "@enmarcheclichy",
        "google_plus_page_url": "",
    }
    assert collect_errors(valid, committee_rules()) == {}


def test_message_and_contact_rules():
    assert collect_errors({"content": "yo"}, message_rules()) == {
        "content": ["The message must contain at least 10 characters."]
    }
    assert collect_errors({"content": "Bienvenue !"}, message_rules()) == {}
    assert "message" in collect_errors({"message": " "}, contact_rules())
    assert collect_errors({"message": "Hello"}, contact_rules()) == {}


def test_address_validator_message_is_reported_on_address():
    def reject_foreign(address):
        if address.get("country") != "FR":
            return "Only French addresses are supported."
        return None

    rules = event_rules(reject_foreign)
    assert collect_errors(_event(), rules) == {}

    errors = collect_errors(_event(address={"address": "Bahnhofstrasse 1", "country": "CH"}), rules)
    assert errors == {"address": ["Only French addresses are supported."]}
