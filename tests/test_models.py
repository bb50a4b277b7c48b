from __future__ import annotations

import json
import logging

import pytest

from boostwatch.models import Event, parse_events, parse_tlv


def _record(**overrides) -> dict:
    record = {
        "index": 42,
        "time": 1_700_000_000,
        "value_msat": 9_500_000,
        "value_msat_total": 10_000_000,
        "action": 2,
        "sender": "alice",
        "app": "Fountain",
        "message": "great episode",
        "podcast": "Podcasting 2.0",
        "episode": "Episode 150",
        "remote_podcast": "",
        "remote_episode": "",
        "tlv": json.dumps(
            {
                "reply_address": "alice@getalby.com",
                "remote_feed_guid": "abc-guid",
                "name": "Adam",
            }
        ),
    }
    record.update(overrides)
    return record


def test_event_from_json_maps_amounts_and_fields() -> None:
    event = Event.from_json(_record())

    assert event.index == 42
    assert event.amount_total_sats == 10_000
    assert event.amount_actual_sats == 9_500
    assert event.action == 2
    assert event.sender == "alice"
    assert event.reply_address == "alice@getalby.com"
    assert event.reply_custom_key == ""
    assert event.remote_feed_guid == "abc-guid"
    assert event.recipient_name == "Adam"
    assert event.tlv_available is True


def test_event_total_falls_back_to_value_msat() -> None:
    event = Event.from_json(_record(value_msat_total=0, value_msat=2_100_999))

    assert event.amount_total_sats == 2_100
    assert event.amount_actual_sats == 2_100


def test_event_with_malformed_tlv_keeps_going() -> None:
    event = Event.from_json(_record(tlv="{not json"))

    assert event.tlv == {}
    assert event.tlv_available is False
    assert event.reply_address == ""


def test_event_missing_strings_become_empty() -> None:
    event = Event.from_json({"index": 1, "sender": None})

    assert event.sender == ""
    assert event.podcast == ""
    assert event.amount_total_sats == 0
    assert event.time == 0


def test_event_requires_integer_index() -> None:
    with pytest.raises(ValueError, match="integer"):
        Event.from_json(_record(index="twelve"))


def test_parse_tlv_rejects_non_objects() -> None:
    assert parse_tlv("[1, 2]") == ({}, False)
    assert parse_tlv(None) == ({}, False)
    assert parse_tlv('{"a": 1}') == ({"a": 1}, True)


def test_parse_events_skips_bad_records(caplog: pytest.LogCaptureFixture) -> None:
    payload = [_record(index=3), "junk", {"index": None}, _record(index=4)]

    with caplog.at_level(logging.WARNING, logger="boostwatch.models"):
        events = parse_events(payload)

    assert [event.index for event in events] == [3, 4]
    assert "skipping" in caplog.text


def test_parse_events_ignores_non_list() -> None:
    assert parse_events({"error": "nope"}) == []


def test_parse_events_tolerates_infinite_time() -> None:
    events = parse_events(json.loads('[{"index": 1, "value_msat": 1000, "time": Infinity}]'))

    assert [event.index for event in events] == [1]
    assert events[0].time == 0
    assert events[0].amount_total_sats == 1
