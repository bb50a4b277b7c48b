from __future__ import annotations

import datetime as dt
from typing import Any

from .models import Event
from .source import SourceKind


def number_format(value: int) -> str:
    return f"{value:,}"


def display_amount(total_sats: int, actual_sats: int) -> str:
    text = f"{number_format(total_sats)} sats"
    if total_sats != actual_sats and total_sats > 0 and actual_sats > 0:
        return f"{text} ({number_format(actual_sats)} sats received after splits/fees)"
    return text


def person_label(event: Event, kind: SourceKind = SourceKind.BOOSTS) -> str:
    if kind is SourceKind.SENT and event.recipient_name:
        return f"sent to {event.recipient_name}"
    if event.sender.strip():
        return f"from {event.sender}"
    return ""


def remote_info(event: Event) -> str:
    if not event.remote_episode:
        return ""
    info = f"({event.remote_podcast} - {event.remote_episode})"
    if event.remote_feed_guid:
        return f"{info} https://podcastindex.org/podcast/{event.remote_feed_guid}"
    return info


def event_datetime(event: Event) -> dt.datetime | None:
    try:
        return dt.datetime.fromtimestamp(event.time, dt.UTC)
    except (OverflowError, ValueError, OSError, TypeError):
        return None


def tlv_rows(event: Event) -> list[tuple[str, Any]] | None:
    """Key/value rows of the event payload, or None when it failed to parse."""

    if not event.tlv_available:
        return None
    return [(str(key), value) for key, value in event.tlv.items()]
