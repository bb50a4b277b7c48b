from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


def _msat_to_sats(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return math.trunc(number / 1000)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def coerce_index(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_tlv(raw: Any) -> tuple[dict[str, Any], bool]:
    """Parse the serialized TLV field of an event.

    Returns the mapping and whether parsing succeeded. Anything that is not a
    JSON object yields an empty mapping.
    """

    if isinstance(raw, dict):
        return dict(raw), True
    if not isinstance(raw, str) or not raw.strip():
        return {}, False
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {}, False
    if not isinstance(data, dict):
        return {}, False
    return data, True


@dataclass(frozen=True)
class Event:
    index: int
    amount_total_sats: int = 0
    amount_actual_sats: int = 0
    action: int | None = None
    app: str = ""
    podcast: str = ""
    episode: str = ""
    remote_podcast: str = ""
    remote_episode: str = ""
    sender: str = ""
    message: str = ""
    tlv: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    tlv_available: bool = False
    time: int = 0

    @classmethod
    def from_json(cls, record: dict[str, Any]) -> Event:
        index = coerce_index(record.get("index"))
        if index is None:
            raise ValueError(f"event index must be an integer: {record.get('index')!r}")
        actual = _msat_to_sats(record.get("value_msat"))
        total = _msat_to_sats(record.get("value_msat_total")) or actual
        tlv, tlv_available = parse_tlv(record.get("tlv"))
        action = record.get("action")
        try:
            timestamp = int(record.get("time") or 0)
        except (TypeError, ValueError, OverflowError):
            timestamp = 0
        return cls(
            index=index,
            amount_total_sats=total,
            amount_actual_sats=actual,
            action=action if isinstance(action, int) and not isinstance(action, bool) else None,
            app=_text(record.get("app")),
            podcast=_text(record.get("podcast")),
            episode=_text(record.get("episode")),
            remote_podcast=_text(record.get("remote_podcast")),
            remote_episode=_text(record.get("remote_episode")),
            sender=_text(record.get("sender")),
            message=_text(record.get("message")),
            tlv=tlv,
            tlv_available=tlv_available,
            time=timestamp,
        )

    def _tlv_str(self, key: str) -> str:
        value = self.tlv.get(key)
        if value is None:
            return ""
        return str(value)

    @property
    def reply_address(self) -> str:
        return self._tlv_str("reply_address")

    @property
    def reply_custom_key(self) -> str:
        return self._tlv_str("reply_custom_key")

    @property
    def reply_custom_value(self) -> str:
        return self._tlv_str("reply_custom_value")

    @property
    def remote_feed_guid(self) -> str:
        return self._tlv_str("remote_feed_guid")

    @property
    def recipient_name(self) -> str:
        return self._tlv_str("name")


def parse_events(payload: Any) -> list[Event]:
    """Build events from a list payload, skipping records that cannot be keyed."""

    if not isinstance(payload, list):
        return []
    events: list[Event] = []
    for record in payload:
        if not isinstance(record, dict):
            logger.warning("skipping non-object event record: %r", record)
            continue
        try:
            events.append(Event.from_json(record))
        except (TypeError, ValueError, OverflowError) as exc:
            logger.warning("skipping event record: %s", exc)
    return events
