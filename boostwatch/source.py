from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from . import http_client
from .models import Event, parse_events

logger = logging.getLogger(__name__)


class SourceError(RuntimeError):
    pass


class SourceKind(enum.Enum):
    BOOSTS = "boosts"
    STREAMS = "streams"
    SENT = "sent"

    @property
    def list_path(self) -> str:
        return f"/api/v1/{self.value}"

    @property
    def index_path(self) -> str:
        if self is SourceKind.SENT:
            return "/api/v1/sent_index"
        return "/api/v1/index"

    @property
    def singular_name(self) -> str:
        return {"boosts": "boost", "streams": "stream", "sent": "sent boost"}[self.value]

    @property
    def plural_name(self) -> str:
        return {"boosts": "boosts", "streams": "streams", "sent": "sent boosts"}[self.value]


@dataclass
class EventSource:
    """Client for the event list endpoints of a payment node dashboard."""

    base_url: str
    kind: SourceKind = SourceKind.BOOSTS
    timeout_s: float = 5.0

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = http_client.build_url(self.base_url, path, params)
        logger.debug("GET %s", url)
        status, payload = http_client.request_json("GET", url, timeout_s=self.timeout_s)
        if status != 200:
            detail = payload.get("error") if isinstance(payload, dict) else None
            raise SourceError(f"{path} returned {status}" + (f": {detail}" if detail else ""))
        return payload

    def fetch_events(self, index: int, count: int, *, old: bool = False) -> list[Event]:
        params: dict[str, Any] = {"index": int(index), "count": int(count)}
        if old:
            params["old"] = "true"
        payload = self._get(self.kind.list_path, params)
        if not isinstance(payload, list):
            raise SourceError(f"{self.kind.list_path} returned {type(payload).__name__}, not a list")
        return parse_events(payload)

    def fetch_index(self) -> int:
        payload = self._get(self.kind.index_path)
        if isinstance(payload, bool) or not isinstance(payload, int | float):
            return 1
        try:
            index = int(payload)
        except (OverflowError, ValueError):
            return 1
        if index < 1:
            return 1
        return index
