from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from http.client import HTTPException
from typing import Protocol

from .models import Event
from .source import EventSource, SourceError
from .timeline import MergeMode, MergeResult, TimelineStore

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, *, new_events: bool, mid_list: bool) -> None: ...


class NullNotifier:
    def notify(self, *, new_events: bool, mid_list: bool) -> None:
        return


@dataclass(frozen=True)
class PollOutcome:
    mode: MergeMode
    new_events: int = 0
    mid_list: bool = False
    alerted: bool = False
    error: str | None = None


class PollDriver:
    """Feeds event batches from an :class:`EventSource` into a :class:`TimelineStore`.

    Every cycle holds one lock, so forward polls and backfills never merge
    concurrently. A failed fetch counts as an empty batch.
    """

    def __init__(
        self,
        source: EventSource,
        store: TimelineStore,
        notifier: Notifier | None = None,
        *,
        forward_count: int = 20,
        initial_count: int = 100,
        backfill_count: int = 100,
    ) -> None:
        self.source = source
        self.store = store
        self.notifier = notifier or NullNotifier()
        self.forward_count = forward_count
        self.initial_count = initial_count
        self.backfill_count = backfill_count
        self.current_index: int | None = None
        self._lock = threading.Lock()
        self._waiting_for_first = False

    def initialize(self) -> PollOutcome:
        with self._lock:
            return self._initialize()

    def poll_once(self) -> PollOutcome:
        with self._lock:
            if len(self.store) == 0:
                return self._initialize()
            start = self.store.head_index
            assert start is not None
            return self._cycle(
                MergeMode.FORWARD_FRESH,
                lambda: self.source.fetch_events(start, self.forward_count),
                alert=True,
            )

    def load_older(self) -> PollOutcome:
        with self._lock:
            tail = self.store.tail_index
            if tail is None or not self.store.has_more():
                return PollOutcome(mode=MergeMode.BACKFILL)
            return self._cycle(
                MergeMode.BACKFILL,
                lambda: self.source.fetch_events(tail, self.backfill_count, old=True),
                alert=False,
            )

    def backfill_from(self, index: int) -> PollOutcome:
        with self._lock:
            return self._cycle(
                MergeMode.BACKFILL,
                lambda: self.source.fetch_events(index, self.backfill_count, old=True),
                alert=False,
            )

    def run(self, interval_s: float, stop_event: threading.Event | None = None) -> None:
        stop = stop_event or threading.Event()
        self.initialize()
        while not stop.wait(interval_s):
            self.poll_once()

    def _initialize(self) -> PollOutcome:
        try:
            self.current_index = self.source.fetch_index()
        except (OSError, HTTPException, SourceError) as exc:
            logger.warning("index fetch failed: %s", exc)
            self._waiting_for_first = len(self.store) == 0
            self.notifier.notify(new_events=False, mid_list=False)
            return PollOutcome(mode=MergeMode.BACKFILL, error=str(exc))
        index = self.current_index
        return self._cycle(
            MergeMode.BACKFILL,
            lambda: self.source.fetch_events(index, self.initial_count, old=True),
            alert=False,
        )

    def _cycle(
        self, mode: MergeMode, fetch: Callable[[], list[Event]], *, alert: bool
    ) -> PollOutcome:
        events: list[Event]
        error: str | None = None
        try:
            events = fetch()
        except (OSError, HTTPException, SourceError) as exc:
            # Timeouts are OSError subclasses.
            logger.warning("%s fetch failed: %s", mode.value, exc)
            events = []
            error = str(exc)
        had_entries = len(self.store) > 0
        result: MergeResult = self.store.merge_batch(events, mode)
        should_alert = result.added and (alert or self._waiting_for_first)
        self._waiting_for_first = len(self.store) == 0
        # The first load fills the timeline; there is no head being watched yet.
        self.notifier.notify(new_events=should_alert, mid_list=result.mid_list and had_entries)
        if result.added:
            logger.info(
                "%d new %s (%s)", result.count, self.source.kind.plural_name, mode.value
            )
        return PollOutcome(
            mode=mode,
            new_events=result.count,
            mid_list=result.mid_list,
            alerted=should_alert,
            error=error,
        )
