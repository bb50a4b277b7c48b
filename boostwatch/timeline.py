from __future__ import annotations

import bisect
import enum
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Literal

from .models import Event, coerce_index
from .numerology import NumerologyResult, NumerologyRule, annotate

logger = logging.getLogger(__name__)

MIN_INDEX = 1

InsertPosition = Literal["head", "before", "after"]


class MergeMode(enum.Enum):
    FORWARD_FRESH = "forward"
    BACKFILL = "backfill"


@dataclass(frozen=True)
class InsertionDirective:
    anchor_index: int | None
    position: InsertPosition


@dataclass(frozen=True)
class TimelineEntry:
    event: Event
    numerology: NumerologyResult

    @property
    def index(self) -> int:
        return self.event.index


@dataclass
class MergeResult:
    mode: MergeMode
    inserted: list[tuple[TimelineEntry, InsertionDirective]] = field(default_factory=list)
    mid_list: bool = False

    @property
    def added(self) -> bool:
        return bool(self.inserted)

    @property
    def count(self) -> int:
        return len(self.inserted)


def closest_index(known: Sequence[int], target: int) -> int | None:
    """Return the known index nearest to ``target``.

    ``known`` must be sorted ascending. Equidistant neighbours resolve to the
    larger value, which sits nearer the head of the timeline.
    """

    if not known:
        return None
    pos = bisect.bisect_left(known, target)
    if pos == 0:
        return known[0]
    if pos == len(known):
        return known[-1]
    lower = known[pos - 1]
    upper = known[pos]
    if target - lower < upper - target:
        return lower
    return upper


def has_more(lowest_known_index: int | None) -> bool:
    if lowest_known_index is None:
        return True
    return lowest_known_index > MIN_INDEX


InsertListener = Callable[[TimelineEntry, InsertionDirective], None]


class TimelineStore:
    """Ordered, duplicate-free timeline of events, highest index first.

    The materialized list and the known-index set change only through
    :meth:`merge_batch`.
    """

    def __init__(
        self,
        rules: Sequence[NumerologyRule] = (),
        *,
        on_insert: InsertListener | None = None,
    ) -> None:
        self._rules = tuple(rules)
        self._entries: list[TimelineEntry] = []
        self._known: list[int] = []
        self._on_insert = on_insert

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, index: object) -> bool:
        return any(entry.index == index for entry in self._entries)

    @property
    def entries(self) -> tuple[TimelineEntry, ...]:
        return tuple(self._entries)

    @property
    def indices(self) -> list[int]:
        return [entry.index for entry in self._entries]

    @property
    def head_index(self) -> int | None:
        if not self._entries:
            return None
        return self._entries[0].index

    @property
    def tail_index(self) -> int | None:
        if not self._entries:
            return None
        return self._entries[-1].index

    def has_more(self) -> bool:
        return has_more(self.tail_index)

    def merge_batch(self, events: Iterable[Event], mode: MergeMode) -> MergeResult:
        result = MergeResult(mode=mode)
        self._known = sorted(entry.index for entry in self._entries)
        for event in events:
            index = coerce_index(getattr(event, "index", None))
            if index is None:
                logger.warning("skipping event without an integer index: %r", event)
                continue
            if self._is_known(index):
                continue
            if event.index != index:
                event = replace(event, index=index)
            entry = TimelineEntry(
                event=event,
                numerology=annotate(max(0, event.amount_total_sats), self._rules),
            )
            directive, position = self._insert(entry, index)
            bisect.insort(self._known, index)
            if position != 0:
                result.mid_list = True
            result.inserted.append((entry, directive))
            self._notify_insert(entry, directive)
        if result.added:
            logger.debug(
                "merged %d new events (%s), head=%s tail=%s",
                result.count,
                mode.value,
                self.head_index,
                self.tail_index,
            )
        return result

    def _notify_insert(self, entry: TimelineEntry, directive: InsertionDirective) -> None:
        if self._on_insert is None:
            return
        try:
            self._on_insert(entry, directive)
        except Exception:
            logger.exception("insert listener failed for event %s", entry.index)

    def _is_known(self, index: int) -> bool:
        pos = bisect.bisect_left(self._known, index)
        return pos < len(self._known) and self._known[pos] == index

    def _position_of(self, index: int) -> int:
        for pos, entry in enumerate(self._entries):
            if entry.index == index:
                return pos
        raise LookupError(index)

    def _insert(self, entry: TimelineEntry, index: int) -> tuple[InsertionDirective, int]:
        anchor = closest_index(self._known, index)
        if anchor is None:
            self._entries.insert(0, entry)
            return InsertionDirective(anchor_index=None, position="head"), 0
        anchor_pos = self._position_of(anchor)
        if index < anchor:
            # Tail holds older, smaller indices.
            self._entries.insert(anchor_pos + 1, entry)
            return InsertionDirective(anchor_index=anchor, position="after"), anchor_pos + 1
        self._entries.insert(anchor_pos, entry)
        return InsertionDirective(anchor_index=anchor, position="before"), anchor_pos
