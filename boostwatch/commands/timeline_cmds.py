from __future__ import annotations

import threading

from rich import print
from rich.console import Console

from boostwatch.config import BoostwatchConfig
from boostwatch.numerology import NumerologyRule
from boostwatch.poller import PollDriver
from boostwatch.render import ConsoleNotifier, ConsoleRenderer, format_entry
from boostwatch.source import EventSource
from boostwatch.timeline import TimelineStore


def watch_cmd(
    cfg: BoostwatchConfig,
    *,
    source: EventSource,
    rules: tuple[NumerologyRule, ...],
    console: Console | None = None,
    stop_event: threading.Event | None = None,
) -> None:
    """Follow the live timeline until interrupted."""

    console = console or Console()
    store = TimelineStore(rules, on_insert=ConsoleRenderer(console, source.kind))
    driver = PollDriver(
        source,
        store,
        ConsoleNotifier(console, bell=cfg.bell),
        forward_count=cfg.forward_count,
        initial_count=cfg.initial_count,
        backfill_count=cfg.backfill_count,
    )
    console.print(
        f"[green]Watching {source.kind.plural_name} at {source.base_url} "
        f"every {cfg.poll_interval_s:g}s[/green]"
    )
    try:
        driver.run(cfg.poll_interval_s, stop_event)
    except KeyboardInterrupt:
        console.print(f"Stopped with {len(store)} {source.kind.plural_name} in view")


def history_cmd(
    *,
    source: EventSource,
    rules: tuple[NumerologyRule, ...],
    index: int | None,
    count: int,
    pages: int,
    details: bool = False,
    console: Console | None = None,
) -> None:
    """Print a page of events ending at ``index`` plus up to ``pages`` older pages."""

    console = console or Console()
    store = TimelineStore(rules)
    driver = PollDriver(source, store, initial_count=count, backfill_count=count)
    if index is None:
        outcome = driver.initialize()
    else:
        outcome = driver.backfill_from(index)
    if outcome.error:
        print(f"[red]Fetch failed: {outcome.error}[/red]")
    for _ in range(max(0, pages)):
        if not store.has_more():
            break
        outcome = driver.load_older()
        if outcome.error or not outcome.new_events:
            break
    if not len(store):
        print(f"No {source.kind.plural_name} to show yet")
        return
    for entry in store.entries:
        console.print(format_entry(entry, source.kind, details=details))
    if store.has_more():
        console.print(
            f"[dim]Older {source.kind.plural_name} available before #{store.tail_index}[/dim]"
        )
