from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from .formatting import display_amount, event_datetime, person_label, remote_info, tlv_rows
from .source import SourceKind
from .timeline import InsertionDirective, TimelineEntry


def format_entry(
    entry: TimelineEntry, kind: SourceKind = SourceKind.BOOSTS, *, details: bool = False
) -> str:
    event = entry.event
    parts = [
        f"[bold]#{event.index}[/bold]",
        escape(display_amount(event.amount_total_sats, event.amount_actual_sats)),
    ]
    person = person_label(event, kind)
    if person:
        parts.append(escape(person))
    numerology = entry.numerology
    if numerology.decorated_text:
        text = escape(numerology.decorated_text)
        if numerology.matched_labels:
            text = f"{text} [dim]({escape(numerology.title)})[/dim]"
        parts.append(text)

    moment = event_datetime(event)
    when = moment.strftime("%Y-%m-%d %H:%M:%S UTC") if moment else "unknown time"
    origin = f"{event.podcast} - {event.episode}"
    remote = remote_info(event)
    if remote:
        origin = f"{origin} {remote}"
    if event.app:
        origin = f"{origin} via {event.app}"

    lines = [" ".join(parts), f"  [dim]{when}[/dim] {escape(origin)}"]
    if event.message.strip():
        lines.append(f"  {escape(event.message.strip())}")
    if event.reply_address:
        lines.append(f"  [cyan]reply to {escape(event.reply_address)}[/cyan]")
    if details:
        rows = tlv_rows(event)
        if rows is None:
            lines.append("  [dim]TLV unavailable[/dim]")
        else:
            lines.extend(f"  [dim]{escape(key)}:[/dim] {escape(str(value))}" for key, value in rows)
    return "\n".join(lines)


class ConsoleRenderer:
    """Prints each merged entry as it lands in the timeline."""

    def __init__(
        self,
        console: Console | None = None,
        kind: SourceKind = SourceKind.BOOSTS,
        *,
        details: bool = False,
    ) -> None:
        self.console = console or Console()
        self.kind = kind
        self.details = details

    def __call__(self, entry: TimelineEntry, directive: InsertionDirective) -> None:
        text = format_entry(entry, self.kind, details=self.details)
        if directive.position == "after":
            text = f"[yellow]↳ older than #{directive.anchor_index}[/yellow]\n{text}"
        self.console.print(text)


class ConsoleNotifier:
    def __init__(self, console: Console | None = None, *, bell: bool = True) -> None:
        self.console = console or Console()
        self.bell = bell

    def notify(self, *, new_events: bool, mid_list: bool) -> None:
        if new_events and self.bell:
            self.console.bell()
        if mid_list:
            self.console.print("[magenta]🎉 an earlier payment just landed in the timeline[/magenta]")
