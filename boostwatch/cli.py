from __future__ import annotations

import typer
from rich import print

from . import __version__
from .commands.common import (
    build_source,
    configure_logging,
    load_config_or_exit,
    load_rules_or_exit,
)
from .commands.config_cmds import config_cmd
from .commands.numerology_cmds import numerology_cmd
from .commands.timeline_cmds import history_cmd, watch_cmd

app = typer.Typer(help="boostwatch: follow payment boosts from a node dashboard API")


@app.command()
def watch(
    config_path: str = typer.Option(None, "--config", help="Path to config JSON"),
    base_url: str = typer.Option(None, help="Dashboard base URL"),
    source: str = typer.Option(None, help="Event list to follow: boosts, streams or sent"),
    interval: float = typer.Option(None, help="Seconds between polls"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Follow the live timeline, printing new events as they arrive."""

    cfg = load_config_or_exit(config_path, base_url=base_url, source=source)
    if interval is not None and interval > 0:
        cfg.poll_interval_s = interval
    configure_logging(cfg, verbose=verbose)
    rules = load_rules_or_exit(cfg.numerology_path)
    watch_cmd(cfg, source=build_source(cfg), rules=rules)


@app.command()
def history(
    config_path: str = typer.Option(None, "--config", help="Path to config JSON"),
    base_url: str = typer.Option(None, help="Dashboard base URL"),
    source: str = typer.Option(None, help="Event list to read: boosts, streams or sent"),
    index: int = typer.Option(None, help="Newest index to show (defaults to the latest)"),
    count: int = typer.Option(20, min=1, help="Events per page"),
    pages: int = typer.Option(0, min=0, help="Additional older pages to load"),
    details: bool = typer.Option(False, "--details", help="Show each payload's TLV fields"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Print recent events once."""

    cfg = load_config_or_exit(config_path, base_url=base_url, source=source)
    configure_logging(cfg, verbose=verbose)
    rules = load_rules_or_exit(cfg.numerology_path)
    history_cmd(
        source=build_source(cfg),
        rules=rules,
        index=index,
        count=count,
        pages=pages,
        details=details,
    )


@app.command()
def numerology(
    amount: int = typer.Argument(..., min=0, help="Amount in sats"),
    rules_path: str = typer.Option(None, "--rules", help="Path to a numerology.json rule file"),
    config_path: str = typer.Option(None, "--config", help="Path to config JSON"),
) -> None:
    """Show the numerology behind a sat amount."""

    cfg = load_config_or_exit(config_path)
    rules = load_rules_or_exit(rules_path or cfg.numerology_path)
    numerology_cmd(amount, rules=rules)


@app.command("config")
def config(
    set_values: list[str] = typer.Option(None, "--set", help="KEY=VALUE to store (repeatable)"),
    config_path: str = typer.Option(None, "--config", help="Path to config JSON"),
) -> None:
    """Show the effective config or update the config file."""

    config_cmd(config_path, set_values=set_values or [])


def main() -> None:
    app()


@app.command("version")
def version() -> None:
    """Print version."""

    print(__version__)
