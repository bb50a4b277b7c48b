from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer
from rich import print

from boostwatch.config import BoostwatchConfig, load_config, read_config_file, write_config_file
from boostwatch.numerology import NumerologyRule, load_rules
from boostwatch.source import EventSource, SourceKind


def load_config_or_exit(
    config_path: str | None,
    *,
    base_url: str | None = None,
    source: str | None = None,
) -> BoostwatchConfig:
    path = Path(config_path) if config_path else None
    read_config_or_exit(path)
    cfg = load_config(path)
    if base_url:
        cfg.base_url = base_url
    if source:
        cfg.source = source
    return cfg


def read_config_or_exit(path: Path | None) -> dict[str, Any]:
    try:
        return read_config_file(path)
    except ValueError as exc:
        print(f"[red]Invalid config file: {exc}[/red]")
        raise typer.Exit(code=1) from exc


def write_config_or_exit(data: dict[str, Any], path: Path | None) -> Path:
    try:
        return write_config_file(data, path)
    except OSError as exc:
        print(f"[red]Failed to write config: {exc}[/red]")
        raise typer.Exit(code=1) from exc


def source_kind_or_exit(value: str) -> SourceKind:
    try:
        return SourceKind(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(kind.value for kind in SourceKind)
        print(f"[red]Unknown source {value!r} (expected one of: {choices})[/red]")
        raise typer.Exit(code=1) from exc


def load_rules_or_exit(path: str | None) -> tuple[NumerologyRule, ...]:
    try:
        return load_rules(Path(path) if path else None)
    except ValueError as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


def build_source(cfg: BoostwatchConfig) -> EventSource:
    return EventSource(
        base_url=cfg.base_url,
        kind=source_kind_or_exit(cfg.source),
        timeout_s=cfg.request_timeout_s,
    )


def configure_logging(cfg: BoostwatchConfig, *, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
