from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import typer
from rich import print

from boostwatch.commands.common import read_config_or_exit, write_config_or_exit
from boostwatch.config import CONFIG_ENV_OVERRIDES, load_config


def _config_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def config_cmd(config_path: str | None, *, set_values: list[str]) -> None:
    """Print the effective config, or store ``KEY=VALUE`` pairs in the config file."""

    path = Path(config_path) if config_path else None
    data = read_config_or_exit(path)
    if not set_values:
        print(json.dumps(asdict(load_config(path)), indent=2))
        return
    for item in set_values:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or key not in CONFIG_ENV_OVERRIDES:
            choices = ", ".join(CONFIG_ENV_OVERRIDES)
            print(f"[red]Expected KEY=VALUE with KEY one of: {choices}[/red]")
            raise typer.Exit(code=1)
        data[key] = _config_value(raw.strip())
    written = write_config_or_exit(data, path)
    print(f"Saved {written}")
