from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BOOSTWATCH_CONFIG", str(tmp_path / "config.json"))
    for name in (
        "BOOSTWATCH_BASE_URL",
        "BOOSTWATCH_SOURCE",
        "BOOSTWATCH_POLL_INTERVAL_S",
        "BOOSTWATCH_REQUEST_TIMEOUT_S",
        "BOOSTWATCH_FORWARD_COUNT",
        "BOOSTWATCH_INITIAL_COUNT",
        "BOOSTWATCH_BACKFILL_COUNT",
        "BOOSTWATCH_NUMEROLOGY_PATH",
        "BOOSTWATCH_BELL",
        "BOOSTWATCH_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
