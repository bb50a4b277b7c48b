import json
from pathlib import Path

import pytest

from boostwatch.config import (
    get_config_path,
    get_env_overrides,
    load_config,
    read_config_file,
    write_config_file,
)


def test_read_config_file_rejects_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not-json}")
    with pytest.raises(ValueError, match="invalid config json"):
        read_config_file(config_path)


def test_read_config_file_rejects_non_object(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("[1, 2]")
    with pytest.raises(ValueError, match="config must be an object"):
        read_config_file(config_path)


def test_read_config_file_missing_is_empty(tmp_path: Path) -> None:
    assert read_config_file(tmp_path / "absent.json") == {}


def test_write_config_file_roundtrip(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "config.json"
    data = {"base_url": "http://umbrel.local:2112", "forward_count": 50}
    write_config_file(data, config_path)
    assert json.loads(config_path.read_text()) == data
    assert read_config_file(config_path) == data


def test_get_config_path_uses_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "custom.json"
    monkeypatch.setenv("BOOSTWATCH_CONFIG", str(target))
    assert get_config_path() == target


def test_load_config_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "absent.json")
    assert cfg.base_url == "http://127.0.0.1:2112"
    assert cfg.source == "boosts"
    assert cfg.poll_interval_s == 7.0
    assert cfg.forward_count == 20
    assert cfg.initial_count == 100
    assert cfg.numerology_path is None
    assert cfg.bell is True


def test_load_config_reads_file_values(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "base_url": "http://node:2112",
                "source": "Sent",
                "poll_interval_s": "3.5",
                "backfill_count": 40,
                "bell": "off",
                "numerology_path": " ~/numerology.json ",
                "unknown_key": 1,
            }
        )
    )

    cfg = load_config(config_path)

    assert cfg.base_url == "http://node:2112"
    assert cfg.source == "sent"
    assert cfg.poll_interval_s == 3.5
    assert cfg.backfill_count == 40
    assert cfg.bell is False
    assert cfg.numerology_path == "~/numerology.json"


def test_env_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text('{"forward_count": 5, "source": "streams"}\n')
    monkeypatch.setenv("BOOSTWATCH_FORWARD_COUNT", "9")
    monkeypatch.setenv("BOOSTWATCH_BASE_URL", "http://env:1")

    cfg = load_config(config_path)

    assert cfg.forward_count == 9
    assert cfg.source == "streams"
    assert cfg.base_url == "http://env:1"


def test_get_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOOSTWATCH_SOURCE", "streams")
    monkeypatch.setenv("BOOSTWATCH_BELL", "0")
    overrides = get_env_overrides()
    assert overrides == {"source": "streams", "bell": "0"}


def test_load_config_warns_and_uses_defaults_on_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{broken-json")

    with pytest.warns(RuntimeWarning, match="Invalid config file"):
        cfg = load_config(config_path)

    assert cfg.source == "boosts"


def test_load_config_invalid_int_env_does_not_crash_and_warns(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{}\n")
    monkeypatch.setenv("BOOSTWATCH_INITIAL_COUNT", "nope")
    with pytest.warns(RuntimeWarning, match="initial_count"):
        cfg = load_config(config_path)
    assert cfg.initial_count == 100


def test_load_config_rejects_non_positive_interval(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text('{"poll_interval_s": 0}\n')
    with pytest.warns(RuntimeWarning, match="poll_interval_s"):
        cfg = load_config(config_path)
    assert cfg.poll_interval_s == 7.0


def test_load_config_unknown_source_warns(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text('{"source": "invoices"}\n')
    with pytest.warns(RuntimeWarning, match="Invalid source"):
        cfg = load_config(config_path)
    assert cfg.source == "boosts"
