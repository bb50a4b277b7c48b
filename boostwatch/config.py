from __future__ import annotations

import json
import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("~/.config/boostwatch/config.json").expanduser()

CONFIG_ENV_OVERRIDES = {
    "base_url": "BOOSTWATCH_BASE_URL",
    "source": "BOOSTWATCH_SOURCE",
    "poll_interval_s": "BOOSTWATCH_POLL_INTERVAL_S",
    "request_timeout_s": "BOOSTWATCH_REQUEST_TIMEOUT_S",
    "forward_count": "BOOSTWATCH_FORWARD_COUNT",
    "initial_count": "BOOSTWATCH_INITIAL_COUNT",
    "backfill_count": "BOOSTWATCH_BACKFILL_COUNT",
    "numerology_path": "BOOSTWATCH_NUMEROLOGY_PATH",
    "bell": "BOOSTWATCH_BELL",
    "log_level": "BOOSTWATCH_LOG_LEVEL",
}

_INT_KEYS = {"forward_count", "initial_count", "backfill_count"}
_FLOAT_KEYS = {"poll_interval_s", "request_timeout_s"}
_BOOL_KEYS = {"bell"}
_SOURCES = {"boosts", "streams", "sent"}


def get_config_path(path: Path | None = None) -> Path:
    candidate = path or Path(os.getenv("BOOSTWATCH_CONFIG", DEFAULT_CONFIG_PATH))
    return candidate.expanduser()


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    config_path = get_config_path(path)
    if not config_path.exists():
        return {}
    raw = config_path.read_text()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid config json") from exc
    if not isinstance(data, dict):
        raise ValueError("config must be an object")
    return data


def write_config_file(data: dict[str, Any], path: Path | None = None) -> Path:
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n")
    return config_path


def get_env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, env_var in CONFIG_ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[key] = value
    return overrides


@dataclass
class BoostwatchConfig:
    base_url: str = "http://127.0.0.1:2112"
    source: str = "boosts"
    poll_interval_s: float = 7.0
    request_timeout_s: float = 5.0
    # Batch sizes for the live poll, the first load, and "show older".
    forward_count: int = 20
    initial_count: int = 100
    backfill_count: int = 100
    numerology_path: str | None = None
    bell: bool = True
    log_level: str = "WARNING"


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    if value.lower() in {"1", "true", "yes", "on"}:
        return True
    if value.lower() in {"0", "false", "off", "no"}:
        return False
    return default


def _parse_int(value: object, default: int, *, key: str) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    if parsed <= 0:
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    return parsed


def _parse_float(value: object, default: float, *, key: str) -> float:
    if value is None:
        return default
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid float for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    if not parsed > 0:
        warnings.warn(f"Invalid float for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    return parsed


def _coerce_bool(value: object, default: bool, *, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return _parse_bool(value, default)
    warnings.warn(f"Invalid bool for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def _coerce_source(value: object, default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in _SOURCES:
        return value.strip().lower()
    warnings.warn(f"Invalid source: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def load_config(path: Path | None = None) -> BoostwatchConfig:
    cfg = BoostwatchConfig()
    config_path = get_config_path(path)
    if config_path.exists():
        try:
            data = read_config_file(config_path)
        except ValueError as exc:
            warnings.warn(f"Invalid config file {config_path}: {exc}", RuntimeWarning, stacklevel=2)
            data = {}
        cfg = _apply_dict(cfg, data)
    cfg = _apply_dict(cfg, get_env_overrides())
    return cfg


def _apply_dict(cfg: BoostwatchConfig, data: dict[str, Any]) -> BoostwatchConfig:
    for key, value in data.items():
        if not hasattr(cfg, key):
            continue
        if key in _INT_KEYS:
            setattr(cfg, key, _parse_int(value, getattr(cfg, key), key=key))
            continue
        if key in _FLOAT_KEYS:
            setattr(cfg, key, _parse_float(value, getattr(cfg, key), key=key))
            continue
        if key in _BOOL_KEYS:
            setattr(cfg, key, _coerce_bool(value, getattr(cfg, key), key=key))
            continue
        if key == "source":
            cfg.source = _coerce_source(value, cfg.source)
            continue
        if key == "numerology_path":
            text = str(value).strip() if value is not None else ""
            cfg.numerology_path = text or None
            continue
        if key == "log_level":
            cfg.log_level = str(value).strip().upper() or cfg.log_level
            continue
        setattr(cfg, key, str(value))
    return cfg
