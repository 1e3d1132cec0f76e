"""Configuration loading and persistence."""

from __future__ import annotations

import copy
import json
import os
from datetime import tzinfo
from pathlib import Path
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]

from wl_cli.core.constants import DEFAULT_DATE_RANGE


class ConfigError(RuntimeError):
    """Raised when config file parsing fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_data_dir() -> Path:
    """Resolve XDG-style data directory with env override."""
    raw = os.getenv("WL_DATA_DIR", "~/.local/share/wl")
    return expand_path(raw)


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("WL_CONFIG_FILE", "~/.config/wl/config.toml")
    return expand_path(raw)


def _default_config() -> Dict[str, Any]:
    data_dir = default_data_dir()
    return {
        "defaults": {
            "user": "",
            "timezone": "local",
            "date_range": DEFAULT_DATE_RANGE,
        },
        "store": {
            "backend": "file",
            "path": str(data_dir / "workouts.json"),
            "url": "",
            "token_env": "WL_API_TOKEN",
        },
        "export": {
            "default_directory": "./workout-exports",
        },
        "api": {
            "rate_limit_delay": 0.0,
            "max_retries": 3,
            "timeout_seconds": 30,
        },
    }


def _read_config(path: Path) -> Dict[str, Any]:
    is_json = path.suffix.lower() == ".json"
    try:
        loaded = json.loads(path.read_text()) if is_json else tomllib.loads(path.read_text())
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        kind = "JSON" if is_json else "TOML"
        raise ConfigError(f"Invalid {kind} in config file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = _default_config()

    if cfg_path.exists():
        cfg = _deep_merge(cfg, _read_config(cfg_path))

    return cfg


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        # JSON string escapes are valid TOML basic-string escapes.
        return json.dumps(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(item) for item in value if item is not None) + "]"
    raise TypeError(f"Unsupported TOML value type: {type(value)!r}")


def _dict_to_toml(data: Dict[str, Any], table: str = "") -> List[str]:
    scalars = {key: value for key, value in data.items() if value is not None and not isinstance(value, dict)}
    tables = {key: value for key, value in data.items() if isinstance(value, dict)}

    lines: List[str] = [f"[{table}]"] if table and scalars else []
    lines.extend(f"{key} = {_toml_value(value)}" for key, value in scalars.items())
    for key, value in tables.items():
        if lines:
            lines.append("")
        lines.extend(_dict_to_toml(value, f"{table}.{key}" if table else key))
    return lines


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> Path:
    """Save configuration to disk as TOML (default) or JSON."""
    cfg_path = path or default_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    if cfg_path.suffix.lower() == ".json":
        cfg_path.write_text(json.dumps(config, indent=2) + "\n")
    else:
        cfg_path.write_text("\n".join(_dict_to_toml(config)).strip() + "\n")
    return cfg_path


def resolve_store_path(config: Dict[str, Any]) -> Path:
    """Resolve the JSON store file from env/config."""
    raw = os.getenv("WL_STORE_PATH") or config.get("store", {}).get("path")
    if not raw:
        raw = str(default_data_dir() / "workouts.json")
    return expand_path(raw)


def resolve_output_dir(config: Dict[str, Any], explicit: Optional[Path] = None) -> Path:
    """Resolve output directory with CLI override first."""
    if explicit is not None:
        return explicit.expanduser().resolve()
    raw = os.getenv("WL_OUTPUT_DIR") or config.get("export", {}).get(
        "default_directory",
        "./workout-exports",
    )
    return expand_path(raw)


def resolve_default_user(config: Dict[str, Any]) -> Optional[str]:
    """Default owner id from env or config."""
    raw = os.getenv("WL_USER") or config.get("defaults", {}).get("user") or ""
    return str(raw).strip() or None


def resolve_default_range(config: Dict[str, Any]) -> str:
    """Named range applied when analyze/export get no date flags."""
    raw = config.get("defaults", {}).get("date_range") or DEFAULT_DATE_RANGE
    return str(raw).strip().lower()


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Map a zone name to tzinfo; 'local' or empty means the host zone (None)."""
    if not name or name.strip().lower() == "local":
        return None
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown time zone: {name}") from exc


def configured_timezone(config: Dict[str, Any]) -> Optional[tzinfo]:
    """Time zone from WL_TIMEZONE or ``defaults.timezone``."""
    return resolve_timezone(os.getenv("WL_TIMEZONE") or config.get("defaults", {}).get("timezone"))
