"""Configuration file management for since-when.

Reads and writes ~/.since-when/config.json for settings that don't belong in the DB
(e.g., where the DB itself lives).
"""
from __future__ import annotations

import json
import os
from pathlib import Path

from since_when.db import DEFAULT_DB_PATH

DEFAULT_CONFIG_PATH: Path = Path.home() / ".since-when" / "config.json"

DB_ENV_VAR = "SINCE_WHEN_DB"

DEFAULT_LOG_LEVEL = "WARNING"


def load_config(config_path: Path | None = None) -> dict:
    """Load config from JSON file. Returns {} if file missing or invalid."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, config_path: Path | None = None) -> None:
    """Write config dict to JSON file. Creates parent dirs if needed."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def get_db_path(override: str | None = None, config_path: Path | None = None) -> Path:
    """Resolve the database path: explicit override > env var > config > default."""
    if override:
        return Path(override).expanduser()
    env_value = os.environ.get(DB_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    raw = load_config(config_path).get("db_path")
    if raw:
        return Path(raw).expanduser()
    return DEFAULT_DB_PATH


def set_db_path(db_path: Path, config_path: Path | None = None) -> None:
    """Persist the database path to config."""
    config = load_config(config_path)
    config["db_path"] = str(db_path)
    save_config(config, config_path)


def get_log_level(override: str | None = None, config_path: Path | None = None) -> str:
    """Resolve the log level name, defaulting to WARNING."""
    if override:
        return override.upper()
    raw = load_config(config_path).get("log_level")
    return str(raw).upper() if raw else DEFAULT_LOG_LEVEL
