"""Configuration loader."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, fields, replace
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

ENV_FILE_NAME = ".env"
YAML_SECTION = "session_store"

DEFAULT_RETENTION_LIMIT = 20
DEFAULT_SUMMARY_CHUNK_LIMIT = 1200
DEFAULT_INACTIVITY_TIMEOUT = 10 * 60.0

_ENV_OVERRIDES = {
    "retention_limit": "CHAT_MEMORY_RETENTION_LIMIT",
    "summary_chunk_limit": "CHAT_MEMORY_SUMMARY_CHUNK_LIMIT",
    "inactivity_timeout": "CHAT_MEMORY_INACTIVITY_TIMEOUT",
    "max_summary_chars": "CHAT_MEMORY_MAX_SUMMARY_CHARS",
}


@dataclass(frozen=True)
class StoreSettings:
    retention_limit: int = DEFAULT_RETENTION_LIMIT
    summary_chunk_limit: int = DEFAULT_SUMMARY_CHUNK_LIMIT
    inactivity_timeout: float = DEFAULT_INACTIVITY_TIMEOUT  # seconds
    max_summary_chars: Optional[int] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _require_limit("retention_limit", self.retention_limit)
        _require_limit("summary_chunk_limit", self.summary_chunk_limit)
        if self.max_summary_chars is not None:
            _require_limit("max_summary_chars", self.max_summary_chars)
        timeout = self.inactivity_timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError(f"inactivity_timeout must be a number, got {timeout!r}")
        if not math.isfinite(timeout) or timeout < 0:
            raise ConfigError(f"inactivity_timeout must be finite and >= 0, got {timeout!r}")

    @property
    def inactivity_delta(self) -> timedelta:
        return timedelta(seconds=self.inactivity_timeout)


def _require_limit(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ConfigError(f"{name} must be >= 0, got {value}")


def load_settings(
    config_path: Path | str | None = None,
    env_file: Path | str | None = None,
) -> StoreSettings:
    """Build settings from defaults, an optional YAML file and the environment.

    Precedence, lowest first: built-in defaults, YAML values, environment
    variables (including those loaded from ``env_file``).
    """
    if env_file is not None:
        _load_env_file(Path(env_file).expanduser())

    values: Dict[str, Any] = {}
    if config_path is not None:
        values.update(_load_yaml(Path(config_path).expanduser()))
    values.update(_load_env_overrides())

    try:
        settings = replace(StoreSettings(), **values)
    except TypeError as exc:
        raise ConfigError(f"Invalid session store settings: {exc}") from exc

    LOGGER.debug("Loaded session store settings: %s", settings)
    return settings


def _load_env_file(path: Path) -> None:
    if not path.exists():
        LOGGER.warning("No .env file found at %s; relying on shell environment.", path)
        return
    load_dotenv(dotenv_path=path, override=False)


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found at {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config structure at {path}")

    section = data.get(YAML_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"{YAML_SECTION} must be a mapping in {path}")

    known = {f.name for f in fields(StoreSettings)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"Unknown session store settings in {path}: {', '.join(unknown)}")
    return dict(section)


def _load_env_overrides() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name, env_name in _ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            continue
        try:
            values[name] = float(raw) if name == "inactivity_timeout" else int(raw)
        except ValueError as exc:
            raise ConfigError(f"{env_name} must be a number, got {raw!r}") from exc
    return values
