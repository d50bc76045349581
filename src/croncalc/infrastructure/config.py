"""Settings loading for croncalc applications.

Settings are merged from several sources, later sources winning:

    defaults  <  configuration file (YAML, JSON, TOML)  <  environment

Environment variables use the ``CRONCALC_`` prefix:

    CRONCALC_CONFIG          path of the configuration file
    CRONCALC_LOG_LEVEL       debug, info, warning, error, critical
    CRONCALC_LOG_FORMAT      text or json
    CRONCALC_DEFAULT_COUNT   occurrences listed when no count is given
    CRONCALC_OUTPUT_FORMAT   strftime format for printed instants
    CRONCALC_TIMEZONE        IANA zone for the reference instant

Usage:
    >>> from croncalc.infrastructure.config import load_settings
    >>> settings = load_settings("croncalc.yaml")
    >>> settings.default_count
    5
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "CRONCALC_"
LOG_FORMATS = ("text", "json")
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(Exception):
    """Base configuration error."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Configuration validation failed: {', '.join(errors)}")


class ConfigSourceError(ConfigError):
    """Configuration source could not be read."""

    pass


# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """Typed application settings."""

    log_level: str = "info"
    log_format: str = "text"
    default_count: int = 5
    output_format: str = "%Y-%m-%d %H:%M:%S"
    timezone: str | None = None

    def validate(self) -> list[str]:
        """Return a list of problems (empty if valid)."""
        errors: list[str] = []
        if str(self.log_level).lower() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        if self.log_format not in LOG_FORMATS:
            errors.append(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        if isinstance(self.default_count, bool) or not isinstance(self.default_count, int):
            errors.append("default_count must be an integer")
        elif self.default_count < 1:
            errors.append("default_count must be at least 1")
        if not self.output_format:
            errors.append("output_format must not be empty")
        if self.timezone is not None:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError, TypeError):
                errors.append(f"unknown timezone: {self.timezone}")
        return errors

    def zone(self) -> ZoneInfo | None:
        """Resolve :attr:`timezone`, or None for naive local time."""
        return ZoneInfo(self.timezone) if self.timezone else None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_SETTING_NAMES = frozenset(f.name for f in fields(Settings))


# =============================================================================
# Sources
# =============================================================================


def load_file(path: str | Path) -> dict[str, Any]:
    """Load a configuration file, detecting the format from its extension.

    Raises:
        ConfigSourceError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigSourceError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    try:
        content = path.read_text(encoding="utf-8")
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif suffix == ".json":
            data = json.loads(content)
        elif suffix == ".toml":
            data = tomllib.loads(content)
        else:
            raise ConfigSourceError(f"Unsupported file format: {suffix}")
    except (OSError, yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigSourceError(f"Failed to load config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigSourceError(f"Configuration file must contain a mapping: {path}")

    # Allow the settings to live under a top-level "croncalc" section.
    section = data.get("croncalc", data)
    if not isinstance(section, dict):
        raise ConfigSourceError(f"'croncalc' section must be a mapping: {path}")
    return section


def load_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``CRONCALC_*`` settings from an environment mapping."""
    result: dict[str, Any] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name not in _SETTING_NAMES:
            continue
        if name == "default_count":
            try:
                result[name] = int(value)
            except ValueError:
                result[name] = value
        elif name == "timezone":
            result[name] = value or None
        else:
            result[name] = value
    return result


def load_settings(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Load and validate settings.

    Args:
        path: Configuration file; defaults to ``$CRONCALC_CONFIG`` if set.
        env: Environment mapping (default: ``os.environ``).

    Returns:
        Validated Settings.

    Raises:
        ConfigSourceError: If the configuration file cannot be read.
        ConfigValidationError: If any value is invalid.
    """
    env = os.environ if env is None else env
    if path is None:
        path = env.get(f"{ENV_PREFIX}CONFIG") or None

    merged: dict[str, Any] = {}
    if path is not None:
        file_values = load_file(path)
        unknown = sorted(set(file_values) - _SETTING_NAMES)
        if unknown:
            raise ConfigValidationError([f"unknown setting: {name}" for name in unknown])
        merged.update(file_values)
        logger.debug("Loaded %d setting(s) from %s", len(file_values), path)

    merged.update(load_env(env))

    settings = Settings(**merged)
    errors = settings.validate()
    if errors:
        raise ConfigValidationError(errors)
    return settings
