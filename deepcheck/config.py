"""Package-wide defaults and their YAML loader."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ConfigError
from .utils import parse_duration

LOGGER = logging.getLogger(__name__)


@dataclass
class Settings:
    """Defaults used when constructing dumpers and comparison options."""
    dump_depth: int = 6
    dump_time_format: str = ""
    dump_duration_format: str = ""
    dump_indent: int = 0
    dump_tab_width: int = 2
    dump_flat_strings: int = 200
    parse_time_format: str = "%Y-%m-%dT%H:%M:%S.%f%z"
    recent: timedelta = field(default_factory=lambda: timedelta(seconds=10))


# Process-wide settings read by Dump() and default_options().
SETTINGS = Settings()


def _coerce(name: str, value: Any, current: Any) -> Any:
    """Validate a setting value against the type of its current value."""
    if isinstance(current, timedelta):
        if isinstance(value, timedelta):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return timedelta(seconds=value)
        if isinstance(value, str):
            try:
                return parse_duration(value)
            except ValueError as e:
                raise ConfigError(name, str(e)) from e
        raise ConfigError(name, f"expected a duration, got {type(value).__name__}")

    if isinstance(current, bool) or isinstance(value, bool):
        raise ConfigError(name, f"expected {type(current).__name__}, got {type(value).__name__}")

    if not isinstance(value, type(current)):
        raise ConfigError(name, f"expected {type(current).__name__}, got {type(value).__name__}")

    if isinstance(value, int) and value < 0:
        raise ConfigError(name, "must not be negative")

    return value


def settings_from_mapping(data: Optional[dict], base: Optional[Settings] = None) -> Settings:
    """
    Build settings from a mapping of setting names to values.

    Args:
        data: Mapping with any subset of the Settings field names
        base: Settings to start from (defaults to a fresh Settings)

    Returns:
        New Settings instance
    """
    base = base or Settings()
    if not data:
        return replace(base)
    if not isinstance(data, dict):
        raise ConfigError("<root>", "expected a mapping")

    known = {f.name for f in fields(Settings)}
    changes = {}
    for name, value in data.items():
        if name not in known:
            raise ConfigError(str(name), "unknown setting")
        changes[name] = _coerce(name, value, getattr(base, name))

    return replace(base, **changes)


def load_settings(path: str | Path) -> Settings:
    """
    Load settings from a YAML file.

    The file holds a flat mapping, for example:

        dump_depth: 10
        recent: 30s

    Args:
        path: Path to the YAML file

    Returns:
        New Settings instance
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, 'r') as f:
        content = f.read()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError("<root>", f"failed to parse {path}: {e}") from e

    LOGGER.debug("Loaded settings from: %s", path)
    return settings_from_mapping(data)


def configure(settings: Optional[Settings] = None, **changes: Any) -> Settings:
    """
    Update the process-wide settings in place.

    Args:
        settings: Settings to copy into the process-wide instance
        **changes: Individual settings to change

    Returns:
        The process-wide settings
    """
    new = settings_from_mapping(changes, base=settings or SETTINGS)
    for f in fields(Settings):
        setattr(SETTINGS, f.name, getattr(new, f.name))
    return SETTINGS
