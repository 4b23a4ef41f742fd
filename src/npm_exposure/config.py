"""Configuration loader for scans.

Reads settings from a JSON file (default: settings.json in the working
directory) and validates the structure. All keys are optional:

- ``knownBadList``: path to the known-bad list (.csv or .json)
- ``lockFiles``: lock file names to read beside each package.json; the order is
  also the merge order, later files winning for the same package
- ``exclude``: directory names skipped during discovery
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .discovery import EXCLUDES
from .parsers import LOCK_PARSERS

DEFAULT_CONFIG_PATH = Path("settings.json")
CONFIG_PATH_ENV_VAR = "NPM_EXPOSURE_CONFIG"
DEFAULT_LOCK_FILES: tuple[str, ...] = ("package-lock.json", "yarn.lock", "pnpm-lock.yaml")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    known_bad_list: Path | None = None
    lock_files: tuple[str, ...] = DEFAULT_LOCK_FILES
    exclude: frozenset[str] = field(default_factory=lambda: EXCLUDES)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a dictionary, validating every field."""
        known_bad_list = data.get("knownBadList")
        if known_bad_list is not None and (not isinstance(known_bad_list, str) or not known_bad_list):
            raise ConfigError("'knownBadList' must be a non-empty string")

        lock_files = data.get("lockFiles", list(DEFAULT_LOCK_FILES))
        if not isinstance(lock_files, list) or not lock_files:
            raise ConfigError("'lockFiles' must be a non-empty array")
        if any(not isinstance(name, str) for name in lock_files):
            raise ConfigError("'lockFiles' must contain only strings")
        unknown = [name for name in lock_files if name not in LOCK_PARSERS]
        if unknown:
            known_list = ", ".join(sorted(LOCK_PARSERS))
            raise ConfigError(
                f"Unknown lock file(s) in 'lockFiles': {', '.join(map(str, unknown))}. "
                f"Supported: {known_list}"
            )
        if len(set(lock_files)) != len(lock_files):
            raise ConfigError("'lockFiles' must not contain duplicates")

        exclude = data.get("exclude", sorted(EXCLUDES))
        if not isinstance(exclude, list) or any(not isinstance(n, str) or not n for n in exclude):
            raise ConfigError("'exclude' must be an array of non-empty strings")

        return cls(
            known_bad_list=Path(known_bad_list) if known_bad_list else None,
            lock_files=tuple(lock_files),
            exclude=frozenset(exclude),
        )


def _resolve_config_path(path: Path | str | None = None) -> tuple[Path, bool]:
    """Resolve the configuration file path and whether it was requested explicitly.

    Priority:
    1. Explicit path argument
    2. NPM_EXPOSURE_CONFIG environment variable
    3. Default path (settings.json in the working directory)
    """
    if path is not None:
        return Path(path), True

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path), True

    return DEFAULT_CONFIG_PATH, False


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings from a JSON file.

    Args:
        path: Optional path to the config file. If not provided, uses the
            NPM_EXPOSURE_CONFIG env var or falls back to settings.json.

    Returns:
        A Settings object. Defaults are used when no file was requested and the
        default settings.json does not exist.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path, explicit = _resolve_config_path(path)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return Settings()

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    return Settings.from_dict(data)
