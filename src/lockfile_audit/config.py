"""Configuration loader for lockfile scanning.

Reads settings from a JSON file and validates the structure. All keys are
optional:

- ``lockfiles``: file names to pick up during discovery (default
  ``["yarn.lock"]``); every name must have a registered parser.
- ``exclude``: directory names skipped during discovery.
- ``ecosystem``: tag attached to every extracted package descriptor; must be
  one of the ecosystems the package descriptor model accepts.

When no file is given and ``LOCKFILE_AUDIT_CONFIG`` is unset the built-in
defaults are used.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .models.package_descriptor import ECOSYSTEM_NPM, VALID_ECOSYSTEMS

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "LOCKFILE_AUDIT_CONFIG"

DEFAULT_LOCKFILES = ("yarn.lock",)
DEFAULT_EXCLUDES = ("node_modules", ".git", ".venv")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    lockfiles: tuple[str, ...] = field(default=DEFAULT_LOCKFILES)
    exclude: tuple[str, ...] = field(default=DEFAULT_EXCLUDES)
    ecosystem: str = ECOSYSTEM_NPM

    def __post_init__(self) -> None:
        if self.ecosystem not in VALID_ECOSYSTEMS:
            known = ", ".join(sorted(VALID_ECOSYSTEMS))
            raise ConfigError(
                f"Unknown ecosystem '{self.ecosystem}'. Supported ecosystems: {known}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a dictionary, validating each field."""
        lockfiles = _string_list(data, "lockfiles", DEFAULT_LOCKFILES)
        if not lockfiles:
            raise ConfigError("'lockfiles' must contain at least one file name")

        exclude = _string_list(data, "exclude", DEFAULT_EXCLUDES)

        ecosystem = data.get("ecosystem", ECOSYSTEM_NPM)
        if not isinstance(ecosystem, str) or not ecosystem:
            raise ConfigError("'ecosystem' must be a non-empty string")

        return cls(lockfiles=lockfiles, exclude=exclude, ecosystem=ecosystem)


def _string_list(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be an array")
    for index, item in enumerate(value):
        if not isinstance(item, str) or not item:
            raise ConfigError(f"'{key}' entry at index {index} must be a non-empty string")
    return tuple(value)


def _resolve_config_path(path: Path | str | None = None) -> Path | None:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. LOCKFILE_AUDIT_CONFIG environment variable
    3. None (use defaults)
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return None


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings from a JSON file.

    Args:
        path: Optional path to the config file. If not provided, uses the
            LOCKFILE_AUDIT_CONFIG env var or falls back to the defaults.

    Returns:
        A validated Settings object.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path = _resolve_config_path(path)
    if config_path is None:
        return Settings()

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

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

    settings = Settings.from_dict(data)
    logger.debug("Loaded settings from %s", config_path)
    return settings


def validate_lockfile_names(settings: Settings, known: list[str]) -> None:
    """Validate that every configured lockfile name has a registered parser.

    Raises:
        ConfigError: If any configured name is not registered.
    """
    unknown = [name for name in settings.lockfiles if name not in known]
    if unknown:
        known_list = ", ".join(sorted(known))
        unknown_list = ", ".join(sorted(unknown))
        raise ConfigError(
            f"Unsupported lockfile name(s): {unknown_list}. " f"Supported lockfiles: {known_list}"
        )
