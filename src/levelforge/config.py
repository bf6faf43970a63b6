"""Build configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from ruamel.yaml import YAML

CONFIG_FILENAME = "levelforge.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable, falling back to *default*."""
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


@dataclass
class BuildConfig:
    """Configuration for building and validating game content.

    Resolution order for each flag:
    1. Environment variable (e.g., LEVELFORGE_STRICT)
    2. Config file (``levelforge.yaml``)
    3. Default

    Attributes:
        strict: Raise on failed validation at finalize time instead of
            logging warnings.
        validate_on_finalize: Run authoring-boundary validation when a game
            is finalized.
        require_documented_items: Treat undocumented inventory items as
            failures rather than warnings.
        include_locked: Include not-yet-unlocked items as locked tiles in
            resolved inventories.
    """

    strict: bool = True
    validate_on_finalize: bool = True
    require_documented_items: bool = False
    include_locked: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BuildConfig:
        """Create config from dictionary.

        Args:
            data: Dictionary with the ``build`` and ``inventory`` sections.

        Returns:
            BuildConfig instance with environment overrides applied.
        """
        build_data = data.get("build", {}) or {}
        inventory_data = data.get("inventory", {}) or {}
        return cls(
            strict=_env_flag("LEVELFORGE_STRICT", bool(build_data.get("strict", True))),
            validate_on_finalize=bool(build_data.get("validate_on_finalize", True)),
            require_documented_items=bool(build_data.get("require_documented_items", False)),
            include_locked=_env_flag(
                "LEVELFORGE_INCLUDE_LOCKED", bool(inventory_data.get("include_locked", False))
            ),
        )

    @classmethod
    def from_env(cls) -> BuildConfig:
        """Defaults with environment overrides applied."""
        return cls.from_dict({})


class ConfigError(Exception):
    """Raised when build configuration cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load build config at {path}: {reason}")


def load_build_config(path: Path) -> BuildConfig:
    """Load build configuration from a YAML file or a directory holding one.

    A missing file yields the defaults (with environment overrides).

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    config_path = path / CONFIG_FILENAME if path.is_dir() else path

    if not config_path.exists():
        return BuildConfig.from_env()

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except Exception as e:
        raise ConfigError(config_path, str(e)) from e

    if data is None:
        return BuildConfig.from_env()
    if not isinstance(data, dict):
        raise ConfigError(config_path, "Top level must be a mapping")
    return BuildConfig.from_dict(data)
