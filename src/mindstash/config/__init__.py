"""Configuration management for mindstash.

Settings live in ``~/.mindstash/config.yaml``. Effective values are layered as
defaults, then the file, then ``MINDSTASH__SECTION__KEY`` environment variables,
then dotted-key overrides from the command line.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import (
    CLIOptions,
    IngestionOptions,
    LoggingSettings,
    MindstashConfig,
    QueryDefaults,
    TraversalOptions,
)
from .resolver import overrides_from_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.mindstash/config.yaml")
_HEADER_LINES = (
    "# mindstash configuration file",
    "# Edit with `mindstash config edit` or change one key with `mindstash config set`.",
)


class ConfigManager:
    """Read, layer and write the mindstash configuration file."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self.env = os.environ if env is None else env

    def ensure_exists(self) -> Path:
        """Write a file holding the defaults unless one is already present."""
        if not self.config_path.exists():
            self.save(MindstashConfig().model_dump(mode="python"))
        return self.config_path

    def read_text(self) -> str:
        """Return the raw file contents, or an empty string when absent."""
        try:
            return self.config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def read_overrides(self) -> dict[str, Any]:
        """Parse the file into a mapping of overrides.

        Raises:
            ConfigError: If the YAML is malformed or not a mapping.
        """
        try:
            data = yaml.safe_load(self.read_text())
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {self.config_path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping at the top level.")
        return data

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> MindstashConfig:
        """Return the validated effective configuration.

        Args:
            cli_overrides: Dotted-key overrides supplied on the command line.
            include_env: Whether ``MINDSTASH__`` environment variables apply.
            ensure_file: Create a default file first when none exists.
            env_overrides: Environment mapping used instead of the manager's own.

        Raises:
            ConfigError: If the file cannot be parsed or values are invalid.
        """
        if ensure_file:
            self.ensure_exists()
        env_layer = None
        if include_env:
            env_layer = overrides_from_env(self.env if env_overrides is None else env_overrides)
        return resolve_with_precedence(
            defaults=MindstashConfig(),
            file_overrides=self.read_overrides(),
            env_overrides=env_layer,
            cli_overrides=cli_overrides,
        )

    def save(self, data: Mapping[str, Any]) -> None:
        """Write ``data`` below a generated header and timestamp."""
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        header = "\n".join((*_HEADER_LINES, f"# Last updated: {stamp}"))
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(
            header + "\n" + yaml.safe_dump(dict(data), sort_keys=False), encoding="utf-8"
        )


__all__ = [
    "CLIOptions",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "IngestionOptions",
    "LoggingSettings",
    "MindstashConfig",
    "QueryDefaults",
    "TraversalOptions",
    "resolve_with_precedence",
]
