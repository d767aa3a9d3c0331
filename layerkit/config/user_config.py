"""
User configuration management for layerkit.

This module handles user-specific configuration settings with multiple sources:
1. Environment variables (highest precedence)
2. Command-line provided config file
3. Config file in current directory
4. User's XDG config directory
5. Default values (lowest precedence)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from layerkit.config.models import UserConfigData
from layerkit.core.errors import ConfigError


# Config loads before setup_logging configures structlog
logger = logging.getLogger(__name__)

ENV_PREFIX = "LAYERKIT_"


class UserConfig:
    """Manages user-specific configuration for layerkit using Pydantic Settings."""

    def __init__(self, cli_config_path: str | Path | None = None):
        """
        Initialize the user configuration handler.

        Args:
            cli_config_path: Optional config file path provided via CLI
        """
        self._config_sources: dict[str, str] = {}
        self._main_config_path: Path | None = None
        self._cli_config_path = (
            Path(cli_config_path).expanduser().resolve() if cli_config_path else None
        )
        self._config_paths = self._generate_config_paths()
        self._load_config()

    def _generate_config_paths(self) -> list[Path]:
        """Generate a list of config paths to search in order of precedence."""
        config_paths = []

        if self._cli_config_path is not None:
            config_paths.append(self._cli_config_path)

        config_paths.extend([Path.cwd() / "layerkit.yaml", Path.cwd() / ".layerkit.yml"])

        xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
        config_dir = (
            Path(xdg_config_home) / "layerkit"
            if xdg_config_home
            else Path.home() / ".config" / "layerkit"
        )
        config_paths.extend([config_dir / "config.yaml", config_dir / "config.yml"])
        return config_paths

    def _read_config_file(self, path: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    def _search_config_files(self) -> tuple[dict[str, Any], Path | None]:
        if self._cli_config_path is not None and not self._cli_config_path.exists():
            raise ConfigError(f"Config file not found: {self._cli_config_path}")

        for path in self._config_paths:
            if path.is_file():
                return self._read_config_file(path), path
        return {}, None

    def _load_config(self) -> None:
        """Load configuration from config files and environment variables."""
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Config search paths: %s", [str(p) for p in self._config_paths]
            )

        config_data, found_path = self._search_config_files()

        try:
            self._config = UserConfigData(**config_data)
        except ValidationError as e:
            source = found_path or "environment"
            raise ConfigError(f"Invalid configuration in {source}: {e}") from e

        if found_path:
            logger.debug("Loaded user configuration from %s", found_path)
            self._main_config_path = found_path
            for key in config_data:
                self._config_sources[key] = found_path.name
        else:
            logger.debug("No user configuration files found, using defaults")
            self._main_config_path = self._config_paths[-2]

        for key in os.environ:
            if key.upper().startswith(ENV_PREFIX):
                config_key = key[len(ENV_PREFIX) :].lower()
                self._config_sources[config_key] = "environment"

    @property
    def config(self) -> UserConfigData:
        return self._config

    @property
    def config_file_path(self) -> Path | None:
        return self._main_config_path

    def get_source(self, key: str) -> str:
        """Get where a configuration value came from."""
        return self._config_sources.get(key, "default")

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self._config, key, default)

    def get_log_level_int(self) -> int:
        """Get the configured log level as a logging module constant."""
        level: int = getattr(logging, self._config.log_level, logging.WARNING)
        return level


def create_user_config(cli_config_path: str | Path | None = None) -> UserConfig:
    """Create a UserConfig instance.

    Raises:
        ConfigError: If a config file is unreadable or invalid
    """
    return UserConfig(cli_config_path=cli_config_path)
