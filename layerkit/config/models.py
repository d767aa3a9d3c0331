"""User configuration models."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IconMode(str, Enum):
    """Icon display modes for CLI output."""

    EMOJI = "emoji"
    TEXT = "text"


class UserConfigData(BaseSettings):
    """User configuration data model with automatic environment variable support.

    Precedence order (highest to lowest):
    1. Environment variables (highest)
    2. Constructor arguments (file data)
    3. .env file
    4. Default values (lowest)
    """

    model_config = SettingsConfigDict(
        env_prefix="LAYERKIT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Return sources in priority order: env > init > dotenv > file_secret."""
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    # Logging
    log_level: str = "WARNING"

    # Validation
    strict: bool = Field(
        default=False,
        description="Treat validation warnings as errors by default",
    )
    keycode_catalog_path: Path | None = Field(
        default=None,
        description="Keycode catalog file replacing the bundled catalog",
    )

    # UI settings
    icon_mode: IconMode = Field(
        default=IconMode.EMOJI,
        description="Icon display mode: 'emoji' (default) or 'text'",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a recognized value."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v

    @field_validator("keycode_catalog_path", mode="before")
    @classmethod
    def expand_catalog_path(cls, v: Any) -> Any:
        if isinstance(v, str):
            if not v.strip():
                return None
            return Path(v.strip()).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v

    @field_validator("icon_mode", mode="before")
    @classmethod
    def normalize_icon_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v
