"""Error hierarchy for layerkit."""

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from layerkit.layout.tap_dance.validation import TapDanceReference


class LayerkitError(Exception):
    """Base exception for all layerkit errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class LayoutError(LayerkitError):
    """Invalid layout structure or mutation."""


class LayoutLoadError(LayoutError):
    """Layout document could not be read or parsed at all."""


class TapDanceError(LayerkitError):
    """Tap-dance definition or reference problem."""

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        references: list["TapDanceReference"] | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, **context)
        self.missing = missing or []
        self.references = references or []


class KeycodeCatalogError(LayerkitError):
    """Keycode catalog could not be loaded."""


class GeometryError(LayerkitError):
    """Keyboard geometry could not be loaded."""


class ConfigError(LayerkitError):
    """Invalid user configuration."""


__all__ = [
    "ConfigError",
    "GeometryError",
    "KeycodeCatalogError",
    "LayerkitError",
    "LayoutError",
    "LayoutLoadError",
    "TapDanceError",
]
