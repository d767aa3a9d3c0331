from .errors import (
    ConfigError,
    GeometryError,
    KeycodeCatalogError,
    LayerkitError,
    LayoutError,
    LayoutLoadError,
    TapDanceError,
)
from .logging import setup_logging


__all__ = [
    "setup_logging",
    "LayerkitError",
    "LayoutError",
    "LayoutLoadError",
    "TapDanceError",
    "KeycodeCatalogError",
    "GeometryError",
    "ConfigError",
]
