"""layerkit - keyboard firmware layout toolkit.

Parses layer-switching macros, indexes layer references, detects shadowed
hold positions and validates tap dances, keycodes and key positions.
"""

from layerkit.core.errors import (
    LayerkitError,
    LayoutError,
    LayoutLoadError,
    TapDanceError,
)
from layerkit.layout.models import Layer, Layout, Position, TapDanceAction
from layerkit.layout.validation import ValidationReport, validate


__all__ = [
    "Layer",
    "LayerkitError",
    "Layout",
    "LayoutError",
    "LayoutLoadError",
    "Position",
    "TapDanceAction",
    "TapDanceError",
    "ValidationReport",
    "validate",
]
