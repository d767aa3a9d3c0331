"""Layout domain: models, layer references, tap dances and validation."""

from layerkit.layout.models import (
    KeyDefinition,
    Layer,
    Layout,
    LayoutMetadata,
    Position,
    TapDanceAction,
)


__all__ = [
    "KeyDefinition",
    "Layer",
    "Layout",
    "LayoutMetadata",
    "Position",
    "TapDanceAction",
]
