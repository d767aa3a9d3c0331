"""Physical keyboard geometry models."""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import Field, ValidationError, model_validator

from layerkit.core.errors import GeometryError
from layerkit.layout.models import Position
from layerkit.models.base import LayerkitBaseModel


if TYPE_CHECKING:
    from layerkit.layout.models import Layout


logger = logging.getLogger(__name__)


class KeyGeometry(LayerkitBaseModel):
    """A single physical key: matrix slot plus placement in keyboard units."""

    row: int = Field(ge=0)
    col: int = Field(ge=0)
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=1.0, gt=0)
    height: float = Field(default=1.0, gt=0)
    rotation: float = 0.0

    @property
    def position(self) -> Position:
        return Position(row=self.row, col=self.col)


class KeyboardGeometry(LayerkitBaseModel):
    """Keyboard bounds implementing ``KeyboardGeometryProtocol``.

    When ``keys`` is populated only the listed positions exist, which covers
    split and column-staggered boards with holes in their matrix. Otherwise
    every slot inside ``matrix_rows`` x ``matrix_cols`` is accepted.
    """

    keyboard_name: str = "unknown"
    layout_name: str = "LAYOUT"
    matrix_rows: int = Field(default=0, ge=0)
    matrix_cols: int = Field(default=0, ge=0)
    keys: list[KeyGeometry] = Field(default_factory=list)

    @model_validator(mode="after")
    def derive_matrix_size(self) -> "KeyboardGeometry":
        """Fill in matrix dimensions from the key list when not given."""
        if self.keys and not (self.matrix_rows and self.matrix_cols):
            # Bypass validate_assignment re-entering this validator
            object.__setattr__(
                self, "matrix_rows", max(key.row for key in self.keys) + 1
            )
            object.__setattr__(
                self, "matrix_cols", max(key.col for key in self.keys) + 1
            )
        return self

    @property
    def key_count(self) -> int:
        if self.keys:
            return len(self.keys)
        return self.matrix_rows * self.matrix_cols

    def contains(self, position: Position) -> bool:
        """Check if a position exists on this keyboard."""
        if self.keys:
            return any(
                key.row == position.row and key.col == position.col
                for key in self.keys
            )
        return position.row < self.matrix_rows and position.col < self.matrix_cols

    @classmethod
    def from_layout(cls, layout: "Layout") -> "KeyboardGeometry":
        """Derive matrix bounds from every key position in a layout.

        Used when no geometry file is supplied. Layers may be sparse, so the
        board is taken to cover the union of positions across all layers.
        """
        positions = [key.position for layer in layout.layers for key in layer.keys]
        if not positions:
            return cls(keyboard_name=layout.metadata.keyboard or "unknown")

        geometry = cls(
            keyboard_name=layout.metadata.keyboard or "unknown",
            layout_name=layout.metadata.layout_variant or "LAYOUT",
            matrix_rows=max(p.row for p in positions) + 1,
            matrix_cols=max(p.col for p in positions) + 1,
        )
        logger.debug(
            "Derived %dx%d geometry from %d layers",
            geometry.matrix_rows,
            geometry.matrix_cols,
            len(layout.layers),
        )
        return geometry


def load_geometry_file(path: Path) -> KeyboardGeometry:
    """Load keyboard geometry from a YAML or JSON file.

    Raises:
        GeometryError: If the file cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise GeometryError(f"Cannot read geometry file {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise GeometryError(f"Failed to parse geometry file {path}: {e}") from e

    if not isinstance(data, dict):
        raise GeometryError(f"Geometry file {path} must contain a mapping")

    try:
        return KeyboardGeometry.model_validate(data)
    except ValidationError as e:
        raise GeometryError(f"Invalid geometry file {path}: {e}") from e
