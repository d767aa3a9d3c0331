"""Layout models for keyboard layouts."""

import logging
import re
import uuid
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any, TypeAlias

from pydantic import ConfigDict, Field, field_validator, model_validator

from layerkit.core.errors import LayoutError, TapDanceError
from layerkit.models.base import LayerkitBaseModel


logger = logging.getLogger(__name__)

# Type aliases for common layout values
LayerIndex: TypeAlias = int
Keycode: TypeAlias = str

# Firmware supports 8 (default), 16 or 32 layers depending on LAYER_STATE_*BIT
MAX_LAYER_COUNT = 32
MAX_LAYER_NAME_LENGTH = 50
MAX_LAYOUT_NAME_LENGTH = 100

TRANSPARENT_KEYCODES = frozenset({"KC_TRNS", "KC_TRANSPARENT"})
NO_OP_KEYCODE = "KC_NO"

TAP_DANCE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
_TAG_PATTERN = re.compile(r"^[a-z0-9-]+$")


def generate_layer_id() -> str:
    """Generate a new stable layer identifier."""
    return str(uuid.uuid4())


class Position(LayerkitBaseModel):
    """Physical key slot identified by row and column."""

    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=0)
    col: int = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def convert_sequence(cls, data: Any) -> Any:
        """Accept ``[row, col]`` pairs in addition to mappings."""
        if isinstance(data, list | tuple):
            if len(data) != 2:
                raise ValueError(f"Position must have exactly 2 values, got {data!r}")
            return {"row": data[0], "col": data[1]}
        return data

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


class KeyDefinition(LayerkitBaseModel):
    """Model for a single key assignment on a layer."""

    position: Position
    keycode: Keycode
    label: str | None = None
    description: str | None = None

    def is_transparent(self) -> bool:
        """Check if the key falls through to lower layers."""
        return self.keycode in TRANSPARENT_KEYCODES

    def is_no_op(self) -> bool:
        """Check if the key does nothing."""
        return self.keycode == NO_OP_KEYCODE


class Layer(LayerkitBaseModel):
    """Model for keyboard layers.

    The layer's sequence index is its position inside ``Layout.layers`` and is
    never stored; ``id`` is the stable identifier referenced by ``@id`` macros.
    """

    id: str = Field(default_factory=generate_layer_id)
    name: str
    color: str = "#ffffff"
    keys: list[KeyDefinition] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate layer id is non-empty and not '@'-prefixed."""
        if not v:
            raise ValueError("Layer id cannot be empty")
        if v.startswith("@"):
            raise ValueError(f"Layer id must not start with '@': {v}")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate layer name length."""
        if not v:
            raise ValueError("Layer name cannot be empty")
        if len(v) > MAX_LAYER_NAME_LENGTH:
            raise ValueError(
                f"Layer name '{v}' exceeds maximum length of "
                f"{MAX_LAYER_NAME_LENGTH} characters (got {len(v)})"
            )
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """Validate color is a #rrggbb hex string."""
        if not _COLOR_PATTERN.match(v):
            raise ValueError(f"Invalid layer color: {v}. Expected #rrggbb")
        return v.lower()

    def get_key(self, position: Position) -> KeyDefinition | None:
        """Get the key at a position, if the layer defines one."""
        for key in self.keys:
            if key.position == position:
                return key
        return None

    def set_key(self, position: Position, keycode: Keycode) -> None:
        """Assign a keycode to a position, adding the key if missing."""
        key = self.get_key(position)
        if key is None:
            self.keys.append(KeyDefinition(position=position, keycode=keycode))
        else:
            key.keycode = keycode

    def remove_key(self, position: Position) -> bool:
        """Remove the key at a position. Returns True if a key was removed."""
        for idx, key in enumerate(self.keys):
            if key.position == position:
                del self.keys[idx]
                return True
        return False

    def iter_keycodes(self) -> Iterator[tuple[Position, Keycode]]:
        """Iterate ``(position, keycode)`` pairs in the layer's own order."""
        for key in self.keys:
            yield key.position, key.keycode


class TapDanceAction(LayerkitBaseModel):
    """Model for tap-dance action definitions."""

    name: str
    single_tap: Keycode
    double_tap: Keycode | None = None
    hold: Keycode | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate tap-dance name is a C identifier fragment."""
        if not TAP_DANCE_NAME_PATTERN.match(v):
            raise ValueError(
                f"Invalid tap dance name: '{v}'. "
                "Use only letters, digits and underscores"
            )
        return v

    @field_validator("single_tap")
    @classmethod
    def validate_single_tap(cls, v: str) -> str:
        """Validate the single-tap keycode is present."""
        if not v:
            raise ValueError("Tap dance single-tap keycode cannot be empty")
        return v

    @field_validator("double_tap", "hold")
    @classmethod
    def validate_optional_keycode(cls, v: str | None) -> str | None:
        """Validate optional keycodes are non-empty when given."""
        if v is not None and not v:
            raise ValueError("Tap dance keycodes cannot be empty strings")
        return v

    def is_two_way(self) -> bool:
        return self.double_tap is not None and self.hold is None

    def is_three_way(self) -> bool:
        return self.double_tap is not None and self.hold is not None

    @property
    def kind(self) -> str:
        """Tap-dance type label: single, two_way or three_way."""
        if self.is_three_way():
            return "three_way"
        if self.is_two_way():
            return "two_way"
        return "single"


class LayoutMetadata(LayerkitBaseModel):
    """Pydantic model for layout metadata fields."""

    name: str = "Untitled Layout"
    description: str = ""
    author: str = ""
    keyboard: str | None = None
    layout_variant: str | None = None
    tags: list[str] = Field(default_factory=list)
    version: str = "1.0"
    created: datetime = Field(default_factory=lambda: datetime.now(UTC))
    modified: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate layout name length."""
        if not v:
            raise ValueError("Layout name cannot be empty")
        if len(v) > MAX_LAYOUT_NAME_LENGTH:
            raise ValueError(
                f"Layout name '{v}' exceeds maximum length of "
                f"{MAX_LAYOUT_NAME_LENGTH} characters (got {len(v)})"
            )
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Validate tags are lowercase with hyphens."""
        for tag in v:
            if not _TAG_PATTERN.match(tag):
                raise ValueError(
                    f"Tag '{tag}' must be lowercase with hyphens and "
                    "alphanumeric characters only"
                )
        return v

    def touch(self) -> None:
        """Update the modification timestamp."""
        self.modified = datetime.now(UTC)


class Layout(LayerkitBaseModel):
    """Complete keyboard layout: ordered layers plus tap-dance definitions.

    The layout is the sole owner of its layers and tap dances; the mutation
    methods below are the only supported way to add or remove them.
    """

    metadata: LayoutMetadata = Field(default_factory=LayoutMetadata)
    layers: list[Layer] = Field(default_factory=list)
    tap_dances: list[TapDanceAction] = Field(default_factory=list)

    @field_validator("layers")
    @classmethod
    def validate_layers(cls, v: list[Layer]) -> list[Layer]:
        """Validate layer count and identifier uniqueness."""
        if len(v) > MAX_LAYER_COUNT:
            raise ValueError(
                f"Layout has {len(v)} layers, maximum is {MAX_LAYER_COUNT}"
            )
        seen: set[str] = set()
        for layer in v:
            if layer.id in seen:
                raise ValueError(f"Duplicate layer id: {layer.id}")
            seen.add(layer.id)
        return v

    @field_validator("tap_dances")
    @classmethod
    def validate_tap_dance_names(
        cls, v: list[TapDanceAction]
    ) -> list[TapDanceAction]:
        """Validate tap-dance names are unique."""
        seen: set[str] = set()
        for action in v:
            if action.name in seen:
                raise ValueError(f"Duplicate tap dance name: {action.name}")
            seen.add(action.name)
        return v

    # Layer operations

    @property
    def layer_names(self) -> list[str]:
        return [layer.name for layer in self.layers]

    def get_layer(self, index: LayerIndex) -> Layer | None:
        """Get a layer by sequence index."""
        if 0 <= index < len(self.layers):
            return self.layers[index]
        return None

    def find_layer_index(self, identifier: str) -> LayerIndex | None:
        """Find a layer's sequence index by stable id (with or without '@')."""
        layer_id = identifier.removeprefix("@")
        for idx, layer in enumerate(self.layers):
            if layer.id == layer_id:
                return idx
        return None

    def find_layer_index_by_name(self, name: str) -> LayerIndex | None:
        """Find the first layer with the given display name."""
        for idx, layer in enumerate(self.layers):
            if layer.name == name:
                return idx
        return None

    def add_layer(self, layer: Layer, position: LayerIndex | None = None) -> int:
        """Insert a layer, appending when no position is given.

        Returns:
            The sequence index the layer was inserted at

        Raises:
            LayoutError: If the layer limit is reached or the id is taken
        """
        if len(self.layers) >= MAX_LAYER_COUNT:
            raise LayoutError(
                f"Layout already has the maximum of {MAX_LAYER_COUNT} layers"
            )
        if self.find_layer_index(layer.id) is not None:
            raise LayoutError(f"Layer id '{layer.id}' already exists")

        if position is None or position >= len(self.layers):
            position = len(self.layers)
        elif position < 0:
            position = max(0, len(self.layers) + position)

        self.layers.insert(position, layer)
        self.metadata.touch()
        logger.debug("Added layer '%s' at index %d", layer.name, position)
        return position

    def remove_layer(self, index: LayerIndex) -> Layer:
        """Remove and return the layer at a sequence index.

        Raises:
            LayoutError: If the index is out of range
        """
        if not 0 <= index < len(self.layers):
            raise LayoutError(
                f"Layer index {index} out of range (0-{len(self.layers) - 1})"
            )
        layer = self.layers.pop(index)
        self.metadata.touch()
        return layer

    def move_layer(self, from_index: LayerIndex, to_index: LayerIndex) -> int:
        """Move a layer to a new sequence index, clamping the destination.

        Returns:
            The final sequence index of the moved layer
        """
        layer = self.remove_layer(from_index)
        if to_index < 0:
            to_index = max(0, len(self.layers) + 1 + to_index)
        to_index = min(to_index, len(self.layers))
        self.layers.insert(to_index, layer)
        return to_index

    # Tap-dance operations

    def get_tap_dance(self, name: str) -> TapDanceAction | None:
        for action in self.tap_dances:
            if action.name == name:
                return action
        return None

    def add_tap_dance(self, action: TapDanceAction) -> None:
        """Add a tap-dance definition.

        Raises:
            TapDanceError: If a definition with the same name exists
        """
        if self.get_tap_dance(action.name) is not None:
            raise TapDanceError(
                f"Tap dance with name '{action.name}' already exists",
                name=action.name,
            )
        self.tap_dances.append(action)
        self.metadata.touch()

    def remove_tap_dance(self, name: str) -> TapDanceAction:
        """Remove and return a tap-dance definition.

        Raises:
            TapDanceError: If no definition has that name
        """
        for idx, action in enumerate(self.tap_dances):
            if action.name == name:
                del self.tap_dances[idx]
                self.metadata.touch()
                return action
        raise TapDanceError(f"Tap dance '{name}' not found", name=name)

    def snapshot(self) -> "Layout":
        """Return an independent deep copy for read-only validation passes."""
        return self.model_copy(deep=True)


__all__ = [
    "MAX_LAYER_COUNT",
    "NO_OP_KEYCODE",
    "TAP_DANCE_NAME_PATTERN",
    "TRANSPARENT_KEYCODES",
    "KeyDefinition",
    "Keycode",
    "Layer",
    "LayerIndex",
    "Layout",
    "LayoutMetadata",
    "Position",
    "TapDanceAction",
    "generate_layer_id",
]
