"""Detection of keys that shadow a hold-activated layer's fall-through."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import assert_never

from layerkit.layout.models import Layer, Position

from .index import LayerRef, LayerRefIndex, build_layer_ref_index
from .parser import LayerRefKind, is_transparent


def is_hold_like(kind: LayerRefKind) -> bool:
    """Check if a macro activates its layer only while the key is held.

    While such a key is held, the same physical position on the target layer
    is what the finger is resting on, so it should normally be transparent.
    """
    if kind in (
        LayerRefKind.MOMENTARY,
        LayerRefKind.TAP_HOLD,
        LayerRefKind.TAP_TOGGLE,
        LayerRefKind.LAYER_MOD,
    ):
        return True
    elif kind in (
        LayerRefKind.TOGGLE,
        LayerRefKind.SWITCH_TO,
        LayerRefKind.ONE_SHOT,
        LayerRefKind.DEFAULT_SET,
    ):
        return False
    else:
        assert_never(kind)


@dataclass(frozen=True)
class TransparencyConflict:
    """An existing key on a hold-exposed position that is not transparent."""

    layer: int
    position: Position
    keycode: str
    references: tuple[LayerRef, ...]
    message: str


def _hold_refs_at(
    target_layer: int, position: Position, index: LayerRefIndex
) -> list[LayerRef]:
    return [
        ref
        for ref in index.get(target_layer, [])
        if ref.position == position and is_hold_like(ref.kind)
    ]


def _format_conflict(
    target_layer: int,
    position: Position,
    refs: list[LayerRef],
    layer_names: Sequence[str] | None,
) -> str:
    # Group kinds by source layer, keeping first-seen order for both
    by_source: dict[int, list[LayerRefKind]] = {}
    for ref in refs:
        kinds = by_source.setdefault(ref.from_layer, [])
        if ref.kind not in kinds:
            kinds.append(ref.kind)

    sources = []
    for from_layer, kinds in by_source.items():
        label = f"layer {from_layer}"
        if layer_names is not None and 0 <= from_layer < len(layer_names):
            label += f" '{layer_names[from_layer]}'"
        kind_text = ", ".join(kind.display_name for kind in kinds)
        sources.append(f"{label} [{kind_text}]")

    return (
        f"Position {position} on layer {target_layer} is reached by holding a key "
        f"from {'; '.join(sources)}. Pressing it while held will trigger this key "
        "instead of the key underneath. Consider using KC_TRNS"
    )


def check_transparency_conflict(
    target_layer: int,
    position: Position,
    new_keycode: str,
    index: LayerRefIndex,
    layer_names: Sequence[str] | None = None,
) -> str | None:
    """Warn when assigning a keycode would shadow a hold-exposed position.

    Args:
        target_layer: Layer receiving the new keycode
        position: Position being edited
        new_keycode: Keycode about to be assigned
        index: Reference index of the layout
        layer_names: Optional layer display names for the message

    Returns:
        Warning text naming every contributing source layer, or None
    """
    if is_transparent(new_keycode):
        return None

    refs = _hold_refs_at(target_layer, position, index)
    if not refs:
        return None
    return _format_conflict(target_layer, position, refs, layer_names)


def find_transparency_conflicts(
    layers: Sequence[Layer], index: LayerRefIndex | None = None
) -> list[TransparencyConflict]:
    """Find every existing key that shadows a hold-exposed position.

    Args:
        layers: Ordered layers of the layout
        index: Prebuilt reference index, built from ``layers`` when omitted

    Returns:
        Conflicts in layer order, then key order
    """
    if index is None:
        index = build_layer_ref_index(layers)
    names = [layer.name for layer in layers]

    conflicts = []
    for layer_idx, layer in enumerate(layers):
        if layer_idx not in index:
            continue
        for position, keycode in layer.iter_keycodes():
            message = check_transparency_conflict(
                layer_idx, position, keycode, index, names
            )
            if message is None:
                continue
            conflicts.append(
                TransparencyConflict(
                    layer=layer_idx,
                    position=position,
                    keycode=keycode,
                    references=tuple(_hold_refs_at(layer_idx, position, index)),
                    message=message,
                )
            )
    return conflicts
