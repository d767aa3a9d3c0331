"""Reverse index of layer references.

Maps every layer to the macros elsewhere in the layout that activate it. The
index is a derived value: rebuild it after every edit instead of caching it.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TypeAlias, assert_never

from layerkit.core.structlog_logger import get_struct_logger
from layerkit.layout.models import Layer, Position

from .parser import (
    LayerIdTarget,
    LayerIndexTarget,
    LayerRefKind,
    LayerRefTarget,
    is_no_op,
    is_transparent,
    parse_layer_keycode,
)


logger = get_struct_logger(__name__)


@dataclass(frozen=True)
class LayerRef:
    """A resolved reference from a key on one layer to another layer."""

    from_layer: int
    to_layer: int
    position: Position
    kind: LayerRefKind
    keycode: str


@dataclass(frozen=True)
class UnresolvedLayerRef:
    """A layer macro whose target matches no layer in the layout."""

    from_layer: int
    position: Position
    kind: LayerRefKind
    keycode: str
    target: LayerRefTarget


LayerRefIndex: TypeAlias = dict[int, list[LayerRef]]


def build_layer_id_lookup(layers: Sequence[Layer]) -> dict[str, int]:
    """Map stable layer ids to sequence indices, first occurrence winning."""
    lookup: dict[str, int] = {}
    for idx, layer in enumerate(layers):
        lookup.setdefault(layer.id, idx)
    return lookup


def resolve_layer_target(
    target: LayerRefTarget,
    layers: Sequence[Layer],
    id_lookup: dict[str, int] | None = None,
) -> int | None:
    """Resolve a macro target to a layer sequence index.

    Args:
        target: Parsed macro target
        layers: Ordered layers of the layout
        id_lookup: Precomputed result of ``build_layer_id_lookup(layers)``

    Returns:
        Sequence index, or None when the target names no existing layer
    """
    if isinstance(target, LayerIndexTarget):
        if 0 <= target.index < len(layers):
            return target.index
        return None
    elif isinstance(target, LayerIdTarget):
        if id_lookup is None:
            id_lookup = build_layer_id_lookup(layers)
        return id_lookup.get(target.layer_id)
    else:
        assert_never(target)


def _iter_layer_macros(
    layers: Sequence[Layer],
) -> Iterator[tuple[int, Position, str, LayerRefTarget, LayerRefKind]]:
    for from_layer, layer in enumerate(layers):
        for position, keycode in layer.iter_keycodes():
            if is_transparent(keycode) or is_no_op(keycode):
                continue
            parsed = parse_layer_keycode(keycode)
            if parsed is None:
                continue
            target, kind = parsed
            yield from_layer, position, keycode, target, kind


def build_layer_ref_index(layers: Sequence[Layer]) -> LayerRefIndex:
    """Build the reverse index of layer references.

    Layers are scanned in order and keys in each layer's iteration order, so
    the entries of every list follow scan order. References whose target does
    not resolve are left out; duplicates are kept.

    Args:
        layers: Ordered layers of the layout

    Returns:
        Mapping from target layer index to the references pointing at it
    """
    id_lookup = build_layer_id_lookup(layers)
    index: LayerRefIndex = {}
    skipped = 0

    for from_layer, position, keycode, target, kind in _iter_layer_macros(layers):
        to_layer = resolve_layer_target(target, layers, id_lookup)
        if to_layer is None:
            skipped += 1
            continue
        index.setdefault(to_layer, []).append(
            LayerRef(
                from_layer=from_layer,
                to_layer=to_layer,
                position=position,
                kind=kind,
                keycode=keycode,
            )
        )

    logger.debug(
        "layer_ref_index_built",
        layer_count=len(layers),
        target_count=len(index),
        unresolved=skipped,
    )
    return index


def find_unresolved_layer_refs(layers: Sequence[Layer]) -> list[UnresolvedLayerRef]:
    """Find layer macros whose target matches no layer, in scan order."""
    id_lookup = build_layer_id_lookup(layers)
    return [
        UnresolvedLayerRef(
            from_layer=from_layer,
            position=position,
            kind=kind,
            keycode=keycode,
            target=target,
        )
        for from_layer, position, keycode, target, kind in _iter_layer_macros(layers)
        if resolve_layer_target(target, layers, id_lookup) is None
    ]
