"""Layer reference parsing, indexing and conflict detection."""

from .conflicts import (
    TransparencyConflict,
    check_transparency_conflict,
    find_transparency_conflicts,
    is_hold_like,
)
from .index import (
    LayerRef,
    LayerRefIndex,
    UnresolvedLayerRef,
    build_layer_id_lookup,
    build_layer_ref_index,
    find_unresolved_layer_refs,
    resolve_layer_target,
)
from .parser import (
    LayerIdTarget,
    LayerIndexTarget,
    LayerRefKind,
    LayerRefTarget,
    is_no_op,
    is_transparent,
    parse_layer_keycode,
    parse_layer_target,
    parse_tap_dance_keycode,
)


__all__ = [
    "LayerIdTarget",
    "LayerIndexTarget",
    "LayerRef",
    "LayerRefIndex",
    "LayerRefKind",
    "LayerRefTarget",
    "TransparencyConflict",
    "UnresolvedLayerRef",
    "build_layer_id_lookup",
    "build_layer_ref_index",
    "check_transparency_conflict",
    "find_transparency_conflicts",
    "find_unresolved_layer_refs",
    "is_hold_like",
    "is_no_op",
    "is_transparent",
    "parse_layer_keycode",
    "parse_layer_target",
    "parse_tap_dance_keycode",
    "resolve_layer_target",
]
