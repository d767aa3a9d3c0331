"""Tap-dance definition and reference checks."""

from .validation import (
    REPLACEMENT_KEYCODE,
    TapDanceReference,
    find_tap_dance_references,
    find_undefined_tap_dance_references,
    get_orphaned_tap_dances,
    iter_tap_dance_references,
    remove_tap_dance_references,
    validate_tap_dances,
)


__all__ = [
    "REPLACEMENT_KEYCODE",
    "TapDanceReference",
    "find_tap_dance_references",
    "find_undefined_tap_dance_references",
    "get_orphaned_tap_dances",
    "iter_tap_dance_references",
    "remove_tap_dance_references",
    "validate_tap_dances",
]
