"""Cross-validation between tap-dance definitions and ``TD(name)`` keys."""

from collections.abc import Iterator
from dataclasses import dataclass

from layerkit.core.errors import TapDanceError
from layerkit.core.structlog_logger import get_struct_logger
from layerkit.layout.layer_refs.parser import parse_tap_dance_keycode
from layerkit.layout.models import Layout, Position


logger = get_struct_logger(__name__)

# Keycode written over removed tap-dance references
REPLACEMENT_KEYCODE = "KC_TRNS"


@dataclass(frozen=True)
class TapDanceReference:
    """A ``TD(name)`` key found in a layer."""

    name: str
    layer: int
    position: Position
    keycode: str

    def __str__(self) -> str:
        return f"TD({self.name}) at layer {self.layer}, position {self.position}"


def iter_tap_dance_references(layout: Layout) -> Iterator[TapDanceReference]:
    """Yield every tap-dance reference in layer order, then key order."""
    for layer_idx, layer in enumerate(layout.layers):
        for position, keycode in layer.iter_keycodes():
            name = parse_tap_dance_keycode(keycode)
            if name is not None:
                yield TapDanceReference(
                    name=name, layer=layer_idx, position=position, keycode=keycode
                )


def find_undefined_tap_dance_references(layout: Layout) -> list[TapDanceReference]:
    """Find references to tap-dance names with no definition."""
    defined = {action.name for action in layout.tap_dances}
    return [ref for ref in iter_tap_dance_references(layout) if ref.name not in defined]


def validate_tap_dances(layout: Layout) -> None:
    """Check that every ``TD(name)`` key has a matching definition.

    Raises:
        TapDanceError: Naming every undefined tap dance, in order of first use.
            ``missing`` holds the names and ``references`` every offending key.
    """
    undefined = find_undefined_tap_dance_references(layout)
    if not undefined:
        return

    missing = list(dict.fromkeys(ref.name for ref in undefined))
    details = "; ".join(str(ref) for ref in undefined)
    logger.debug("undefined_tap_dances", missing=missing, count=len(undefined))
    raise TapDanceError(
        f"Undefined tap dance(s) referenced: {', '.join(missing)} ({details})",
        missing=missing,
        references=undefined,
    )


def get_orphaned_tap_dances(layout: Layout) -> list[str]:
    """Get names of defined tap dances never referenced, in definition order."""
    used = {ref.name for ref in iter_tap_dance_references(layout)}
    return [action.name for action in layout.tap_dances if action.name not in used]


def find_tap_dance_references(layout: Layout, name: str) -> list[TapDanceReference]:
    """Find all keys referencing one tap dance."""
    return [ref for ref in iter_tap_dance_references(layout) if ref.name == name]


def remove_tap_dance_references(layout: Layout, name: str) -> int:
    """Replace every ``TD(name)`` key with a transparent key.

    Returns:
        Number of keys replaced
    """
    refs = find_tap_dance_references(layout, name)
    for ref in refs:
        layout.layers[ref.layer].set_key(ref.position, REPLACEMENT_KEYCODE)
    if refs:
        logger.debug("tap_dance_references_removed", name=name, count=len(refs))
    return len(refs)
