"""Parsing of layer-switching and tap-dance keycode macros.

Keycodes are plain strings such as ``KC_A``, ``MO(1)`` or ``LT(@nav, KC_SPC)``.
The functions here only look at the string; resolving a target against a layout
is done by :mod:`layerkit.layout.layer_refs.index`.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias, assert_never

from layerkit.layout.models import NO_OP_KEYCODE, TRANSPARENT_KEYCODES


class LayerRefKind(str, Enum):
    """Kind of layer-switching macro."""

    MOMENTARY = "momentary"
    TAP_HOLD = "tap_hold"
    TOGGLE = "toggle"
    SWITCH_TO = "switch_to"
    TAP_TOGGLE = "tap_toggle"
    ONE_SHOT = "one_shot"
    DEFAULT_SET = "default_set"
    LAYER_MOD = "layer_mod"

    @property
    def macro_name(self) -> str:
        """Firmware macro name, e.g. ``MO``."""
        return _MACRO_NAMES[self]

    @property
    def display_name(self) -> str:
        """Human-readable label, e.g. ``Momentary (MO)``."""
        return f"{_describe_kind(self)} ({self.macro_name})"


_MACRO_NAMES: dict[LayerRefKind, str] = {
    LayerRefKind.MOMENTARY: "MO",
    LayerRefKind.TAP_HOLD: "LT",
    LayerRefKind.TOGGLE: "TG",
    LayerRefKind.SWITCH_TO: "TO",
    LayerRefKind.TAP_TOGGLE: "TT",
    LayerRefKind.ONE_SHOT: "OSL",
    LayerRefKind.DEFAULT_SET: "DF",
    LayerRefKind.LAYER_MOD: "LM",
}

if set(_MACRO_NAMES) != set(LayerRefKind):
    raise RuntimeError("Every LayerRefKind needs a macro name")

_KINDS_BY_MACRO: dict[str, LayerRefKind] = {
    macro: kind for kind, macro in _MACRO_NAMES.items()
}

# Macros taking a second argument after the layer target
_TWO_ARGUMENT_KINDS = frozenset({LayerRefKind.TAP_HOLD, LayerRefKind.LAYER_MOD})


def _describe_kind(kind: LayerRefKind) -> str:
    if kind is LayerRefKind.MOMENTARY:
        return "Momentary"
    elif kind is LayerRefKind.TAP_HOLD:
        return "Tap-Hold"
    elif kind is LayerRefKind.TOGGLE:
        return "Toggle"
    elif kind is LayerRefKind.SWITCH_TO:
        return "Switch"
    elif kind is LayerRefKind.TAP_TOGGLE:
        return "Tap-Toggle"
    elif kind is LayerRefKind.ONE_SHOT:
        return "One-Shot"
    elif kind is LayerRefKind.DEFAULT_SET:
        return "Default Set"
    elif kind is LayerRefKind.LAYER_MOD:
        return "Layer-Mod"
    else:
        assert_never(kind)


@dataclass(frozen=True)
class LayerIndexTarget:
    """Target given as a zero-based layer sequence index."""

    index: int

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class LayerIdTarget:
    """Target given as an ``@``-prefixed stable layer id."""

    identifier: str

    @property
    def layer_id(self) -> str:
        return self.identifier.removeprefix("@")

    def __str__(self) -> str:
        return self.identifier


LayerRefTarget: TypeAlias = LayerIndexTarget | LayerIdTarget

_MACRO_PATTERN = re.compile(r"^(?P<name>[A-Z]+)\((?P<args>.*)\)$", re.DOTALL)
_INDEX_PATTERN = re.compile(r"^[0-9]+$")
_IDENTIFIER_PATTERN = re.compile(r"^@[A-Za-z0-9_.-]+$")
_TAP_DANCE_PATTERN = re.compile(r"^TD\(\s*(?P<name>[A-Za-z0-9_]+)\s*\)$")


def is_transparent(keycode: str) -> bool:
    """Check if a keycode falls through to the layer below."""
    return keycode in TRANSPARENT_KEYCODES


def is_no_op(keycode: str) -> bool:
    return keycode == NO_OP_KEYCODE


def parse_layer_target(token: str) -> LayerRefTarget | None:
    """Parse a macro's layer argument into a target.

    Args:
        token: Argument text, surrounding whitespace allowed

    Returns:
        Index or identifier target, or None if the token is malformed
    """
    token = token.strip()
    if _INDEX_PATTERN.match(token):
        return LayerIndexTarget(int(token))
    if _IDENTIFIER_PATTERN.match(token):
        return LayerIdTarget(token)
    return None


def parse_layer_keycode(keycode: str) -> tuple[LayerRefTarget, LayerRefKind] | None:
    """Parse a layer-switching macro.

    Recognizes ``MO``, ``TG``, ``TO``, ``TT``, ``OSL`` and ``DF`` with a single
    layer argument, and ``LT``/``LM`` with a layer plus a keycode or modifier.
    Anything else, including malformed arguments or wrong arity, is not a layer
    reference. Never raises.

    Args:
        keycode: Keycode string to inspect

    Returns:
        ``(target, kind)`` or None when the keycode is not a layer macro
    """
    match = _MACRO_PATTERN.match(keycode.strip())
    if match is None:
        return None

    kind = _KINDS_BY_MACRO.get(match.group("name"))
    if kind is None:
        return None

    args = match.group("args")
    if kind in _TWO_ARGUMENT_KINDS:
        layer_arg, sep, rest = args.partition(",")
        if not sep or not rest.strip():
            return None
    else:
        layer_arg = args

    target = parse_layer_target(layer_arg)
    if target is None:
        return None
    return target, kind


def parse_tap_dance_keycode(keycode: str) -> str | None:
    """Extract the action name from a ``TD(name)`` keycode."""
    match = _TAP_DANCE_PATTERN.match(keycode.strip())
    if match is None:
        return None
    return match.group("name")
