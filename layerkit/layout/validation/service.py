"""Whole-layout validation combining keycode, position and reference checks."""

import re

from layerkit.core.errors import TapDanceError
from layerkit.core.structlog_logger import get_struct_logger
from layerkit.keycodes.models import KeycodeParam, ParamType
from layerkit.layout.layer_refs.index import find_unresolved_layer_refs
from layerkit.layout.layer_refs.parser import (
    parse_layer_keycode,
    parse_layer_target,
    parse_tap_dance_keycode,
)
from layerkit.layout.models import Layout, Position
from layerkit.layout.tap_dance.validation import (
    get_orphaned_tap_dances,
    validate_tap_dances,
)
from layerkit.protocols import KeyboardGeometryProtocol, KeycodeCatalogProtocol

from .models import (
    CheckName,
    IssueKind,
    Severity,
    ValidationLocation,
    ValidationMessage,
    ValidationReport,
)


logger = get_struct_logger(__name__)

_GENERIC_MACRO_PATTERN = re.compile(r"^(?P<name>[A-Z][A-Z0-9_]*)\((?P<args>.*)\)$", re.DOTALL)


def split_macro_args(args: str) -> list[str]:
    """Split macro arguments on top-level commas, trimming each one."""
    parts = []
    depth = 0
    current: list[str] = []
    for char in args:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return parts


def _is_valid_argument(
    arg: str, param: KeycodeParam, catalog: KeycodeCatalogProtocol
) -> bool:
    if not arg:
        return False
    if param.type == ParamType.LAYER:
        return parse_layer_target(arg) is not None
    if param.type == ParamType.MODIFIER:
        return all(catalog.is_known(part.strip()) for part in arg.split("|"))
    return is_valid_keycode(arg, catalog)


def is_valid_keycode(keycode: str, catalog: KeycodeCatalogProtocol) -> bool:
    """Check if a keycode is acceptable in a layout.

    A keycode is accepted when the catalog knows it, when it is a layer macro
    or ``TD(name)`` reference, or when it is a parametrized macro whose
    arguments match the catalog's parameter list.
    """
    if not keycode:
        return False
    if catalog.is_known(keycode):
        return True
    if parse_layer_keycode(keycode) is not None:
        return True
    if parse_tap_dance_keycode(keycode) is not None:
        return True

    match = _GENERIC_MACRO_PATTERN.match(keycode)
    if match is None:
        return False
    params = catalog.get_params(match.group("name"))
    if params is None:
        return False
    args = split_macro_args(match.group("args"))
    if len(args) != len(params):
        return False
    return all(
        _is_valid_argument(arg, param, catalog)
        for arg, param in zip(args, params, strict=True)
    )


class _ReportBuilder:
    """Collects messages and check outcomes while the checks run."""

    def __init__(self, strict: bool) -> None:
        self.strict = strict
        self.report = ValidationReport(strict=strict)

    def add(
        self,
        check: CheckName,
        kind: IssueKind,
        message: str,
        severity: Severity = Severity.ERROR,
        layer: int | None = None,
        position: Position | None = None,
    ) -> None:
        if severity == Severity.WARNING and self.strict:
            severity = Severity.ERROR
        location = None
        if layer is not None:
            location = ValidationLocation(layer=layer, position=position)
        self.report.messages.append(
            ValidationMessage(
                severity=severity,
                kind=kind,
                check=check,
                message=message,
                location=location,
            )
        )
        if severity == Severity.ERROR:
            self.report.checks.fail(check)

    def finish(self) -> ValidationReport:
        self.report.valid = not self.report.errors
        return self.report


def _check_keycodes(
    layout: Layout, catalog: KeycodeCatalogProtocol, builder: _ReportBuilder
) -> None:
    for layer_idx, layer in enumerate(layout.layers):
        for position, keycode in layer.iter_keycodes():
            if is_valid_keycode(keycode, catalog):
                continue
            if not keycode:
                message = "Empty keycode"
            else:
                message = f"Invalid keycode '{keycode}'"
            builder.add(
                CheckName.KEYCODES,
                IssueKind.INVALID_KEYCODE,
                message,
                layer=layer_idx,
                position=position,
            )


def _check_positions(
    layout: Layout, geometry: KeyboardGeometryProtocol, builder: _ReportBuilder
) -> None:
    for layer_idx, layer in enumerate(layout.layers):
        seen: set[Position] = set()
        for position, keycode in layer.iter_keycodes():
            if position in seen:
                builder.add(
                    CheckName.POSITIONS,
                    IssueKind.DUPLICATE_POSITION,
                    f"Duplicate key at position {position} ('{keycode}')",
                    layer=layer_idx,
                    position=position,
                )
            seen.add(position)
            if not geometry.contains(position):
                builder.add(
                    CheckName.POSITIONS,
                    IssueKind.OUT_OF_BOUNDS,
                    f"Position {position} does not exist on this keyboard",
                    layer=layer_idx,
                    position=position,
                )


def _check_layer_refs(layout: Layout, builder: _ReportBuilder) -> None:
    for ref in find_unresolved_layer_refs(layout.layers):
        builder.add(
            CheckName.LAYER_REFS,
            IssueKind.UNRESOLVED_LAYER_REF,
            f"'{ref.keycode}' references layer {ref.target}, which does not exist "
            f"(layout has {len(layout.layers)} layers)",
            layer=ref.from_layer,
            position=ref.position,
        )


def _check_tap_dances(layout: Layout, builder: _ReportBuilder) -> None:
    try:
        validate_tap_dances(layout)
    except TapDanceError as e:
        for ref in e.references:
            builder.add(
                CheckName.TAP_DANCES,
                IssueKind.UNDEFINED_TAP_DANCE,
                f"Tap dance '{ref.name}' is used but not defined",
                layer=ref.layer,
                position=ref.position,
            )

    for name in get_orphaned_tap_dances(layout):
        builder.add(
            CheckName.TAP_DANCES,
            IssueKind.ORPHANED_TAP_DANCE,
            f"Tap dance '{name}' is defined but never used in any layer",
            severity=Severity.WARNING,
        )


def validate(
    layout: Layout,
    geometry: KeyboardGeometryProtocol,
    keycode_catalog: KeycodeCatalogProtocol,
    strict: bool = False,
) -> ValidationReport:
    """Validate a layout and collect every finding into one report.

    Checks run in a fixed order (keycodes, positions, layer_refs, tap_dances)
    and all of them run even when an earlier one fails.

    Args:
        layout: Layout to validate; it is not modified
        geometry: Physical bounds of the target keyboard
        keycode_catalog: Lookup of known keycodes and macro parameters
        strict: Promote warnings to errors

    Returns:
        ValidationReport with ``valid`` set and per-check status
    """
    builder = _ReportBuilder(strict)
    _check_keycodes(layout, keycode_catalog, builder)
    _check_positions(layout, geometry, builder)
    _check_layer_refs(layout, builder)
    _check_tap_dances(layout, builder)
    report = builder.finish()

    logger.debug(
        "layout_validated",
        valid=report.valid,
        errors=len(report.errors),
        warnings=len(report.warnings),
        strict=strict,
    )
    return report
