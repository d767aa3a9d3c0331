"""Validation report models."""

from enum import Enum
from typing import Any

from pydantic import Field

from layerkit.layout.models import Position
from layerkit.models.base import LayerkitBaseModel


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class CheckName(str, Enum):
    """Validation checks, in the order they run."""

    KEYCODES = "keycodes"
    POSITIONS = "positions"
    LAYER_REFS = "layer_refs"
    TAP_DANCES = "tap_dances"


class CheckStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"


class IssueKind(str, Enum):
    """Category of a validation finding."""

    INVALID_KEYCODE = "invalid_keycode"
    OUT_OF_BOUNDS = "out_of_bounds"
    DUPLICATE_POSITION = "duplicate_position"
    UNRESOLVED_LAYER_REF = "unresolved_layer_ref"
    UNDEFINED_TAP_DANCE = "undefined_tap_dance"
    ORPHANED_TAP_DANCE = "orphaned_tap_dance"


class ValidationLocation(LayerkitBaseModel):
    """Where a finding was made; position is absent for layer-wide issues."""

    layer: int
    position: Position | None = None

    def __str__(self) -> str:
        if self.position is None:
            return f"Layer {self.layer}"
        return f"Layer {self.layer} {self.position}"


class ValidationMessage(LayerkitBaseModel):
    """A single validation finding."""

    severity: Severity
    kind: IssueKind
    check: CheckName
    message: str
    location: ValidationLocation | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        # Check name is reported through the checks table
        data.pop("check", None)
        return data


class ValidationChecks(LayerkitBaseModel):
    """Per-check pass/fail status."""

    keycodes: CheckStatus = CheckStatus.PASSED
    positions: CheckStatus = CheckStatus.PASSED
    layer_refs: CheckStatus = CheckStatus.PASSED
    tap_dances: CheckStatus = CheckStatus.PASSED

    def fail(self, check: CheckName) -> None:
        setattr(self, CheckName(check).value, CheckStatus.FAILED)

    def items(self) -> list[tuple[str, str]]:
        return [(name.value, getattr(self, name.value)) for name in CheckName]


_CHECK_LABELS = {
    CheckName.KEYCODES: "Keycodes",
    CheckName.POSITIONS: "Positions",
    CheckName.LAYER_REFS: "Layer refs",
    CheckName.TAP_DANCES: "Tap dances",
}


class ReportIcons:
    """Status glyphs for plain-text reports, keyed like the CLI ``Icons``."""

    PASSED = "✓"
    FAILED = "✗"
    ERROR = "✗"
    WARNING = "⚠"

    _TEXT_FALLBACKS = {
        "PASSED": "[OK]",
        "FAILED": "[FAIL]",
        "ERROR": "[ERROR]",
        "WARNING": "[WARN]",
    }

    @classmethod
    def get_icon(cls, icon_name: str, icon_mode: str = "emoji") -> str:
        """Get a glyph by status or severity value; unknown modes use emoji."""
        key = icon_name.upper()
        if icon_mode == "text":
            return cls._TEXT_FALLBACKS.get(key, f"[{key}]")
        return str(getattr(cls, key, ""))


class ValidationReport(LayerkitBaseModel):
    """Outcome of validating a whole layout.

    ``messages`` keeps errors and warnings together in the order they were
    found. ``to_dict`` emits them under ``errors`` with a severity each.
    """

    valid: bool = True
    strict: bool = False
    messages: list[ValidationMessage] = Field(default_factory=list)
    checks: ValidationChecks = Field(default_factory=ValidationChecks)

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    def to_dict(self) -> dict[str, Any]:
        """Machine-readable report used by ``validate --json``."""
        return {
            "valid": self.valid,
            "errors": [message.to_dict() for message in self.messages],
            "checks": self.checks.to_dict(),
        }

    def format_text(self, icon_mode: str = "emoji") -> str:
        """Human-readable report used by ``validate``."""
        outcome = CheckStatus.PASSED if self.valid else CheckStatus.FAILED
        header = "Validation passed" if self.valid else "Validation failed"
        lines = [f"{ReportIcons.get_icon(outcome.value, icon_mode)} {header}"]

        lines.append("")
        lines.append("Checks:")
        width = max(len(label) for label in _CHECK_LABELS.values()) + 1
        for name, status in self.checks.items():
            label = f"{_CHECK_LABELS[CheckName(name)]}:"
            icon = ReportIcons.get_icon(status, icon_mode)
            lines.append(f"  {label:<{width}} {icon} {status}")

        if self.messages:
            lines.append("")
            lines.append("Issues:")
            for message in self.messages:
                prefix = ReportIcons.get_icon(message.severity, icon_mode)
                if message.location is not None:
                    prefix += f" [{message.location}]"
                lines.append(f"  {prefix} {message.message}")

        return "\n".join(lines)
