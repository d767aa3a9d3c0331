"""Layout validation."""

from .models import (
    CheckName,
    CheckStatus,
    IssueKind,
    Severity,
    ValidationChecks,
    ValidationLocation,
    ValidationMessage,
    ValidationReport,
)
from .service import is_valid_keycode, split_macro_args, validate


__all__ = [
    "CheckName",
    "CheckStatus",
    "IssueKind",
    "Severity",
    "ValidationChecks",
    "ValidationLocation",
    "ValidationMessage",
    "ValidationReport",
    "is_valid_keycode",
    "split_macro_args",
    "validate",
]
