"""Protocol definitions for the lookups consumed by layout validation."""

from typing import Protocol, runtime_checkable

from layerkit.keycodes.models import KeycodeParam
from layerkit.layout.models import Position


@runtime_checkable
class KeycodeCatalogProtocol(Protocol):
    """Protocol for a read-only keycode catalog."""

    def is_known(self, keycode: str) -> bool:
        """Check if a plain keycode or alias is defined."""
        ...

    def get_params(self, macro_name: str) -> list[KeycodeParam] | None:
        """Get the parameter list of a parametrized macro such as ``LCTL_T``."""
        ...


@runtime_checkable
class KeyboardGeometryProtocol(Protocol):
    """Protocol for physical keyboard bounds."""

    def contains(self, position: Position) -> bool:
        """Check if a position exists on the keyboard."""
        ...
