"""CLI helper utilities."""

from .output import get_app_console, print_json_output, print_operation_details
from .theme import (
    Colors,
    Icons,
    TableStyles,
    ThemedConsole,
    get_icon_mode_from_config,
    get_themed_console,
)


__all__ = [
    "Colors",
    "Icons",
    "TableStyles",
    "ThemedConsole",
    "get_app_console",
    "get_icon_mode_from_config",
    "get_themed_console",
    "print_json_output",
    "print_operation_details",
]
