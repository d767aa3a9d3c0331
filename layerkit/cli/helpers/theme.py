"""Unified theme system for consistent Rich styling across CLI commands."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from layerkit.config.models import IconMode


class Colors:
    """Standardized color palette for CLI output."""

    # Status colors
    SUCCESS = "bold green"
    ERROR = "bold red"
    WARNING = "bold yellow"
    INFO = "bold blue"

    # UI element colors
    PRIMARY = "cyan"
    SECONDARY = "blue"
    ACCENT = "magenta"
    MUTED = "dim"

    # Text colors
    HEADER = "bold cyan"
    HIGHLIGHT = "bold white"


class Icons:
    """Standardized icons for different message types."""

    # Status indicators
    SUCCESS = "✅"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"

    # List indicators
    BULLET = "•"

    # Category icons
    LAYER = "🗂️"
    TAP_DANCE = "💃"

    _TEXT_FALLBACKS = {
        "SUCCESS": "",
        "ERROR": "",
        "WARNING": "!",
        "INFO": "i",
        "BULLET": "•",
        "LAYER": "",
        "TAP_DANCE": "",
    }

    @classmethod
    def get_icon(cls, icon_name: str, icon_mode: str = "emoji") -> str:
        """Get icon based on the specified mode.

        Args:
            icon_name: Name of the icon (e.g., "SUCCESS", "ERROR")
            icon_mode: Icon mode - "emoji" or "text"

        Returns:
            The appropriate icon based on mode
        """
        if icon_mode == IconMode.EMOJI:
            return getattr(cls, icon_name, "")
        return cls._TEXT_FALLBACKS.get(icon_name, f"[{icon_name}]")

    @classmethod
    def format_with_icon(
        cls, icon_name: str, text: str, icon_mode: str = "emoji"
    ) -> str:
        """Format text with icon, handling empty icons gracefully."""
        icon = cls.get_icon(icon_name, icon_mode)
        if icon:
            return f"{icon} {text}"
        return text


LAYERKIT_THEME = Theme(
    {
        "success": Colors.SUCCESS,
        "error": Colors.ERROR,
        "warning": Colors.WARNING,
        "info": Colors.INFO,
        "primary": Colors.PRIMARY,
        "secondary": Colors.SECONDARY,
        "accent": Colors.ACCENT,
        "muted": Colors.MUTED,
        "header": Colors.HEADER,
        "highlight": Colors.HIGHLIGHT,
    }
)


class ThemedConsole:
    """Console wrapper with the layerkit theme applied.

    Messages are escaped before printing so keycodes such as ``[KC_A]`` are
    never read as Rich markup.
    """

    def __init__(self, icon_mode: str = "emoji", stderr: bool = False) -> None:
        self.console = Console(theme=LAYERKIT_THEME, stderr=stderr, highlight=False)
        self.icon_mode = icon_mode

    def _print(self, icon_name: str, message: str, style: str) -> None:
        text = Icons.format_with_icon(icon_name, escape(message), self.icon_mode)
        self.console.print(text, style=style, soft_wrap=True)

    def print_success(self, message: str) -> None:
        self._print("SUCCESS", message, "success")

    def print_error(self, message: str) -> None:
        self._print("ERROR", message, "error")

    def print_warning(self, message: str) -> None:
        self._print("WARNING", message, "warning")

    def print_info(self, message: str) -> None:
        self._print("INFO", message, "info")

    def print_list_item(self, message: str, indent: int = 1) -> None:
        """Print list item with bullet and styling."""
        spacing = "  " * indent
        bullet = Icons.get_icon("BULLET", self.icon_mode)
        self.console.print(
            f"{spacing}{bullet} {escape(message)}", style="primary", soft_wrap=True
        )

    def print_plain(self, message: str = "", style: str | None = None) -> None:
        self.console.print(escape(message), style=style, soft_wrap=True)


class TableStyles:
    """Predefined table styling templates."""

    @staticmethod
    def create_basic_table(
        title: str = "", icon: str = "", icon_mode: str = "emoji"
    ) -> Table:
        """Create a basic styled table."""
        full_title = Icons.format_with_icon(icon.upper(), title, icon_mode) if icon else title
        return Table(
            title=full_title,
            show_header=True,
            header_style=Colors.HEADER,
            border_style=Colors.SECONDARY,
        )


def get_themed_console(icon_mode: str = "emoji", stderr: bool = False) -> ThemedConsole:
    """Get a themed console instance."""
    return ThemedConsole(icon_mode=icon_mode, stderr=stderr)


def get_icon_mode_from_config(user_config: Any = None) -> str:
    """Get icon mode from user configuration, defaulting to emoji."""
    if user_config is None:
        return IconMode.EMOJI.value
    mode = user_config.get("icon_mode", IconMode.EMOJI)
    return IconMode(mode).value
