"""Helper functions for CLI output formatting."""

import json
from typing import Any

import typer

from layerkit.cli.helpers.theme import ThemedConsole, get_themed_console


def print_json_output(data: Any) -> None:
    """Print JSON to stdout without Rich wrapping or markup."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def get_app_console(ctx: typer.Context) -> ThemedConsole:
    """Get a themed console honoring the icon mode of the app context."""
    app_ctx = ctx.obj
    icon_mode = app_ctx.icon_mode if app_ctx is not None else "emoji"
    return get_themed_console(icon_mode=icon_mode)


def print_operation_details(console: ThemedConsole, details: dict[str, Any]) -> None:
    """Print the scalar fields of a service result as list items."""
    for key, value in details.items():
        if value is None or isinstance(value, list | dict):
            continue
        console.print_list_item(f"{key.replace('_', ' ').capitalize()}: {value}")
