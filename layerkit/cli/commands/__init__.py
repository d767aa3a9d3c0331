"""CLI command modules."""

import typer

from layerkit.cli.commands.layer import register_commands as register_layer_commands
from layerkit.cli.commands.layer_refs import layer_refs
from layerkit.cli.commands.tap_dance import (
    register_commands as register_tap_dance_commands,
)
from layerkit.cli.commands.validate import validate


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    app.command(name="validate")(validate)
    app.command(name="layer-refs")(layer_refs)
    register_tap_dance_commands(app)
    register_layer_commands(app)
