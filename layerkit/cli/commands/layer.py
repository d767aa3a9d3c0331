"""Layer management commands."""

from pathlib import Path
from typing import Annotated

import typer

from layerkit.cli.decorators import handle_errors
from layerkit.cli.helpers import (
    TableStyles,
    get_app_console,
    print_json_output,
    print_operation_details,
)
from layerkit.layout.layer import create_layout_layer_service


LayoutFileArg = Annotated[Path, typer.Argument(help="Layout file (.json, .yaml or .yml)")]
LayerArg = Annotated[str, typer.Argument(help="Layer index, @id or name")]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Output file (defaults to the input file)"),
]
ForceOption = Annotated[
    bool, typer.Option("--force", help="Overwrite an existing output file")
]

layer_app = typer.Typer(
    name="layer",
    help="""Layer management commands.

Layers are addressed by sequence index, by stable id prefixed with '@',
or by display name.
""",
    no_args_is_help=True,
)


@layer_app.command(name="list")
@handle_errors
def list_layers(
    ctx: typer.Context,
    layout_file: LayoutFileArg,
    json_output: Annotated[bool, typer.Option("--json", help="Print as JSON")] = False,
) -> None:
    """List layers with key and inbound reference counts."""
    result = create_layout_layer_service().list_layers(layout_file)

    if json_output:
        print_json_output(result)
        return

    console = get_app_console(ctx)
    table = TableStyles.create_basic_table(
        f"Layers ({result['total_layers']})", "LAYER", console.icon_mode
    )
    table.add_column("#", justify="right")
    table.add_column("Name", style="primary", no_wrap=True)
    table.add_column("Keys", justify="right")
    table.add_column("Refs", justify="right")
    table.add_column("Id", style="muted", no_wrap=True)
    for layer in result["layers"]:
        table.add_row(
            str(layer["position"]),
            layer["name"],
            str(layer["key_count"]),
            str(layer["inbound_references"]),
            layer["id"],
        )
    console.console.print(table)


@layer_app.command(name="add")
@handle_errors
def add_layer(
    ctx: typer.Context,
    layout_file: LayoutFileArg,
    layer_name: Annotated[str, typer.Argument(help="Name of the new layer")],
    position: Annotated[
        int | None,
        typer.Option("--position", "-p", help="Insert position (defaults to end)"),
    ] = None,
    color: Annotated[
        str | None, typer.Option("--color", help="Layer color as #rrggbb")
    ] = None,
    copy_from: Annotated[
        str | None,
        typer.Option("--copy-from", help="Copy keys from an existing layer"),
    ] = None,
    output: OutputOption = None,
    force: ForceOption = False,
) -> None:
    """Add a new layer to a layout."""
    result = create_layout_layer_service().add_layer(
        layout_file,
        layer_name,
        position=position,
        color=color,
        copy_from=copy_from,
        output=output,
        force=force,
    )
    console = get_app_console(ctx)
    console.print_success(
        f"Added layer '{result['layer_name']}' at position {result['position']}"
    )
    print_operation_details(console, result)


@layer_app.command(name="remove")
@handle_errors
def remove_layer(
    ctx: typer.Context,
    layout_file: LayoutFileArg,
    layer: LayerArg,
    output: OutputOption = None,
    force: ForceOption = False,
) -> None:
    """Remove a layer from a layout.

    Keys on other layers that pointed at the removed layer are reported; they
    are not rewritten.
    """
    result = create_layout_layer_service().remove_layer(
        layout_file, layer, output=output, force=force
    )
    console = get_app_console(ctx)
    console.print_success(
        f"Removed layer '{result['layer_name']}' from position {result['position']}"
    )
    for ref in result["dangling_references"]:
        position = ref["position"]
        console.print_warning(
            f"'{ref['keycode']}' on layer {ref['from_layer']} at "
            f"({position['row']}, {position['col']}) pointed at the removed layer"
        )


@layer_app.command(name="move")
@handle_errors
def move_layer(
    ctx: typer.Context,
    layout_file: LayoutFileArg,
    layer: LayerArg,
    new_position: Annotated[
        int, typer.Argument(help="New position (0-based, negative counts from end)")
    ],
    output: OutputOption = None,
    force: ForceOption = False,
) -> None:
    """Move a layer to a new position."""
    result = create_layout_layer_service().move_layer(
        layout_file, layer, new_position, output=output, force=force
    )
    console = get_app_console(ctx)
    if result["moved"]:
        console.print_success(
            f"Moved layer '{result['layer_name']}' from position "
            f"{result['from_position']} to {result['to_position']}"
        )
    else:
        console.print_info(
            f"Layer '{result['layer_name']}' is already at position {result['to_position']}"
        )


def register_commands(app: typer.Typer) -> None:
    """Register layer commands with the main app."""
    app.add_typer(layer_app, name="layer")
