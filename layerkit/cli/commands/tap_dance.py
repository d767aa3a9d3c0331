"""Tap-dance management commands."""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from layerkit.cli.decorators import EXIT_INVALID, handle_errors
from layerkit.cli.helpers import TableStyles, get_app_console, print_json_output
from layerkit.core.errors import TapDanceError
from layerkit.core.structlog_logger import get_struct_logger
from layerkit.layout.models import TapDanceAction
from layerkit.layout.tap_dance import (
    REPLACEMENT_KEYCODE,
    find_tap_dance_references,
    get_orphaned_tap_dances,
    remove_tap_dance_references,
    validate_tap_dances,
)
from layerkit.layout.utils import load_layout_file, save_layout_file


logger = get_struct_logger(__name__)

LayoutFileArg = Annotated[Path, typer.Argument(help="Layout file (.json, .yaml or .yml)")]

tap_dance_app = typer.Typer(
    name="tap-dance",
    help="""Tap-dance management commands.

A tap dance sends a different keycode on a single tap, a double tap or a
hold. Keys use a definition by name with TD(name).
""",
    no_args_is_help=True,
)


@tap_dance_app.command(name="list")
@handle_errors
def list_tap_dances(
    ctx: typer.Context,
    layout_file: LayoutFileArg,
    json_output: Annotated[bool, typer.Option("--json", help="Print as JSON")] = False,
) -> None:
    """List tap-dance definitions with their type and usage count."""
    layout = load_layout_file(layout_file)
    rows = [
        {
            "name": action.name,
            "type": action.kind,
            "single_tap": action.single_tap,
            "double_tap": action.double_tap,
            "hold": action.hold,
            "references": len(find_tap_dance_references(layout, action.name)),
        }
        for action in layout.tap_dances
    ]

    if json_output:
        print_json_output({"tap_dances": rows})
        return

    console = get_app_console(ctx)
    if not rows:
        console.print_info("No tap dances defined")
        return

    table = TableStyles.create_basic_table("Tap Dances", "TAP_DANCE", console.icon_mode)
    table.add_column("Name", style="primary", no_wrap=True)
    table.add_column("Type", style="accent")
    table.add_column("Single")
    table.add_column("Double")
    table.add_column("Hold")
    table.add_column("Uses", justify="right")
    for row in rows:
        table.add_row(
            row["name"],
            row["type"],
            row["single_tap"],
            row["double_tap"] or "-",
            row["hold"] or "-",
            str(row["references"]),
        )
    console.console.print(table)


@tap_dance_app.command(name="add")
@handle_errors
def add_tap_dance(
    ctx: typer.Context,
    layout_file: LayoutFileArg,
    name: Annotated[str, typer.Option("--name", "-n", help="Tap dance name")],
    single: Annotated[
        str, typer.Option("--single", "-s", help="Keycode sent on a single tap")
    ],
    double: Annotated[
        str | None, typer.Option("--double", "-d", help="Keycode sent on a double tap")
    ] = None,
    hold: Annotated[
        str | None, typer.Option("--hold", help="Keycode sent while held")
    ] = None,
) -> None:
    """Add a tap-dance definition to a layout.

    Examples:
        layerkit tap-dance add layout.json --name esc_caps --single KC_ESC --double KC_CAPS
    """
    layout = load_layout_file(layout_file)
    try:
        action = TapDanceAction(
            name=name, single_tap=single, double_tap=double, hold=hold
        )
    except ValidationError as e:
        raise TapDanceError(f"Invalid tap dance: {e}", name=name) from e

    layout.add_tap_dance(action)
    save_layout_file(layout, layout_file)
    logger.info("tap_dance_added", name=name, kind=action.kind)

    get_app_console(ctx).print_success(
        f"Added tap dance '{name}' ({action.kind}) to {layout_file}"
    )


@tap_dance_app.command(name="delete")
@handle_errors
def delete_tap_dance(
    ctx: typer.Context,
    layout_file: LayoutFileArg,
    name: Annotated[str, typer.Option("--name", "-n", help="Tap dance name")],
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help=f"Delete even when referenced, replacing keys with {REPLACEMENT_KEYCODE}",
        ),
    ] = False,
) -> None:
    """Delete a tap-dance definition from a layout."""
    layout = load_layout_file(layout_file)
    if layout.get_tap_dance(name) is None:
        raise TapDanceError(f"Tap dance '{name}' not found", name=name)

    references = find_tap_dance_references(layout, name)
    if references and not force:
        raise TapDanceError(
            f"Tap dance '{name}' is referenced in {len(references)} location(s). "
            f"Use --force to delete and replace references with {REPLACEMENT_KEYCODE}",
            references=references,
        )

    replaced = remove_tap_dance_references(layout, name) if force else 0
    layout.remove_tap_dance(name)
    save_layout_file(layout, layout_file)
    logger.info("tap_dance_deleted", name=name, replaced=replaced)

    console = get_app_console(ctx)
    if replaced:
        console.print_success(
            f"Deleted tap dance '{name}' and replaced {replaced} reference(s) "
            f"with {REPLACEMENT_KEYCODE}"
        )
    else:
        console.print_success(f"Deleted tap dance '{name}'")


@tap_dance_app.command(name="validate")
@handle_errors
def validate_tap_dance_refs(
    ctx: typer.Context,
    layout_file: LayoutFileArg,
    json_output: Annotated[bool, typer.Option("--json", help="Print as JSON")] = False,
) -> None:
    """Check TD(name) keys against tap-dance definitions.

    Exits 1 when a key uses an undefined tap dance. Unused definitions are
    reported as warnings only.
    """
    layout = load_layout_file(layout_file)
    unused = get_orphaned_tap_dances(layout)
    try:
        validate_tap_dances(layout)
        missing: list[str] = []
    except TapDanceError as e:
        missing = e.missing

    if json_output:
        print_json_output({"valid": not missing, "undefined": missing, "unused": unused})
    else:
        console = get_app_console(ctx)
        for tap_dance in missing:
            console.print_error(f"Undefined tap dance: TD({tap_dance}) used but not defined")
        for tap_dance in unused:
            console.print_warning(
                f"Unused definition: '{tap_dance}' defined but never used"
            )
        if not missing and not unused:
            console.print_success("All tap dance references are valid")

    if missing:
        raise typer.Exit(EXIT_INVALID)


def register_commands(app: typer.Typer) -> None:
    """Register tap-dance commands with the main app."""
    app.add_typer(tap_dance_app, name="tap-dance")
