"""Layout validation command."""

from pathlib import Path
from typing import Annotated

import typer

from layerkit.cli.decorators import EXIT_INVALID, handle_errors
from layerkit.cli.helpers import get_app_console, print_json_output
from layerkit.core.structlog_logger import get_struct_logger
from layerkit.geometry import KeyboardGeometry, load_geometry_file
from layerkit.keycodes import KeycodeCatalog, load_default_catalog, load_keycode_catalog
from layerkit.layout.utils import load_layout_file
from layerkit.layout.validation import validate as validate_layout


logger = get_struct_logger(__name__)


def resolve_keycode_catalog(ctx: typer.Context, catalog: Path | None) -> KeycodeCatalog:
    """Pick the catalog from the CLI option, the user config or the bundle."""
    if catalog is not None:
        return load_keycode_catalog(catalog)
    app_ctx = ctx.obj
    configured = (
        app_ctx.user_config.config.keycode_catalog_path if app_ctx is not None else None
    )
    if configured is not None:
        return load_keycode_catalog(configured)
    return load_default_catalog()


@handle_errors
def validate(
    ctx: typer.Context,
    layout_file: Annotated[
        Path, typer.Argument(help="Layout file (.json, .yaml or .yml)")
    ],
    geometry: Annotated[
        Path | None,
        typer.Option(
            "--geometry",
            "-g",
            help="Keyboard geometry file; derived from all layers when omitted",
        ),
    ] = None,
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", help="Keycode catalog file replacing the default"),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Print the report as JSON")
    ] = False,
    strict: Annotated[
        bool, typer.Option("--strict", help="Treat warnings as errors")
    ] = False,
) -> None:
    """Validate keycodes, key positions, layer references and tap dances.

    Exits 0 when the layout is valid, 1 when it has errors (or warnings with
    --strict) and 2 when the layout file cannot be loaded.

    Examples:
        layerkit validate my-layout.json
        layerkit validate my-layout.yaml --geometry crkbd.yaml --strict
        layerkit validate my-layout.json --json
    """
    layout = load_layout_file(layout_file)
    keyboard = (
        load_geometry_file(geometry)
        if geometry is not None
        else KeyboardGeometry.from_layout(layout)
    )
    keycode_catalog = resolve_keycode_catalog(ctx, catalog)
    if ctx.obj is not None:
        strict = strict or ctx.obj.strict

    report = validate_layout(layout, keyboard, keycode_catalog, strict=strict)
    logger.info(
        "validation_complete",
        layout=str(layout_file),
        valid=report.valid,
        messages=len(report.messages),
    )

    if json_output:
        print_json_output(report.to_dict())
    else:
        console = get_app_console(ctx)
        header, _, body = report.format_text(console.icon_mode).partition("\n")
        console.print_plain(header, style="success" if report.valid else "error")
        console.print_plain(body)

    if not report.valid:
        raise typer.Exit(EXIT_INVALID)
