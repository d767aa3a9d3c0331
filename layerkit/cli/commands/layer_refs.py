"""Layer reference inspection command."""

from pathlib import Path
from typing import Annotated, Any

import typer

from layerkit.cli.decorators import handle_errors
from layerkit.cli.helpers import get_app_console, print_json_output
from layerkit.layout.layer_refs import (
    TransparencyConflict,
    build_layer_ref_index,
    find_transparency_conflicts,
    find_unresolved_layer_refs,
)
from layerkit.layout.layer_refs.index import LayerRefIndex
from layerkit.layout.models import Layout
from layerkit.layout.utils import load_layout_file


def _collect_layer_refs(
    layout: Layout, index: LayerRefIndex, conflicts: list[TransparencyConflict]
) -> list[dict[str, Any]]:
    layers_data = []
    for layer_idx, layer in enumerate(layout.layers):
        layers_data.append(
            {
                "number": layer_idx,
                "id": layer.id,
                "name": layer.name,
                "inbound_refs": [
                    {
                        "from_layer": ref.from_layer,
                        "position": ref.position.to_dict(),
                        "kind": ref.kind.display_name,
                        "keycode": ref.keycode,
                    }
                    for ref in index.get(layer_idx, [])
                ],
                "warnings": [
                    {
                        "position": conflict.position.to_dict(),
                        "keycode": conflict.keycode,
                        "message": conflict.message,
                    }
                    for conflict in conflicts
                    if conflict.layer == layer_idx
                ],
            }
        )
    return layers_data


@handle_errors
def layer_refs(
    ctx: typer.Context,
    layout_file: Annotated[
        Path, typer.Argument(help="Layout file (.json, .yaml or .yml)")
    ],
    json_output: Annotated[
        bool, typer.Option("--json", help="Print references as JSON")
    ] = False,
) -> None:
    """Show which keys activate each layer and flag shadowed hold positions.

    Examples:
        layerkit layer-refs my-layout.json
        layerkit layer-refs my-layout.json --json
    """
    layout = load_layout_file(layout_file)
    index = build_layer_ref_index(layout.layers)
    conflicts = find_transparency_conflicts(layout.layers, index)
    unresolved = find_unresolved_layer_refs(layout.layers)
    layers_data = _collect_layer_refs(layout, index, conflicts)

    if json_output:
        print_json_output(
            {
                "layers": layers_data,
                "unresolved": [
                    {
                        "from_layer": ref.from_layer,
                        "position": ref.position.to_dict(),
                        "keycode": ref.keycode,
                        "target": str(ref.target),
                    }
                    for ref in unresolved
                ],
            }
        )
        return

    console = get_app_console(ctx)
    for layer_data in layers_data:
        console.print_plain(
            f"Layer {layer_data['number']}: {layer_data['name']}", style="header"
        )
        if not layer_data["inbound_refs"]:
            console.print_plain("  No inbound references", style="muted")
        for ref in layer_data["inbound_refs"]:
            position = ref["position"]
            console.print_list_item(
                f"Layer {ref['from_layer']} [{position['row']},{position['col']}] "
                f"{ref['kind']}: {ref['keycode']}",
                indent=2,
            )
        for warning in layer_data["warnings"]:
            console.print_warning(warning["message"])

    for ref in unresolved:
        console.print_warning(
            f"'{ref.keycode}' on layer {ref.from_layer} at {ref.position} "
            f"points at missing layer {ref.target}"
        )
