"""Layout layer service for layer management operations."""

from pathlib import Path
from typing import Any

from layerkit.core.errors import LayoutError
from layerkit.core.structlog_logger import StructlogMixin
from layerkit.layout.layer_refs.index import build_layer_ref_index
from layerkit.layout.models import KeyDefinition, Layer, Layout
from layerkit.layout.utils.json_operations import load_layout_file, save_layout_file


def resolve_layer_selector(layout: Layout, selector: str) -> int:
    """Find a layer by index, ``@id`` or display name.

    Raises:
        LayoutError: If no layer matches
    """
    if selector.isdigit():
        index = int(selector)
        if layout.get_layer(index) is None:
            raise LayoutError(
                f"Layer index {index} out of range (layout has "
                f"{len(layout.layers)} layers)"
            )
        return index

    if selector.startswith("@"):
        found = layout.find_layer_index(selector)
    else:
        found = layout.find_layer_index_by_name(selector)
    if found is None:
        available = ", ".join(layout.layer_names) or "none"
        raise LayoutError(f"Layer '{selector}' not found. Available layers: {available}")
    return found


def validate_output_path(output: Path, source: Path, force: bool) -> None:
    """Refuse to overwrite an unrelated existing file unless forced."""
    if output.exists() and output.resolve() != source.resolve() and not force:
        raise LayoutError(
            f"Output file already exists: {output}. Use --force to overwrite"
        )


class LayoutLayerService(StructlogMixin):
    """Service for managing layout layers."""

    def _save(
        self, layout: Layout, layout_file: Path, output: Path | None, force: bool
    ) -> Path:
        output_path = output if output is not None else layout_file
        validate_output_path(output_path, layout_file, force)
        save_layout_file(layout, output_path)
        return output_path

    def add_layer(
        self,
        layout_file: Path,
        layer_name: str,
        position: int | None = None,
        color: str | None = None,
        copy_from: str | None = None,
        output: Path | None = None,
        force: bool = False,
    ) -> dict[str, Any]:
        """Add a new layer to the layout.

        Args:
            layout_file: Path to layout file
            layer_name: Name of the new layer
            position: Position to insert (defaults to end)
            color: Layer color as #rrggbb
            copy_from: Copy keys from an existing layer (index, @id or name)
            output: Output file path (defaults to input file)
            force: Whether to overwrite existing files

        Returns:
            Dictionary with operation details

        Raises:
            LayoutError: If the layer cannot be added
        """
        layout = load_layout_file(layout_file)

        if layout.find_layer_index_by_name(layer_name) is not None:
            raise LayoutError(f"Layer '{layer_name}' already exists")

        keys: list[KeyDefinition] = []
        if copy_from is not None:
            source = layout.layers[resolve_layer_selector(layout, copy_from)]
            keys = [key.model_copy(deep=True) for key in source.keys]

        layer_fields: dict[str, Any] = {"name": layer_name, "keys": keys}
        if color is not None:
            layer_fields["color"] = color
        try:
            layer = Layer(**layer_fields)
        except ValueError as e:
            raise LayoutError(f"Invalid layer: {e}") from e

        index = layout.add_layer(layer, position)
        output_path = self._save(layout, layout_file, output, force)
        self.logger.info("layer_added", layer=layer_name, position=index)

        return {
            "output_path": output_path,
            "layer_name": layer_name,
            "layer_id": layer.id,
            "position": index,
            "total_layers": len(layout.layers),
            "copy_from": copy_from,
        }

    def remove_layer(
        self,
        layout_file: Path,
        layer: str,
        output: Path | None = None,
        force: bool = False,
    ) -> dict[str, Any]:
        """Remove a layer from the layout.

        The result lists references that pointed at the removed layer; numeric
        references to later layers are not renumbered.

        Returns:
            Dictionary with operation details
        """
        layout = load_layout_file(layout_file)
        layer_idx = resolve_layer_selector(layout, layer)

        inbound = build_layer_ref_index(layout.layers).get(layer_idx, [])
        removed = layout.remove_layer(layer_idx)
        output_path = self._save(layout, layout_file, output, force)
        self.logger.info(
            "layer_removed",
            layer=removed.name,
            position=layer_idx,
            inbound_references=len(inbound),
        )

        return {
            "output_path": output_path,
            "layer_name": removed.name,
            "position": layer_idx,
            "remaining_layers": len(layout.layers),
            "dangling_references": [
                {
                    "from_layer": ref.from_layer,
                    "position": ref.position.to_dict(),
                    "keycode": ref.keycode,
                }
                for ref in inbound
                if ref.from_layer != layer_idx
            ],
        }

    def move_layer(
        self,
        layout_file: Path,
        layer: str,
        new_position: int,
        output: Path | None = None,
        force: bool = False,
    ) -> dict[str, Any]:
        """Move a layer to a new position.

        Args:
            layout_file: Path to layout file
            layer: Layer to move (index, @id or name)
            new_position: New position (0-based index, can be negative)
            output: Output file path (defaults to input file)
            force: Whether to overwrite existing files

        Returns:
            Dictionary with operation details
        """
        layout = load_layout_file(layout_file)
        current_idx = resolve_layer_selector(layout, layer)
        layer_name = layout.layers[current_idx].name

        total_layers = len(layout.layers)
        if new_position < 0:
            new_position = max(0, total_layers + new_position)
        elif new_position >= total_layers:
            new_position = total_layers - 1

        if current_idx == new_position:
            return {
                "output_path": layout_file,
                "layer_name": layer_name,
                "from_position": current_idx,
                "to_position": new_position,
                "moved": False,
            }

        layout.move_layer(current_idx, new_position)
        output_path = self._save(layout, layout_file, output, force)
        self.logger.info(
            "layer_moved", layer=layer_name, from_position=current_idx, to_position=new_position
        )

        return {
            "output_path": output_path,
            "layer_name": layer_name,
            "from_position": current_idx,
            "to_position": new_position,
            "moved": True,
        }

    def list_layers(self, layout_file: Path) -> dict[str, Any]:
        """List all layers with their details.

        Returns:
            Dictionary with layer information, including inbound reference
            counts from the reference index
        """
        layout = load_layout_file(layout_file)
        index = build_layer_ref_index(layout.layers)

        layers_info = [
            {
                "position": i,
                "id": layer.id,
                "name": layer.name,
                "color": layer.color,
                "key_count": len(layer.keys),
                "inbound_references": len(index.get(i, [])),
            }
            for i, layer in enumerate(layout.layers)
        ]

        return {
            "total_layers": len(layout.layers),
            "layers": layers_info,
        }


def create_layout_layer_service() -> LayoutLayerService:
    """Create a LayoutLayerService instance."""
    return LayoutLayerService()
