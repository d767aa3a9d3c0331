"""Tests for the layout layer service."""

import pytest

from layerkit.core.errors import LayoutError
from layerkit.layout.layer import create_layout_layer_service, resolve_layer_selector
from layerkit.layout.utils.json_operations import load_layout_file


@pytest.fixture
def service():
    return create_layout_layer_service()


class TestResolveLayerSelector:
    def test_selectors(self, sample_layout):
        assert resolve_layer_selector(sample_layout, "1") == 1
        assert resolve_layer_selector(sample_layout, "@base-id") == 0
        assert resolve_layer_selector(sample_layout, "Nav") == 1

    def test_unknown_selector_lists_layers(self, sample_layout):
        with pytest.raises(LayoutError, match="Available layers: Base, Nav"):
            resolve_layer_selector(sample_layout, "Gaming")

    def test_index_out_of_range(self, sample_layout):
        with pytest.raises(LayoutError, match="out of range"):
            resolve_layer_selector(sample_layout, "7")


class TestLayoutLayerService:
    """Test file-backed layer operations."""

    def test_add_layer(self, service, layout_file):
        result = service.add_layer(layout_file, "Symbols", color="#FF0000")

        assert result["position"] == 2
        assert result["total_layers"] == 3
        layout = load_layout_file(layout_file)
        assert layout.layers[2].name == "Symbols"
        assert layout.layers[2].color == "#ff0000"
        assert layout.layers[2].id == result["layer_id"]

    def test_add_layer_copy_from(self, service, layout_file):
        service.add_layer(layout_file, "Copy", position=1, copy_from="Base")

        layout = load_layout_file(layout_file)
        assert layout.layer_names == ["Base", "Copy", "Nav"]
        assert layout.layers[1].keys == layout.layers[0].keys

    def test_add_duplicate_name(self, service, layout_file):
        with pytest.raises(LayoutError, match="already exists"):
            service.add_layer(layout_file, "Nav")

    def test_add_invalid_color(self, service, layout_file):
        with pytest.raises(LayoutError, match="Invalid layer"):
            service.add_layer(layout_file, "Sym", color="blue")

    def test_output_file_guard(self, service, layout_file, tmp_path):
        output = tmp_path / "other.json"
        output.write_text("{}", encoding="utf-8")

        with pytest.raises(LayoutError, match="--force"):
            service.add_layer(layout_file, "Sym", output=output)

        result = service.add_layer(layout_file, "Sym", output=output, force=True)
        assert result["output_path"] == output
        assert len(load_layout_file(layout_file).layers) == 2

    def test_remove_layer_reports_dangling_references(self, service, layout_file):
        result = service.remove_layer(layout_file, "@nav-id")

        assert result["layer_name"] == "Nav"
        assert result["remaining_layers"] == 1
        assert result["dangling_references"] == [
            {"from_layer": 0, "position": {"row": 0, "col": 0}, "keycode": "MO(1)"}
        ]

    def test_move_layer(self, service, layout_file):
        result = service.move_layer(layout_file, "Nav", 0)

        assert result["moved"]
        assert result["from_position"] == 1
        assert load_layout_file(layout_file).layer_names == ["Nav", "Base"]

    def test_move_to_same_position(self, service, layout_file):
        result = service.move_layer(layout_file, "0", -2)
        assert not result["moved"]

    def test_list_layers_counts_inbound_references(self, service, layout_file):
        result = service.list_layers(layout_file)

        assert result["total_layers"] == 2
        assert [info["inbound_references"] for info in result["layers"]] == [0, 1]
        assert result["layers"][1]["id"] == "nav-id"
