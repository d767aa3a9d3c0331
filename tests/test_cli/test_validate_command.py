"""Tests for the validate command."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from layerkit.cli import app
from layerkit.cli.commands import register_all_commands
from layerkit.keycodes import load_default_catalog
from layerkit.layout.models import Layout, TapDanceAction


# Register commands with the app before running tests
register_all_commands(app)


@pytest.fixture
def orphan_layout_file(write_layout, sample_layout):
    sample_layout.add_tap_dance(TapDanceAction(name="unused", single_tap="KC_B"))
    return write_layout(sample_layout, "orphan.json")


class TestValidateCommand:
    """Test exit codes and output formats of the validate command."""

    def test_valid_layout(self, cli_runner, layout_file):
        result = cli_runner.invoke(app, ["validate", str(layout_file)])

        assert result.exit_code == 0
        assert "Validation passed" in result.output
        assert "Keycodes:" in result.output

    def test_valid_layout_json(self, cli_runner, layout_file):
        result = cli_runner.invoke(app, ["validate", str(layout_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["errors"] == []
        assert data["checks"] == {
            "keycodes": "passed",
            "positions": "passed",
            "layer_refs": "passed",
            "tap_dances": "passed",
        }

    def test_invalid_layout_json(self, cli_runner, write_layout, layer_factory):
        path = write_layout(Layout(layers=[layer_factory("Base", {(0, 0): "MO(99)"})]))

        result = cli_runner.invoke(app, ["validate", str(path), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert data["checks"]["layer_refs"] == "failed"
        assert data["errors"][0]["kind"] == "unresolved_layer_ref"
        assert data["errors"][0]["location"] == {
            "layer": 0,
            "position": {"row": 0, "col": 0},
        }

    def test_warning_only_passes(self, cli_runner, orphan_layout_file):
        result = cli_runner.invoke(app, ["validate", str(orphan_layout_file)])

        assert result.exit_code == 0
        assert "never used" in result.output

    def test_strict_flag(self, cli_runner, orphan_layout_file):
        result = cli_runner.invoke(app, ["validate", str(orphan_layout_file), "--strict"])

        assert result.exit_code == 1
        assert "Validation failed" in result.output

    def test_strict_from_config(self, cli_runner, orphan_layout_file, tmp_path):
        (tmp_path / "layerkit.yaml").write_text("strict: true\n", encoding="utf-8")

        result = cli_runner.invoke(app, ["validate", str(orphan_layout_file)])

        assert result.exit_code == 1

    def test_text_icon_mode(self, cli_runner, layout_file, monkeypatch):
        monkeypatch.setenv("LAYERKIT_ICON_MODE", "text")

        result = cli_runner.invoke(app, ["validate", str(layout_file)])

        assert result.exit_code == 0
        assert "[OK] Validation passed" in result.output

    def test_geometry_option(self, cli_runner, layout_file, tmp_path):
        geometry = tmp_path / "board.yaml"
        geometry.write_text("matrix_rows: 1\nmatrix_cols: 3\n", encoding="utf-8")

        result = cli_runner.invoke(
            app, ["validate", str(layout_file), "-g", str(geometry), "--json"]
        )

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["checks"]["positions"] == "failed"
        assert all(error["kind"] == "out_of_bounds" for error in data["errors"])

    def test_custom_catalog(self, cli_runner, layout_file, tmp_path):
        catalog = tmp_path / "catalog.yaml"
        catalog.write_text(
            "keycodes:\n  - {code: KC_A, name: A, category: basic}\n", encoding="utf-8"
        )

        result = cli_runner.invoke(
            app, ["validate", str(layout_file), "--catalog", str(catalog), "--json"]
        )

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["checks"]["keycodes"] == "failed"
        invalid = {error["message"] for error in data["errors"]}
        assert "Invalid keycode 'KC_LEFT'" in invalid

    def test_missing_file_exits_2(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, ["validate", str(tmp_path / "missing.json")])

        assert result.exit_code == 2
        assert "not found" in result.output

    def test_malformed_file_exits_2(self, cli_runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        result = cli_runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 2
        assert "Invalid JSON" in result.output

    def test_schema_violation_exits_2(self, cli_runner, write_layout):
        path = write_layout({"layers": [{"name": "Base", "color": "red"}]})

        result = cli_runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 2

    def test_catalog_path_from_config(self, cli_runner, layout_file, monkeypatch):
        monkeypatch.setenv("LAYERKIT_KEYCODE_CATALOG_PATH", "/opt/keycodes.yaml")

        with patch(
            "layerkit.cli.commands.validate.load_keycode_catalog",
            return_value=load_default_catalog(),
        ) as mock_load:
            result = cli_runner.invoke(app, ["validate", str(layout_file)])

        assert result.exit_code == 0
        mock_load.assert_called_once_with(Path("/opt/keycodes.yaml"))

    def test_runs_before_logging_is_configured(self, cli_runner, layout_file):
        structlog.reset_defaults()

        result = cli_runner.invoke(app, ["validate", str(layout_file), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["valid"] is True

    def test_sparse_layout_without_geometry(self, cli_runner, write_layout, layer_factory):
        path = write_layout(
            Layout(
                layers=[
                    layer_factory("Base", {(0, 0): "MO(1)"}),
                    layer_factory("Nav", {(0, 0): "KC_TRNS", (0, 1): "KC_B"}),
                ]
            )
        )

        result = cli_runner.invoke(app, ["validate", str(path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["errors"] == []
        assert set(data["checks"].values()) == {"passed"}
