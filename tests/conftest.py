"""Core test fixtures for the layerkit project."""

import json
import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from layerkit.geometry import KeyboardGeometry
from layerkit.keycodes import KeycodeCatalog, load_default_catalog
from layerkit.layout.models import KeyDefinition, Layer, Layout, Position, TapDanceAction


# ---- Layout builders ----


def make_layer(
    name: str,
    keycodes: dict[tuple[int, int], str],
    layer_id: str | None = None,
) -> Layer:
    """Build a layer from a ``{(row, col): keycode}`` mapping."""
    keys = [
        KeyDefinition(position=Position(row=row, col=col), keycode=keycode)
        for (row, col), keycode in keycodes.items()
    ]
    if layer_id is None:
        return Layer(name=name, keys=keys)
    return Layer(id=layer_id, name=name, keys=keys)


def make_grid(rows: int, cols: int, keycode: str = "KC_A") -> dict[tuple[int, int], str]:
    """Build a full ``rows x cols`` keycode mapping."""
    return {(r, c): keycode for r in range(rows) for c in range(cols)}


@pytest.fixture
def layer_factory() -> Callable[..., Layer]:
    """Return the layer builder for tests that need custom layers."""
    return make_layer


@pytest.fixture
def sample_layout() -> Layout:
    """A sound two-layer layout: MO(1) on the base layer, KC_TRNS under it."""
    base = make_grid(2, 3)
    base[(0, 0)] = "MO(1)"
    base[(1, 2)] = "TD(esc_caps)"
    nav = make_grid(2, 3, "KC_LEFT")
    nav[(0, 0)] = "KC_TRNS"
    return Layout(
        layers=[
            make_layer("Base", base, layer_id="base-id"),
            make_layer("Nav", nav, layer_id="nav-id"),
        ],
        tap_dances=[
            TapDanceAction(name="esc_caps", single_tap="KC_ESC", double_tap="KC_CAPS")
        ],
    )


@pytest.fixture
def sample_geometry() -> KeyboardGeometry:
    return KeyboardGeometry(keyboard_name="test", matrix_rows=2, matrix_cols=3)


@pytest.fixture
def keycode_catalog() -> KeycodeCatalog:
    return load_default_catalog()


# ---- File fixtures ----


@pytest.fixture
def write_layout(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a layout (model or raw dict) to a JSON file."""

    def _write(layout: Layout | dict[str, Any], name: str = "layout.json") -> Path:
        path = tmp_path / name
        data = layout.to_dict() if isinstance(layout, Layout) else layout
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def layout_file(write_layout: Callable[..., Path], sample_layout: Layout) -> Path:
    return write_layout(sample_layout)


# ---- CLI fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


# ---- Test Isolation Fixtures ----


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Keep user config files and LAYERKIT_ variables out of every test."""
    config_home = tmp_path / "xdg_config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for key in list(os.environ):
        if key.upper().startswith("LAYERKIT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield config_home
