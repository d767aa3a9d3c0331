"""Tests for the keycode catalog."""

import json

import pytest

from layerkit.core.errors import KeycodeCatalogError
from layerkit.keycodes import KeycodeCatalog, ParamType, load_keycode_catalog
from layerkit.protocols import KeycodeCatalogProtocol


@pytest.fixture
def small_catalog_data():
    return {
        "categories": [{"id": "basic", "name": "Basic"}],
        "keycodes": [
            {"code": "KC_A", "name": "A", "category": "basic"},
            {
                "code": "KC_SPACE",
                "name": "Space",
                "category": "basic",
                "aliases": ["KC_SPC"],
                "description": "Space bar",
            },
            {"code": "CUSTOM_N", "name": "Custom", "category": "basic", "pattern": "CUSTOM_[0-9]+"},
            {
                "code": "HOLD()",
                "name": "Hold",
                "category": "basic",
                "params": [{"type": "keycode", "name": "tap"}],
            },
        ],
    }


class TestKeycodeCatalog:
    """Test lookups on a small in-memory catalog."""

    def test_satisfies_protocol(self, small_catalog_data):
        assert isinstance(KeycodeCatalog.from_dict(small_catalog_data), KeycodeCatalogProtocol)

    def test_lookup_by_code_and_alias(self, small_catalog_data):
        catalog = KeycodeCatalog.from_dict(small_catalog_data)

        assert catalog.is_known("KC_SPC")
        assert catalog.get("KC_SPC").code == "KC_SPACE"
        assert not catalog.is_known("KC_B")
        assert len(catalog) == 4

    def test_pattern_match(self, small_catalog_data):
        catalog = KeycodeCatalog.from_dict(small_catalog_data)
        assert catalog.is_known("CUSTOM_12")
        assert not catalog.is_known("CUSTOM_X")

    def test_template_is_not_a_keycode(self, small_catalog_data):
        catalog = KeycodeCatalog.from_dict(small_catalog_data)

        assert not catalog.is_known("HOLD()")
        assert catalog.get("HOLD()") is not None

    def test_get_params(self, small_catalog_data):
        catalog = KeycodeCatalog.from_dict(small_catalog_data)

        params = catalog.get_params("HOLD")
        assert params is not None
        assert [p.type for p in params] == [ParamType.KEYCODE]
        assert catalog.get_params("HOLD()") == params
        assert catalog.get_params("KC_A") is None

    def test_search_ranking(self, small_catalog_data):
        catalog = KeycodeCatalog.from_dict(small_catalog_data)

        results = catalog.search("space")

        assert [kc.code for kc in results] == ["KC_SPACE"]
        assert [kc.code for kc in catalog.search("kc_")] == ["KC_A", "KC_SPACE"]
        assert [kc.code for kc in catalog.search("bar")] == ["KC_SPACE"]

    def test_invalid_pattern(self):
        with pytest.raises(KeycodeCatalogError, match="Invalid pattern"):
            KeycodeCatalog.from_dict(
                {"keycodes": [{"code": "X", "name": "X", "category": "c", "pattern": "("}]}
            )

    def test_invalid_document(self):
        with pytest.raises(KeycodeCatalogError, match="Invalid keycode catalog"):
            KeycodeCatalog.from_dict({"keycodes": [{"code": "X"}]})


class TestCatalogFiles:
    def test_load_json_file(self, tmp_path, small_catalog_data):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(small_catalog_data), encoding="utf-8")

        assert load_keycode_catalog(path).is_known("KC_A")

    def test_missing_file(self, tmp_path):
        with pytest.raises(KeycodeCatalogError, match="Cannot read"):
            load_keycode_catalog(tmp_path / "missing.yaml")

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("- KC_A\n", encoding="utf-8")

        with pytest.raises(KeycodeCatalogError, match="must contain a mapping"):
            load_keycode_catalog(path)


class TestDefaultCatalog:
    """Test the bundled catalog."""

    def test_categories(self, keycode_catalog):
        ids = [category.id for category in keycode_catalog.categories]
        assert "layers" in ids
        assert "mod_tap" in ids

    def test_common_keycodes(self, keycode_catalog):
        for code in ("KC_A", "KC_ENT", "KC_TRNS", "KC_NO", "KC_F24", "QK_BOOT"):
            assert keycode_catalog.is_known(code), code

    def test_layer_macro_params(self, keycode_catalog):
        params = keycode_catalog.get_params("LT")
        assert [p.type for p in params] == [ParamType.LAYER, ParamType.KEYCODE]

    def test_every_category_is_declared(self, keycode_catalog):
        ids = {category.id for category in keycode_catalog.categories}
        assert {kc.category for kc in keycode_catalog.keycodes} <= ids
