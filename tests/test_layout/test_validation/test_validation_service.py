"""Tests for whole-layout validation."""

import pytest

from layerkit.geometry import KeyboardGeometry
from layerkit.layout.layer_refs import build_layer_ref_index
from layerkit.layout.models import KeyDefinition, Layer, Layout, Position, TapDanceAction
from layerkit.layout.validation import (
    CheckStatus,
    IssueKind,
    Severity,
    is_valid_keycode,
    split_macro_args,
    validate,
)


class TestIsValidKeycode:
    """Test keycode acceptance against the bundled catalog."""

    @pytest.mark.parametrize(
        "keycode",
        [
            "KC_A",
            "KC_ESC",
            "KC_TRNS",
            "_______",
            "XXXXXXX",
            "MO(1)",
            "MO(@nav)",
            "LT(2, KC_SPC)",
            "TD(anything)",
            "LCTL_T(KC_A)",
            "MT(MOD_LSFT, KC_B)",
            "MT(MOD_LSFT | MOD_LCTL, KC_B)",
            "LCTL(LSFT(KC_A))",
            "OSM(MOD_LALT)",
        ],
    )
    def test_valid(self, keycode, keycode_catalog):
        assert is_valid_keycode(keycode, keycode_catalog)

    @pytest.mark.parametrize(
        "keycode",
        [
            "",
            "KC_NOT_A_KEY",
            "FOO(KC_A)",
            "LCTL_T()",
            "MO()",
            "LT()",
            "LCTL()",
            "LCTL_T(KC_A, KC_B)",
            "LCTL_T(KC_BOGUS)",
            "OSM(MOD_BOGUS)",
        ],
    )
    def test_invalid(self, keycode, keycode_catalog):
        assert not is_valid_keycode(keycode, keycode_catalog)

    def test_split_macro_args_respects_nesting(self):
        assert split_macro_args("MOD_LSFT, LCTL(KC_A)") == ["MOD_LSFT", "LCTL(KC_A)"]
        assert split_macro_args("LT(1, KC_A), KC_B") == ["LT(1, KC_A)", "KC_B"]
        assert split_macro_args("") == [""]


class TestValidate:
    """Test the validation orchestrator."""

    def test_sound_layout_is_valid(self, sample_layout, sample_geometry, keycode_catalog):
        report = validate(sample_layout, sample_geometry, keycode_catalog)

        assert report.valid
        assert report.messages == []
        assert all(status == CheckStatus.PASSED for _, status in report.checks.items())

    def test_unresolved_layer_reference(self, layer_factory, keycode_catalog):
        layout = Layout(layers=[layer_factory("Base", {(0, 0): "MO(99)"})])
        geometry = KeyboardGeometry(matrix_rows=1, matrix_cols=1)

        report = validate(layout, geometry, keycode_catalog)

        # The index drops the reference but validation reports it
        assert build_layer_ref_index(layout.layers) == {}
        assert not report.valid
        assert len(report.errors) == 1
        error = report.errors[0]
        assert error.kind == IssueKind.UNRESOLVED_LAYER_REF
        assert "MO(99)" in error.message
        assert "layout has 1 layers" in error.message
        assert report.checks.layer_refs == CheckStatus.FAILED
        assert report.checks.keycodes == CheckStatus.PASSED

    def test_invalid_keycode(self, layer_factory, sample_geometry, keycode_catalog):
        layout = Layout(layers=[layer_factory("Base", {(0, 1): "KC_BOGUS"})])

        report = validate(layout, sample_geometry, keycode_catalog)

        assert not report.valid
        assert [m.message for m in report.errors] == ["Invalid keycode 'KC_BOGUS'"]
        assert report.errors[0].location.layer == 0
        assert report.errors[0].location.position == Position(row=0, col=1)
        assert report.checks.keycodes == CheckStatus.FAILED

    def test_out_of_bounds_position(self, layer_factory, sample_geometry, keycode_catalog):
        layout = Layout(layers=[layer_factory("Base", {(0, 0): "KC_A", (4, 7): "KC_B"})])

        report = validate(layout, sample_geometry, keycode_catalog)

        assert not report.valid
        assert report.errors[0].kind == IssueKind.OUT_OF_BOUNDS
        assert "(4, 7)" in report.errors[0].message
        assert report.checks.positions == CheckStatus.FAILED

    def test_duplicate_position(self, sample_geometry, keycode_catalog):
        position = Position(row=0, col=0)
        layer = Layer(
            name="Base",
            keys=[
                KeyDefinition(position=position, keycode="KC_A"),
                KeyDefinition(position=position, keycode="KC_B"),
            ],
        )

        report = validate(Layout(layers=[layer]), sample_geometry, keycode_catalog)

        assert [m.kind for m in report.errors] == [IssueKind.DUPLICATE_POSITION]
        assert "KC_B" in report.errors[0].message

    def test_undefined_tap_dance_per_reference(
        self, layer_factory, sample_geometry, keycode_catalog
    ):
        layout = Layout(
            layers=[layer_factory("Base", {(0, 0): "TD(ghost)", (0, 1): "TD(ghost)"})]
        )

        report = validate(layout, sample_geometry, keycode_catalog)

        assert not report.valid
        assert [m.message for m in report.errors] == [
            "Tap dance 'ghost' is used but not defined",
            "Tap dance 'ghost' is used but not defined",
        ]
        assert report.checks.tap_dances == CheckStatus.FAILED

    def test_orphaned_tap_dance_is_warning(
        self, sample_layout, sample_geometry, keycode_catalog
    ):
        sample_layout.add_tap_dance(TapDanceAction(name="unused", single_tap="KC_B"))

        report = validate(sample_layout, sample_geometry, keycode_catalog)

        assert report.valid
        assert report.errors == []
        assert len(report.warnings) == 1
        assert report.warnings[0].kind == IssueKind.ORPHANED_TAP_DANCE
        assert report.warnings[0].location is None
        assert report.checks.tap_dances == CheckStatus.PASSED

    def test_strict_promotes_warnings(self, sample_layout, sample_geometry, keycode_catalog):
        sample_layout.add_tap_dance(TapDanceAction(name="unused", single_tap="KC_B"))

        report = validate(sample_layout, sample_geometry, keycode_catalog, strict=True)

        assert not report.valid
        assert report.strict
        assert [m.severity for m in report.messages] == [Severity.ERROR]
        assert report.checks.tap_dances == CheckStatus.FAILED

    def test_all_checks_run_in_order(self, layer_factory, sample_geometry, keycode_catalog):
        layout = Layout(
            layers=[
                layer_factory(
                    "Base",
                    {(0, 0): "KC_BOGUS", (9, 9): "KC_A", (0, 1): "TO(5)", (0, 2): "TD(x)"},
                )
            ]
        )

        report = validate(layout, sample_geometry, keycode_catalog)

        assert [m.kind for m in report.messages] == [
            IssueKind.INVALID_KEYCODE,
            IssueKind.OUT_OF_BOUNDS,
            IssueKind.UNRESOLVED_LAYER_REF,
            IssueKind.UNDEFINED_TAP_DANCE,
        ]
        assert all(status == CheckStatus.FAILED for _, status in report.checks.items())

    def test_does_not_modify_layout(self, sample_layout, sample_geometry, keycode_catalog):
        before = sample_layout.to_dict()
        validate(sample_layout, sample_geometry, keycode_catalog, strict=True)
        assert sample_layout.to_dict() == before

    def test_transparency_conflicts_are_not_reported(
        self, layer_factory, sample_geometry, keycode_catalog
    ):
        layout = Layout(
            layers=[
                layer_factory("Base", {(0, 0): "MO(1)"}),
                layer_factory("Nav", {(0, 0): "KC_LEFT"}),
            ]
        )

        report = validate(layout, sample_geometry, keycode_catalog)

        assert report.valid
        assert report.messages == []

    def test_parametrized_templates_without_arguments(self, layer_factory, keycode_catalog):
        layout = Layout(layers=[layer_factory("Base", {(0, 0): "MO()", (0, 1): "LT()"})])
        geometry = KeyboardGeometry(matrix_rows=1, matrix_cols=2)

        report = validate(layout, geometry, keycode_catalog)

        assert not report.valid
        assert [m.message for m in report.errors] == [
            "Invalid keycode 'MO()'",
            "Invalid keycode 'LT()'",
        ]
        assert report.checks.keycodes == CheckStatus.FAILED


class TestValidateSparseLayouts:
    """Test layouts whose layers only define some positions."""

    def test_layout_without_tap_dances(self, layer_factory, sample_geometry, keycode_catalog):
        layout = Layout(
            layers=[
                layer_factory("Base", {(0, 0): "MO(1)", (1, 2): "KC_B"}),
                layer_factory("Nav", {(0, 1): "KC_LEFT"}),
            ]
        )

        report = validate(layout, sample_geometry, keycode_catalog)

        assert report.valid
        assert report.messages == []
        assert report.checks.to_dict() == {
            "keycodes": "passed",
            "positions": "passed",
            "layer_refs": "passed",
            "tap_dances": "passed",
        }

    @pytest.mark.parametrize(
        ("base_keys", "nav_keys"),
        [
            ({}, {(0, 0): "KC_A"}),
            ({(0, 0): "MO(1)"}, {(0, 0): "KC_TRNS", (0, 1): "KC_B"}),
        ],
    )
    def test_derived_geometry_covers_every_layer(
        self, layer_factory, keycode_catalog, base_keys, nav_keys
    ):
        layout = Layout(
            layers=[layer_factory("Base", base_keys), layer_factory("Nav", nav_keys)]
        )

        report = validate(layout, KeyboardGeometry.from_layout(layout), keycode_catalog)

        assert report.valid
        assert report.messages == []
