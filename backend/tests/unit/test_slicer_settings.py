"""Unit tests for the slicer settings allowlist and range checks."""

from decimal import Decimal

import pytest

from backend.app.services.slicer_settings import (
    PROFILE_IDENTITY_COLUMNS,
    SLICER_SETTING_COLUMNS,
    SLICER_SETTINGS,
    column_name,
    filter_known_settings,
    validate_slicer_settings,
)


@pytest.mark.unit
class TestColumnName:
    """Tests for camelCase form key to column name mapping."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("nozzleTemp", "nozzle_temp"),
            ("supportZDistance", "support_z_distance"),
            ("topBottomLayers", "top_bottom_layers"),
            ("tags", "tags"),
            ("nozzle_temp", "nozzle_temp"),
        ],
    )
    def test_maps_key(self, key, expected):
        assert column_name(key) == expected


@pytest.mark.unit
class TestSettingColumns:
    """The catalogue and the table must describe the same columns."""

    def test_catalogue_matches_table_columns(self):
        assert set(SLICER_SETTINGS) == SLICER_SETTING_COLUMNS

    def test_identity_columns_are_not_settings(self):
        assert not PROFILE_IDENTITY_COLUMNS & SLICER_SETTING_COLUMNS


@pytest.mark.unit
class TestFilterKnownSettings:
    """Tests for dropping keys that are not slicer-setting columns."""

    def test_keeps_known_and_drops_unknown(self):
        result = filter_known_settings({"nozzleTemp": 210, "bogusField": "x"})
        assert result == {"nozzle_temp": 210}

    def test_accepts_column_names(self):
        result = filter_known_settings({"bed_temp": 60, "infill_pattern": "Gyroid"})
        assert result == {"bed_temp": 60, "infill_pattern": "Gyroid"}

    def test_identity_fields_cannot_be_smuggled_in(self):
        """Owner, ids and name are set by the service, never by the settings map."""
        result = filter_known_settings(
            {
                "userId": "someone-else",
                "filament_profile_id": "forged",
                "filamentProfileName": "renamed",
                "submissionDate": "2020-01-01",
                "clonedFromProfileId": "abc",
            }
        )
        assert result == {}

    def test_none_is_empty(self):
        assert filter_known_settings(None) == {}


@pytest.mark.unit
class TestValidateSlicerSettings:
    """Tests for type and range validation."""

    def test_valid_settings_pass(self):
        errors = validate_slicer_settings(
            {
                "nozzle_temp": 215,
                "bed_temp": 60,
                "layer_height": 0.2,
                "community_rating": Decimal("4.5"),
                "supports_enabled": True,
                "tags": ["pla", "fast"],
                "source_slicer": "OrcaSlicer",
            }
        )
        assert errors == []

    def test_none_values_pass(self):
        assert validate_slicer_settings({"nozzle_temp": None, "tags": None}) == []

    def test_below_minimum(self):
        errors = validate_slicer_settings({"nozzle_temp": 100})
        assert len(errors) == 1
        assert errors[0].field == "nozzle_temp"
        assert errors[0].message == "must be at least 150"

    def test_above_maximum(self):
        errors = validate_slicer_settings({"community_rating": 7})
        assert [e.field for e in errors] == ["community_rating"]
        assert errors[0].message == "must be at most 5"

    def test_collects_every_error(self):
        errors = validate_slicer_settings({"fan_speed": 150, "infill_density": -1, "bed_temp": 60})
        assert {e.field for e in errors} == {"fan_speed", "infill_density"}

    def test_integer_rejects_fraction(self):
        errors = validate_slicer_settings({"nozzle_temp": 210.5})
        assert errors[0].message == "must be a whole number"

    def test_integer_accepts_whole_float(self):
        assert validate_slicer_settings({"nozzle_temp": 210.0}) == []

    def test_bool_is_not_a_number(self):
        errors = validate_slicer_settings({"flow_rate": True})
        assert errors[0].message == "must be a number"

    def test_string_is_not_a_number(self):
        errors = validate_slicer_settings({"bed_temp": "60"})
        assert errors[0].message == "must be a number"

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("nozzle_temp", float("nan")),
            ("layer_height", float("nan")),
            ("print_speed", float("inf")),
            ("community_rating", Decimal("NaN")),
        ],
    )
    def test_non_finite_is_not_a_number(self, name, value):
        errors = validate_slicer_settings({name: value})
        assert [(e.field, e.message) for e in errors] == [(name, "must be a number")]

    def test_boolean_rejects_string(self):
        errors = validate_slicer_settings({"supports_enabled": "true"})
        assert errors[0].message == "must be true or false"

    def test_list_must_hold_strings(self):
        errors = validate_slicer_settings({"tags": ["ok", 3]})
        assert errors[0].message == "must be a list of strings"

    def test_text_must_be_string(self):
        errors = validate_slicer_settings({"custom_notes": 12})
        assert errors[0].message == "must be text"

    def test_enum_values_are_not_checked_for_membership(self):
        assert validate_slicer_settings({"infill_pattern": "Lightning"}) == []
