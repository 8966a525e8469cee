"""Catalogue of the optional slicer settings stored on a filament profile.

Three things live here:

- ``SLICER_SETTINGS``: every persisted slicer-setting column with its value
  kind (used by the form adapter) and, for numbers, its allowed range.
- ``filter_known_settings``: the allowlist. Anything that is not a slicer
  setting column is dropped without complaint, so caller-supplied keys can
  never reach other columns (ids, owner, name, timestamps).
- ``validate_slicer_settings``: a per-field check that returns a list of
  ``FieldError`` instead of raising on the first problem.
"""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any

from backend.app.core.errors import FieldError
from backend.app.models.filament_profile import FilamentProfile

logger = logging.getLogger(__name__)


class SettingKind(StrEnum):
    TEXT = "text"
    DECIMAL = "decimal"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ENUM = "enum"
    LIST = "list"


@dataclass(slots=True, frozen=True)
class SettingSpec:
    kind: SettingKind
    minimum: float | None = None
    maximum: float | None = None


SLICER_SETTINGS: dict[str, SettingSpec] = {
    "source_slicer": SettingSpec(SettingKind.ENUM),
    "slicer_version": SettingSpec(SettingKind.TEXT),
    "custom_notes": SettingSpec(SettingKind.TEXT),
    "community_rating": SettingSpec(SettingKind.DECIMAL, 0, 5),
    "layer_height": SettingSpec(SettingKind.DECIMAL, 0.01, 2),
    "wall_thickness": SettingSpec(SettingKind.DECIMAL, 0, 20),
    "top_bottom_layers": SettingSpec(SettingKind.INTEGER, 0, 100),
    "infill_density": SettingSpec(SettingKind.INTEGER, 0, 100),
    "infill_pattern": SettingSpec(SettingKind.ENUM),
    "nozzle_temp": SettingSpec(SettingKind.INTEGER, 150, 450),
    "bed_temp": SettingSpec(SettingKind.INTEGER, 0, 150),
    "chamber_temp": SettingSpec(SettingKind.INTEGER, 0, 100),
    "print_speed": SettingSpec(SettingKind.DECIMAL, 1, 999.99),
    "wall_speed": SettingSpec(SettingKind.DECIMAL, 1, 999.99),
    "infill_speed": SettingSpec(SettingKind.DECIMAL, 1, 999.99),
    "travel_speed": SettingSpec(SettingKind.DECIMAL, 1, 999.99),
    "flow_rate": SettingSpec(SettingKind.INTEGER, 1, 200),
    "fan_speed": SettingSpec(SettingKind.INTEGER, 0, 100),
    "min_layer_time": SettingSpec(SettingKind.DECIMAL, 0, 999.99),
    "retraction_distance": SettingSpec(SettingKind.DECIMAL, 0, 20),
    "retraction_speed": SettingSpec(SettingKind.DECIMAL, 0, 200),
    "z_hop": SettingSpec(SettingKind.DECIMAL, 0, 10),
    "supports_enabled": SettingSpec(SettingKind.BOOLEAN),
    "support_type": SettingSpec(SettingKind.ENUM),
    "support_density": SettingSpec(SettingKind.INTEGER, 0, 100),
    "support_z_distance": SettingSpec(SettingKind.DECIMAL, 0, 10),
    "gcode_link": SettingSpec(SettingKind.TEXT),
    "profile_link": SettingSpec(SettingKind.TEXT),
    "tags": SettingSpec(SettingKind.LIST),
}

# Columns set by the mutation service itself, never through the settings map
PROFILE_IDENTITY_COLUMNS = frozenset(
    {
        "filament_profile_id",
        "user_id",
        "filament_id",
        "printer_id",
        "filament_profile_name",
        "submission_date",
        "cloned_from_profile_id",
    }
)

SLICER_SETTING_COLUMNS = frozenset(
    column.key for column in FilamentProfile.__table__.columns if column.key not in PROFILE_IDENTITY_COLUMNS
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def column_name(key: str) -> str:
    """Map a camelCase form key (``nozzleTemp``) to its column name (``nozzle_temp``)."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def filter_known_settings(settings: Mapping[str, Any] | None) -> dict[str, Any]:
    """Keep only entries that correspond to persisted slicer-setting columns.

    Keys may be camelCase or column names. Unknown keys are dropped; this is
    not an error.
    """
    known: dict[str, Any] = {}
    for key, value in (settings or {}).items():
        name = column_name(key)
        if name in SLICER_SETTING_COLUMNS:
            known[name] = value
        else:
            logger.debug("Dropping unknown slicer setting %r", key)
    return known


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    # NaN and infinities cannot be range-checked or stored
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def validate_slicer_settings(settings: Mapping[str, Any]) -> list[FieldError]:
    """Check types and ranges of already-filtered slicer settings.

    None always passes: every setting is optional.
    """
    errors: list[FieldError] = []
    for name, value in settings.items():
        spec = SLICER_SETTINGS.get(name)
        if spec is None or value is None:
            continue

        if spec.kind in (SettingKind.DECIMAL, SettingKind.INTEGER):
            if not _is_number(value):
                errors.append(FieldError(name, "must be a number"))
                continue
            if spec.kind == SettingKind.INTEGER and value != int(value):
                errors.append(FieldError(name, "must be a whole number"))
                continue
            if spec.minimum is not None and value < spec.minimum:
                errors.append(FieldError(name, f"must be at least {spec.minimum:g}"))
            elif spec.maximum is not None and value > spec.maximum:
                errors.append(FieldError(name, f"must be at most {spec.maximum:g}"))
        elif spec.kind == SettingKind.BOOLEAN:
            if not isinstance(value, bool):
                errors.append(FieldError(name, "must be true or false"))
        elif spec.kind == SettingKind.LIST:
            if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
                errors.append(FieldError(name, "must be a list of strings"))
        elif not isinstance(value, str):
            errors.append(FieldError(name, "must be text"))

    return errors
