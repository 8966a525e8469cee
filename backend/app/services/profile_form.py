"""Turn an untyped profile form submission into typed service arguments.

The adapter only coerces types. Range checks belong to
``validate_slicer_settings`` and the known-column allowlist belongs to the
mutation service, so unrecognised form keys are passed through untouched.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from backend.app.core.errors import FieldError, ValidationError
from backend.app.services.slicer_settings import SLICER_SETTINGS, SettingKind, column_name

REQUIRED_FORM_FIELDS = ("userId", "filamentId", "filamentProfileName")
IDENTITY_FORM_FIELDS = frozenset(REQUIRED_FORM_FIELDS) | {"printerId", "clonedFromProfileId"}


@dataclass(slots=True)
class ProfileSubmission:
    user_id: str
    filament_id: str
    filament_profile_name: str
    printer_id: str | None = None
    cloned_from_profile_id: str | None = None
    slicer_settings: dict[str, Any] = field(default_factory=dict)


class _Unset:
    pass


UNSET = _Unset()


def _parse_decimal(raw: str) -> float | _Unset:
    try:
        value = float(raw)
    except ValueError:
        return UNSET
    if math.isnan(value) or math.isinf(value):
        return UNSET
    return value


def _parse_integer(raw: str) -> int | _Unset:
    try:
        return int(raw.strip())
    except ValueError:
        return UNSET


def _parse_list(raw: str) -> list[str]:
    if raw == "":
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def coerce_setting(kind: SettingKind, raw: str) -> Any:
    """Coerce one raw form string. Returns ``UNSET`` when a number does not parse."""
    if kind == SettingKind.DECIMAL:
        return _parse_decimal(raw)
    if kind == SettingKind.INTEGER:
        return _parse_integer(raw)
    if kind == SettingKind.BOOLEAN:
        return raw == "true"
    if kind == SettingKind.LIST:
        return _parse_list(raw)
    # TEXT and ENUM: enum values are cast, not checked for membership
    return str(raw)


def _optional_id(form: Mapping[str, str | None], key: str) -> str | None:
    value = form.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_profile_form(form: Mapping[str, str | None]) -> ProfileSubmission:
    """Parse a flat form map into a ``ProfileSubmission``.

    Raises ValidationError listing every missing required field.
    """
    missing = [key for key in REQUIRED_FORM_FIELDS if not (form.get(key) or "").strip()]
    if missing:
        raise ValidationError(
            "Missing required filament profile data",
            [FieldError(key, "is required") for key in missing],
        )

    slicer_settings: dict[str, Any] = {}
    for key, raw in form.items():
        if key in IDENTITY_FORM_FIELDS or raw is None:
            continue

        spec = SLICER_SETTINGS.get(column_name(key))
        if spec is None:
            slicer_settings[key] = raw
            continue

        value = coerce_setting(spec.kind, raw)
        if value is not UNSET:
            slicer_settings[key] = value

    return ProfileSubmission(
        user_id=form["userId"].strip(),
        filament_id=form["filamentId"].strip(),
        filament_profile_name=form["filamentProfileName"].strip(),
        printer_id=_optional_id(form, "printerId"),
        cloned_from_profile_id=_optional_id(form, "clonedFromProfileId"),
        slicer_settings=slicer_settings,
    )
