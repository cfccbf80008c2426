"""Allowed status targets for patients and appointments.

Both entity types use an allow-list of target values rather than a transition
matrix: any current status may move to any allowed value, itself included.
"""

from __future__ import annotations

from typing import FrozenSet

from .errors import InvalidStatusError
from .models import (
    APPOINTMENT_CANCELED,
    APPOINTMENT_COMPLETED,
    APPOINTMENT_SCHEDULED,
    PATIENT_ACTIVE,
    PATIENT_INACTIVE,
)

PATIENT_STATUSES: FrozenSet[str] = frozenset({PATIENT_ACTIVE, PATIENT_INACTIVE})
APPOINTMENT_STATUSES: FrozenSet[str] = frozenset(
    {APPOINTMENT_SCHEDULED, APPOINTMENT_COMPLETED, APPOINTMENT_CANCELED}
)


def _normalize_target(value: object, allowed: FrozenSet[str], label: str) -> str:
    if not isinstance(value, str):
        raise InvalidStatusError(f"{label} status must be a string")
    normalized = value.strip().upper()
    if normalized not in allowed:
        options = ", ".join(sorted(allowed))
        raise InvalidStatusError(f"Invalid {label} status '{value}'; expected one of {options}")
    return normalized


def validate_patient_status(value: object) -> str:
    """Return the canonical patient status for *value* or raise ``InvalidStatusError``."""

    return _normalize_target(value, PATIENT_STATUSES, "patient")


def validate_appointment_status(value: object) -> str:
    """Return the canonical appointment status for *value* or raise ``InvalidStatusError``."""

    return _normalize_target(value, APPOINTMENT_STATUSES, "appointment")
