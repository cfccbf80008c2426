"""In-memory data layer for the clinical records service."""

from __future__ import annotations

from .appointments import AppointmentStore
from .audit import AUDIT_CAPACITY, AuditTrail
from .context import ClinicRecords, new_identifier, utc_now
from .errors import (
    ClinicError,
    InvalidStatusError,
    MrnAlreadyExistsError,
    NotFoundError,
    ValidationError,
)
from .models import SYSTEM_ACTOR, Appointment, AuditEvent, Patient
from .patients import PatientStore
from .status import (
    APPOINTMENT_STATUSES,
    PATIENT_STATUSES,
    validate_appointment_status,
    validate_patient_status,
)

__all__ = [
    "AUDIT_CAPACITY",
    "SYSTEM_ACTOR",
    "APPOINTMENT_STATUSES",
    "PATIENT_STATUSES",
    "Appointment",
    "AppointmentStore",
    "AuditEvent",
    "AuditTrail",
    "ClinicError",
    "ClinicRecords",
    "InvalidStatusError",
    "MrnAlreadyExistsError",
    "NotFoundError",
    "Patient",
    "PatientStore",
    "ValidationError",
    "new_identifier",
    "utc_now",
    "validate_appointment_status",
    "validate_patient_status",
]
