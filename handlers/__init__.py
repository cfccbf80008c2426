"""Request handlers translating validated input into store operations."""

from .appointments import (
    create_appointment,
    get_appointment,
    list_patient_appointments,
    update_appointment_status,
)
from .audit import latest_audit_events, record_event
from .patients import (
    create_patient,
    delete_patient,
    get_patient,
    search_patients,
    update_patient_status,
)

__all__ = [
    "create_appointment",
    "create_patient",
    "delete_patient",
    "get_appointment",
    "get_patient",
    "latest_audit_events",
    "list_patient_appointments",
    "record_event",
    "search_patients",
    "update_appointment_status",
    "update_patient_status",
]
