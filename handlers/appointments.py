"""Appointment handlers providing scheduling operations."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Optional

from records import Appointment, ClinicRecords, NotFoundError, validate_appointment_status

from .audit import record_event
from .validation import parse_timestamp, require_identifier, require_mapping, require_text

logger = logging.getLogger(__name__)

ENTITY_TYPE = "appointment"


def _load_appointment(appointment_id: str, records: ClinicRecords) -> Appointment:
    appointment_id = require_identifier(appointment_id, "appointment_id")
    appointment = records.appointments.find_by_id(appointment_id)
    if appointment is None:
        raise NotFoundError(f"Appointment '{appointment_id}' does not exist")
    return appointment


def create_appointment(
    payload: Any,
    *,
    records: ClinicRecords,
    actor: Optional[str] = None,
) -> Dict[str, Any]:
    """Schedule an appointment for a registered patient."""

    data = require_mapping(payload)
    patient_id = require_identifier(data.get("patient_id"), "patient_id")
    scheduled_at = parse_timestamp(data.get("scheduled_at"), "scheduled_at")
    department = require_text(data, "department")
    provider = require_text(data, "provider")

    if records.patients.find_by_id(patient_id) is None:
        logger.warning("Rejected appointment for unknown patient %s", patient_id)
        raise NotFoundError(f"Patient '{patient_id}' does not exist")

    appointment = Appointment(
        id=records.id_factory(),
        patient_id=patient_id,
        scheduled_at=scheduled_at,
        department=department,
        provider=provider,
    )
    records.appointments.save(appointment)

    record_event(
        "CREATE",
        ENTITY_TYPE,
        appointment.id,
        records=records,
        actor=actor,
        metadata={"patient_id": patient_id},
    )
    logger.info("Scheduled appointment %s for patient %s", appointment.id, patient_id)
    return appointment.to_dict()


def get_appointment(appointment_id: str, *, records: ClinicRecords) -> Dict[str, Any]:
    return _load_appointment(appointment_id, records).to_dict()


def list_patient_appointments(patient_id: str, *, records: ClinicRecords) -> List[Dict[str, Any]]:
    """Retrieve the patient's appointments in scheduled order."""

    patient_id = require_identifier(patient_id, "patient_id")
    if records.patients.find_by_id(patient_id) is None:
        raise NotFoundError(f"Patient '{patient_id}' does not exist")
    return [record.to_dict() for record in records.appointments.list_for_patient(patient_id)]


def update_appointment_status(
    appointment_id: str,
    status: Any,
    *,
    records: ClinicRecords,
    actor: Optional[str] = None,
) -> Dict[str, Any]:
    """Replace the appointment's status; concurrent updates are last-writer-wins."""

    existing = _load_appointment(appointment_id, records)
    target = validate_appointment_status(status)
    updated = dataclasses.replace(existing, status=target)
    records.appointments.save(updated)

    record_event(
        "UPDATE_STATUS",
        ENTITY_TYPE,
        updated.id,
        records=records,
        actor=actor,
        metadata={"from": existing.status, "to": target},
    )
    logger.info("Appointment %s status %s -> %s", updated.id, existing.status, target)
    return updated.to_dict()
