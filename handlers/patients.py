"""Patient handlers: registration, lookup, search, status and removal."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Optional

from records import (
    ClinicRecords,
    MrnAlreadyExistsError,
    NotFoundError,
    Patient,
    ValidationError,
    validate_patient_status,
)

from .audit import record_event
from .validation import optional_text, parse_birth_date, require_identifier, require_mapping, require_text

logger = logging.getLogger(__name__)

ENTITY_TYPE = "patient"


def _load_patient(patient_id: str, records: ClinicRecords) -> Patient:
    patient_id = require_identifier(patient_id, "patient_id")
    patient = records.patients.find_by_id(patient_id)
    if patient is None:
        raise NotFoundError(f"Patient '{patient_id}' does not exist")
    return patient


def create_patient(
    payload: Any,
    *,
    records: ClinicRecords,
    actor: Optional[str] = None,
) -> Dict[str, Any]:
    """Register a new patient with a unique MRN."""

    data = require_mapping(payload)
    first_name = require_text(data, "first_name")
    last_name = require_text(data, "last_name")
    date_of_birth = parse_birth_date(data.get("date_of_birth"))
    mrn = require_text(data, "mrn")
    phone = optional_text(data, "phone")
    email = optional_text(data, "email")
    if email and "@" not in email:
        raise ValidationError("email must be a valid address")

    patient = Patient(
        id=records.id_factory(),
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date_of_birth,
        phone=phone,
        email=email,
        mrn=mrn,
    )
    if not records.patients.save_if_mrn_absent(patient):
        logger.warning("Rejected patient registration for duplicate MRN %s", mrn)
        raise MrnAlreadyExistsError(f"A patient with MRN '{mrn}' already exists")

    record_event("CREATE", ENTITY_TYPE, patient.id, records=records, actor=actor, metadata={"mrn": mrn})
    logger.info("Registered patient %s (MRN %s)", patient.id, mrn)
    return patient.to_dict()


def get_patient(patient_id: str, *, records: ClinicRecords) -> Dict[str, Any]:
    return _load_patient(patient_id, records).to_dict()


def search_patients(
    query: Optional[str] = None,
    status: Optional[str] = None,
    *,
    records: ClinicRecords,
) -> List[Dict[str, Any]]:
    """Search by name or MRN substring, optionally restricted to one status."""

    matches = records.patients.search((query or "").strip(), (status or "").strip())
    return [patient.to_dict() for patient in matches]


def update_patient_status(
    patient_id: str,
    status: Any,
    *,
    records: ClinicRecords,
    actor: Optional[str] = None,
) -> Dict[str, Any]:
    """Replace the patient's status, keeping every other field.

    The read and the save are not atomic: two concurrent updates to the same
    patient resolve last-writer-wins.
    """

    existing = _load_patient(patient_id, records)
    target = validate_patient_status(status)
    updated = dataclasses.replace(existing, status=target)
    records.patients.save(updated)

    record_event(
        "UPDATE_STATUS",
        ENTITY_TYPE,
        updated.id,
        records=records,
        actor=actor,
        metadata={"from": existing.status, "to": target},
    )
    logger.info("Patient %s status %s -> %s", updated.id, existing.status, target)
    return updated.to_dict()


def delete_patient(
    patient_id: str,
    *,
    records: ClinicRecords,
    actor: Optional[str] = None,
) -> None:
    """Remove the patient after removing every appointment indexed under them."""

    patient = _load_patient(patient_id, records)
    appointments = records.appointments.list_for_patient(patient.id)
    for appointment in appointments:
        records.appointments.delete(appointment.id)
    records.patients.delete(patient.id)

    record_event(
        "DELETE",
        ENTITY_TYPE,
        patient.id,
        records=records,
        actor=actor,
        metadata={"mrn": patient.mrn, "appointments_removed": len(appointments)},
    )
    logger.info("Deleted patient %s and %d appointment(s)", patient.id, len(appointments))
