"""In-memory appointment repository indexed by owning patient."""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Set

from .models import Appointment


class AppointmentStore:
    """Thread-safe appointment storage with a patient -> appointment ids index."""

    def __init__(self) -> None:
        self._appointments: Dict[str, Appointment] = {}
        self._by_patient: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def save(self, appointment: Appointment) -> Appointment:
        with self._lock:
            previous = self._appointments.get(appointment.id)
            if previous is not None and previous.patient_id != appointment.patient_id:
                self._unindex(previous)
            self._appointments[appointment.id] = appointment
            self._by_patient.setdefault(appointment.patient_id, set()).add(appointment.id)
        return appointment

    def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        with self._lock:
            return self._appointments.get(appointment_id)

    def list_for_patient(self, patient_id: str) -> List[Appointment]:
        """Return the patient's appointments ordered by scheduled time.

        Index entries whose appointment is gone are skipped. Unknown patients
        yield an empty list.
        """

        with self._lock:
            appointment_ids = list(self._by_patient.get(patient_id, ()))
            records = [
                self._appointments[appointment_id]
                for appointment_id in appointment_ids
                if appointment_id in self._appointments
            ]
        return sorted(records, key=lambda record: record.scheduled_at)

    def delete(self, appointment_id: str) -> None:
        with self._lock:
            appointment = self._appointments.pop(appointment_id, None)
            if appointment is not None:
                self._unindex(appointment)

    def count(self) -> int:
        with self._lock:
            return len(self._appointments)

    def _unindex(self, appointment: Appointment) -> None:
        appointment_ids = self._by_patient.get(appointment.patient_id)
        if appointment_ids is None:
            return
        appointment_ids.discard(appointment.id)
        if not appointment_ids:
            del self._by_patient[appointment.patient_id]
