"""In-memory patient repository with a unique MRN index."""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from .models import Patient


class PatientStore:
    """Thread-safe patient storage keyed by id, indexed by MRN.

    The primary map and the MRN index are only touched while holding the same
    lock, so readers never observe one updated without the other.
    """

    def __init__(self) -> None:
        self._patients: Dict[str, Patient] = {}
        self._mrn_index: Dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, patient: Patient) -> Patient:
        """Insert or replace *patient*; MRN uniqueness is not checked here."""

        with self._lock:
            self._put(patient)
        return patient

    def save_if_mrn_absent(self, patient: Patient) -> bool:
        """Insert *patient* unless its MRN already belongs to a stored patient."""

        with self._lock:
            owner_id = self._mrn_index.get(patient.mrn)
            if owner_id is not None and owner_id in self._patients:
                return False
            self._put(patient)
        return True

    def _put(self, patient: Patient) -> None:
        previous = self._patients.get(patient.id)
        if previous is not None and previous.mrn != patient.mrn:
            if self._mrn_index.get(previous.mrn) == patient.id:
                del self._mrn_index[previous.mrn]
        self._patients[patient.id] = patient
        self._mrn_index[patient.mrn] = patient.id

    def find_by_id(self, patient_id: str) -> Optional[Patient]:
        with self._lock:
            return self._patients.get(patient_id)

    def find_by_mrn(self, mrn: str) -> Optional[Patient]:
        with self._lock:
            patient_id = self._mrn_index.get(mrn)
            if patient_id is None:
                return None
            return self._patients.get(patient_id)

    def search(self, query: str = "", status_filter: str = "") -> List[Patient]:
        """Return patients matching both filters, ordered by last then first name.

        ``status_filter`` is compared case-insensitively for equality; ``query``
        is a case-insensitive substring of the full name or the MRN. Empty
        filters match every patient.
        """

        needle = query.lower()
        status = status_filter.upper()
        with self._lock:
            candidates = list(self._patients.values())

        matches: List[Patient] = []
        for patient in candidates:
            if status and patient.status.upper() != status:
                continue
            if needle and needle not in patient.full_name.lower() and needle not in patient.mrn.lower():
                continue
            matches.append(patient)
        return sorted(matches, key=lambda record: (record.last_name, record.first_name))

    def delete(self, patient_id: str) -> None:
        with self._lock:
            patient = self._patients.pop(patient_id, None)
            if patient is None:
                return
            if self._mrn_index.get(patient.mrn) == patient_id:
                del self._mrn_index[patient.mrn]

    def count(self) -> int:
        with self._lock:
            return len(self._patients)
