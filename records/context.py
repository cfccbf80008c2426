"""Composition root bundling the stores with their collaborators."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from .appointments import AppointmentStore
from .audit import AuditTrail
from .patients import PatientStore


def new_identifier() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ClinicRecords:
    """One set of stores, created at startup and shared by every request."""

    patients: PatientStore = field(default_factory=PatientStore)
    appointments: AppointmentStore = field(default_factory=AppointmentStore)
    audit: AuditTrail = field(default_factory=AuditTrail)
    id_factory: Callable[[], str] = new_identifier
    clock: Callable[[], datetime] = utc_now
