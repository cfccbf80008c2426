"""Record types held by the clinical stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Union

MetadataValue = Union[str, int, float]

PATIENT_ACTIVE = "ACTIVE"
PATIENT_INACTIVE = "INACTIVE"

APPOINTMENT_SCHEDULED = "SCHEDULED"
APPOINTMENT_COMPLETED = "COMPLETED"
APPOINTMENT_CANCELED = "CANCELED"

SYSTEM_ACTOR = "system"


@dataclass(frozen=True)
class Patient:
    """Demographic record keyed by ``id`` and by its medical record number."""

    id: str
    first_name: str
    last_name: str
    date_of_birth: date
    phone: str
    email: str
    mrn: str
    status: str = PATIENT_ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "date_of_birth": self.date_of_birth.isoformat(),
            "phone": self.phone,
            "email": self.email,
            "mrn": self.mrn,
            "status": self.status,
        }


@dataclass(frozen=True)
class Appointment:
    """Appointment owned by a patient; ``patient_id`` is a plain reference."""

    id: str
    patient_id: str
    scheduled_at: datetime
    department: str
    provider: str
    status: str = APPOINTMENT_SCHEDULED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "patient_id": self.patient_id,
            "scheduled_at": self.scheduled_at.isoformat(),
            "department": self.department,
            "provider": self.provider,
            "status": self.status,
        }


@dataclass(frozen=True)
class AuditEvent:
    """Immutable record of one successful mutation."""

    id: str
    timestamp: datetime
    action: str
    entity_type: str
    entity_id: str
    actor: str = SYSTEM_ACTOR
    metadata: Mapping[str, MetadataValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "actor": self.actor,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "metadata": dict(self.metadata),
        }
