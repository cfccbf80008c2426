"""Audit trail recording and querying for the request handlers."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from records import AuditEvent, ClinicRecords, ValidationError

from .validation import normalize_actor

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_LIMIT = 50
MIN_AUDIT_LIMIT = 1
MAX_AUDIT_LIMIT = 200


def record_event(
    action: str,
    entity_type: str,
    entity_id: str,
    *,
    records: ClinicRecords,
    actor: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> AuditEvent:
    """Append one audit event describing a completed mutation."""

    event = AuditEvent(
        id=records.id_factory(),
        timestamp=records.clock(),
        actor=normalize_actor(actor),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata=dict(metadata or {}),
    )
    records.audit.add(event)
    logger.debug("Audit %s %s %s by %s", action, entity_type, entity_id, event.actor)
    return event


def clamp_limit(limit: Any) -> int:
    if limit is None or limit == "":
        return DEFAULT_AUDIT_LIMIT
    try:
        value = int(limit)
    except (TypeError, ValueError) as exc:
        raise ValidationError("limit must be an integer") from exc
    return max(MIN_AUDIT_LIMIT, min(MAX_AUDIT_LIMIT, value))


def latest_audit_events(limit: Any = None, *, records: ClinicRecords) -> List[Dict[str, Any]]:
    """Return the newest audit events as dictionaries."""

    return [event.to_dict() for event in records.audit.latest(clamp_limit(limit))]
