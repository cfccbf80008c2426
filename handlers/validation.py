"""Input coercion shared by the request handlers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from records import SYSTEM_ACTOR, ValidationError


def require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


def require_text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be a non-empty string")
    return value.strip()


def optional_text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip()


def require_identifier(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} must be a non-empty string")
    return value.strip()


def parse_birth_date(value: Any, *, today: Optional[date] = None) -> date:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("date_of_birth must be a YYYY-MM-DD string")
    try:
        parsed = date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError("date_of_birth must be a YYYY-MM-DD string") from exc
    if parsed > (today or date.today()):
        raise ValidationError("date_of_birth cannot be in the future")
    return parsed


def parse_timestamp(value: Any, key: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""

    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be an ISO-8601 datetime string")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"{key} must be an ISO-8601 datetime string") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_actor(actor: Optional[str]) -> str:
    if actor is None or not actor.strip():
        return SYSTEM_ACTOR
    return actor.strip()
