"""Bounded, append-only audit trail."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, List

from .models import AuditEvent

AUDIT_CAPACITY = 500


class AuditTrail:
    """Keeps the most recent ``AUDIT_CAPACITY`` events, evicting the oldest first."""

    def __init__(self) -> None:
        self._events: Deque[AuditEvent] = deque()
        self._lock = threading.Lock()

    def add(self, event: AuditEvent) -> None:
        with self._lock:
            if len(self._events) >= AUDIT_CAPACITY:
                self._events.popleft()
            self._events.append(event)

    def latest(self, limit: int) -> List[AuditEvent]:
        """Return up to *limit* events, newest timestamp first.

        The caller is responsible for clamping *limit*. Events sharing a
        timestamp come back most recently added first.
        """

        with self._lock:
            snapshot = list(reversed(self._events))
        snapshot.sort(key=lambda event: event.timestamp, reverse=True)
        return snapshot[: max(limit, 0)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
