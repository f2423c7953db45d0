"""Event publisher that keeps every published event in memory."""

from __future__ import annotations

import threading

from ..domain import DomainEvent


class RecordingEventPublisher:
    """Records published events so they can be inspected later."""

    def __init__(self) -> None:
        self._events: list[DomainEvent] = []
        self._lock = threading.Lock()

    def publish(self, event: DomainEvent) -> None:
        """Record ``event``."""
        with self._lock:
            self._events.append(event)

    def published_events(self) -> list[DomainEvent]:
        """All events published so far, oldest first."""
        with self._lock:
            return list(self._events)