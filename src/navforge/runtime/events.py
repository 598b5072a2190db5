"""Bounded performance event log."""

from __future__ import annotations

import logging
import time
from typing import Literal

from pydantic import BaseModel, ValidationError

from navforge.runtime.storage import KeyValueStore, MemoryKeyValueStore
from navforge.state import NavigatorMode
from navforge.util.logging import get_logger, log_event, redact

LOG_STORAGE_KEY = "performance_logger_events"
MAX_EVENTS = 100

Outcome = Literal["success", "fail", "stuck", "skipped"]


def now_ms() -> int:
    return int(time.time() * 1000)


class PerfEvent(BaseModel):
    timestamp: int
    task_id: str
    step: int
    actor: str
    modality: NavigatorMode | None = None
    action: str | None = None
    outcome: Outcome | None = None
    origin: str
    session_id: str
    note: str | None = None


class PerformanceLogger:
    """Append-only log keeping the most recent ``max_events`` entries.

    Persisted events are loaded lazily on first access. Entries that no longer
    validate are skipped with a warning.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        max_events: int = MAX_EVENTS,
        storage_key: str = LOG_STORAGE_KEY,
    ) -> None:
        self.store = store or MemoryKeyValueStore()
        self.max_events = max(1, max_events)
        self.storage_key = storage_key
        self.logger = get_logger("navforge.events")
        self._events: list[PerfEvent] = []
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        raw_events = self.store.get(self.storage_key)
        events: list[PerfEvent] = []
        if isinstance(raw_events, list):
            for raw in raw_events[-self.max_events :]:
                try:
                    events.append(PerfEvent.model_validate(raw))
                except ValidationError as exc:
                    log_event(
                        self.logger,
                        logging.WARNING,
                        "events.skip_invalid",
                        errors=exc.error_count(),
                    )
        self._events = events
        self._loaded = True

    def _persist(self) -> None:
        self.store.set(
            self.storage_key,
            [event.model_dump(mode="json") for event in self._events],
        )

    def add_event(self, event: PerfEvent) -> None:
        self._ensure_loaded()
        if event.note:
            event = event.model_copy(update={"note": redact(event.note)})
        self._events.append(event)
        if len(self._events) > self.max_events:
            self._events = self._events[-self.max_events :]
        self._persist()

    def get_events(self) -> list[PerfEvent]:
        self._ensure_loaded()
        return list(self._events)

    def clear(self) -> None:
        self._events = []
        self._loaded = True
        self._persist()
