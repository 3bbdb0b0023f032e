"""
Family Calendar Lite — Event Store.

The in-memory, ordered collection of events that every view reads from.
Writes go to the backend first; the local collection changes only once the
backend has acknowledged, and then with exactly the shape that was sent.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator

from pydantic import ValidationError

from src.data.models import Event, start_sort_key
from src.ports.backend_port import BackendError

if TYPE_CHECKING:
    from src.ports.backend_port import BackendPort

logger = logging.getLogger(__name__)


class EventNotFoundError(Exception):
    """Raised when mutating an id that is no longer in memory."""


class EventBusyError(Exception):
    """Raised when a write is already in flight for the same event."""


class EventStore:
    """Single source of truth for the events the UI shows."""

    def __init__(self, backend: BackendPort) -> None:
        self._backend = backend
        self._events: list[Event] = []
        self._in_flight: set[str] = set()

    @property
    def events(self) -> list[Event]:
        """Snapshot of the collection in its current order."""
        return list(self._events)

    def get(self, event_id: str) -> Event | None:
        """Direct lookup by id; declined events are reachable here too."""
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def is_busy(self, event_id: str) -> bool:
        return event_id in self._in_flight

    @asynccontextmanager
    async def _writing(self, event_id: str) -> AsyncIterator[None]:
        if event_id in self._in_flight:
            raise EventBusyError(f"Event {event_id} is still being saved")
        self._in_flight.add(event_id)
        try:
            yield
        finally:
            self._in_flight.discard(event_id)

    async def load(self) -> list[Event]:
        """Replace the collection with the backend's rows, by start_at.

        On any failure the previous collection is kept and BackendError is
        raised; partial results are never exposed.
        """
        try:
            rows = await self._backend.select_all()
            events = [Event.model_validate(row) for row in rows]
        except BackendError as exc:
            logger.error("Failed to load events: %s", exc)
            raise
        except ValidationError as exc:
            logger.error("Backend returned malformed events: %s", exc)
            raise BackendError(f"Malformed event rows: {exc}") from exc

        # Stable: rows with equal start_at keep the backend order
        events.sort(key=start_sort_key)
        self._events = events
        logger.info("Loaded %d events", len(events))
        return self.events

    async def create(self, event: Event) -> Event:
        """Insert a new event and append it to the collection."""
        async with self._writing(event.id):
            try:
                await self._backend.insert(event.to_row())
            except BackendError as exc:
                logger.error("Failed to save '%s': %s", event.title, exc)
                raise
            self._events.append(event)
        logger.info("Event created: %s '%s' on %s", event.id, event.title, event.start_at)
        return event

    async def update(self, event_id: str, patch: dict) -> Event:
        """Patch an event by id and merge the same patch into memory."""
        current = self.get(event_id)
        if current is None:
            raise EventNotFoundError(event_id)

        patch = {k: v for k, v in patch.items() if k != "id"}
        merged = Event.model_validate({**current.to_row(), **patch})

        async with self._writing(event_id):
            try:
                await self._backend.update(event_id, patch)
            except BackendError as exc:
                logger.error("Failed to update '%s': %s", current.title, exc)
                raise
            self._events = [merged if e.id == event_id else e for e in self._events]
        logger.info("Event updated: %s (%s)", event_id, ", ".join(patch))
        return merged

    async def delete(self, event_id: str) -> None:
        """Delete permanently; there is no undo."""
        current = self.get(event_id)
        if current is None:
            raise EventNotFoundError(event_id)

        async with self._writing(event_id):
            try:
                await self._backend.delete(event_id)
            except BackendError as exc:
                logger.error("Failed to delete '%s': %s", current.title, exc)
                raise
            self._events = [e for e in self._events if e.id != event_id]
        logger.info("Event deleted: %s '%s'", event_id, current.title)
