"""
Family Calendar Lite — UI-Agnostic Calendar Service.

Orchestrates the user actions on events: save from the form, delete,
duplicate, drag to another day, and answer approval requests. Each action
returns a response object; expected failures never raise, so any UI can
render the outcome and go back to idle.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from src.core import approval
from src.core.approval import ApprovalError
from src.core.event_form import (
    EventDraft,
    EventValidationError,
    build_event,
    draft_from_event,
    new_draft,
)
from src.core.event_store import EventBusyError, EventNotFoundError
from src.core.reschedule import reschedule
from src.data.models import Event, Participant
from src.ports.backend_port import BackendError

if TYPE_CHECKING:
    from src.core.event_store import EventStore

logger = logging.getLogger(__name__)

DUPLICATE_SUFFIX = " (Copia)"


# ---------------------------------------------------------------------------
# Response types
# ---------------------------------------------------------------------------


class ResponseKind(Enum):
    SUCCESS = "success"
    ERROR = "error"
    NO_ACTION = "no_action"


@dataclass
class ServiceResponse:
    kind: ResponseKind
    message: str


@dataclass
class SuccessResponse(ServiceResponse):
    event: Event | None = None


@dataclass
class ErrorResponse(ServiceResponse):
    pass


@dataclass
class NoActionResponse(ServiceResponse):
    pass


def _error(message: str) -> ErrorResponse:
    return ErrorResponse(kind=ResponseKind.ERROR, message=message)


def _no_action(message: str) -> NoActionResponse:
    return NoActionResponse(kind=ResponseKind.NO_ACTION, message=message)


def _success(message: str, event: Event | None = None) -> SuccessResponse:
    return SuccessResponse(kind=ResponseKind.SUCCESS, message=message, event=event)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CalendarService:
    """Action layer between a UI and the event store."""

    def __init__(self, store: EventStore, acting_parent: Participant | str | None = None) -> None:
        if acting_parent is None:
            from src.config import settings
            acting_parent = settings.ACTING_PARENT

        self._store = store
        self._acting_parent = Participant(acting_parent)

    @property
    def acting_parent(self) -> Participant:
        return self._acting_parent

    # -- form ---------------------------------------------------------------

    def new_draft(self, day: date | None = None) -> EventDraft:
        return new_draft(day or date.today(), self._acting_parent)

    def edit_draft(self, event_id: str) -> EventDraft | None:
        event = self._store.get(event_id)
        if event is None:
            return None
        return draft_from_event(event, self._acting_parent)

    def toggle_approval(self, draft: EventDraft) -> EventDraft:
        return approval.toggle_requires_approval(draft, self._acting_parent)

    # -- actions ------------------------------------------------------------

    async def save(self, draft: EventDraft, event_id: str | None = None) -> ServiceResponse:
        """Create a new event, or replace every field of `event_id`."""
        if event_id is not None and self._store.get(event_id) is None:
            logger.debug("Save ignored: event %s no longer exists", event_id)
            return _no_action("This event no longer exists.")

        try:
            event = build_event(draft, event_id or str(uuid.uuid4()), self._acting_parent)
        except (EventValidationError, ApprovalError) as exc:
            return _error(str(exc))

        try:
            if event_id is None:
                saved = await self._store.create(event)
            else:
                patch = event.to_row()
                patch.pop("id")
                saved = await self._store.update(event_id, patch)
        except EventBusyError:
            return _error("This event is still being saved, try again in a moment.")
        except EventNotFoundError:
            return _no_action("This event no longer exists.")
        except BackendError:
            return _error("Couldn't save the event to the database.")

        return _success(f"'{saved.title}' saved.", saved)

    async def delete(self, event_id: str) -> ServiceResponse:
        try:
            await self._store.delete(event_id)
        except EventNotFoundError:
            logger.debug("Delete ignored: event %s not found", event_id)
            return _no_action("This event no longer exists.")
        except EventBusyError:
            return _error("This event is still being saved, try again in a moment.")
        except BackendError:
            return _error("Couldn't delete the event.")
        return _success("Event deleted.")

    async def duplicate(self, event_id: str) -> ServiceResponse:
        """Copy an event under a new id; approval state is copied as is."""
        original = self._store.get(event_id)
        if original is None:
            return _no_action("This event no longer exists.")

        copy = original.model_copy(update={
            "id": str(uuid.uuid4()),
            "title": f"{original.title}{DUPLICATE_SUFFIX}",
        })
        try:
            await self._store.create(copy)
        except BackendError:
            return _error("Couldn't duplicate the event.")
        return _success("Duplicated!", copy)

    async def move(self, event_id: str, target_date: date | None) -> ServiceResponse:
        """Drop handler: move the event to target_date keeping its times."""
        try:
            moved = await reschedule(self._store, event_id, target_date)
        except EventBusyError:
            return _error("This event is still being saved, try again in a moment.")
        except EventNotFoundError:
            return _no_action("This event no longer exists.")
        except BackendError:
            return _error("Couldn't move the event.")

        if moved is None:
            return _no_action("Nothing to move.")
        return _success(f"'{moved.title}' moved to {target_date.isoformat()}.", moved)

    async def respond(
        self,
        event_id: str,
        approve: bool,
        responder: Participant | str | None = None,
    ) -> ServiceResponse:
        """Approve or decline a pending request as `responder`."""
        event = self._store.get(event_id)
        if event is None:
            return _no_action("This event no longer exists.")

        try:
            patch = approval.respond(event, responder or self._acting_parent, approve)
        except ApprovalError as exc:
            return _error(str(exc))

        try:
            updated = await self._store.update(event_id, patch)
        except EventBusyError:
            return _error("This event is still being saved, try again in a moment.")
        except EventNotFoundError:
            return _no_action("This event no longer exists.")
        except BackendError:
            return _error("Couldn't save the answer.")

        verb = "approved" if approve else "declined"
        return _success(f"'{updated.title}' {verb}.", updated)
