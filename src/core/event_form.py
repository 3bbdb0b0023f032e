"""
Family Calendar Lite — Event Form.

Holds the editable state of the create/edit form and turns it into an
Event record. All validation happens here, before anything is sent to
the backend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from src.core.approval import resolve_routing
from src.data.models import Event, EventStatus, Participant, get_status

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = "12:00"
DEFAULT_END_TIME = "13:00"
ALL_DAY_START = "00:00:00"
ALL_DAY_END = "23:59:59"


class EventValidationError(Exception):
    """Raised when form input cannot be saved as an event."""


@dataclass
class EventDraft:
    """Form state for creating or editing an event."""

    title: str = ""
    who: Participant = Participant.CHILD
    start_date: str = ""                    # ISO date YYYY-MM-DD
    start_time: str = DEFAULT_START_TIME    # HH:MM, ignored when all-day
    end_time: str = DEFAULT_END_TIME
    is_all_day: bool = False
    notes: str = ""
    status: EventStatus = EventStatus.CONFIRMED
    requested_by: Participant | None = None
    needs_approval_from: Participant | None = None


def new_draft(day: date, acting_parent: Participant) -> EventDraft:
    """Blank form for a new event on `day`."""
    return EventDraft(start_date=day.isoformat(), requested_by=acting_parent)


def draft_from_event(event: Event, acting_parent: Participant) -> EventDraft:
    """Prefill the form from an existing event."""
    start_date, _, start_rest = event.start_at.partition("T")
    _, _, end_rest = event.end_at.partition("T")
    return EventDraft(
        title=event.title,
        who=Participant(event.who),
        start_date=start_date,
        start_time=start_rest[:5] or DEFAULT_START_TIME,
        end_time=end_rest[:5] or DEFAULT_END_TIME,
        is_all_day=event.is_all_day,
        notes=event.notes,
        status=get_status(event),
        requested_by=event.requested_by or acting_parent,
        needs_approval_from=event.needs_approval_from,
    )


def _parse_time(value: str, label: str) -> datetime:
    try:
        return datetime.strptime(value, "%H:%M")
    except (TypeError, ValueError) as exc:
        raise EventValidationError(f"Invalid {label} time: {value!r}") from exc


def build_timestamps(draft: EventDraft) -> tuple[str, str]:
    """Return (start_at, end_at) for the draft.

    All-day events are pinned to the day boundary whatever the time fields say.
    """
    if not draft.start_date:
        raise EventValidationError("Pick a date")
    try:
        day = date.fromisoformat(draft.start_date)
    except ValueError as exc:
        raise EventValidationError(f"Invalid date: {draft.start_date!r}") from exc

    if draft.is_all_day:
        return f"{day.isoformat()}T{ALL_DAY_START}", f"{day.isoformat()}T{ALL_DAY_END}"

    start = _parse_time(draft.start_time, "start")
    end = _parse_time(draft.end_time, "end")
    if end <= start:
        raise EventValidationError("The end must be after the start")

    return (
        f"{day.isoformat()}T{start:%H:%M}:00",
        f"{day.isoformat()}T{end:%H:%M}:00",
    )


def build_event(draft: EventDraft, event_id: str, acting_parent: Participant) -> Event:
    """Validate the draft and produce the Event that will be written.

    Raises:
        EventValidationError: empty title, missing date, end not after start.
        ApprovalError: pending event without a resolvable approver.
    """
    title = draft.title.strip()
    if not title:
        raise EventValidationError("Enter a title")

    start_at, end_at = build_timestamps(draft)
    requested_by, needs_approval_from = resolve_routing(
        draft.status, draft.requested_by, acting_parent,
    )

    return Event(
        id=event_id,
        title=title,
        who=draft.who,
        notes=draft.notes,
        start_at=start_at,
        end_at=end_at,
        is_all_day=draft.is_all_day,
        status=draft.status,
        requested_by=requested_by,
        needs_approval_from=needs_approval_from,
    )
