"""
Family Calendar Lite — Data Models.

Events live in the remote `events` table; this module defines the record
shape shared by the in-memory store, the backend adapters and the views.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, field_validator


class Participant(str, Enum):
    """The three fixed family members an event can be attributed to."""

    CHILD = "child"
    PARENT_A = "parentA"
    PARENT_B = "parentB"


class EventStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class Event(BaseModel):
    """A calendar event, 1:1 with a row of the backend `events` table.

    JSON example:
    {
        "id": "3f0c1a5e-...",
        "title": "Dentist",
        "who": "child",
        "notes": "",
        "start_at": "2024-03-05T12:00:00",
        "end_at": "2024-03-05T13:00:00",
        "is_all_day": false,
        "status": "pending",
        "requested_by": "parentA",
        "needs_approval_from": "parentB"
    }

    `status` may be missing on legacy rows; read it through get_status().
    """

    id: str
    title: str
    who: Participant
    notes: str = ""
    start_at: str          # local YYYY-MM-DDTHH:MM:SS
    end_at: str
    is_all_day: bool = False
    status: EventStatus | None = None
    requested_by: Participant | None = None
    needs_approval_from: Participant | None = None

    @field_validator("notes", mode="before")
    @classmethod
    def parse_notes(cls, v: str | None) -> str:
        return v or ""

    @field_validator("is_all_day", mode="before")
    @classmethod
    def parse_all_day(cls, v: bool | int | None) -> bool:
        return bool(v)

    def to_row(self) -> dict:
        """Serialize to the backend row shape."""
        return self.model_dump(mode="json")


def get_status(event: Event | None) -> EventStatus:
    """Status of an event, reading a missing value as confirmed."""
    if event is None or event.status is None:
        return EventStatus.CONFIRMED
    return EventStatus(event.status)


def event_date(event: Event) -> str:
    """Calendar date part (YYYY-MM-DD) of an event's start timestamp."""
    return (event.start_at or "")[:10]


def start_sort_key(event: Event) -> datetime:
    """Sort key for start_at as local wall time; unparseable values sort last.

    Legacy rows may carry a trailing "Z" or offset, which is dropped rather
    than converted.
    """
    try:
        return datetime.fromisoformat(event.start_at).replace(tzinfo=None)
    except (TypeError, ValueError):
        return datetime.max
