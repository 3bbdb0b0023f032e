"""
Family Calendar Lite — Drag-and-drop rescheduling.

Moving an event to another day keeps its time of day, so the duration is
unchanged. Only start_at/end_at are written; approval state stays as is.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from src.core.query import local_date_str
from src.data.models import Event

if TYPE_CHECKING:
    from src.core.event_store import EventStore

logger = logging.getLogger(__name__)


def _time_part(timestamp: str) -> str:
    _, _, time_part = (timestamp or "").partition("T")
    return time_part.strip()


def plan_reschedule(event: Event, target_date: date) -> dict | None:
    """Return the {start_at, end_at} patch for moving `event` to target_date.

    None when either timestamp has no time component; a malformed
    timestamp is never written.
    """
    start_time = _time_part(event.start_at)
    end_time = _time_part(event.end_at)
    if not start_time or not end_time:
        return None

    day = local_date_str(target_date)
    return {
        "start_at": f"{day}T{start_time}",
        "end_at": f"{day}T{end_time}",
    }


async def reschedule(
    store: EventStore, event_id: str, target_date: date | None,
) -> Event | None:
    """Move the dragged event to target_date through a single store update.

    Unknown ids, filler cells and events without time components are
    silent no-ops returning None. BackendError propagates from the store.
    """
    if target_date is None:
        return None

    event = store.get(event_id)
    if event is None:
        logger.debug("Drop ignored: event %s not found", event_id)
        return None

    patch = plan_reschedule(event, target_date)
    if patch is None:
        logger.warning("Drop ignored: '%s' has no time component", event.title)
        return None

    return await store.update(event_id, patch)
