"""
Family Calendar Lite — View Queries.

Derives what each view shows from the event collection. Every function
recomputes from the list it is given, so results always reflect the latest
mutation. Declined events never appear in any view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable

from src.data.models import (
    Event,
    EventStatus,
    Participant,
    event_date,
    get_status,
    start_sort_key,
)


def _this_month() -> tuple[int, int]:
    today = date.today()
    return today.year, today.month - 1


class View(Enum):
    MONTH = "month"
    AGENDA = "agenda"
    PENDING = "pending"


@dataclass
class ViewState:
    """Explicit UI state: active view, visible month, selection and filters."""

    view: View = View.MONTH
    # (year, zero-based month index)
    current_month: tuple[int, int] = field(default_factory=_this_month)
    selected_date: date = field(default_factory=date.today)
    drawer_open: bool = False
    filter_who: Participant | None = None  # None = everyone


def local_date_str(day: date) -> str:
    """Same YYYY-MM-DD form used in stored timestamps."""
    return day.isoformat()


def visible(events: Iterable[Event]) -> list[Event]:
    """Base filter shared by every view: drop declined events."""
    return [e for e in events if get_status(e) is not EventStatus.DECLINED]


def _on_day(events: Iterable[Event], day: date | None) -> list[Event]:
    if day is None:
        return []
    day_str = local_date_str(day)
    return [e for e in visible(events) if event_date(e) == day_str]


def month_cell_events(events: Iterable[Event], day: date | None) -> list[Event]:
    """Confirmed events starting on `day`; placeholders get nothing."""
    return [e for e in _on_day(events, day) if get_status(e) is EventStatus.CONFIRMED]


def drawer_events(events: Iterable[Event], day: date | None) -> list[Event]:
    """Everything on `day` except declined: pending first, then by start time."""
    return sorted(
        _on_day(events, day),
        key=lambda e: (get_status(e) is not EventStatus.PENDING, start_sort_key(e)),
    )


def agenda_list(events: Iterable[Event], state: ViewState) -> list[Event]:
    """Chronological list for the agenda and pending views.

    The agenda view keeps confirmed events, the pending view keeps pending
    ones; the participant filter applies on top of either.
    """
    result = sorted(visible(events), key=start_sort_key)

    if state.view is View.AGENDA:
        result = [e for e in result if get_status(e) is EventStatus.CONFIRMED]
    elif state.view is View.PENDING:
        result = [e for e in result if get_status(e) is EventStatus.PENDING]

    if state.filter_who is not None:
        result = [e for e in result if e.who == state.filter_who]

    return result


def pending_count(events: Iterable[Event], day: date | None) -> int:
    """Number of pending requests on `day` (drives the small pending dot)."""
    return sum(1 for e in _on_day(events, day) if get_status(e) is EventStatus.PENDING)
