"""
Family Calendar Lite — Month Grid.

Builds the fixed 6x7 Monday-first cell layout for the month view.
Months are addressed as (year, zero-based month index).
"""

from __future__ import annotations

from datetime import date, timedelta

GRID_CELLS = 42


def days_in_month(year: int, month_index: int) -> int:
    """Number of days in the month: the day before the 1st of next month."""
    next_year, next_index = shift_month(year, month_index, 1)
    last_day = date(next_year, next_index + 1, 1) - timedelta(days=1)
    return last_day.day


def month_grid(year: int, month_index: int) -> list[date | None]:
    """Return exactly 42 cells for the month, None for filler cells.

    The first real cell lands on the weekday column of the 1st
    (Monday=1 .. Sunday=7), so a month starting on Sunday gets six
    leading placeholders.
    """
    first = date(year, month_index + 1, 1)
    offset = first.isoweekday()

    cells: list[date | None] = [None] * (offset - 1)
    cells.extend(
        date(year, month_index + 1, day)
        for day in range(1, days_in_month(year, month_index) + 1)
    )
    while len(cells) < GRID_CELLS:
        cells.append(None)
    return cells


def shift_month(year: int, month_index: int, delta: int) -> tuple[int, int]:
    """Move (year, month_index) by delta months, e.g. -1 for previous."""
    total = year * 12 + month_index + delta
    return total // 12, total % 12


def is_drop_target(cell: date | None) -> bool:
    """Only real day cells accept dropped events."""
    return cell is not None
