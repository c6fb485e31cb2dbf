"""
Calendar arithmetic helpers for occurrence generation.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from incomecalc.schema.enums import DaySelector, Ordinal


def get_month_end(year: int, month: int) -> date:
    """Get the last calendar day of a given month."""
    return date(year, month, calendar.monthrange(year, month)[1])


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, using the month end when ``day`` does not exist in that month."""
    month_end = get_month_end(year, month)
    return month_end if day >= month_end.day else date(year, month, day)


def add_months(dt: date, months: int) -> date:
    """Add months; the day is clamped to the target month's last day."""
    return dt + relativedelta(months=months)


def week_start(dt: date) -> date:
    """Monday of the week containing ``dt``."""
    return dt - timedelta(days=dt.weekday())


def month_index(dt: date) -> int:
    """Months since year 0, used to step whole months arithmetically."""
    return dt.year * 12 + dt.month - 1


def from_month_index(index: int) -> Tuple[int, int]:
    """Inverse of :func:`month_index`: ``(year, month)``."""
    return index // 12, index % 12 + 1


def steps_to_reach(distance: int, every: int) -> int:
    """Smallest ``k >= 0`` with ``k * every >= distance``."""
    if distance <= 0:
        return 0
    return -(-distance // every)


def positional_day(year: int, month: int, selector: DaySelector, on: Ordinal) -> Optional[date]:
    """Return the ``on``-th day of the month matching ``selector``.

    Returns ``None`` when the month has fewer matching days than requested.
    """
    last_day = calendar.monthrange(year, month)[1]
    matching: List[date] = [
        date(year, month, day)
        for day in range(1, last_day + 1)
        if selector.matches(calendar.weekday(year, month, day))
    ]
    index = on.index
    if index >= 0 and index < len(matching):
        return matching[index]
    if index < 0 and -index <= len(matching):
        return matching[index]
    return None
