"""
Interval algebra over closed date ranges that may be unbounded forward.

Functions accept anything exposing ``start_date`` and ``end_date`` (``None``
meaning no end), so recurrence rules and plain ``DateRange`` values mix
freely. Inputs are never mutated.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Protocol

from incomecalc.schema.periods import DateRange


class Span(Protocol):
    start_date: date
    end_date: Optional[date]


def _is_empty(period: Span) -> bool:
    return period.end_date is not None and period.end_date < period.start_date


def in_period(dt: date, start_date: date, end_date: Optional[date] = None) -> bool:
    """Inclusive membership test; a missing end date means unbounded."""
    return dt >= start_date and (end_date is None or dt <= end_date)


def overlapping(period1: Span, period2: Span) -> bool:
    """True if the two ranges share at least one date (touching counts).

    A range ending before it starts holds no dates and overlaps nothing.
    """
    if _is_empty(period1) or _is_empty(period2):
        return False
    if period1.end_date is not None and period2.start_date > period1.end_date:
        return False
    if period2.end_date is not None and period1.start_date > period2.end_date:
        return False
    return True


def intersection(period1: Span, period2: Span) -> Optional[DateRange]:
    """Return the overlapping sub-range, or ``None`` when the ranges are disjoint."""
    if not overlapping(period1, period2):
        return None
    start = later_date(period1.start_date, period2.start_date)
    if period1.end_date is not None and period2.end_date is not None:
        end = earlier_date(period1.end_date, period2.end_date)
    else:
        end = period1.end_date if period1.end_date is not None else period2.end_date
    return DateRange(start, end)


def merge(periods: Iterable[Span]) -> List[DateRange]:
    """
    Merge overlapping or adjacent ranges.

    Ranges are sorted by start date and folded left: the next range is absorbed
    when it starts no later than the day after the running range ends, or when
    the running range is already unbounded.

    Returns:
        Ascending list of disjoint, non-adjacent ranges
    """
    ordered = sorted(periods, key=lambda p: p.start_date)
    if not ordered:
        return []

    merged: List[DateRange] = []
    start, end = ordered[0].start_date, ordered[0].end_date
    for period in ordered[1:]:
        if end is None:
            continue
        if (period.start_date - end).days <= 1:
            if period.end_date is None:
                end = None
            else:
                end = later_date(end, period.end_date)
        else:
            merged.append(DateRange(start, end))
            start, end = period.start_date, period.end_date
    merged.append(DateRange(start, end))
    return merged


def later_date(date1: date, date2: date) -> date:
    return date1 if date1 > date2 else date2


def earlier_date(date1: date, date2: date) -> date:
    return date1 if date1 < date2 else date2
