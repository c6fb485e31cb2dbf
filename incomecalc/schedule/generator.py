"""
Occurrence generation for recurring calculation periods.

``occurrences`` maps a recurrence rule and an inclusive query window to the
ascending list of dates on which the rule fires. Results only depend on the
rule and the window: dates are always stepped from the rule's own anchor
(its start date), so restricting the window restricts the output and nothing
else.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Tuple

from incomecalc.schema.periods import (
    DailyPeriod,
    DayRule,
    FixedDay,
    MonthlyPeriod,
    Period,
    PositionalDay,
    WeeklyPeriod,
    YearlyPeriod,
)

from .adjustments import (
    add_months,
    clamp_day,
    from_month_index,
    month_index,
    positional_day,
    steps_to_reach,
    week_start,
)


def effective_span(
    period: Period, window_start: date, window_end: date
) -> Optional[Tuple[date, date]]:
    """Intersect the rule's own span with the window.

    Returns ``None`` when the intersection is empty, including malformed rules
    and windows whose start lies after their end.
    """
    lo = max(period.start_date, window_start)
    hi = window_end if period.end_date is None else min(period.end_date, window_end)
    if period.end_date is not None and period.start_date > period.end_date:
        return None
    if lo > hi:
        return None
    return lo, hi


def occurrences(period: Period, window_start: date, window_end: date) -> List[date]:
    """
    Generate the dates on which ``period`` fires inside ``[window_start, window_end]``.

    Args:
        period: Recurrence rule (daily, weekly, monthly or yearly)
        window_start: First date of the query window (inclusive)
        window_end: Last date of the query window (inclusive)

    Returns:
        Ascending list of occurrence dates; empty for malformed rules
    """
    span = effective_span(period, window_start, window_end)
    if span is None or period.every < 1:
        return []
    lo, hi = span

    if isinstance(period, DailyPeriod):
        return _daily_occurrences(period, lo, hi)
    elif isinstance(period, WeeklyPeriod):
        return _weekly_occurrences(period, lo, hi)
    elif isinstance(period, MonthlyPeriod):
        return _monthly_occurrences(period, lo, hi)
    elif isinstance(period, YearlyPeriod):
        return _yearly_occurrences(period, lo, hi)
    else:
        raise TypeError(f"Unsupported period type: {type(period).__name__}")


def _daily_occurrences(period: DailyPeriod, lo: date, hi: date) -> List[date]:
    every = period.every
    offset = (lo - period.start_date).days
    current = period.start_date + timedelta(days=steps_to_reach(offset, every) * every)

    dates = []
    while current <= hi:
        dates.append(current)
        current += timedelta(days=every)
    return dates


def _weekly_occurrences(period: WeeklyPeriod, lo: date, hi: date) -> List[date]:
    weekdays = sorted({weekday.number for weekday in period.weekdays})
    if not weekdays:
        return []

    anchor = week_start(period.start_date)
    weeks_to_window = (week_start(lo) - anchor).days // 7
    current = anchor + timedelta(weeks=steps_to_reach(weeks_to_window, period.every) * period.every)

    dates = []
    while current <= hi:
        for weekday in weekdays:
            candidate = current + timedelta(days=weekday)
            if lo <= candidate <= hi:
                dates.append(candidate)
        current += timedelta(weeks=period.every)
    return dates


def _monthly_occurrences(period: MonthlyPeriod, lo: date, hi: date) -> List[date]:
    rule = period.day_rule
    dates = []

    if isinstance(rule, FixedDay):
        if rule.day < 1:
            return []
        # Clamping is sticky: each step starts from the previous (possibly
        # clamped) date, so the walk always begins at the anchor month.
        current = clamp_day(period.start_date.year, period.start_date.month, rule.day)
        while current <= hi:
            if current >= lo:
                dates.append(current)
            current = add_months(current, period.every)
        return dates

    anchor = month_index(period.start_date)
    index = anchor + steps_to_reach(month_index(lo) - anchor, period.every) * period.every
    last_index = month_index(hi)
    while index <= last_index:
        year, month = from_month_index(index)
        candidate = _day_in_month(rule, year, month)
        if candidate is not None and lo <= candidate <= hi:
            dates.append(candidate)
        index += period.every
    return dates


def _yearly_occurrences(period: YearlyPeriod, lo: date, hi: date) -> List[date]:
    months = sorted({month.number for month in period.months})
    if not months:
        return []
    if isinstance(period.day_rule, FixedDay) and period.day_rule.day < 1:
        return []

    start_year = period.start_date.year
    year = start_year + steps_to_reach(lo.year - start_year, period.every) * period.every

    dates = []
    while year <= hi.year:
        for month in months:
            candidate = _day_in_month(period.day_rule, year, month)
            if candidate is not None and lo <= candidate <= hi:
                dates.append(candidate)
        year += period.every
    return dates


def _day_in_month(rule: DayRule, year: int, month: int) -> Optional[date]:
    """Resolve a day rule for one month, independently of other months."""
    if isinstance(rule, FixedDay):
        return clamp_day(year, month, rule.day)
    elif isinstance(rule, PositionalDay):
        return positional_day(year, month, rule.day, rule.on)
    else:
        raise TypeError(f"Unsupported day rule: {type(rule).__name__}")
