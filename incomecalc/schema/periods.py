"""
Recurrence rule data structures.

A period is one of four frequency variants (daily, weekly, monthly, yearly).
Monthly and yearly rules carry a day rule that is either a fixed day of the
month or a positional rule such as "last weekday".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Union

from .enums import DaySelector, Month, Ordinal, Weekday


@dataclass(frozen=True)
class DateRange:
    """Closed date interval; a missing end date means unbounded forward."""

    start_date: date
    end_date: Optional[date] = None


@dataclass(frozen=True)
class FixedDay:
    """Fixed day of the month (1..31), clamped to shorter months."""

    day: int


@dataclass(frozen=True)
class PositionalDay:
    """The ``on``-th day of the month matching ``day``."""

    day: DaySelector
    on: Ordinal


DayRule = Union[FixedDay, PositionalDay]


@dataclass(frozen=True)
class DailyPeriod:
    start_date: date
    end_date: Optional[date] = None
    every: int = 1


@dataclass(frozen=True)
class WeeklyPeriod:
    start_date: date
    end_date: Optional[date] = None
    every: int = 1
    weekdays: Tuple[Weekday, ...] = ()


@dataclass(frozen=True)
class MonthlyPeriod:
    start_date: date
    end_date: Optional[date] = None
    every: int = 1
    day_rule: DayRule = FixedDay(1)


@dataclass(frozen=True)
class YearlyPeriod:
    start_date: date
    end_date: Optional[date] = None
    every: int = 1
    months: Tuple[Month, ...] = ()
    day_rule: DayRule = FixedDay(1)


Period = Union[DailyPeriod, WeeklyPeriod, MonthlyPeriod, YearlyPeriod]
