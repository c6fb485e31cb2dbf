"""
Enumeration types used by the period rules, inputs and engine configuration.
"""

from enum import Enum


class Weekday(Enum):
    """Days of the week, numbered like ``date.weekday()`` (Monday = 0)."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def number(self) -> int:
        return _WEEKDAY_NUMBERS[self]


_WEEKDAY_NUMBERS = {day: index for index, day in enumerate(Weekday)}


class Month(Enum):
    """Calendar months, numbered 1..12."""

    JANUARY = "january"
    FEBRUARY = "february"
    MARCH = "march"
    APRIL = "april"
    MAY = "may"
    JUNE = "june"
    JULY = "july"
    AUGUST = "august"
    SEPTEMBER = "september"
    OCTOBER = "october"
    NOVEMBER = "november"
    DECEMBER = "december"

    @property
    def number(self) -> int:
        return _MONTH_NUMBERS[self]


_MONTH_NUMBERS = {month: index + 1 for index, month in enumerate(Month)}


class DaySelector(Enum):
    """Which days of a month a positional rule counts."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    DAY = "day"
    WEEKDAY = "weekday"
    WEEKEND_DAY = "weekend-day"

    def matches(self, weekday: int) -> bool:
        """Check a ``date.weekday()`` number against this selector."""
        if self is DaySelector.DAY:
            return True
        if self is DaySelector.WEEKDAY:
            return weekday < 5
        if self is DaySelector.WEEKEND_DAY:
            return weekday >= 5
        return Weekday(self.value).number == weekday


class Ordinal(Enum):
    """Position of the matching day inside a month.

    ``FIRST``..``FIFTH`` count from the start of the month, ``NEXT_TO_LAST``
    and ``LAST`` count from its end.
    """

    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    FOURTH = "fourth"
    FIFTH = "fifth"
    NEXT_TO_LAST = "next-to-last"
    LAST = "last"

    @property
    def index(self) -> int:
        return _ORDINAL_INDEXES[self]


_ORDINAL_INDEXES = {
    Ordinal.FIRST: 0,
    Ordinal.SECOND: 1,
    Ordinal.THIRD: 2,
    Ordinal.FOURTH: 3,
    Ordinal.FIFTH: 4,
    Ordinal.NEXT_TO_LAST: -2,
    Ordinal.LAST: -1,
}


class InputType(Enum):
    """Kinds of user-supplied calculation inputs."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    RANGE = "range"


class PeriodOrder(Enum):
    """How overlapping calculation periods of one component are prioritised."""

    START_DATE = "start_date"
    DECLARATION = "declaration"
