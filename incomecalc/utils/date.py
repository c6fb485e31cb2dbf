from __future__ import annotations

from datetime import date, datetime
from typing import Tuple, Union

from dateutil.relativedelta import relativedelta
from pandas import Timestamp

DATE_FMT = "%Y-%m-%d"
COMPACT_FMT = "%Y%m%d"

DateLike = Union[str, date, datetime, Timestamp]


def to_date(value: DateLike) -> date:
    """Coerce a window or period bound to a plain ``date``.

    Strings may be ISO (``2024-01-31``) or compact (``20240131``); datetimes
    and Timestamps drop their time of day.
    """
    if isinstance(value, datetime):
        # Timestamp subclasses datetime
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Cannot convert {type(value).__name__} to a date")
    for fmt in (DATE_FMT, COMPACT_FMT):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date string: {value!r}")


def date_to_str(value: DateLike) -> str:
    """ISO form of any accepted date value."""
    return to_date(value).strftime(DATE_FMT)


def month_window(year: int, month: int) -> Tuple[date, date]:
    """
    First and last day of the given month.
    """
    first = date(year, month, 1)
    return first, first + relativedelta(months=1, days=-1)
