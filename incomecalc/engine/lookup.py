"""Selection of the calculation that applies to a component on a date."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Tuple

from incomecalc.schedule.intervals import in_period
from incomecalc.schema.components import (
    ONE_TIME_PERIOD_KEY,
    Calculation,
    CalculationPeriod,
    Component,
    OneTimeComponent,
    RecurringComponent,
)
from incomecalc.schema.enums import PeriodOrder


def ordered_periods(
    component: RecurringComponent, order: PeriodOrder = PeriodOrder.START_DATE
) -> List[CalculationPeriod]:
    """Calculation periods in priority order; the first matching one wins.

    ``START_DATE`` sorts by start date (stable, so ties keep declaration order),
    ``DECLARATION`` keeps the order the periods were declared in.
    """
    periods = list(component.calculation_periods)
    if order is PeriodOrder.START_DATE:
        periods.sort(key=lambda cp: cp.period.start_date)
    return periods


def first_matching_period(
    periods: Sequence[CalculationPeriod], on: date
) -> Optional[CalculationPeriod]:
    """First of ``periods`` whose ``[start_date, end_date]`` contains ``on``."""
    for calculation_period in periods:
        period = calculation_period.period
        if in_period(on, period.start_date, period.end_date):
            return calculation_period
    return None


def find_calculation_period(
    component: RecurringComponent, on: date, order: PeriodOrder = PeriodOrder.START_DATE
) -> Optional[CalculationPeriod]:
    return first_matching_period(ordered_periods(component, order), on)


def lookup(
    component: Component, on: date, order: PeriodOrder = PeriodOrder.START_DATE
) -> Optional[Tuple[str, Calculation]]:
    """
    Find the calculation applying to ``component`` on ``on``.

    Returns:
        ``(period_key, calculation)`` or ``None``. One-time components use
        ``ONE_TIME_PERIOD_KEY`` and only match their own date.
    """
    if isinstance(component, OneTimeComponent):
        if component.date == on:
            return ONE_TIME_PERIOD_KEY, component.calculation
        return None
    elif isinstance(component, RecurringComponent):
        calculation_period = find_calculation_period(component, on, order)
        if calculation_period is None:
            return None
        return calculation_period.id, calculation_period.calculation
    else:
        raise TypeError(f"Unsupported component type: {type(component).__name__}")


def find_calculation(
    component: Component, on: date, order: PeriodOrder = PeriodOrder.START_DATE
) -> Optional[Calculation]:
    """Like :func:`lookup` but returns only the calculation."""
    found = lookup(component, on, order)
    return found[1] if found is not None else None
