"""
Income components, their calculations and calculation results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Tuple, Union

from .inputs import Input
from .periods import Period

# Input values of one-time components are stored under this period key.
ONE_TIME_PERIOD_KEY = ""


@dataclass(frozen=True)
class Calculation:
    """Inputs, dependency ids and formula source evaluated at a firing date."""

    func: str
    inputs: Tuple[Input, ...] = ()
    dependencies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CalculationPeriod:
    """A recurrence rule paired with the calculation it schedules."""

    id: str
    period: Period
    calculation: Calculation


@dataclass(frozen=True)
class OneTimeComponent:
    id: str
    name: str
    date: date
    calculation: Calculation
    description: str = ""


@dataclass(frozen=True)
class RecurringComponent:
    id: str
    name: str
    calculation_periods: Tuple[CalculationPeriod, ...]
    description: str = ""

    def __post_init__(self):
        if not self.calculation_periods:
            raise ValueError(
                f'Recurring component "{self.id}" needs at least one calculation period'
            )


Component = Union[OneTimeComponent, RecurringComponent]


@dataclass(frozen=True)
class DatedAmount:
    date: date
    amount: float


@dataclass
class ComponentResult:
    """Amounts computed for one component, ascending by date."""

    id: str
    name: str
    results: List[DatedAmount] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(entry.amount for entry in self.results)
