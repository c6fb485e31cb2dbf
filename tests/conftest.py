"""Shared fixtures for incomecalc tests."""

from datetime import date

import pytest

from incomecalc.engine.formula import SandboxedEvaluator
from incomecalc.schema.components import (
    Calculation,
    CalculationPeriod,
    OneTimeComponent,
    RecurringComponent,
)
from incomecalc.schema.enums import DaySelector, Ordinal
from incomecalc.schema.inputs import NumberInput
from incomecalc.schema.periods import FixedDay, MonthlyPeriod, PositionalDay


@pytest.fixture
def sandbox() -> SandboxedEvaluator:
    return SandboxedEvaluator()


@pytest.fixture
def salary() -> RecurringComponent:
    """Monthly salary on the 25th, raised from 2023-07."""
    return RecurringComponent(
        id="salary",
        name="Salary",
        calculation_periods=(
            CalculationPeriod(
                id="h1",
                period=MonthlyPeriod(date(2023, 1, 1), date(2023, 6, 30), day_rule=FixedDay(25)),
                calculation=Calculation(
                    func="return inputs.gross",
                    inputs=(NumberInput(id="gross", default_value=3000),),
                ),
            ),
            CalculationPeriod(
                id="h2",
                period=MonthlyPeriod(date(2023, 7, 1), day_rule=FixedDay(25)),
                calculation=Calculation(
                    func="return inputs.gross",
                    inputs=(NumberInput(id="gross", default_value=3300),),
                ),
            ),
        ),
    )


@pytest.fixture
def bonus() -> OneTimeComponent:
    return OneTimeComponent(
        id="bonus",
        name="Bonus",
        date=date(2023, 12, 15),
        calculation=Calculation(func="return 1000"),
    )


@pytest.fixture
def pension() -> RecurringComponent:
    """Pension contribution of 5% of salary, on every pay day."""
    return RecurringComponent(
        id="pension",
        name="Pension",
        calculation_periods=(
            CalculationPeriod(
                id="all",
                period=MonthlyPeriod(date(2023, 1, 1), day_rule=FixedDay(25)),
                calculation=Calculation(
                    func="return -0.05 * dependencies.salary",
                    dependencies=("salary",),
                ),
            ),
        ),
    )


@pytest.fixture
def rent() -> RecurringComponent:
    return RecurringComponent(
        id="rent",
        name="Rent",
        calculation_periods=(
            CalculationPeriod(
                id="lease",
                period=MonthlyPeriod(
                    date(2023, 1, 1),
                    day_rule=PositionalDay(DaySelector.WEEKDAY, Ordinal.FIRST),
                ),
                calculation=Calculation(func="return -inputs.rent", inputs=(NumberInput(id="rent"),)),
            ),
        ),
    )
