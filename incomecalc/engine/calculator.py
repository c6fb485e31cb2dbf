"""
Income projection over a date window.

``calculate`` finds, for every date of the window, the components that fire
on it, resolves that date's evaluation set through the dependency graph and
collects the amounts per component.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from incomecalc.config import EngineConfig
from incomecalc.errors import CalculationError
from incomecalc.schedule.generator import occurrences
from incomecalc.schedule.intervals import in_period, intersection
from incomecalc.schema.components import (
    ONE_TIME_PERIOD_KEY,
    Component,
    ComponentResult,
    DatedAmount,
    OneTimeComponent,
    RecurringComponent,
)
from incomecalc.schema.enums import PeriodOrder
from incomecalc.schema.inputs import Input, InputValue
from incomecalc.schema.periods import DateRange
from incomecalc.utils.date import DateLike, month_window, to_date

from .formula import ExpressionEvaluator, SandboxedEvaluator
from .graph import DependencyGraphEvaluator, InputValueMap, ScheduledCalculation
from .inputs import validate_inputs
from .lookup import first_matching_period, ordered_periods

logger = logging.getLogger(__name__)


def schedule_calculations(
    components: Sequence[Component],
    start_date: date,
    end_date: date,
    order: PeriodOrder = PeriodOrder.START_DATE,
) -> Dict[date, List[ScheduledCalculation]]:
    """
    Build the evaluation set of every date in ``[start_date, end_date]``.

    A one-time component fires on its own date. A recurring component fires on
    a date only when that date is an occurrence of the calculation period that
    lookup selects for it; lying inside a period is not enough.

    Returns:
        Firing calculations per date, each list in component order
    """
    by_date: Dict[date, List[ScheduledCalculation]] = defaultdict(list)
    for component in components:
        if isinstance(component, OneTimeComponent):
            if in_period(component.date, start_date, end_date):
                by_date[component.date].append(
                    ScheduledCalculation(
                        component.id, component.name, ONE_TIME_PERIOD_KEY, component.calculation
                    )
                )
        elif isinstance(component, RecurringComponent):
            periods = ordered_periods(component, order)
            for calculation_period in component.calculation_periods:
                for on in occurrences(calculation_period.period, start_date, end_date):
                    if first_matching_period(periods, on) is not calculation_period:
                        continue
                    by_date[on].append(
                        ScheduledCalculation(
                            component.id,
                            component.name,
                            calculation_period.id,
                            calculation_period.calculation,
                        )
                    )
        else:
            raise TypeError(f"Unsupported component type: {type(component).__name__}")
    return dict(by_date)


def _check_unique_ids(components: Sequence[Component]) -> None:
    seen = set()
    for component in components:
        if component.id in seen:
            raise ValueError(f'Duplicate component id "{component.id}"')
        seen.add(component.id)


def calculate(
    components: Sequence[Component],
    input_values: Optional[InputValueMap],
    start_date: DateLike,
    end_date: DateLike,
    evaluator: Optional[ExpressionEvaluator] = None,
    config: Optional[EngineConfig] = None,
) -> List[ComponentResult]:
    """
    Project the amounts of all components over an inclusive date window.

    Args:
        components: Components to evaluate; ids must be unique
        input_values: Values keyed component id -> period id -> input id
            (one-time components use the empty period key)
        start_date: First date of the window
        end_date: Last date of the window
        evaluator: Formula evaluator (defaults to ``SandboxedEvaluator``)
        config: Engine configuration (defaults to ``EngineConfig()``)

    Returns:
        One ``ComponentResult`` per component, in input order, each ascending by date

    Raises:
        CalculationError: Any formula or dependency failure aborts the whole call
    """
    config = config or EngineConfig()
    evaluator = evaluator or SandboxedEvaluator()
    start, end = to_date(start_date), to_date(end_date)
    _check_unique_ids(components)

    results = [ComponentResult(component.id, component.name) for component in components]
    by_id = {result.id: result for result in results}

    firing = schedule_calculations(components, start, end, config.period_order)
    dates = sorted(firing)
    graph = DependencyGraphEvaluator(evaluator, input_values)

    try:
        if config.max_workers > 1 and len(dates) > 1:
            with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
                per_date = list(executor.map(lambda on: graph.evaluate_date(on, firing[on]), dates))
        else:
            per_date = [graph.evaluate_date(on, firing[on]) for on in dates]
    except CalculationError as exc:
        logger.error("Calculation aborted: %s", exc)
        raise

    for on, amounts in zip(dates, per_date):
        for component_id, amount in amounts.items():
            by_id[component_id].results.append(DatedAmount(on, amount))

    if config.verbose:
        logger.info(
            "Calculated %s components over %s..%s: %s firing dates",
            len(components), start, end, len(dates),
        )
    return results


def calculate_month(
    components: Sequence[Component],
    input_values: Optional[InputValueMap],
    year: int,
    month: int,
    evaluator: Optional[ExpressionEvaluator] = None,
    config: Optional[EngineConfig] = None,
) -> List[ComponentResult]:
    """Run :func:`calculate` over one calendar month."""
    start, end = month_window(year, month)
    return calculate(components, input_values, start, end, evaluator=evaluator, config=config)


@dataclass(frozen=True)
class InputRequirement:
    """Inputs a component period needs for the part of a window it covers."""

    component_id: str
    period_key: str
    start_date: date
    end_date: Optional[date]
    inputs: Tuple[Input, ...]

    def problems(self, input_values: Optional[InputValueMap]) -> Dict[str, List[str]]:
        """Validation problems of the supplied values, keyed by input id."""
        supplied: Mapping[str, InputValue] = (
            ((input_values or {}).get(self.component_id) or {}).get(self.period_key) or {}
        )
        return validate_inputs(self.inputs, supplied)


def required_inputs(
    components: Sequence[Component], start_date: DateLike, end_date: DateLike
) -> List[InputRequirement]:
    """
    List the input specifications relevant to a window.

    One entry per one-time component dated inside the window and per
    calculation period overlapping it, clipped to the window.
    """
    window = DateRange(to_date(start_date), to_date(end_date))
    requirements: List[InputRequirement] = []
    for component in components:
        if isinstance(component, OneTimeComponent):
            if in_period(component.date, window.start_date, window.end_date):
                requirements.append(
                    InputRequirement(
                        component.id,
                        ONE_TIME_PERIOD_KEY,
                        component.date,
                        component.date,
                        component.calculation.inputs,
                    )
                )
        elif isinstance(component, RecurringComponent):
            for calculation_period in component.calculation_periods:
                overlap = intersection(calculation_period.period, window)
                if overlap is None:
                    continue
                requirements.append(
                    InputRequirement(
                        component.id,
                        calculation_period.id,
                        overlap.start_date,
                        overlap.end_date,
                        calculation_period.calculation.inputs,
                    )
                )
        else:
            raise TypeError(f"Unsupported component type: {type(component).__name__}")
    return requirements
