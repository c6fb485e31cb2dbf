"""
Per-date dependency resolution.

All components firing on one date form an evaluation set. Each component is
resolved by first resolving the components its formula depends on, with
memoization and cycle detection. The memo and the in-progress markers live
in an ``EvaluationContext`` that is created for a single date and discarded
afterwards, so nothing leaks between dates or between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Mapping, Optional, Sequence, Set

from incomecalc.errors import (
    CalculationError,
    CircularDependencyError,
    DependencyNotFoundError,
    FormulaRuntimeError,
    FormulaSyntaxError,
)
from incomecalc.schema.components import Calculation
from incomecalc.schema.inputs import InputValue

from .formula import ExpressionEvaluator
from .inputs import resolve_inputs

logger = logging.getLogger(__name__)

# component id -> period key -> input id -> value
InputValueMap = Mapping[str, Mapping[str, Mapping[str, InputValue]]]


@dataclass(frozen=True)
class ScheduledCalculation:
    """A component's calculation scheduled on one date."""

    component_id: str
    component_name: str
    period_key: str
    calculation: Calculation


class EvaluationContext:
    """Memo and in-progress state for one evaluation date."""

    def __init__(self, on: date, entries: Sequence[ScheduledCalculation]):
        self.date = on
        self.entries: Dict[str, ScheduledCalculation] = {
            entry.component_id: entry for entry in entries
        }
        self.results: Dict[str, float] = {}
        self.in_progress: Set[str] = set()


class DependencyGraphEvaluator:
    """Resolves the evaluation set of a date through an ``ExpressionEvaluator``."""

    def __init__(
        self,
        evaluator: ExpressionEvaluator,
        input_values: Optional[InputValueMap] = None,
    ):
        self.evaluator = evaluator
        self.input_values = input_values or {}

    def evaluate_date(
        self, on: date, entries: Sequence[ScheduledCalculation]
    ) -> Dict[str, float]:
        """
        Resolve every scheduled calculation of one date.

        Args:
            on: Evaluation date
            entries: Calculations firing on that date

        Returns:
            Amount per component id, in the order of ``entries``

        Raises:
            CircularDependencyError: If dependencies form a cycle
            DependencyNotFoundError: If a dependency does not fire on ``on``
            FormulaSyntaxError: If a formula cannot be compiled
            FormulaRuntimeError: If a formula raised while executing
        """
        context = EvaluationContext(on, entries)
        for entry in entries:
            self.resolve(context, entry.component_id)
        return {entry.component_id: context.results[entry.component_id] for entry in entries}

    def resolve(self, context: EvaluationContext, component_id: str) -> float:
        if component_id in context.results:
            return context.results[component_id]
        if component_id in context.in_progress:
            raise CircularDependencyError(component_id, context.date)
        entry = context.entries.get(component_id)
        if entry is None:
            raise KeyError(f'Component "{component_id}" is not scheduled on {context.date.isoformat()}')

        context.in_progress.add(component_id)
        dependencies: Dict[str, float] = {}
        for dependency_id in entry.calculation.dependencies:
            if dependency_id not in context.entries:
                raise DependencyNotFoundError(dependency_id, component_id, context.date)
            dependencies[dependency_id] = self.resolve(context, dependency_id)

        inputs = resolve_inputs(entry.calculation.inputs, self._supplied_values(entry))
        amount = self._evaluate(context.date, entry, inputs, dependencies)

        context.results[component_id] = amount
        context.in_progress.discard(component_id)
        logger.debug("Resolved %s on %s: %s", component_id, context.date, amount)
        return amount

    def _supplied_values(self, entry: ScheduledCalculation) -> Mapping[str, InputValue]:
        by_period = self.input_values.get(entry.component_id) or {}
        return by_period.get(entry.period_key) or {}

    def _evaluate(
        self,
        on: date,
        entry: ScheduledCalculation,
        inputs: Mapping[str, InputValue],
        dependencies: Mapping[str, float],
    ) -> float:
        try:
            return self.evaluator.evaluate(entry.calculation.func, inputs, dependencies)
        except FormulaSyntaxError as exc:
            if exc.component_id is None:
                exc.component_id = entry.component_id
            raise
        except CalculationError:
            raise
        except Exception as exc:
            raise FormulaRuntimeError(entry.component_id, on, exc) from exc
