"""Tests for per-date dependency resolution."""

import math
from datetime import date

import pytest

from incomecalc.engine.formula import MappingEvaluator
from incomecalc.engine.graph import DependencyGraphEvaluator, ScheduledCalculation
from incomecalc.errors import (
    CircularDependencyError,
    DependencyNotFoundError,
    FormulaRuntimeError,
    FormulaSyntaxError,
)
from incomecalc.schema.components import Calculation
from incomecalc.schema.inputs import NumberInput

ON = date(2023, 5, 1)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _entry(component_id: str, func: str, dependencies=(), inputs=(), period_key="p"):
    return ScheduledCalculation(
        component_id=component_id,
        component_name=component_id.upper(),
        period_key=period_key,
        calculation=Calculation(func=func, inputs=tuple(inputs), dependencies=tuple(dependencies)),
    )


# ===================================================================
# Resolution
# ===================================================================


class TestResolution:

    def test_dependency_value_flows_into_formula(self, sandbox) -> None:
        graph = DependencyGraphEvaluator(sandbox, {"A": {"p": {"value": 3}}})
        entries = [
            _entry("A", "inputs.value + 1", inputs=[NumberInput(id="value")]),
            _entry("B", "dependencies.A * 2", dependencies=["A"]),
        ]
        assert graph.evaluate_date(ON, entries) == {"A": 4.0, "B": 8.0}

    def test_dependency_declared_after_dependant(self, sandbox) -> None:
        graph = DependencyGraphEvaluator(sandbox)
        entries = [
            _entry("net", "dependencies.gross - dependencies.tax", dependencies=["gross", "tax"]),
            _entry("tax", "dependencies.gross * 0.2", dependencies=["gross"]),
            _entry("gross", "return 100"),
        ]
        assert graph.evaluate_date(ON, entries) == {"net": 80.0, "tax": 20.0, "gross": 100.0}

    def test_shared_dependency_evaluated_once(self) -> None:
        evaluator = MappingEvaluator(
            {
                "base": lambda inputs, deps: 10,
                "left": lambda inputs, deps: deps.base + 1,
                "right": lambda inputs, deps: deps.base + 2,
                "top": lambda inputs, deps: deps.left + deps.right,
            }
        )
        graph = DependencyGraphEvaluator(evaluator)
        entries = [
            _entry("top", "top", dependencies=["left", "right"]),
            _entry("left", "left", dependencies=["base"]),
            _entry("right", "right", dependencies=["base"]),
            _entry("base", "base"),
        ]
        assert graph.evaluate_date(ON, entries)["top"] == 23.0
        assert evaluator.calls.count("base") == 1
        assert len(evaluator.calls) == 4

    def test_memo_does_not_leak_between_dates(self) -> None:
        counter = iter(range(100))
        evaluator = MappingEvaluator({"tick": lambda inputs, deps: next(counter)})
        graph = DependencyGraphEvaluator(evaluator)
        entries = [_entry("A", "tick")]
        assert graph.evaluate_date(date(2023, 1, 1), entries) == {"A": 0.0}
        assert graph.evaluate_date(date(2023, 1, 2), entries) == {"A": 1.0}

    def test_missing_input_gives_nan(self, sandbox) -> None:
        graph = DependencyGraphEvaluator(sandbox)
        amounts = graph.evaluate_date(ON, [_entry("A", "return inputs.missing * 2")])
        assert math.isnan(amounts["A"])

    def test_inputs_read_by_period_key(self, sandbox) -> None:
        values = {"A": {"p1": {"x": 1}, "p2": {"x": 2}}}
        graph = DependencyGraphEvaluator(sandbox, values)
        assert graph.evaluate_date(ON, [_entry("A", "inputs.x", period_key="p2")]) == {"A": 2.0}

    def test_declared_default_used_when_unsupplied(self, sandbox) -> None:
        graph = DependencyGraphEvaluator(sandbox)
        entry = _entry("A", "inputs.x", inputs=[NumberInput(id="x", default_value=5)])
        assert graph.evaluate_date(ON, [entry]) == {"A": 5.0}


# ===================================================================
# Failures
# ===================================================================


class TestFailures:

    @pytest.mark.parametrize("first", ["A", "B"])
    def test_cycle_detected_from_either_side(self, sandbox, first: str) -> None:
        a = _entry("A", "dependencies.B", dependencies=["B"])
        b = _entry("B", "dependencies.A", dependencies=["A"])
        entries = [a, b] if first == "A" else [b, a]
        with pytest.raises(CircularDependencyError) as exc_info:
            DependencyGraphEvaluator(sandbox).evaluate_date(ON, entries)
        assert exc_info.value.date == ON
        assert "Circular dependency" in str(exc_info.value)

    def test_self_dependency(self, sandbox) -> None:
        with pytest.raises(CircularDependencyError) as exc_info:
            DependencyGraphEvaluator(sandbox).evaluate_date(
                ON, [_entry("A", "dependencies.A", dependencies=["A"])]
            )
        assert exc_info.value.component_id == "A"

    def test_dependency_not_firing(self, sandbox) -> None:
        with pytest.raises(DependencyNotFoundError) as exc_info:
            DependencyGraphEvaluator(sandbox).evaluate_date(
                ON, [_entry("B", "dependencies.A", dependencies=["A"])]
            )
        assert exc_info.value.dependency_id == "A"
        assert exc_info.value.referrer_id == "B"
        assert "2023-05-01" in str(exc_info.value)

    def test_runtime_error_is_wrapped(self, sandbox) -> None:
        with pytest.raises(FormulaRuntimeError) as exc_info:
            DependencyGraphEvaluator(sandbox).evaluate_date(ON, [_entry("A", "return 1 / 0")])
        assert exc_info.value.component_id == "A"
        assert isinstance(exc_info.value.cause, ZeroDivisionError)

    def test_syntax_error_names_component(self, sandbox) -> None:
        with pytest.raises(FormulaSyntaxError) as exc_info:
            DependencyGraphEvaluator(sandbox).evaluate_date(ON, [_entry("A", "return (")])
        assert exc_info.value.component_id == "A"
        assert '"A"' in str(exc_info.value)
