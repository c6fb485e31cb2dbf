"""Income Projection Engine.

This package models income as components, each a single dated event or a
recurring schedule, and projects their amounts over a date window by
evaluating a formula per occurrence. Formulas may depend on the values other
components compute for the same date.

Key modules:
- schema: Components, periods, inputs and results
- schedule: Occurrence generation and date interval algebra
- engine: Calculation lookup, formula evaluation, dependency resolution and ``calculate``
- data: Builders from JSON-shaped data
- reporting: pandas views of results
"""

from incomecalc.config import EngineConfig
from incomecalc.engine import (
    MappingEvaluator,
    SandboxedEvaluator,
    calculate,
    calculate_month,
    check_formula,
    required_inputs,
)
from incomecalc.errors import (
    CalculationError,
    CircularDependencyError,
    DependencyNotFoundError,
    FormulaRuntimeError,
    FormulaSyntaxError,
)
from incomecalc.schedule import intersection, merge, occurrences, overlapping

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "EngineConfig",
    "MappingEvaluator",
    "SandboxedEvaluator",
    "calculate",
    "calculate_month",
    "check_formula",
    "required_inputs",
    "CalculationError",
    "CircularDependencyError",
    "DependencyNotFoundError",
    "FormulaRuntimeError",
    "FormulaSyntaxError",
    "intersection",
    "merge",
    "occurrences",
    "overlapping",
]
