from .calculator import (
    InputRequirement,
    calculate,
    calculate_month,
    required_inputs,
    schedule_calculations,
)
from .formula import (
    ExpressionEvaluator,
    FormulaBindings,
    FormulaCheck,
    MappingEvaluator,
    SandboxedEvaluator,
    check_formula,
    compile_formula,
)
from .graph import (
    DependencyGraphEvaluator,
    EvaluationContext,
    InputValueMap,
    ScheduledCalculation,
)
from .inputs import resolve_inputs, validate_inputs
from .lookup import find_calculation, find_calculation_period, lookup
