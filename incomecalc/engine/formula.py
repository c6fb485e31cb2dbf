"""
Formula evaluation.

A formula is a Python statement sequence run as the body of a function with
two read-only parameters, ``inputs`` and ``dependencies``. It is expected to
``return`` the amount; a trailing bare expression is returned as well.
Missing keys read as ``nan`` so incomplete data poisons the result instead of
raising.

Isolation is best-effort only. ``SandboxedEvaluator`` runs formulas in the
host interpreter with a reduced set of builtins and rejects a few obviously
unsafe constructs; it is not a security boundary.
"""

from __future__ import annotations

import ast
import builtins
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import CodeType
from typing import Any, Callable, Dict, Iterator, Optional, Protocol, runtime_checkable

from incomecalc.errors import FormulaSyntaxError
from incomecalc.schema.components import Calculation
from incomecalc.schema.inputs import InputValue

from .inputs import resolve_inputs

logger = logging.getLogger(__name__)

FORMULA_FILENAME = "<formula>"
FORMULA_FUNCTION = "formula"

_TEMPLATE = "def formula(inputs, dependencies):\n    pass\n"

_ALLOWED_BUILTINS = (
    "abs", "all", "any", "bool", "dict", "divmod", "enumerate", "filter",
    "float", "int", "isinstance", "len", "list", "map", "max", "min", "pow",
    "range", "reversed", "round", "set", "sorted", "str", "sum", "tuple", "zip",
    "ArithmeticError", "Exception", "KeyError", "TypeError", "ValueError",
    "ZeroDivisionError",
)
SAFE_BUILTINS: Dict[str, Any] = {
    name: getattr(builtins, name) for name in _ALLOWED_BUILTINS if hasattr(builtins, name)
}


class FormulaBindings(Mapping):
    """Read-only view of formula values; unknown keys read as ``nan``.

    Values are reachable both as ``inputs["salary"]`` and ``inputs.salary``,
    including ids such as ``items`` or ``get`` that name a mapping method.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        object.__setattr__(self, "_values", dict(values or {}))

    def __getitem__(self, key: str) -> Any:
        return self._values.get(key, math.nan)

    def __getattribute__(self, name: str) -> Any:
        # Stored ids shadow the Mapping methods (``inputs.items``, ``inputs.get``).
        if not name.startswith("_"):
            values = object.__getattribute__(self, "_values")
            if name in values:
                return values[name]
        return object.__getattribute__(self, name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return self._values.get(name, math.nan)

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError("formula bindings are read-only")

    def __delattr__(self, name: str) -> None:
        raise TypeError("formula bindings are read-only")

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def __repr__(self) -> str:
        return f"FormulaBindings({self._values!r})"


@runtime_checkable
class ExpressionEvaluator(Protocol):
    """Evaluates formula source against ``inputs`` and ``dependencies``."""

    def evaluate(
        self,
        source: str,
        inputs: Mapping[str, InputValue],
        dependencies: Mapping[str, float],
    ) -> float:
        """
        Evaluate a formula.

        Raises:
            FormulaSyntaxError: If the source cannot be compiled
            Exception: Anything raised by the formula body propagates unchanged
        """
        ...


class _FormulaValidator(ast.NodeVisitor):
    """Rejects constructs the sandbox does not support."""

    def __init__(self, source: str):
        self.source = source

    def _reject(self, node: ast.AST, message: str) -> None:
        raise FormulaSyntaxError(message, source=self.source, lineno=getattr(node, "lineno", None))

    def visit_Import(self, node: ast.Import) -> None:
        self._reject(node, "imports are not allowed")

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        self._reject(node, "imports are not allowed")

    def visit_Global(self, node: ast.Global) -> None:
        self._reject(node, "global statements are not allowed")

    def visit_Nonlocal(self, node: ast.Nonlocal) -> None:
        self._reject(node, "nonlocal statements are not allowed")

    def visit_Yield(self, node: ast.Yield) -> None:
        self._reject(node, "yield is not allowed")

    def visit_YieldFrom(self, node: ast.YieldFrom) -> None:
        self._reject(node, "yield is not allowed")

    def visit_Await(self, node: ast.Await) -> None:
        self._reject(node, "await is not allowed")

    def visit_Name(self, node: ast.Name) -> None:
        if node.id.startswith("__"):
            self._reject(node, f"name {node.id!r} is not allowed")

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if node.attr.startswith("_"):
            self._reject(node, f"attribute {node.attr!r} is not allowed")
        self.generic_visit(node)


@lru_cache(maxsize=512)
def compile_formula(source: str) -> CodeType:
    """
    Compile formula source into a module defining ``formula(inputs, dependencies)``.

    Raises:
        FormulaSyntaxError: If the source is malformed or uses disallowed constructs
    """
    try:
        body_tree = ast.parse(source, filename=FORMULA_FILENAME, mode="exec")
    except SyntaxError as exc:
        raise FormulaSyntaxError(exc.msg, source=source, lineno=exc.lineno) from exc
    _FormulaValidator(source).visit(body_tree)

    body = body_tree.body or [ast.Pass()]
    last = body[-1]
    if isinstance(last, ast.Expr):
        body[-1] = ast.copy_location(ast.Return(value=last.value), last)

    module = ast.parse(_TEMPLATE, filename=FORMULA_FILENAME, mode="exec")
    module.body[0].body = body
    ast.fix_missing_locations(module)
    try:
        return compile(module, FORMULA_FILENAME, "exec")
    except SyntaxError as exc:
        raise FormulaSyntaxError(exc.msg, source=source, lineno=exc.lineno) from exc


def to_amount(value: Any) -> float:
    """Coerce a formula's return value to a float amount."""
    if value is None:
        return math.nan
    if isinstance(value, (bool, int, float)):
        return float(value)
    raise TypeError(f"formula must return a number, got {type(value).__name__}")


class SandboxedEvaluator:
    """Production evaluator running compiled formulas with restricted builtins."""

    def evaluate(
        self,
        source: str,
        inputs: Mapping[str, InputValue],
        dependencies: Mapping[str, float],
    ) -> float:
        code = compile_formula(source)
        namespace: Dict[str, Any] = {"__builtins__": SAFE_BUILTINS}
        exec(code, namespace)
        func = namespace[FORMULA_FUNCTION]
        return to_amount(func(FormulaBindings(inputs), FormulaBindings(dependencies)))


class MappingEvaluator:
    """Deterministic evaluator mapping formula source to Python callables.

    Lets the scheduling and graph logic be exercised without dynamic code
    execution. Each callable receives ``(inputs, dependencies)`` as
    ``FormulaBindings``.
    """

    def __init__(self, functions: Mapping[str, Callable[[FormulaBindings, FormulaBindings], Any]]):
        self.functions = dict(functions)
        self.calls: list = []

    def evaluate(
        self,
        source: str,
        inputs: Mapping[str, InputValue],
        dependencies: Mapping[str, float],
    ) -> float:
        try:
            func = self.functions[source]
        except KeyError:
            raise FormulaSyntaxError(f"unknown formula {source!r}", source=source) from None
        self.calls.append(source)
        return to_amount(func(FormulaBindings(inputs), FormulaBindings(dependencies)))


@dataclass
class FormulaCheck:
    """Outcome of a trial formula evaluation."""

    amount: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def check_formula(
    calculation: Calculation,
    inputs: Optional[Mapping[str, InputValue]] = None,
    dependencies: Optional[Mapping[str, float]] = None,
    evaluator: Optional[ExpressionEvaluator] = None,
) -> FormulaCheck:
    """
    Try a calculation's formula with ad-hoc values without raising.

    Unset inputs are filled from the declared defaults, dependencies default
    to nothing (reading as ``nan``).
    """
    evaluator = evaluator or SandboxedEvaluator()
    values = resolve_inputs(calculation.inputs, inputs)
    try:
        amount = evaluator.evaluate(calculation.func, values, dict(dependencies or {}))
    except FormulaSyntaxError as exc:
        logger.debug("Formula check failed to compile: %s", exc)
        return FormulaCheck(error=str(exc))
    except Exception as exc:
        logger.debug("Formula check raised %s: %s", type(exc).__name__, exc)
        return FormulaCheck(error=f"{type(exc).__name__}: {exc}")
    return FormulaCheck(amount=amount)
