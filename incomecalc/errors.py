"""Errors raised by the calculation engine.

Every error here aborts the whole ``calculate`` call; there is no
partial-success mode.
"""

from __future__ import annotations

from datetime import date
from typing import Optional


class CalculationError(Exception):
    """Base class for failures that abort a calculation."""


class FormulaSyntaxError(CalculationError):
    """Raised when formula source is malformed or uses disallowed constructs.

    ``message`` holds the compiler's message unchanged and ``lineno`` its
    line; ``str()`` prefixes them with the component id for logs. Not
    retryable: the source has to be corrected first.
    """

    def __init__(
        self,
        message: str,
        source: str = "",
        component_id: Optional[str] = None,
        lineno: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.source = source
        self.component_id = component_id
        self.lineno = lineno

    def __str__(self) -> str:
        location = f" (line {self.lineno})" if self.lineno else ""
        if self.component_id is not None:
            return f'Invalid formula for component "{self.component_id}"{location}: {self.message}'
        return f"Invalid formula{location}: {self.message}"


class CircularDependencyError(CalculationError):
    """Raised when a component is reached again while it is still being resolved."""

    def __init__(self, component_id: str, on: date):
        super().__init__(
            f'Circular dependency detected for component "{component_id}" on date {on.isoformat()}'
        )
        self.component_id = component_id
        self.date = on


class DependencyNotFoundError(CalculationError):
    """Raised when a dependency has no calculation on the evaluated date."""

    def __init__(self, dependency_id: str, referrer_id: str, on: date):
        super().__init__(
            f'Dependency "{dependency_id}" not found for component "{referrer_id}" '
            f"on date {on.isoformat()}. Check that the dependency exists and that "
            f"it has a calculation for that date"
        )
        self.dependency_id = dependency_id
        self.referrer_id = referrer_id
        self.date = on


class FormulaRuntimeError(CalculationError):
    """Wraps an exception raised while a component's formula was executing."""

    def __init__(self, component_id: str, on: date, cause: BaseException):
        super().__init__(
            f'Formula of component "{component_id}" failed on date {on.isoformat()}: '
            f"{type(cause).__name__}: {cause}"
        )
        self.component_id = component_id
        self.date = on
        self.cause = cause
