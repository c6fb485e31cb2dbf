"""
Typed input specifications for calculations.

Each input declares a default and type specific constraints. The default (or
a type appropriate fallback) fills in values the caller did not supply.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple, Union

from .enums import InputType

InputValue = Union[str, int, float, bool]


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class BaseInput:
    """Fields shared by all input kinds."""

    input_type: ClassVar[InputType]

    id: str
    name: str = ""
    description: str = ""
    required: bool = True

    def fallback_value(self) -> Optional[InputValue]:
        """Value used when the caller supplied nothing; ``None`` leaves it unset."""
        raise NotImplementedError

    def validate(self, value: Optional[InputValue]) -> List[str]:
        """Return human readable problems with ``value`` (empty when valid)."""
        if value is None:
            return [f'Input "{self.id}" is required'] if self.required else []
        return self._check(value)

    def _check(self, value: InputValue) -> List[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class TextInput(BaseInput):
    input_type: ClassVar[InputType] = InputType.TEXT

    default_value: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    placeholder: str = ""

    def fallback_value(self) -> Optional[InputValue]:
        return self.default_value if self.default_value is not None else ""

    def _check(self, value: InputValue) -> List[str]:
        if not isinstance(value, str):
            return [f'Input "{self.id}" expects text, got {type(value).__name__}']
        problems = []
        if self.min_length is not None and len(value) < self.min_length:
            problems.append(f'Input "{self.id}" must be at least {self.min_length} characters')
        if self.max_length is not None and len(value) > self.max_length:
            problems.append(f'Input "{self.id}" must be at most {self.max_length} characters')
        return problems


@dataclass(frozen=True)
class _BoundedNumberInput(BaseInput):
    default_value: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None

    def fallback_value(self) -> Optional[InputValue]:
        return self.default_value if self.default_value is not None else self.min

    def _check(self, value: InputValue) -> List[str]:
        if not _is_number(value):
            return [f'Input "{self.id}" expects a number, got {type(value).__name__}']
        problems = []
        if self.min is not None and value < self.min:
            problems.append(f'Input "{self.id}" must be >= {self.min}')
        if self.max is not None and value > self.max:
            problems.append(f'Input "{self.id}" must be <= {self.max}')
        return problems


@dataclass(frozen=True)
class NumberInput(_BoundedNumberInput):
    input_type: ClassVar[InputType] = InputType.NUMBER

    unit: str = ""
    placeholder: str = ""


@dataclass(frozen=True)
class RangeInput(_BoundedNumberInput):
    input_type: ClassVar[InputType] = InputType.RANGE


@dataclass(frozen=True)
class BooleanInput(BaseInput):
    input_type: ClassVar[InputType] = InputType.BOOLEAN

    default_value: Optional[bool] = None

    def fallback_value(self) -> Optional[InputValue]:
        return self.default_value if self.default_value is not None else False

    def _check(self, value: InputValue) -> List[str]:
        if not isinstance(value, bool):
            return [f'Input "{self.id}" expects true or false, got {type(value).__name__}']
        return []


@dataclass(frozen=True)
class SelectOption:
    id: str
    label: str = ""


@dataclass(frozen=True)
class SelectInput(BaseInput):
    input_type: ClassVar[InputType] = InputType.SELECT

    options: Tuple[SelectOption, ...] = ()
    default_value: Optional[str] = None

    def fallback_value(self) -> Optional[InputValue]:
        if self.default_value is not None:
            return self.default_value
        return self.options[0].id if self.options else None

    def _check(self, value: InputValue) -> List[str]:
        allowed = [option.id for option in self.options]
        if value not in allowed:
            return [f'Input "{self.id}" must be one of {allowed}, got {value!r}']
        return []


Input = Union[TextInput, NumberInput, BooleanInput, SelectInput, RangeInput]
