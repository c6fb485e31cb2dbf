"""
Builders for components and input values from JSON-shaped data.

The accepted shape uses camelCase keys, e.g.::

    {
        "id": "salary",
        "name": "Salary",
        "type": "recurring",
        "calculationPeriods": [
            {
                "id": "2024",
                "period": {
                    "startDate": "2024-01-01",
                    "frequency": "monthly",
                    "every": 1,
                    "dayOfMonthType": "day",
                    "each": 25
                },
                "calculation": {
                    "inputs": [{"id": "gross", "type": "number", "defaultValue": 3000}],
                    "dependencies": [],
                    "func": "return inputs.gross"
                }
            }
        ]
    }
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

from incomecalc.schema.components import (
    Calculation,
    CalculationPeriod,
    Component,
    OneTimeComponent,
    RecurringComponent,
)
from incomecalc.schema.enums import DaySelector, InputType, Month, Ordinal, Weekday
from incomecalc.schema.inputs import (
    BooleanInput,
    Input,
    InputValue,
    NumberInput,
    RangeInput,
    SelectInput,
    SelectOption,
    TextInput,
)
from incomecalc.schema.periods import (
    DailyPeriod,
    DayRule,
    FixedDay,
    MonthlyPeriod,
    Period,
    PositionalDay,
    WeeklyPeriod,
    YearlyPeriod,
)
from incomecalc.utils.date import to_date


def _require(data: Mapping[str, Any], key: str, context: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f'{context} is missing required field "{key}"') from None


def day_rule_from_dict(data: Mapping[str, Any]) -> DayRule:
    """Parse the day-of-month part of a monthly or yearly period."""
    kind = data.get("dayOfMonthType", "day")
    if kind == "day":
        return FixedDay(int(_require(data, "each", "Day of month rule")))
    elif kind == "position":
        return PositionalDay(
            day=DaySelector(_require(data, "day", "Positional day rule")),
            on=Ordinal(_require(data, "on", "Positional day rule")),
        )
    else:
        raise ValueError(f"Unsupported dayOfMonthType: {kind!r}")


def period_from_dict(data: Mapping[str, Any]) -> Period:
    """
    Parse a recurrence rule.

    Args:
        data: Mapping with startDate, optional endDate, frequency and
            the frequency specific fields

    Returns:
        Period variant matching the frequency
    """
    start_date = to_date(_require(data, "startDate", "Period"))
    end_date = to_date(data["endDate"]) if data.get("endDate") else None
    every = int(data.get("every", 1))
    frequency = _require(data, "frequency", "Period")

    if frequency == "daily":
        return DailyPeriod(start_date, end_date, every)
    elif frequency == "weekly":
        weekdays = tuple(Weekday(day) for day in data.get("weekdays", []))
        return WeeklyPeriod(start_date, end_date, every, weekdays)
    elif frequency == "monthly":
        return MonthlyPeriod(start_date, end_date, every, day_rule_from_dict(data))
    elif frequency == "yearly":
        months = tuple(Month(month) for month in data.get("months", []))
        return YearlyPeriod(start_date, end_date, every, months, day_rule_from_dict(data))
    else:
        raise ValueError(f"Unsupported frequency: {frequency!r}")


def input_from_dict(data: Mapping[str, Any]) -> Input:
    """Parse a typed input specification."""
    common = {
        "id": _require(data, "id", "Input"),
        "name": data.get("name", ""),
        "description": data.get("description", ""),
        "required": data.get("required", True) is not False,
    }
    input_type = InputType(_require(data, "type", "Input"))
    default = data.get("defaultValue")

    if input_type is InputType.TEXT:
        return TextInput(
            **common,
            default_value=default,
            min_length=data.get("minLength"),
            max_length=data.get("maxLength"),
            placeholder=data.get("placeholder", ""),
        )
    elif input_type is InputType.NUMBER:
        return NumberInput(
            **common,
            default_value=default,
            min=data.get("min"),
            max=data.get("max"),
            step=data.get("step"),
            unit=data.get("unit", ""),
            placeholder=data.get("placeholder", ""),
        )
    elif input_type is InputType.BOOLEAN:
        return BooleanInput(**common, default_value=default)
    elif input_type is InputType.SELECT:
        options = tuple(
            SelectOption(id=_require(option, "id", "Select option"), label=option.get("label", ""))
            for option in data.get("options", [])
        )
        return SelectInput(**common, options=options, default_value=default)
    else:
        return RangeInput(
            **common,
            default_value=default,
            min=data.get("min"),
            max=data.get("max"),
            step=data.get("step"),
        )


def calculation_from_dict(data: Mapping[str, Any]) -> Calculation:
    return Calculation(
        func=_require(data, "func", "Calculation"),
        inputs=tuple(input_from_dict(item) for item in data.get("inputs", [])),
        dependencies=tuple(str(dep) for dep in data.get("dependencies", [])),
    )


def component_from_dict(data: Mapping[str, Any]) -> Component:
    """Parse a one-time or recurring component."""
    component_id = _require(data, "id", "Component")
    name = data.get("name", "")
    description = data.get("description", "") or ""
    component_type = _require(data, "type", f'Component "{component_id}"')

    if component_type == "one-time":
        return OneTimeComponent(
            id=component_id,
            name=name,
            date=to_date(_require(data, "date", f'Component "{component_id}"')),
            calculation=calculation_from_dict(
                _require(data, "calculation", f'Component "{component_id}"')
            ),
            description=description,
        )
    elif component_type == "recurring":
        periods = tuple(
            CalculationPeriod(
                id=str(_require(item, "id", "Calculation period")),
                period=period_from_dict(_require(item, "period", "Calculation period")),
                calculation=calculation_from_dict(
                    _require(item, "calculation", "Calculation period")
                ),
            )
            for item in _require(data, "calculationPeriods", f'Component "{component_id}"')
        )
        return RecurringComponent(
            id=component_id,
            name=name,
            calculation_periods=periods,
            description=description,
        )
    else:
        raise ValueError(f"Unsupported component type: {component_type!r}")


def components_from_dicts(items: Iterable[Mapping[str, Any]]) -> List[Component]:
    components = [component_from_dict(item) for item in items]
    seen = set()
    for component in components:
        if component.id in seen:
            raise ValueError(f'Duplicate component id "{component.id}"')
        seen.add(component.id)
    return components


def input_values_from_dict(
    data: Mapping[str, Any]
) -> Dict[str, Dict[str, Dict[str, InputValue]]]:
    """
    Validate a nested component id -> period id -> input id -> value mapping.

    Raises:
        TypeError: If a level is not a mapping or a value is not text, number or boolean
    """
    values: Dict[str, Dict[str, Dict[str, InputValue]]] = {}
    for component_id, by_period in data.items():
        if not isinstance(by_period, Mapping):
            raise TypeError(f'Input values of component "{component_id}" must be a mapping')
        values[component_id] = {}
        for period_key, by_input in by_period.items():
            if not isinstance(by_input, Mapping):
                raise TypeError(
                    f'Input values of component "{component_id}" period "{period_key}" '
                    f"must be a mapping"
                )
            for input_id, value in by_input.items():
                if not isinstance(value, (str, int, float, bool)):
                    raise TypeError(
                        f'Unsupported value for input "{input_id}" of component '
                        f'"{component_id}": {value!r}'
                    )
            values[component_id][period_key] = dict(by_input)
    return values


def _read_json(path: Union[str, Path]) -> Any:
    with open(Path(path), "r", encoding="utf-8") as f:
        return json.load(f)


def load_components(path: Union[str, Path]) -> List[Component]:
    """
    Load components from a JSON file.

    The file holds either a list of components or an object with a
    "components" list.
    """
    data = _read_json(path)
    if isinstance(data, Mapping):
        data = _require(data, "components", f"Component file {path}")
    return components_from_dicts(data)


def load_input_values(path: Union[str, Path]) -> Dict[str, Dict[str, Dict[str, InputValue]]]:
    """Load the nested input value mapping from a JSON file."""
    return input_values_from_dict(_read_json(path))
