"""Tests for building components and input values from JSON-shaped data."""

import json
from datetime import date

import pytest

from incomecalc.data.loaders import (
    component_from_dict,
    components_from_dicts,
    input_from_dict,
    input_values_from_dict,
    load_components,
    load_input_values,
    period_from_dict,
)
from incomecalc.engine.calculator import calculate
from incomecalc.schema.components import OneTimeComponent, RecurringComponent
from incomecalc.schema.enums import DaySelector, Month, Ordinal, Weekday
from incomecalc.schema.inputs import BooleanInput, NumberInput, RangeInput, SelectInput, TextInput
from incomecalc.schema.periods import (
    DailyPeriod,
    FixedDay,
    MonthlyPeriod,
    PositionalDay,
    WeeklyPeriod,
    YearlyPeriod,
)

SALARY = {
    "id": "salary",
    "name": "Salary",
    "type": "recurring",
    "calculationPeriods": [
        {
            "id": "2023",
            "period": {
                "startDate": "2023-01-01",
                "endDate": "2023-12-31",
                "frequency": "monthly",
                "every": 1,
                "dayOfMonthType": "day",
                "each": 25,
            },
            "calculation": {
                "inputs": [{"id": "gross", "type": "number", "defaultValue": 3000}],
                "dependencies": [],
                "func": "return inputs.gross",
            },
        }
    ],
}

BONUS = {
    "id": "bonus",
    "name": "Bonus",
    "type": "one-time",
    "date": "2023-12-15",
    "calculation": {"func": "return dependencies.salary", "dependencies": ["salary"]},
}


class TestPeriodFromDict:

    def test_daily(self) -> None:
        period = period_from_dict({"startDate": "2023-01-01", "frequency": "daily", "every": 2})
        assert period == DailyPeriod(date(2023, 1, 1), None, 2)

    def test_weekly(self) -> None:
        period = period_from_dict(
            {"startDate": "2023-01-01", "frequency": "weekly", "weekdays": ["monday", "friday"]}
        )
        assert isinstance(period, WeeklyPeriod)
        assert period.weekdays == (Weekday.MONDAY, Weekday.FRIDAY)

    def test_monthly_positional(self) -> None:
        period = period_from_dict(
            {
                "startDate": "2023-01-01",
                "frequency": "monthly",
                "dayOfMonthType": "position",
                "day": "weekend-day",
                "on": "next-to-last",
            }
        )
        assert isinstance(period, MonthlyPeriod)
        assert period.day_rule == PositionalDay(DaySelector.WEEKEND_DAY, Ordinal.NEXT_TO_LAST)

    def test_yearly(self) -> None:
        period = period_from_dict(
            {
                "startDate": "2023-01-01",
                "endDate": "2030-12-31",
                "frequency": "yearly",
                "months": ["june", "december"],
                "each": 31,
            }
        )
        assert period == YearlyPeriod(
            date(2023, 1, 1), date(2030, 12, 31), 1, (Month.JUNE, Month.DECEMBER), FixedDay(31)
        )

    def test_unknown_frequency(self) -> None:
        with pytest.raises(ValueError, match="frequency"):
            period_from_dict({"startDate": "2023-01-01", "frequency": "hourly"})

    def test_missing_start_date(self) -> None:
        with pytest.raises(ValueError, match="startDate"):
            period_from_dict({"frequency": "daily"})


class TestInputFromDict:

    @pytest.mark.parametrize(
        "data, expected_type",
        [
            ({"id": "a", "type": "text"}, TextInput),
            ({"id": "a", "type": "number", "min": 0}, NumberInput),
            ({"id": "a", "type": "boolean"}, BooleanInput),
            ({"id": "a", "type": "select", "options": [{"id": "x"}]}, SelectInput),
            ({"id": "a", "type": "range", "min": 1, "max": 5}, RangeInput),
        ],
    )
    def test_types(self, data, expected_type) -> None:
        assert isinstance(input_from_dict(data), expected_type)

    def test_optional_flag(self) -> None:
        assert input_from_dict({"id": "a", "type": "text", "required": False}).required is False

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            input_from_dict({"id": "a", "type": "date"})


class TestComponentFromDict:

    def test_recurring(self) -> None:
        component = component_from_dict(SALARY)
        assert isinstance(component, RecurringComponent)
        [calculation_period] = component.calculation_periods
        assert calculation_period.id == "2023"
        assert calculation_period.calculation.inputs[0].default_value == 3000

    def test_one_time(self) -> None:
        component = component_from_dict(BONUS)
        assert isinstance(component, OneTimeComponent)
        assert component.date == date(2023, 12, 15)
        assert component.calculation.dependencies == ("salary",)

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="component type"):
            component_from_dict({**BONUS, "type": "weekly"})

    def test_recurring_without_periods(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            component_from_dict({**SALARY, "calculationPeriods": []})

    def test_duplicate_ids(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            components_from_dicts([BONUS, BONUS])


class TestInputValues:

    def test_valid_mapping(self) -> None:
        values = input_values_from_dict({"salary": {"2023": {"gross": 2000, "note": "x"}}})
        assert values == {"salary": {"2023": {"gross": 2000, "note": "x"}}}

    def test_rejects_nested_lists(self) -> None:
        with pytest.raises(TypeError):
            input_values_from_dict({"salary": {"2023": {"gross": [1, 2]}}})

    def test_rejects_non_mapping_level(self) -> None:
        with pytest.raises(TypeError):
            input_values_from_dict({"salary": ["2023"]})


class TestFiles:

    def test_load_and_calculate(self, tmp_path) -> None:
        components_path = tmp_path / "components.json"
        components_path.write_text(json.dumps({"components": [SALARY, BONUS]}), encoding="utf-8")
        values_path = tmp_path / "values.json"
        values_path.write_text(json.dumps({"salary": {"2023": {"gross": 2000}}}), encoding="utf-8")

        components = load_components(components_path)
        values = load_input_values(str(values_path))
        salary, bonus = calculate(components, values, date(2023, 12, 16), date(2023, 12, 31))
        assert salary.total == 2000.0
        assert bonus.total == 0.0
        assert bonus.results == []

    def test_plain_list_file(self, tmp_path) -> None:
        path = tmp_path / "components.json"
        path.write_text(json.dumps([SALARY]), encoding="utf-8")
        assert [c.id for c in load_components(path)] == ["salary"]
