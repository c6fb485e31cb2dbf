from .components import (
    ONE_TIME_PERIOD_KEY,
    Calculation,
    CalculationPeriod,
    Component,
    ComponentResult,
    DatedAmount,
    OneTimeComponent,
    RecurringComponent,
)
from .enums import DaySelector, InputType, Month, Ordinal, PeriodOrder, Weekday
from .inputs import (
    BooleanInput,
    Input,
    InputValue,
    NumberInput,
    RangeInput,
    SelectInput,
    SelectOption,
    TextInput,
)
from .periods import (
    DailyPeriod,
    DateRange,
    DayRule,
    FixedDay,
    MonthlyPeriod,
    Period,
    PositionalDay,
    WeeklyPeriod,
    YearlyPeriod,
)
