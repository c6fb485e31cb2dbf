# Re-export schedule components
from .adjustments import (
    add_months,
    clamp_day,
    get_month_end,
    positional_day,
    week_start,
)
from .generator import effective_span, occurrences
from .intervals import (
    earlier_date,
    in_period,
    intersection,
    later_date,
    merge,
    overlapping,
)
