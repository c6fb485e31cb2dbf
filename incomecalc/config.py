"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from incomecalc.schema.enums import PeriodOrder

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class EngineConfig:
    """Configuration for a calculation run.

    Attributes:
        max_workers: Threads used to evaluate dates in parallel (1 = sequential)
        period_order: Priority of overlapping calculation periods in one component
        verbose: Log a summary of every calculation at INFO level
    """

    max_workers: int = 1
    period_order: PeriodOrder = PeriodOrder.START_DATE
    verbose: bool = False

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Build a configuration from environment variables.

        Reads INCOMECALC_MAX_WORKERS, INCOMECALC_PERIOD_ORDER ("start_date" or
        "declaration") and INCOMECALC_VERBOSE, falling back to the defaults.
        """
        return cls(
            max_workers=int(os.getenv("INCOMECALC_MAX_WORKERS", "1")),
            period_order=PeriodOrder(
                os.getenv("INCOMECALC_PERIOD_ORDER", PeriodOrder.START_DATE.value).lower()
            ),
            verbose=os.getenv("INCOMECALC_VERBOSE", "").strip().lower() in _TRUE_VALUES,
        )
