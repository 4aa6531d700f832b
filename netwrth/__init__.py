"""netwrth: period totals, deltas and breakdowns for personal finance records."""

from netwrth.core.exceptions import InvalidPeriodSpec, NetwrthError
from netwrth.core.models import (
    AggregateResult,
    AllTime,
    CategoryShare,
    Cycle,
    DateRange,
    PastDays,
    PeriodSpec,
    Record,
    TimeUnit,
    Window,
)
from netwrth.engine.aggregator import aggregate, breakdown_by_category, sum_in_window
from netwrth.engine.periods import resolve_previous_window, resolve_window

__version__ = "0.1.0"

__all__ = [
    "AggregateResult",
    "AllTime",
    "CategoryShare",
    "Cycle",
    "DateRange",
    "InvalidPeriodSpec",
    "NetwrthError",
    "PastDays",
    "PeriodSpec",
    "Record",
    "TimeUnit",
    "Window",
    "aggregate",
    "breakdown_by_category",
    "resolve_previous_window",
    "resolve_window",
    "sum_in_window",
]
