"""Domain models for netwrth.

All data structures are defined here using Pydantic v2 for validation.
Period specifications are a tagged union discriminated on ``kind`` so
each variant's required fields are enforced at construction.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from netwrth.core.exceptions import InvalidPeriodSpec

OTHER_CATEGORY = "Other"


def normalize_timestamp(value: datetime) -> datetime:
    """Convert aware datetimes to naive UTC; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class TimeUnit(str, Enum):
    """Step unit for repeating cycles.

    DAY and WEEK are exact durations; MONTH and YEAR follow the calendar.
    """

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class BudgetStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    OVER = "over"


class SavingsStatus(str, Enum):
    """Savings rate compared to the configured target."""

    ON_TRACK = "on_track"
    BELOW_TARGET = "below_target"
    NEEDS_ATTENTION = "needs_attention"


# -----------------------------------------------------------------------------
# Record Model
# -----------------------------------------------------------------------------


class Record(BaseModel):
    """A single financial event (expense or income entry).

    Attributes:
        amount: Amount in the display currency. Must be finite.
        occurred_at: When the event happened. Dates are promoted to
            midnight, aware timestamps are normalised to naive UTC.
        category: User-defined category ("Other" when missing).
        category_group: Optional parent group used by spending-mix views.
        description: Optional free text (expense description or income source).

    Records are immutable; the external store owns them.
    """

    model_config = ConfigDict(frozen=True)

    amount: Annotated[Decimal, Field(allow_inf_nan=False)]
    occurred_at: datetime
    category: str = OTHER_CATEGORY
    category_group: str | None = None
    description: str | None = None

    @field_validator("occurred_at", mode="before")
    @classmethod
    def promote_date(cls, value: Any) -> Any:
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        return value

    @field_validator("occurred_at")
    @classmethod
    def normalize_tz(cls, value: datetime) -> datetime:
        return normalize_timestamp(value)

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return OTHER_CATEGORY
        return value


# -----------------------------------------------------------------------------
# Period Specifications
# -----------------------------------------------------------------------------


class AllTime(BaseModel):
    """No bounds: every record is in the window."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["all_time"] = "all_time"


class Cycle(BaseModel):
    """Repeating window of ``amount`` x ``unit`` starting at ``anchor``.

    The window advances forward from the anchor until it contains "now".
    An anchor in the future resolves to the first window.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["cycle"] = "cycle"
    amount: int
    unit: TimeUnit
    anchor: date

    @model_validator(mode="after")
    def validate_amount(self) -> "Cycle":
        """Reject non-positive cycle lengths."""
        if self.amount <= 0:
            raise InvalidPeriodSpec(f"cycle amount must be positive, got {self.amount}")
        return self


class PastDays(BaseModel):
    """Trailing window ``[now - days, now]``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["past_days"] = "past_days"
    days: int

    @model_validator(mode="after")
    def validate_days(self) -> "PastDays":
        if self.days <= 0:
            raise InvalidPeriodSpec(f"past days must be positive, got {self.days}")
        return self


class DateRange(BaseModel):
    """Explicit bounds; either side may be open.

    ``to_date`` is inclusive through the end of that day.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["date_range"] = "date_range"
    from_date: date | None = None
    to_date: date | None = None

    @model_validator(mode="after")
    def validate_bounds(self) -> "DateRange":
        if self.from_date and self.to_date and self.from_date > self.to_date:
            raise InvalidPeriodSpec(
                f"range start {self.from_date} is after range end {self.to_date}"
            )
        return self


PeriodSpec = Annotated[
    Union[AllTime, Cycle, PastDays, DateRange],
    Field(discriminator="kind"),
]


# -----------------------------------------------------------------------------
# Resolved Windows and Results
# -----------------------------------------------------------------------------


class Window(BaseModel):
    """A resolved ``[start, end]`` timestamp pair, inclusive on both ends."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_order(self) -> "Window":
        if self.start > self.end:
            raise InvalidPeriodSpec(f"window start {self.start} is after end {self.end}")
        return self

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


class AggregateResult(BaseModel):
    """Totals for the current window compared with the previous one.

    ``delta_pct`` is None when no comparison is available (no previous
    window, or the previous total is zero).
    """

    model_config = ConfigDict(frozen=True)

    total: Decimal = Decimal(0)
    count: int = 0
    previous_total: Decimal | None = None
    delta_pct: Decimal | None = None

    @property
    def has_previous(self) -> bool:
        return self.delta_pct is not None

    @property
    def direction(self) -> str:
        """Trend direction: "up", "down" or "flat"."""
        if self.delta_pct is None or self.delta_pct == 0:
            return "flat"
        return "up" if self.delta_pct > 0 else "down"


class CategoryShare(BaseModel):
    """One row of a category breakdown."""

    model_config = ConfigDict(frozen=True)

    category: str
    amount: Decimal
    pct: int


# -----------------------------------------------------------------------------
# Budgets and Goals
# -----------------------------------------------------------------------------


class Budget(BaseModel):
    """Spending limit for a category per month."""

    category: str = Field(min_length=1)
    limit: Annotated[Decimal, Field(ge=0, allow_inf_nan=False)]


class Goal(BaseModel):
    """Savings goal."""

    name: str = Field(min_length=1)
    target: Annotated[Decimal, Field(gt=0, allow_inf_nan=False)]
    saved: Annotated[Decimal, Field(ge=0, allow_inf_nan=False)] = Decimal(0)
    deadline: date | None = None


class BudgetUsage(BaseModel):
    """Budget compared with actual spend for a window."""

    category: str
    spent: Decimal
    limit: Decimal
    pct: int  # capped at 100
    over: bool
    status: BudgetStatus


class GoalProgress(BaseModel):
    name: str
    saved: Decimal
    target: Decimal
    pct: int  # capped at 100
    remaining: Decimal
    deadline: date | None = None


# -----------------------------------------------------------------------------
# Dashboard Data Models
# -----------------------------------------------------------------------------


class MonthBucket(BaseModel):
    """Income and expense totals for one calendar month.

    Used for the income-vs-expense bars and savings-rate trend.
    """

    label: str  # "2024-01"
    start: datetime
    end: datetime
    income: Decimal = Decimal(0)
    expense: Decimal = Decimal(0)
    net: Decimal = Decimal(0)
    savings_rate: int = 0


class DashboardData(BaseModel):
    """Complete data container for the status view.

    Everything is computed from the snapshot passed in by the caller;
    nothing here is cached between calls.
    """

    currency: str
    generated_at: datetime
    window: Window
    previous_window: Window | None = None

    # ===== KPIs =====
    expenses: AggregateResult
    income: AggregateResult
    net_flow: Decimal = Decimal(0)
    avg_monthly_spend: Decimal = Decimal(0)
    net_worth: Decimal = Decimal(0)  # lifetime income minus lifetime expenses
    savings_rate: int = 0
    savings_rate_target: int = 0
    savings_status: SavingsStatus = SavingsStatus.NEEDS_ATTENTION
    top_category: CategoryShare | None = None

    # ===== Breakdown and trend =====
    expense_breakdown: list[CategoryShare] = Field(default_factory=list)
    monthly: list[MonthBucket] = Field(default_factory=list)

    # ===== Budgets and goals =====
    budgets: list[BudgetUsage] = Field(default_factory=list)
    goals: list[GoalProgress] = Field(default_factory=list)
