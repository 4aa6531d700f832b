"""Period arithmetic.

Resolves period specifications into concrete windows at a given instant,
finds the comparable previous window, and provides the named report
ranges (this month, last month, fiscal year, salary cycle, ...).

Month and year steps follow the calendar via ``relativedelta``; day and
week steps are exact. Cycle boundaries are always computed from the
anchor (``anchor + k * step``) so month-end anchors clip without drifting.
"""

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

from netwrth.core.exceptions import InvalidPeriodSpec
from netwrth.core.models import (
    AllTime,
    Cycle,
    DateRange,
    PastDays,
    PeriodSpec,
    TimeUnit,
    Window,
    normalize_timestamp,
)
from netwrth.logging_setup import get_logger

if TYPE_CHECKING:
    from netwrth.core.config import Settings

logger = get_logger(__name__)

TICK = timedelta(microseconds=1)
UNBOUNDED = Window(start=datetime.min, end=datetime.max)

INSIGHT_RANGES = {"3m": 3, "6m": 6, "1y": 12, "2y": 24}
PRESETS = (
    "all",
    "this-month",
    "last-month",
    "last-3-months",
    "this-fy",
    "salary-cycle",
    *INSIGHT_RANGES,
)


# -----------------------------------------------------------------------------
# Date helpers
# -----------------------------------------------------------------------------


def start_of_day(value: date) -> datetime:
    """Midnight at the start of the given day."""
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def end_of_day(value: date) -> datetime:
    """Last representable instant of the given day."""
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.max)


def shift(value: date, unit: TimeUnit, n: int) -> date:
    """Move a date or datetime by ``n`` units.

    Args:
        value: Date or datetime to shift.
        unit: Step unit.
        n: Number of units (may be negative).

    Returns:
        Shifted value of the same type. Months and years clip to the last
        valid day (Jan 31 + 1 month = Feb 29 in a leap year).
    """
    if unit == TimeUnit.DAY:
        return value + timedelta(days=n)
    if unit == TimeUnit.WEEK:
        return value + timedelta(weeks=n)
    if unit == TimeUnit.MONTH:
        return value + relativedelta(months=n)
    return value + relativedelta(years=n)


def _days_before(moment: datetime, days: int) -> datetime:
    """``moment - days``, clamped to ``datetime.min``."""
    try:
        return moment - timedelta(days=days)
    except OverflowError:
        return datetime.min


def _before(moment: datetime) -> datetime:
    """Last instant before ``moment``; an unbounded end stays unbounded."""
    if moment in (datetime.min, datetime.max):
        return moment
    return moment - TICK


def _months_between(earlier: date, later: date) -> int:
    return (later.year - earlier.year) * 12 + later.month - earlier.month


# -----------------------------------------------------------------------------
# Cycle stepping
# -----------------------------------------------------------------------------


def _cycle_start(spec: Cycle, k: int) -> datetime:
    """Start of the k-th cycle window (k may be negative).

    Steps past the calendar's range clamp to ``datetime.min`` or
    ``datetime.max``.
    """
    n = k * spec.amount
    try:
        return start_of_day(shift(spec.anchor, spec.unit, n))
    except (OverflowError, ValueError):
        return datetime.max if n > 0 else datetime.min


def _cycle_index(spec: Cycle, moment: datetime) -> int:
    """Index k of the cycle window containing ``moment``.

    Estimates k arithmetically, then corrects for calendar clipping so
    that ``start(k) <= moment < start(k + 1)``.
    """
    anchor = start_of_day(spec.anchor)

    if spec.unit in (TimeUnit.DAY, TimeUnit.WEEK):
        step_days = spec.amount * (7 if spec.unit == TimeUnit.WEEK else 1)
        k = (moment - anchor).days // step_days
    elif spec.unit == TimeUnit.MONTH:
        k = _months_between(anchor, moment) // spec.amount
    else:
        k = (moment.year - anchor.year) // spec.amount

    while _cycle_start(spec, k) > moment:
        k -= 1
    while _cycle_start(spec, k + 1) <= moment:
        k += 1
    return k


def _cycle_window(spec: Cycle, k: int) -> Window:
    return Window(start=_cycle_start(spec, k), end=_before(_cycle_start(spec, k + 1)))


# -----------------------------------------------------------------------------
# Window resolution
# -----------------------------------------------------------------------------


def resolve_window(spec: PeriodSpec, now: datetime | None = None) -> Window:
    """Resolve a period specification into a concrete window.

    Args:
        spec: Period specification.
        now: Reference instant (defaults to the current local time).

    Returns:
        Window with ``start <= end``. For cycles the window contains
        ``now``, or is the first window when ``now`` precedes the anchor.
    """
    now = normalize_timestamp(now or datetime.now())

    if isinstance(spec, AllTime):
        window = UNBOUNDED

    elif isinstance(spec, PastDays):
        window = Window(start=start_of_day(_days_before(now, spec.days)), end=now)

    elif isinstance(spec, DateRange):
        window = Window(
            start=start_of_day(spec.from_date) if spec.from_date else datetime.min,
            end=end_of_day(spec.to_date) if spec.to_date else datetime.max,
        )

    elif isinstance(spec, Cycle):
        if now < start_of_day(spec.anchor):
            k = 0
        else:
            k = _cycle_index(spec, now)
        window = _cycle_window(spec, k)

    else:
        raise InvalidPeriodSpec(f"Unknown period specification: {spec!r}")

    logger.debug("Resolved %s at %s to %s", spec, now, format_window(window))
    return window


def resolve_previous_window(spec: PeriodSpec, current: Window) -> Window | None:
    """Resolve the window immediately preceding ``current``.

    Args:
        spec: The specification ``current`` was resolved from.
        current: The current window.

    Returns:
        Previous comparable window, or None when the specification has no
        meaningful "previous" (all time, explicit ranges) or the current
        window already starts at the earliest representable instant.
    """
    if isinstance(spec, (AllTime, DateRange)) or current.start == datetime.min:
        return None

    if isinstance(spec, PastDays):
        return Window(
            start=_days_before(current.start, spec.days),
            end=current.start - TICK,
        )

    if isinstance(spec, Cycle):
        k = _cycle_index(spec, current.start)
        return Window(start=_cycle_start(spec, k - 1), end=current.start - TICK)

    raise InvalidPeriodSpec(f"Unknown period specification: {spec!r}")


# -----------------------------------------------------------------------------
# Calendar months
# -----------------------------------------------------------------------------


def month_window(year: int, month: int) -> Window:
    """Window covering one calendar month."""
    start = datetime(year, month, 1)
    try:
        next_start = start + relativedelta(months=1)
    except ValueError:
        next_start = datetime.max
    return Window(start=start, end=_before(next_start))


def iterate_month_windows(now: datetime, months: int) -> list[Window]:
    """Windows for the last ``months`` calendar months, oldest first.

    The month containing ``now`` is the last entry. Months before year 1
    are skipped.
    """
    first_of_month = date(now.year, now.month, 1)
    windows = []
    for i in range(months - 1, -1, -1):
        try:
            d = first_of_month - relativedelta(months=i)
        except ValueError:
            continue
        windows.append(month_window(d.year, d.month))
    return windows


# -----------------------------------------------------------------------------
# Named ranges
# -----------------------------------------------------------------------------


def fiscal_year_spec(fiscal_year_start: int) -> Cycle:
    """Yearly cycle starting on the 1st of ``fiscal_year_start`` (1-12)."""
    if not 1 <= fiscal_year_start <= 12:
        raise InvalidPeriodSpec(f"fiscal year start month must be 1-12, got {fiscal_year_start}")
    return Cycle(amount=1, unit=TimeUnit.YEAR, anchor=date(2000, fiscal_year_start, 1))


def salary_cycle_spec(salary_credit_day: int) -> Cycle:
    """Monthly cycle starting on the salary credit day (1-28)."""
    if not 1 <= salary_credit_day <= 28:
        raise InvalidPeriodSpec(f"salary credit day must be 1-28, got {salary_credit_day}")
    return Cycle(amount=1, unit=TimeUnit.MONTH, anchor=date(2000, 1, salary_credit_day))


def preset_spec(
    name: str,
    now: datetime | None = None,
    settings: "Settings | None" = None,
) -> PeriodSpec:
    """Build the specification for a named report range.

    Args:
        name: One of ``PRESETS``.
        now: Reference instant for ranges relative to today.
        settings: Provides fiscal year start and salary day.

    Returns:
        PeriodSpec for the range.

    Raises:
        InvalidPeriodSpec: If the name is unknown.
    """
    if settings is None:
        from netwrth.core.config import get_settings

        settings = get_settings()

    now = normalize_timestamp(now or datetime.now())
    today = now.date()
    first_of_month = today.replace(day=1)

    if name == "all":
        return AllTime()
    if name == "this-month":
        return Cycle(amount=1, unit=TimeUnit.MONTH, anchor=date(2000, 1, 1))
    if name == "last-month":
        return DateRange(
            from_date=first_of_month - relativedelta(months=1),
            to_date=first_of_month - timedelta(days=1),
        )
    if name == "last-3-months":
        return DateRange(from_date=first_of_month - relativedelta(months=3), to_date=today)
    if name == "this-fy":
        return fiscal_year_spec(settings.fiscal_year_start)
    if name == "salary-cycle":
        return salary_cycle_spec(settings.salary_credit_day)
    if name in INSIGHT_RANGES:
        months = INSIGHT_RANGES[name]
        return DateRange(
            from_date=first_of_month - relativedelta(months=months - 1),
            to_date=first_of_month + relativedelta(months=1) - timedelta(days=1),
        )

    raise InvalidPeriodSpec(
        f"Unknown period '{name}'. Expected one of: {', '.join(PRESETS)}"
    )


def _parse_date(text: str) -> date | None:
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidPeriodSpec(f"Invalid date '{text}', expected YYYY-MM-DD") from None


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise InvalidPeriodSpec(f"Invalid {what} '{text}', expected an integer") from None


def parse_period(
    text: str,
    now: datetime | None = None,
    settings: "Settings | None" = None,
) -> PeriodSpec:
    """Parse a period string.

    Accepted forms:
        - a preset name (``this-month``, ``last-month``, ``3m``, ...)
        - ``past:<days>``
        - ``cycle:<amount>:<day|week|month|year>:<YYYY-MM-DD>``
        - ``range:<from>:<to>`` (either date may be empty)

    Raises:
        InvalidPeriodSpec: If the text cannot be parsed.
    """
    text = text.strip().lower()
    kind, _, rest = text.partition(":")

    if not rest:
        return preset_spec(kind, now, settings)

    parts = rest.split(":")

    if kind == "past" and len(parts) == 1:
        return PastDays(days=_parse_int(parts[0], "day count"))

    if kind == "cycle" and len(parts) == 3:
        amount_text, unit_text, anchor_text = parts
        try:
            unit = TimeUnit(unit_text)
        except ValueError:
            raise InvalidPeriodSpec(
                f"Invalid unit '{unit_text}'. Expected: day, week, month, year"
            ) from None
        anchor = _parse_date(anchor_text)
        if anchor is None:
            raise InvalidPeriodSpec("Cycle anchor date is required")
        return Cycle(amount=_parse_int(amount_text, "cycle amount"), unit=unit, anchor=anchor)

    if kind == "range" and len(parts) == 2:
        return DateRange(from_date=_parse_date(parts[0]), to_date=_parse_date(parts[1]))

    raise InvalidPeriodSpec(f"Cannot parse period '{text}'")


def format_window(window: Window) -> str:
    """Human-readable window, e.g. ``2024-01-01 - 2024-01-31``."""

    def _fmt(moment: datetime, unbounded: datetime) -> str:
        if moment == unbounded:
            return "..."
        if moment.time() in (time.min, time.max):
            return moment.date().isoformat()
        return moment.strftime("%Y-%m-%d %H:%M")

    return f"{_fmt(window.start, datetime.min)} - {_fmt(window.end, datetime.max)}"
