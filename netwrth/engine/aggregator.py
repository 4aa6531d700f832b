"""Record aggregation over resolved windows.

Filters records into windows and reduces them to totals, period-over-period
deltas and category breakdowns. Every function is pure: records are a
snapshot supplied by the caller and nothing is cached between calls.
"""

from collections.abc import Collection, Iterable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from netwrth.core.models import (
    OTHER_CATEGORY,
    AggregateResult,
    CategoryShare,
    PeriodSpec,
    Record,
    Window,
)
from netwrth.engine.periods import format_window, resolve_previous_window, resolve_window
from netwrth.logging_setup import get_logger

logger = get_logger(__name__)


def round_half_up(value: Decimal) -> Decimal:
    """Round to the nearest integer, halves away from zero."""
    return value.quantize(Decimal(1), rounding=ROUND_HALF_UP)


def _amount(record: Record) -> Decimal:
    # Records built with model_construct skip validation
    return record.amount if record.amount.is_finite() else Decimal(0)


def filter_in_window(
    records: Iterable[Record],
    window: Window,
    exclude_categories: Collection[str] = (),
) -> list[Record]:
    """Records whose timestamp falls in the window (inclusive).

    Args:
        records: Records to filter.
        window: Resolved window.
        exclude_categories: Categories (or category groups) to drop.

    Returns:
        Matching records in input order.
    """
    return [
        r
        for r in records
        if window.contains(r.occurred_at)
        and r.category not in exclude_categories
        and (r.category_group is None or r.category_group not in exclude_categories)
    ]


def sum_in_window(records: Iterable[Record], window: Window) -> Decimal:
    """Sum of amounts for records in the window. Empty input gives 0."""
    return sum((_amount(r) for r in records if window.contains(r.occurred_at)), Decimal(0))


def delta_pct(current: Decimal, previous: Decimal | None) -> Decimal | None:
    """Percentage change from ``previous`` to ``current``.

    Returns:
        Rounded percentage, or None when there is nothing to compare
        against (no previous value, or previous is zero).
    """
    if previous is None or previous == 0:
        return None
    return round_half_up((current - previous) / abs(previous) * 100)


def aggregate(
    records: Collection[Record],
    spec: PeriodSpec,
    now: datetime | None = None,
    exclude_categories: Collection[str] = (),
) -> AggregateResult:
    """Total records for the current period and compare with the previous one.

    Args:
        records: Snapshot of records.
        spec: Period specification.
        now: Reference instant (defaults to now).
        exclude_categories: Categories left out of both totals.

    Returns:
        AggregateResult. ``delta_pct`` is None when no previous window
        exists or its total is zero.
    """
    window = resolve_window(spec, now)
    current = filter_in_window(records, window, exclude_categories)
    total = sum((_amount(r) for r in current), Decimal(0))

    previous_total: Decimal | None = None
    previous_window = resolve_previous_window(spec, window)
    if previous_window is not None:
        previous = filter_in_window(records, previous_window, exclude_categories)
        previous_total = sum((_amount(r) for r in previous), Decimal(0))

    result = AggregateResult(
        total=total,
        count=len(current),
        previous_total=previous_total,
        delta_pct=delta_pct(total, previous_total),
    )
    logger.debug(
        "Aggregated %d of %d records in %s: total=%s previous=%s",
        result.count,
        len(records),
        format_window(window),
        result.total,
        result.previous_total,
    )
    return result


def _pct(amount: Decimal, total: Decimal) -> int:
    if total == 0:
        return 0
    return int(round_half_up(amount / total * 100))


def breakdown_by_category(
    records: Iterable[Record],
    window: Window,
    top_n: int | None = None,
    by_group: bool = False,
    exclude_categories: Collection[str] = (),
) -> list[CategoryShare]:
    """Group the window's records by category with amounts and shares.

    Args:
        records: Records to group.
        window: Window to filter by.
        top_n: Keep this many categories; the rest are folded into
            "Other". None keeps all.
        by_group: Group by ``category_group`` (falling back to category).
        exclude_categories: Categories to leave out.

    Returns:
        Shares sorted by amount, largest first. Percentages are relative
        to the total of all groups and are 0 when that total is zero.

    Raises:
        ValueError: If top_n is not positive.
    """
    if top_n is not None and top_n <= 0:
        raise ValueError(f"top_n must be positive, got {top_n}")

    totals: dict[str, Decimal] = {}
    for r in filter_in_window(records, window, exclude_categories):
        key = (r.category_group or r.category) if by_group else r.category
        totals[key] = totals.get(key, Decimal(0)) + _amount(r)

    if not totals:
        return []

    ranked = sorted(totals.items(), key=lambda x: (-x[1], x[0]))
    if top_n is not None and len(ranked) > top_n:
        kept = dict(ranked[:top_n])
        rest = sum((amount for _, amount in ranked[top_n:]), Decimal(0))
        kept[OTHER_CATEGORY] = kept.get(OTHER_CATEGORY, Decimal(0)) + rest
        # "Other" sorts after named categories of equal size
        ranked = sorted(kept.items(), key=lambda x: (-x[1], x[0] == OTHER_CATEGORY, x[0]))

    grand_total = sum(totals.values(), Decimal(0))
    return [
        CategoryShare(category=category, amount=amount, pct=_pct(amount, grand_total))
        for category, amount in ranked
    ]
