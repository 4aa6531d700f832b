"""Insight calculations.

Savings rate, budget usage, goal progress and monthly buckets built on
top of the aggregator.
"""

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from netwrth.core.models import (
    Budget,
    BudgetStatus,
    BudgetUsage,
    Goal,
    GoalProgress,
    MonthBucket,
    Record,
    SavingsStatus,
)
from netwrth.engine.aggregator import round_half_up, sum_in_window
from netwrth.engine.periods import iterate_month_windows


def savings_rate(income: Decimal, expenses: Decimal) -> int:
    """Share of income not spent, in whole percent.

    Args:
        income: Total income.
        expenses: Total expenses.

    Returns:
        ``round((income - expenses) / income * 100)``, or 0 when there is
        no income. Negative when spending exceeds income.
    """
    if income <= 0:
        return 0
    return int(round_half_up((income - expenses) / income * 100))


def savings_status(rate: int, target: int) -> SavingsStatus:
    """Classify a savings rate against its target.

    At or above target is on track; at least half the target is below
    target; anything lower needs attention.
    """
    if rate >= target:
        return SavingsStatus.ON_TRACK
    if rate * 2 >= target:
        return SavingsStatus.BELOW_TARGET
    return SavingsStatus.NEEDS_ATTENTION


def average_per_month(total: Decimal, months: int) -> Decimal:
    """Average monthly amount, rounded to a whole unit."""
    if months <= 0:
        return Decimal(0)
    return round_half_up(total / months)


def budget_usage(
    budget: Budget,
    spent: Decimal,
    alert_threshold: int,
    months: int = 1,
) -> BudgetUsage:
    """Compare actual spend against a category budget.

    Args:
        budget: Monthly budget.
        spent: Actual spend in the category.
        alert_threshold: Percent of the limit at which status turns WARNING.
        months: Number of months the spend covers; the limit is scaled.

    Returns:
        BudgetUsage with percentage capped at 100.
    """
    limit = budget.limit * max(months, 1)
    if limit > 0:
        pct = min(int(round_half_up(spent / limit * 100)), 100)
    else:
        pct = 100 if spent > 0 else 0
    over = spent > limit

    if over:
        status = BudgetStatus.OVER
    elif pct >= alert_threshold:
        status = BudgetStatus.WARNING
    else:
        status = BudgetStatus.OK

    return BudgetUsage(
        category=budget.category,
        spent=spent,
        limit=limit,
        pct=pct,
        over=over,
        status=status,
    )


def goal_progress(goal: Goal) -> GoalProgress:
    """Progress towards a savings goal, capped at 100%."""
    pct = min(int(round_half_up(goal.saved / goal.target * 100)), 100)
    return GoalProgress(
        name=goal.name,
        saved=goal.saved,
        target=goal.target,
        pct=pct,
        remaining=max(Decimal(0), goal.target - goal.saved),
        deadline=goal.deadline,
    )


def monthly_buckets(
    income: Iterable[Record],
    expenses: Iterable[Record],
    now: datetime,
    months: int,
) -> list[MonthBucket]:
    """Income and expense totals per calendar month, oldest first.

    Args:
        income: Income records.
        expenses: Expense records.
        now: Reference instant; its month is the last bucket.
        months: Number of buckets.

    Returns:
        One MonthBucket per month, including empty months.
    """
    income = list(income)
    expenses = list(expenses)
    buckets: list[MonthBucket] = []

    for window in iterate_month_windows(now, months):
        inc = sum_in_window(income, window)
        exp = sum_in_window(expenses, window)
        buckets.append(
            MonthBucket(
                label=window.start.strftime("%Y-%m"),
                start=window.start,
                end=window.end,
                income=inc,
                expense=exp,
                net=inc - exp,
                savings_rate=savings_rate(inc, exp),
            )
        )

    return buckets
