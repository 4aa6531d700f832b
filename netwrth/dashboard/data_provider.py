"""Dashboard data provider.

Collects and transforms everything the status view needs from a record
snapshot: KPI totals with deltas, spending mix, monthly trend, budgets
and goals.
"""

from datetime import datetime

from netwrth.core.config import Settings
from netwrth.core.models import (
    BudgetUsage,
    DashboardData,
    PeriodSpec,
    Window,
    normalize_timestamp,
)
from netwrth.core.snapshot import Snapshot
from netwrth.engine.aggregator import (
    aggregate,
    breakdown_by_category,
    filter_in_window,
    sum_in_window,
)
from netwrth.engine.calculator import (
    average_per_month,
    budget_usage,
    goal_progress,
    monthly_buckets,
    savings_rate,
    savings_status,
)
from netwrth.engine.periods import UNBOUNDED, resolve_previous_window, resolve_window
from netwrth.logging_setup import get_logger

logger = get_logger(__name__)

DAYS_PER_MONTH = 30.4375
UNBOUNDED_MONTHS = 12


def window_months(window: Window, now: datetime) -> int:
    """Approximate number of months a window spans, at least 1.

    Windows without a start count as a year; windows without an end are
    measured up to ``now``.
    """
    if window.start == datetime.min:
        return UNBOUNDED_MONTHS
    end = now if window.end == datetime.max else window.end
    days = (end - window.start).total_seconds() / 86400
    return max(1, round(days / DAYS_PER_MONTH))


class InsightsProvider:
    """Provides all data needed for the status view.

    Holds only settings; record snapshots are passed to every call so
    results always reflect the caller's latest data.
    """

    def __init__(self, settings: Settings):
        """Initialize provider.

        Args:
            settings: Display and analysis settings.
        """
        self.settings = settings

    def get_dashboard_data(
        self,
        snapshot: Snapshot,
        spec: PeriodSpec,
        now: datetime | None = None,
    ) -> DashboardData:
        """Get complete dashboard data.

        Args:
            snapshot: Records to analyze.
            spec: Period to analyze.
            now: Reference instant (defaults to now).

        Returns:
            DashboardData for the resolved window.
        """
        now = normalize_timestamp(now or datetime.now())
        ignored = self.settings.ignored_categories

        window = resolve_window(spec, now)
        previous_window = resolve_previous_window(spec, window)

        expenses = aggregate(snapshot.expenses, spec, now, exclude_categories=ignored)
        income = aggregate(snapshot.income, spec, now)

        rate = savings_rate(income.total, expenses.total)
        target = self.settings.savings_rate_target

        # Top category comes from the uncapped breakdown so "Other" never wins
        full_breakdown = breakdown_by_category(
            snapshot.expenses, window, by_group=True, exclude_categories=ignored
        )
        breakdown = breakdown_by_category(
            snapshot.expenses,
            window,
            top_n=self.settings.top_categories,
            by_group=True,
            exclude_categories=ignored,
        )

        monthly = monthly_buckets(
            income=snapshot.income,
            expenses=filter_in_window(snapshot.expenses, UNBOUNDED, ignored),
            now=now,
            months=self.settings.chart_months,
        )

        months = window_months(window, now)
        budgets = self._build_budget_usages(snapshot, window, months)
        goals = [goal_progress(g) for g in snapshot.goals]

        # Lifetime totals, ignored categories included
        income_to_date = sum_in_window(snapshot.income, UNBOUNDED)
        spent_to_date = sum_in_window(snapshot.expenses, UNBOUNDED)

        logger.info(
            "Dashboard for %s: expenses=%s income=%s savings_rate=%d%%",
            spec.kind,
            expenses.total,
            income.total,
            rate,
        )

        return DashboardData(
            currency=self.settings.base_currency,
            generated_at=datetime.now(),
            window=window,
            previous_window=previous_window,
            # KPIs
            expenses=expenses,
            income=income,
            net_flow=income.total - expenses.total,
            avg_monthly_spend=average_per_month(expenses.total, months),
            net_worth=income_to_date - spent_to_date,
            savings_rate=rate,
            savings_rate_target=target,
            savings_status=savings_status(rate, target),
            top_category=full_breakdown[0] if full_breakdown else None,
            # Breakdown and trend
            expense_breakdown=breakdown,
            monthly=monthly,
            # Budgets and goals
            budgets=budgets,
            goals=goals,
        )

    def _build_budget_usages(
        self,
        snapshot: Snapshot,
        window: Window,
        months: int,
    ) -> list[BudgetUsage]:
        """Compare each budget with spend in the window.

        A budget matches expenses by category or by category group.

        Args:
            snapshot: Records and budgets.
            window: Current window.
            months: Months the window spans; budget limits are monthly.

        Returns:
            List of BudgetUsage in budget order.
        """
        usages: list[BudgetUsage] = []

        for budget in snapshot.budgets:
            matching = [
                r
                for r in snapshot.expenses
                if r.category == budget.category or r.category_group == budget.category
            ]
            spent = sum_in_window(matching, window)
            usages.append(
                budget_usage(
                    budget,
                    spent,
                    alert_threshold=self.settings.budget_alert_threshold,
                    months=months,
                )
            )

        return usages
