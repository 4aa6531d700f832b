"""Implementation of 'netwrth status' command.

Shows totals for a period with changes against the previous period,
savings rate, top categories, budgets and goals.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from netwrth.cli.utils import (
    delta_style,
    format_currency,
    format_delta,
    format_percentage,
    load_inputs,
)
from netwrth.core.exceptions import NetwrthError
from netwrth.core.models import AggregateResult, BudgetStatus, SavingsStatus
from netwrth.dashboard import InsightsProvider
from netwrth.engine.periods import format_window

console = Console()

SAVINGS_LABELS = {
    SavingsStatus.ON_TRACK: ("green", "On track"),
    SavingsStatus.BELOW_TARGET: ("yellow", "Below target"),
    SavingsStatus.NEEDS_ATTENTION: ("red", "Needs attention"),
}

BUDGET_STYLES = {
    BudgetStatus.OK: "green",
    BudgetStatus.WARNING: "yellow",
    BudgetStatus.OVER: "red",
}


def _print_total(label: str, result: AggregateResult, currency: str, higher_is_better: bool) -> None:
    style = delta_style(result.delta_pct, higher_is_better)
    console.print(
        f"  {label:<10}{format_currency(result.total, currency):>14}"
        f"  [{style}]{format_delta(result.delta_pct):>6}[/{style}]"
        f"  [dim]({result.count} entries)[/dim]"
    )


def status_command(
    snapshot: Path = typer.Argument(
        ...,
        help="JSON snapshot exported from the record store",
    ),
    period: str = typer.Option(
        None,
        "--period",
        "-p",
        help="Period preset or spec (default: NETWRTH_REPORT_RANGE_DEFAULT)",
    ),
    now: str = typer.Option(
        None,
        "--now",
        help="Reference date/time in ISO format (default: now)",
    ),
) -> None:
    """Show period status.

    Displays income and expenses with change from the previous period,
    savings rate against target, top spending categories, budget usage
    and goal progress.
    """
    try:
        settings, data_snapshot, spec, reference = load_inputs(snapshot, period, now)
    except NetwrthError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    provider = InsightsProvider(settings)
    data = provider.get_dashboard_data(data_snapshot, spec, reference)
    currency = data.currency

    # Header
    console.print()
    title = f"Status for {format_window(data.window)}"
    console.print(Panel(f"[bold]{title}[/bold]", style="cyan"))
    if data.previous_window:
        console.print(f"[dim]Compared with {format_window(data.previous_window)}[/dim]")
    console.print()

    if data.expenses.count == 0 and data.income.count == 0:
        console.print("[yellow]No records found for this period[/yellow]")
        raise typer.Exit(0)

    # Totals
    console.print("[bold]Totals[/bold]")
    _print_total("Income", data.income, currency, higher_is_better=True)
    _print_total("Expenses", data.expenses, currency, higher_is_better=False)
    net_style = "green" if data.net_flow >= 0 else "red"
    console.print(
        f"  {'Net':<10}[{net_style}]{format_currency(data.net_flow, currency):>14}[/{net_style}]"
    )
    console.print(
        f"  {'Avg/month':<10}{format_currency(data.avg_monthly_spend, currency):>14}"
        "  [dim](spending)[/dim]"
    )
    worth_style = "green" if data.net_worth >= 0 else "red"
    console.print(
        f"  {'Net worth':<10}[{worth_style}]{format_currency(data.net_worth, currency):>14}"
        f"[/{worth_style}]  [dim](all time)[/dim]"
    )
    console.print()

    # Savings rate
    style, label = SAVINGS_LABELS[data.savings_status]
    console.print("[bold]Savings Rate[/bold]")
    console.print(
        f"  {format_percentage(max(data.savings_rate, 0))}  "
        f"[{style}]{label}[/{style}] "
        f"[dim]({format_percentage(data.savings_rate_target)} goal)[/dim]"
    )
    console.print()

    # Category breakdown (top spenders)
    if data.expense_breakdown:
        console.print("[bold]Top Categories[/bold]")
        for share in data.expense_breakdown:
            console.print(
                f"  {share.category:<20}{format_currency(share.amount, currency):>14}"
                f"  ({format_percentage(share.pct)})"
            )
        console.print()

    warnings: list[str] = []

    if data.budgets:
        console.print("[bold]Budgets[/bold]")
        for usage in data.budgets:
            style = BUDGET_STYLES[usage.status]
            console.print(
                f"  {usage.category:<20}{format_currency(usage.spent, currency):>14} / "
                f"{format_currency(usage.limit, currency)}  [{style}]{usage.pct}%[/{style}]"
            )
            if usage.over:
                warnings.append(
                    f"{usage.category} over budget by "
                    f"{format_currency(usage.spent - usage.limit, currency)}"
                )
        console.print()

    if data.goals:
        console.print("[bold]Goals[/bold]")
        for goal in data.goals:
            deadline = goal.deadline.strftime("%b %Y") if goal.deadline else "No deadline"
            console.print(
                f"  {goal.name:<20}{format_currency(goal.saved, currency):>14} / "
                f"{format_currency(goal.target, currency)}  ({goal.pct}%)  [dim]{deadline}[/dim]"
            )
        console.print()

    if warnings:
        console.print("[bold yellow]⚠ Warnings[/bold yellow]")
        for w in warnings:
            console.print(f"  - {w}")
        console.print()
