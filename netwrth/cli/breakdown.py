"""Implementation of 'netwrth breakdown' command.

Category breakdown for a period as a table.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from netwrth.cli.utils import format_currency, format_percentage, load_inputs
from netwrth.core.exceptions import NetwrthError
from netwrth.engine.aggregator import breakdown_by_category
from netwrth.engine.periods import format_window, resolve_window

console = Console()


def breakdown_command(
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
    top: int = typer.Option(
        None,
        "--top",
        "-n",
        min=1,
        help="Number of categories before folding into 'Other' (default: NETWRTH_TOP_CATEGORIES)",
    ),
    income: bool = typer.Option(
        False,
        "--income",
        help="Break down income instead of expenses",
    ),
    by_group: bool = typer.Option(
        False,
        "--by-group",
        "-g",
        help="Group by category group instead of category",
    ),
) -> None:
    """Show spending (or income) by category for a period."""
    try:
        settings, data_snapshot, spec, reference = load_inputs(snapshot, period, now)
    except NetwrthError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    window = resolve_window(spec, reference)
    records = data_snapshot.income if income else data_snapshot.expenses
    shares = breakdown_by_category(
        records,
        window,
        top_n=top or settings.top_categories,
        by_group=by_group,
        exclude_categories=() if income else settings.ignored_categories,
    )

    kind = "Income" if income else "Expenses"
    if not shares:
        console.print(f"[yellow]No {kind.lower()} in {format_window(window)}[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"{kind} by category, {format_window(window)}")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Share", justify="right")

    for share in shares:
        table.add_row(
            share.category,
            format_currency(share.amount, settings.base_currency),
            format_percentage(share.pct),
        )

    console.print(table)
