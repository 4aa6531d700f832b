"""Implementation of 'netwrth window' command.

Prints the current and previous windows a period resolves to.
"""

import typer
from rich.console import Console

from netwrth.cli.utils import NO_PREVIOUS_DATA, parse_now
from netwrth.core.config import get_settings
from netwrth.core.exceptions import NetwrthError
from netwrth.engine.periods import (
    format_window,
    parse_period,
    resolve_previous_window,
    resolve_window,
)

console = Console()


def window_command(
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
    """Show the date window a period covers.

    Examples: this-month, past:30, cycle:2:week:2024-01-01,
    range:2024-01-01:2024-03-31.
    """
    try:
        reference = parse_now(now)
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid --now value '{now}'")
        raise typer.Exit(1)

    try:
        settings = get_settings()
        spec = parse_period(period or settings.report_range_default, reference, settings)
    except NetwrthError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    current = resolve_window(spec, reference)
    previous = resolve_previous_window(spec, current)

    console.print(f"Current:  [cyan]{format_window(current)}[/cyan]")
    console.print(f"Previous: {format_window(previous) if previous else NO_PREVIOUS_DATA}")
