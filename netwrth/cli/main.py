"""netwrth command-line interface."""

import typer

from netwrth.cli.breakdown import breakdown_command
from netwrth.cli.status import status_command
from netwrth.cli.window import window_command
from netwrth.logging_setup import configure_logging

app = typer.Typer(
    help="Period totals, deltas and category breakdowns for personal finance records.",
    no_args_is_help=True,
)

app.command(name="status")(status_command)
app.command(name="breakdown")(breakdown_command)
app.command(name="window")(window_command)


@app.callback()
def main(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (default: NETWRTH_LOG_LEVEL or WARNING)",
    ),
) -> None:
    configure_logging(log_level)


if __name__ == "__main__":
    app()
