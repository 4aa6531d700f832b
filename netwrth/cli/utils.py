"""Formatting and argument helpers shared by CLI commands."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from netwrth.core.config import Settings, get_settings
from netwrth.core.exceptions import NetwrthError
from netwrth.core.models import PeriodSpec, normalize_timestamp
from netwrth.core.snapshot import Snapshot, load_snapshot
from netwrth.engine.periods import parse_period

NO_PREVIOUS_DATA = "—"

CURRENCY_SYMBOLS = {"INR": "₹", "EUR": "€", "USD": "$", "GBP": "£"}


def format_currency(amount: Decimal, currency: str) -> str:
    """Format an amount with its currency symbol and thousands separators."""
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"


def format_percentage(value: Decimal | int) -> str:
    return f"{value}%"


def format_delta(delta_pct: Decimal | None) -> str:
    """Signed percentage change, or an em-dash when there is no previous data."""
    if delta_pct is None:
        return NO_PREVIOUS_DATA
    if delta_pct > 0:
        return f"+{delta_pct}%"
    return f"{delta_pct}%"


def delta_style(delta_pct: Decimal | None, higher_is_better: bool) -> str:
    """Rich style for a delta.

    Expenses going down is good; income going up is good.
    """
    if delta_pct is None or delta_pct == 0:
        return "dim"
    improved = (delta_pct > 0) == higher_is_better
    return "green" if improved else "red"


def parse_now(value: str | None) -> datetime | None:
    """Parse a --now option (ISO date or datetime).

    Raises:
        ValueError: If the value is not ISO formatted.
    """
    if not value:
        return None
    return normalize_timestamp(datetime.fromisoformat(value))


def load_inputs(
    snapshot_path: Path,
    period: str | None,
    now: str | None,
) -> tuple[Settings, Snapshot, PeriodSpec, datetime | None]:
    """Build settings, load the snapshot and parse period options.

    Raises:
        NetwrthError: If any input is invalid.
    """
    try:
        reference = parse_now(now)
    except ValueError:
        raise NetwrthError(f"Invalid --now value '{now}', expected ISO date or datetime") from None

    settings = get_settings()
    snapshot = load_snapshot(snapshot_path)
    spec = parse_period(period or settings.report_range_default, reference, settings)
    return settings, snapshot, spec, reference
