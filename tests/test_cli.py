"""Tests for the command-line interface."""

import json
import os
from datetime import datetime
from decimal import Decimal

import pytest
from typer.testing import CliRunner

from netwrth.cli.main import app
from netwrth.cli.utils import format_currency, format_delta, parse_now

runner = CliRunner()

FEBRUARY = ["--period", "cycle:1:month:2024-01-01", "--now", "2024-02-20"]


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("NETWRTH_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "expenses": [
                    {"amount": 1000, "occurred_at": "2024-01-01", "category": "rent"},
                    {"amount": 300, "occurred_at": "2024-01-12", "category": "swiggy"},
                    {"amount": 1000, "occurred_at": "2024-02-01", "category": "rent"},
                    {"amount": 300, "occurred_at": "2024-02-05", "category": "swiggy"},
                    {"amount": 100, "occurred_at": "2024-02-08", "category": "groceries"},
                    {"amount": 100, "occurred_at": "2024-02-10", "category": "fun"},
                ],
                "income": [
                    {"amount": 3000, "occurred_at": "2024-02-01", "category": "salary"},
                ],
                "budgets": [{"category": "fun", "limit": 50}],
                "goals": [{"name": "Laptop", "target": 1000, "saved": 250}],
            }
        ),
        encoding="utf-8",
    )
    return path


class TestWindowCommand:
    def test_monthly(self) -> None:
        result = runner.invoke(app, ["window", "--period", "this-month", "--now", "2024-02-20"])
        assert result.exit_code == 0
        assert "Current:  2024-02-01 - 2024-02-29" in result.output
        assert "Previous: 2024-01-01 - 2024-01-31" in result.output

    def test_all_time_has_no_previous(self) -> None:
        result = runner.invoke(app, ["window", "--period", "all"])
        assert result.exit_code == 0
        assert "Current:  ... - ..." in result.output
        assert "Previous: —" in result.output

    def test_invalid_period(self) -> None:
        result = runner.invoke(app, ["window", "--period", "fortnight"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_past_days_beyond_calendar_start(self) -> None:
        result = runner.invoke(app, ["window", "--period", "past:1000000", "--now", "2024-03-31"])
        assert result.exit_code == 0
        assert "Current:  ... - 2024-03-31" in result.output
        assert "Previous: —" in result.output

    def test_invalid_now(self) -> None:
        result = runner.invoke(app, ["window", "--period", "all", "--now", "yesterday"])
        assert result.exit_code == 1


class TestStatusCommand:
    def test_status(self, snapshot_file) -> None:
        result = runner.invoke(app, ["status", str(snapshot_file), *FEBRUARY])
        assert result.exit_code == 0
        assert "Status for 2024-02-01 - 2024-02-29" in result.output
        assert "+15%" in result.output
        assert "Savings Rate" in result.output
        assert "Laptop" in result.output
        assert "fun over budget by ₹50.00" in result.output

    def test_income_without_previous_shows_dash(self, snapshot_file) -> None:
        result = runner.invoke(app, ["status", str(snapshot_file), *FEBRUARY])
        income_line = next(line for line in result.output.splitlines() if "Income" in line)
        assert "—" in income_line

    def test_average_spend_and_net_worth(self, snapshot_file) -> None:
        result = runner.invoke(app, ["status", str(snapshot_file), *FEBRUARY])
        lines = result.output.splitlines()
        avg_line = next(line for line in lines if "Avg/month" in line)
        worth_line = next(line for line in lines if "Net worth" in line)
        assert "₹1,500.00" in avg_line
        assert "₹200.00" in worth_line

    def test_no_records(self, snapshot_file) -> None:
        result = runner.invoke(
            app, ["status", str(snapshot_file), "--period", "range:2030-01-01:2030-01-31"]
        )
        assert result.exit_code == 0
        assert "No records found" in result.output

    def test_missing_snapshot(self, tmp_path) -> None:
        result = runner.invoke(app, ["status", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestBreakdownCommand:
    def test_top_folds_into_other(self, snapshot_file) -> None:
        result = runner.invoke(app, ["breakdown", str(snapshot_file), *FEBRUARY, "--top", "1"])
        assert result.exit_code == 0
        assert "rent" in result.output
        assert "Other" in result.output
        assert "swiggy" not in result.output

    def test_income(self, snapshot_file) -> None:
        result = runner.invoke(app, ["breakdown", str(snapshot_file), *FEBRUARY, "--income"])
        assert result.exit_code == 0
        assert "salary" in result.output
        assert "100%" in result.output

    def test_empty(self, snapshot_file) -> None:
        result = runner.invoke(
            app, ["breakdown", str(snapshot_file), "--period", "range:2030-01-01:"]
        )
        assert result.exit_code == 0
        assert "No expenses" in result.output


class TestFormatting:
    def test_format_currency(self) -> None:
        assert format_currency(Decimal("1234.5"), "INR") == "₹1,234.50"
        assert format_currency(Decimal("-20"), "USD") == "-$20.00"
        assert format_currency(Decimal("5"), "CHF") == "CHF 5.00"

    def test_format_delta(self) -> None:
        assert format_delta(None) == "—"
        assert format_delta(Decimal(15)) == "+15%"
        assert format_delta(Decimal(-3)) == "-3%"
        assert format_delta(Decimal(0)) == "0%"

    def test_parse_now(self) -> None:
        assert parse_now("2024-02-20") == datetime(2024, 2, 20)
        assert parse_now(None) is None
