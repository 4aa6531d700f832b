"""Tests for domain models."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from netwrth.core.exceptions import InvalidPeriodSpec
from netwrth.core.models import (
    AggregateResult,
    AllTime,
    Cycle,
    DateRange,
    PastDays,
    PeriodSpec,
    Record,
    TimeUnit,
    Window,
)


class TestRecord:
    """Tests for Record validation."""

    def test_date_promoted_to_midnight(self) -> None:
        record = Record(amount=Decimal("10"), occurred_at=date(2024, 1, 15))
        assert record.occurred_at == datetime(2024, 1, 15)

    def test_iso_string(self) -> None:
        record = Record(amount="10.5", occurred_at="2024-01-15T08:30:00")
        assert record.amount == Decimal("10.5")
        assert record.occurred_at == datetime(2024, 1, 15, 8, 30)

    def test_aware_timestamp_normalized_to_utc(self) -> None:
        ist = timezone(timedelta(hours=5, minutes=30))
        record = Record(amount=1, occurred_at=datetime(2024, 1, 15, 5, 30, tzinfo=ist))
        assert record.occurred_at == datetime(2024, 1, 15)
        assert record.occurred_at.tzinfo is None

    def test_missing_category_is_other(self) -> None:
        assert Record(amount=1, occurred_at=date(2024, 1, 1)).category == "Other"
        assert Record(amount=1, occurred_at=date(2024, 1, 1), category="  ").category == "Other"
        assert Record(amount=1, occurred_at=date(2024, 1, 1), category=None).category == "Other"

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_amount_rejected(self, amount: str) -> None:
        with pytest.raises(ValidationError):
            Record(amount=Decimal(amount), occurred_at=date(2024, 1, 1))

    def test_frozen(self) -> None:
        record = Record(amount=1, occurred_at=date(2024, 1, 1))
        with pytest.raises(ValidationError):
            record.amount = Decimal(2)


class TestPeriodSpec:
    """Tests for period specification variants."""

    def test_cycle_rejects_zero_amount(self) -> None:
        with pytest.raises(InvalidPeriodSpec):
            Cycle(amount=0, unit=TimeUnit.MONTH, anchor=date(2024, 1, 1))

    def test_cycle_rejects_negative_amount(self) -> None:
        with pytest.raises(InvalidPeriodSpec):
            Cycle(amount=-2, unit=TimeUnit.WEEK, anchor=date(2024, 1, 1))

    def test_past_days_rejects_zero(self) -> None:
        with pytest.raises(InvalidPeriodSpec):
            PastDays(days=0)

    def test_date_range_rejects_inverted_bounds(self) -> None:
        with pytest.raises(InvalidPeriodSpec):
            DateRange(from_date=date(2024, 2, 1), to_date=date(2024, 1, 1))

    def test_date_range_allows_single_day(self) -> None:
        spec = DateRange(from_date=date(2024, 2, 1), to_date=date(2024, 2, 1))
        assert spec.from_date == spec.to_date

    def test_discriminated_parsing(self) -> None:
        adapter = TypeAdapter(PeriodSpec)
        assert adapter.validate_python({"kind": "all_time"}) == AllTime()
        assert adapter.validate_python(
            {"kind": "cycle", "amount": 1, "unit": "month", "anchor": "2024-01-01"}
        ) == Cycle(amount=1, unit=TimeUnit.MONTH, anchor=date(2024, 1, 1))
        assert adapter.validate_python({"kind": "past_days", "days": 7}) == PastDays(days=7)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValidationError):
            TypeAdapter(PeriodSpec).validate_python({"kind": "fortnightly"})

    def test_cycle_requires_anchor(self) -> None:
        with pytest.raises(ValidationError):
            Cycle(amount=1, unit=TimeUnit.MONTH)


class TestWindow:
    """Tests for Window."""

    def test_rejects_inverted_window(self) -> None:
        with pytest.raises(InvalidPeriodSpec):
            Window(start=datetime(2024, 2, 1), end=datetime(2024, 1, 1))

    def test_contains_is_inclusive(self) -> None:
        window = Window(start=datetime(2024, 1, 1), end=datetime(2024, 1, 31))
        assert window.contains(datetime(2024, 1, 1))
        assert window.contains(datetime(2024, 1, 31))
        assert not window.contains(datetime(2024, 1, 31, 0, 0, 1))


class TestAggregateResult:
    """Tests for AggregateResult derived properties."""

    def test_no_previous_data(self) -> None:
        result = AggregateResult(total=Decimal(10), count=1)
        assert not result.has_previous
        assert result.direction == "flat"

    def test_direction(self) -> None:
        assert AggregateResult(delta_pct=Decimal(5)).direction == "up"
        assert AggregateResult(delta_pct=Decimal(-5)).direction == "down"
        assert AggregateResult(delta_pct=Decimal(0)).direction == "flat"
