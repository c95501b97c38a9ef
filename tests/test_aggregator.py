"""Tests for transaction aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from expense_analytics.aggregator import aggregate
from expense_analytics.exceptions import InvalidTransactionError
from expense_analytics.models import ExpenseCategory, Transaction


MEALS = ExpenseCategory.MEALS_ENTERTAINMENT
TRANSPORT = ExpenseCategory.TRANSPORTATION


@pytest.fixture
def sample_transactions(make_transaction) -> list[Transaction]:
    return [
        make_transaction("10.50", MEALS, on=date(2025, 1, 3)),
        make_transaction("20.00", TRANSPORT, on=date(2025, 1, 20)),
        make_transaction("30.00", MEALS, on=date(2025, 2, 1)),
    ]


class TestAggregate:
    """Test suite for aggregate()."""

    def test_empty_list(self):
        """An empty transaction list aggregates to zeros, never dividing by zero."""
        result = aggregate([])

        assert result.total_spending == Decimal("0")
        assert result.average_per_transaction == Decimal("0")
        assert result.transaction_count == 0
        assert result.category_totals == {}
        assert result.month_totals == {}

    def test_totals_and_average(self, sample_transactions):
        """Total is the sum of amounts; average divides by count."""
        result = aggregate(sample_transactions)

        assert result.total_spending == Decimal("60.50")
        assert result.average_per_transaction == Decimal("60.50") / 3
        assert result.transaction_count == 3

    def test_category_totals_and_counts(self, sample_transactions):
        """Spend and counts are grouped per category."""
        result = aggregate(sample_transactions)

        assert result.category_totals == {MEALS: Decimal("40.50"), TRANSPORT: Decimal("20.00")}
        assert result.category_counts == {MEALS: 2, TRANSPORT: 1}

    def test_categories_ordered_by_label(self, sample_transactions):
        result = aggregate(list(reversed(sample_transactions)))
        assert result.categories == [MEALS, TRANSPORT]

    def test_month_totals_use_zero_padded_keys(self, sample_transactions):
        """Months are keyed YYYY-MM in ascending order."""
        result = aggregate(sample_transactions)

        assert result.month_totals == {"2025-01": Decimal("30.50"), "2025-02": Decimal("30.00")}
        assert result.months == ["2025-01", "2025-02"]
        assert len(result.month_buckets["2025-01"]) == 2

    def test_sum_invariant(self, sample_transactions):
        """Category totals and month totals both add up to the total."""
        result = aggregate(sample_transactions)

        assert sum(result.category_totals.values()) == result.total_spending
        assert sum(result.month_totals.values()) == result.total_spending

    def test_independent_of_input_order(self, sample_transactions):
        """Reversing the input yields identical buckets in identical key order."""
        forward = aggregate(sample_transactions)
        backward = aggregate(list(reversed(sample_transactions)))

        assert list(forward.category_totals.items()) == list(backward.category_totals.items())
        assert list(forward.month_totals.items()) == list(backward.month_totals.items())

    def test_monthly_series_zero_fills_missing_months(self, sample_transactions):
        """A category is reported for every month in the data set."""
        result = aggregate(sample_transactions)

        assert result.monthly_series(TRANSPORT) == {
            "2025-01": Decimal("20.00"),
            "2025-02": Decimal("0"),
        }
        assert result.monthly_series(MEALS) == {
            "2025-01": Decimal("10.50"),
            "2025-02": Decimal("30.00"),
        }

    def test_monthly_series_unknown_category(self, sample_transactions):
        """A category absent from the data has an all-zero series."""
        result = aggregate(sample_transactions)

        series = result.monthly_series(ExpenseCategory.EQUIPMENT)
        assert set(series.values()) == {Decimal("0")}

    def test_rejects_negative_amount_bypassing_validation(self):
        """Unvalidated negative amounts fail fast."""
        bad = Transaction.model_construct(
            id="bad-1",
            date=date(2025, 1, 1),
            amount=Decimal("-5"),
            category=MEALS,
            vendor=None,
            title=None,
        )

        with pytest.raises(InvalidTransactionError) as exc_info:
            aggregate([bad])

        assert exc_info.value.transaction_id == "bad-1"
        assert exc_info.value.field == "amount"

    def test_rejects_non_finite_amount(self):
        """NaN amounts fail fast instead of poisoning the totals."""
        bad = Transaction.model_construct(
            id="bad-2",
            date=date(2025, 1, 1),
            amount=Decimal("NaN"),
            category=MEALS,
            vendor=None,
            title=None,
        )

        with pytest.raises(InvalidTransactionError):
            aggregate([bad])
