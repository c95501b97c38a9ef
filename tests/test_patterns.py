"""Tests for spending pattern synthesis."""

from datetime import date
from decimal import Decimal

from expense_analytics.aggregator import aggregate
from expense_analytics.models import ExpenseCategory, SeasonalityLevel, TrendDirection
from expense_analytics.patterns import build_spending_patterns


class TestBuildSpendingPatterns:
    """Test suite for build_spending_patterns()."""

    def test_empty_aggregation_has_no_patterns(self):
        assert build_spending_patterns(aggregate([])) == []

    def test_average_and_frequency(self, make_transaction):
        """Average is category total over category transaction count."""
        transactions = [
            make_transaction("100", ExpenseCategory.UTILITIES),
            make_transaction("300", ExpenseCategory.UTILITIES),
        ]
        [pattern] = build_spending_patterns(aggregate(transactions))

        assert pattern.category == ExpenseCategory.UTILITIES
        assert pattern.average_amount == Decimal("200")
        assert pattern.frequency == 2

    def test_sorted_by_average_descending(self, make_transaction):
        transactions = [
            make_transaction("50", ExpenseCategory.OFFICE_SUPPLIES),
            make_transaction("900", ExpenseCategory.EQUIPMENT),
            make_transaction("300", ExpenseCategory.SERVICES),
        ]
        patterns = build_spending_patterns(aggregate(transactions))

        averages = [p.average_amount for p in patterns]
        assert averages == sorted(averages, reverse=True)
        assert patterns[0].category == ExpenseCategory.EQUIPMENT

    def test_ties_break_by_category_label(self, make_transaction):
        """Equal averages are ordered by category label ascending."""
        transactions = [
            make_transaction("500", ExpenseCategory.UTILITIES),
            make_transaction("1000", ExpenseCategory.SERVICES),
            make_transaction("500", ExpenseCategory.EQUIPMENT),
        ]
        patterns = build_spending_patterns(aggregate(transactions))

        assert [p.category for p in patterns] == [
            ExpenseCategory.SERVICES,
            ExpenseCategory.EQUIPMENT,
            ExpenseCategory.UTILITIES,
        ]

    def test_trend_and_seasonality_from_monthly_series(self, monthly_transactions):
        transactions = monthly_transactions(
            ExpenseCategory.SERVICES, [100, 100, 100, 300, 300, 300]
        )
        [pattern] = build_spending_patterns(aggregate(transactions))

        assert pattern.trend == TrendDirection.INCREASING
        assert pattern.change_percentage == 200.0
        assert pattern.seasonality == SeasonalityLevel.MEDIUM

    def test_sporadic_category_measured_against_all_months(
        self, make_transaction, monthly_transactions
    ):
        """Months without spend in a category count as zero spend."""
        transactions = monthly_transactions(ExpenseCategory.UTILITIES, [100] * 4)
        transactions.append(
            make_transaction("400", ExpenseCategory.EQUIPMENT, on=date(2025, 4, 2))
        )
        patterns = {p.category: p for p in build_spending_patterns(aggregate(transactions))}

        assert patterns[ExpenseCategory.UTILITIES].seasonality == SeasonalityLevel.LOW
        assert patterns[ExpenseCategory.EQUIPMENT].seasonality == SeasonalityLevel.HIGH
        # Zero baseline in the older window reports no trend.
        assert patterns[ExpenseCategory.EQUIPMENT].trend == TrendDirection.STABLE
