"""Entry points of the expense analytics engine.

``ExpenseAnalyzer.generate_analytics`` runs the full pipeline over a
transaction list:

1. Aggregate totals and month/category buckets (once)
2. Synthesize per-category spending patterns (trend + seasonality)
3. Raise budget alerts over the patterns
4. Derive insights from the patterns and vendor metadata
5. Forecast next-month and year-end spending

The analyzer keeps no transaction state between calls: every call takes the
transactions it analyses as an argument, so the same input always yields
the same output.
"""

from datetime import date
from typing import Any, Iterable, Mapping, Optional

import pydantic
import structlog

from .aggregator import aggregate
from .alerts import generate_budget_alerts
from .config import AnalyticsConfig
from .exceptions import InvalidTransactionError
from .forecast import forecast_spending
from .insights import generate_insights
from .models import CategorySuggestion, ExpenseAnalytics, Transaction
from .patterns import build_spending_patterns
from .suggester import CategorySuggester

logger = structlog.get_logger()


def load_transactions(records: Iterable[Mapping[str, Any]]) -> list[Transaction]:
    """Validate raw transaction records at the engine boundary.

    Args:
        records: Mappings with id, date, amount, category and optional
            vendor/title keys

    Returns:
        Validated Transaction models, in input order

    Raises:
        InvalidTransactionError: On the first record that fails validation
    """
    transactions = []
    for index, record in enumerate(records):
        try:
            transactions.append(Transaction.model_validate(record))
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            value = first.get("input")
            logger.warning(
                "transaction_rejected",
                index=index,
                field=field,
                reason=first["msg"],
            )
            raise InvalidTransactionError(
                f"Invalid transaction at index {index}: {first['msg']}",
                transaction_id=record.get("id") if isinstance(record, Mapping) else None,
                field=field,
                value=value if isinstance(value, (str, int, float)) else None,
                index=index,
            ) from e
    return transactions


class ExpenseAnalyzer:
    """Turn a transaction set into patterns, alerts, insights and a forecast.

    Example:
        analyzer = ExpenseAnalyzer()
        analytics = analyzer.generate_analytics(transactions)
        for alert in analytics.budget_alerts:
            print(alert.severity, alert.message)
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        """
        Initialize the analyzer with a policy configuration.

        Args:
            config: Analytics policy (default: loaded from environment)

        Raises:
            ConfigurationError: If the configuration is inconsistent
        """
        self.config = config or AnalyticsConfig()
        self.config.validate_consistency()

    def generate_analytics(
        self,
        transactions: Iterable[Transaction],
        *,
        as_of: Optional[date] = None,
    ) -> ExpenseAnalytics:
        """Run the full analysis over a validated transaction set.

        Args:
            transactions: Transactions the caller is allowed to see
            as_of: Reference date for the year-end projection (default: today)

        Returns:
            Immutable ExpenseAnalytics snapshot

        Raises:
            InvalidTransactionError: If a transaction has a negative or
                non-finite amount
        """
        aggregation = aggregate(transactions)
        patterns = build_spending_patterns(aggregation, self.config)
        alerts = generate_budget_alerts(patterns, self.config.alerts)
        insights = generate_insights(aggregation.transactions, patterns, self.config.insights)
        prediction = forecast_spending(aggregation, self.config.forecast, as_of=as_of)

        analytics = ExpenseAnalytics(
            total_spending=aggregation.total_spending,
            average_per_transaction=aggregation.average_per_transaction,
            transaction_count=aggregation.transaction_count,
            spending_by_category=aggregation.category_totals,
            spending_by_month=aggregation.month_totals,
            spending_patterns=patterns,
            budget_alerts=alerts,
            insights=insights,
            prediction=prediction,
        )

        logger.info(
            "analytics_generated",
            transactions=analytics.transaction_count,
            total=str(analytics.total_spending),
            categories=len(analytics.spending_by_category),
            months=len(analytics.spending_by_month),
            alerts=len(alerts),
            insights=len(insights),
        )
        return analytics

    def build_suggester(self, transactions: Iterable[Transaction]) -> CategorySuggester:
        """Precompute a keyword index for repeated suggestions."""
        return CategorySuggester.from_transactions(transactions, self.config.suggester)

    def suggest_category(
        self,
        transactions: Iterable[Transaction],
        text: str,
        vendor: Optional[str] = None,
        amount: Any = None,
    ) -> CategorySuggestion:
        """Suggest a category for a new receipt using the given history."""
        return self.build_suggester(transactions).suggest(text, vendor=vendor, amount=amount)


def generate_analytics(
    transactions: Iterable[Transaction],
    *,
    config: Optional[AnalyticsConfig] = None,
    as_of: Optional[date] = None,
) -> ExpenseAnalytics:
    """Convenience wrapper around ``ExpenseAnalyzer.generate_analytics``."""
    return ExpenseAnalyzer(config).generate_analytics(transactions, as_of=as_of)


def suggest_category(
    transactions: Iterable[Transaction],
    text: str,
    vendor: Optional[str] = None,
    amount: Any = None,
    *,
    config: Optional[AnalyticsConfig] = None,
) -> CategorySuggestion:
    """Convenience wrapper around ``ExpenseAnalyzer.suggest_category``."""
    return ExpenseAnalyzer(config).suggest_category(transactions, text, vendor=vendor, amount=amount)
