"""Time-bucketed aggregation of transactions.

The Aggregation built here is computed once per analysis run and shared
read-only by the trend, seasonality, pattern, alert, insight and forecast
steps. Keys are ordered deterministically (months ascending, categories by
label) so results do not depend on the order transactions arrive in.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

import structlog

from .exceptions import InvalidTransactionError
from .models import ExpenseCategory, Transaction

logger = structlog.get_logger()

ZERO = Decimal("0")


@dataclass(frozen=True)
class Aggregation:
    """Totals and buckets for one transaction set."""

    transactions: tuple[Transaction, ...] = ()
    total_spending: Decimal = ZERO
    average_per_transaction: Decimal = ZERO
    category_totals: dict[ExpenseCategory, Decimal] = field(default_factory=dict)
    category_counts: dict[ExpenseCategory, int] = field(default_factory=dict)
    month_totals: dict[str, Decimal] = field(default_factory=dict)
    month_buckets: dict[str, tuple[Transaction, ...]] = field(default_factory=dict)
    category_month_totals: dict[ExpenseCategory, dict[str, Decimal]] = field(default_factory=dict)

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def months(self) -> list[str]:
        """Month keys present in the data, ascending."""
        return list(self.month_totals)

    @property
    def categories(self) -> list[ExpenseCategory]:
        return list(self.category_totals)

    def monthly_series(self, category: ExpenseCategory) -> dict[str, Decimal]:
        """Monthly totals for one category over every month in the data set.

        Months in which the category has no spend are reported as zero, so
        every category is measured against the same calendar.
        """
        per_month = self.category_month_totals.get(category, {})
        return {month: per_month.get(month, ZERO) for month in self.month_totals}


def _category_sort_key(category: ExpenseCategory) -> str:
    return category.value


def _check_amount(txn: Transaction) -> None:
    amount = txn.amount
    if not isinstance(amount, Decimal):
        raise InvalidTransactionError(
            "Transaction amount must be a Decimal",
            transaction_id=txn.id,
            field="amount",
            value=repr(amount),
            recoverable=False,
        )
    if not amount.is_finite() or amount < 0:
        raise InvalidTransactionError(
            "Transaction amount must be a finite, non-negative number",
            transaction_id=txn.id,
            field="amount",
            value=str(amount),
            recoverable=False,
        )


def aggregate(transactions: Iterable[Transaction]) -> Aggregation:
    """Group transactions by category and by calendar month.

    Args:
        transactions: Validated transactions to aggregate

    Returns:
        Aggregation with totals, counts and month buckets

    Raises:
        InvalidTransactionError: If an amount is negative or non-finite
    """
    txns = tuple(transactions)
    if not txns:
        return Aggregation()

    category_totals: dict[ExpenseCategory, Decimal] = defaultdict(Decimal)
    category_counts: dict[ExpenseCategory, int] = defaultdict(int)
    month_totals: dict[str, Decimal] = defaultdict(Decimal)
    month_buckets: dict[str, list[Transaction]] = defaultdict(list)
    category_month_totals: dict[ExpenseCategory, dict[str, Decimal]] = defaultdict(
        lambda: defaultdict(Decimal)
    )

    total = ZERO
    for txn in txns:
        _check_amount(txn)
        month_key = txn.month_key

        total += txn.amount
        category_totals[txn.category] += txn.amount
        category_counts[txn.category] += 1
        month_totals[month_key] += txn.amount
        month_buckets[month_key].append(txn)
        category_month_totals[txn.category][month_key] += txn.amount

    categories = sorted(category_totals, key=_category_sort_key)
    months = sorted(month_totals)

    aggregation = Aggregation(
        transactions=txns,
        total_spending=total,
        average_per_transaction=total / len(txns),
        category_totals={cat: category_totals[cat] for cat in categories},
        category_counts={cat: category_counts[cat] for cat in categories},
        month_totals={month: month_totals[month] for month in months},
        month_buckets={month: tuple(month_buckets[month]) for month in months},
        category_month_totals={
            cat: dict(sorted(category_month_totals[cat].items())) for cat in categories
        },
    )

    logger.debug(
        "transactions_aggregated",
        transactions=len(txns),
        categories=len(categories),
        months=len(months),
        total=str(total),
    )
    return aggregation
