"""Shared fixtures for expense_analytics tests."""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from expense_analytics.models import ExpenseCategory, Transaction


@pytest.fixture
def make_transaction():
    """Factory for single transactions with sequential ids."""
    ids = count(1)

    def _make(
        amount,
        category=ExpenseCategory.OTHER,
        on=date(2025, 1, 15),
        vendor=None,
        title=None,
    ) -> Transaction:
        return Transaction(
            id=f"txn-{next(ids):04d}",
            date=on,
            amount=Decimal(str(amount)),
            category=category,
            vendor=vendor,
            title=title,
        )

    return _make


@pytest.fixture
def monthly_transactions(make_transaction):
    """Factory for one transaction per month, starting January 2025 by default."""

    def _make(category, amounts, start_year=2025, start_month=1) -> list[Transaction]:
        transactions = []
        year, month = start_year, start_month
        for amount in amounts:
            transactions.append(make_transaction(amount, category, on=date(year, month, 10)))
            month += 1
            if month > 12:
                year, month = year + 1, 1
        return transactions

    return _make
