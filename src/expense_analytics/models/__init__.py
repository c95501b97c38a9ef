"""Data models for expense_analytics.

- Transaction input and the expense category lookup table (transaction.py)
- Analysis results: patterns, alerts, insights, forecasts (analytics.py)
"""

from expense_analytics.models.transaction import (
    CATEGORY_DESCRIPTIONS,
    ExpenseCategory,
    Transaction,
    get_category_description,
    parse_category,
)
from expense_analytics.models.analytics import (
    # Enumerations
    AlertKind,
    Impact,
    InsightKind,
    SeasonalityLevel,
    Severity,
    TrendDirection,
    # Results
    BudgetAlert,
    CategorySuggestion,
    ExpenseAnalytics,
    FinancialInsight,
    Prediction,
    SpendingPattern,
)

__all__ = [
    # Categories
    "CATEGORY_DESCRIPTIONS",
    "ExpenseCategory",
    "get_category_description",
    "parse_category",
    # Input
    "Transaction",
    # Enumerations
    "AlertKind",
    "Impact",
    "InsightKind",
    "SeasonalityLevel",
    "Severity",
    "TrendDirection",
    # Results
    "BudgetAlert",
    "CategorySuggestion",
    "ExpenseAnalytics",
    "FinancialInsight",
    "Prediction",
    "SpendingPattern",
]
