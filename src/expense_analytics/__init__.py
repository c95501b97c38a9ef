"""Expense Analytics - Spending patterns, budget alerts, insights and forecasts."""

__version__ = "0.1.0"

from .analyzer import ExpenseAnalyzer, generate_analytics, load_transactions, suggest_category
from .config import AnalyticsConfig
from .exceptions import ConfigurationError, ExpenseAnalyticsError, InvalidTransactionError
from .models import CategorySuggestion, ExpenseAnalytics, ExpenseCategory, Transaction
from .suggester import CategorySuggester

__all__ = [
    "AnalyticsConfig",
    "CategorySuggester",
    "CategorySuggestion",
    "ConfigurationError",
    "ExpenseAnalytics",
    "ExpenseAnalyticsError",
    "ExpenseAnalyzer",
    "ExpenseCategory",
    "InvalidTransactionError",
    "Transaction",
    "generate_analytics",
    "load_transactions",
    "suggest_category",
]
