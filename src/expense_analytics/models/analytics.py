"""Result models produced by an analysis run.

Every model here is frozen: an ExpenseAnalytics value is a snapshot of one
call and has no lifecycle beyond it. Alerts and insights are regenerated
from scratch on every run; their ids are stable strings derived from the
rule and category, not persisted identities.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

from .transaction import ExpenseCategory


class TrendDirection(str, Enum):
    """Direction of recent spend relative to the preceding window."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class SeasonalityLevel(str, Enum):
    """Volatility tier derived from the coefficient of variation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AlertKind(str, Enum):
    OVERSPEND = "overspend"
    UNUSUAL_PATTERN = "unusual_pattern"
    COST_OPTIMIZATION = "cost_optimization"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InsightKind(str, Enum):
    COST_SAVING = "cost_saving"
    SPENDING_PATTERN = "spending_pattern"
    VENDOR_ANALYSIS = "vendor_analysis"


class Impact(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SpendingPattern(BaseModel):
    """Trend, volatility and size summary for one category."""

    model_config = {"frozen": True}

    category: ExpenseCategory
    trend: TrendDirection = TrendDirection.STABLE
    change_percentage: float = Field(
        default=0.0,
        ge=0.0,
        description="Absolute percentage change of the recent window vs. the older one",
    )
    average_amount: Decimal = Field(
        default=Decimal("0"),
        description="Category total divided by its transaction count",
    )
    frequency: int = Field(default=0, ge=0, description="Number of transactions in the category")
    seasonality: SeasonalityLevel = SeasonalityLevel.LOW


class BudgetAlert(BaseModel):
    """A warning raised by one of the alert rules."""

    model_config = {"frozen": True}

    id: str
    kind: AlertKind
    severity: Severity
    category: ExpenseCategory
    message: str
    recommendation: str
    amount: Optional[Decimal] = Field(
        default=None,
        description="The measured value that triggered the rule",
    )
    threshold: Optional[Decimal] = Field(
        default=None,
        description="The rule threshold the measured value crossed",
    )
    confidence: float = Field(ge=0.0, le=1.0)


class FinancialInsight(BaseModel):
    """An explainable observation with recommended actions."""

    model_config = {"frozen": True}

    id: str
    kind: InsightKind
    title: str
    description: str
    impact: Impact
    potential_savings: Optional[Decimal] = None
    action_items: tuple[str, ...] = ()
    confidence: float = Field(ge=0.0, le=1.0)
    data_points: tuple[Any, ...] = Field(
        default=(),
        description="Supporting evidence: category labels or spending patterns",
    )


class Prediction(BaseModel):
    """Short-horizon spending forecast."""

    model_config = {"frozen": True}

    next_month_spending: Decimal = Decimal("0")
    year_end_projection: Decimal = Decimal("0")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class CategorySuggestion(BaseModel):
    """Result of scoring free text against the historical keyword index."""

    model_config = {"frozen": True}

    category: ExpenseCategory
    confidence: float = Field(ge=0.0, le=1.0)


class ExpenseAnalytics(BaseModel):
    """Aggregate output of a single analysis run."""

    model_config = {"frozen": True}

    total_spending: Decimal = Decimal("0")
    average_per_transaction: Decimal = Decimal("0")
    transaction_count: int = Field(default=0, ge=0)
    spending_by_category: dict[ExpenseCategory, Decimal] = Field(default_factory=dict)
    spending_by_month: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Total spend keyed by YYYY-MM, ascending",
    )
    spending_patterns: tuple[SpendingPattern, ...] = ()
    budget_alerts: tuple[BudgetAlert, ...] = ()
    insights: tuple[FinancialInsight, ...] = ()
    prediction: Prediction = Field(default_factory=Prediction)

    @computed_field
    @property
    def category_share(self) -> dict[ExpenseCategory, float]:
        """Percentage of total spending per category (0-100)."""
        if self.total_spending == 0:
            return {category: 0.0 for category in self.spending_by_category}
        return {
            category: float(amount / self.total_spending * 100)
            for category, amount in self.spending_by_category.items()
        }

    def get_pattern(self, category: ExpenseCategory) -> Optional[SpendingPattern]:
        """Return the spending pattern for a category, if present."""
        for pattern in self.spending_patterns:
            if pattern.category == category:
                return pattern
        return None

    def alerts_for(self, category: ExpenseCategory) -> list[BudgetAlert]:
        """Return all alerts raised for a category."""
        return [alert for alert in self.budget_alerts if alert.category == category]
