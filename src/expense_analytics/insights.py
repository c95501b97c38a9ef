"""Heuristic financial insights.

Three independent heuristics, each contributing at most one insight:

- Vendor consolidation: categories served by many distinct vendors.
- High variability: categories whose monthly spend is highly seasonal.
- Cost reduction: categories with a high average transaction amount.

Savings figures are rough planning estimates, not computed forecasts.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from .config import InsightConfig
from .models import (
    ExpenseCategory,
    FinancialInsight,
    Impact,
    InsightKind,
    SeasonalityLevel,
    SpendingPattern,
    Transaction,
)

logger = structlog.get_logger()


def find_duplicate_vendor_categories(
    transactions: Iterable[Transaction],
    vendor_threshold: int = 2,
) -> list[ExpenseCategory]:
    """Return categories with more than ``vendor_threshold`` distinct vendors.

    Only transactions carrying vendor metadata are considered. Categories are
    returned in label order.
    """
    vendors_by_category: dict[ExpenseCategory, set[str]] = defaultdict(set)
    for txn in transactions:
        if txn.vendor:
            vendors_by_category[txn.category].add(txn.vendor)

    return sorted(
        (cat for cat, vendors in vendors_by_category.items() if len(vendors) > vendor_threshold),
        key=lambda cat: cat.value,
    )


def _vendor_consolidation_insight(
    transactions: Iterable[Transaction],
    config: InsightConfig,
) -> Optional[FinancialInsight]:
    duplicates = find_duplicate_vendor_categories(transactions, config.vendor_threshold)
    if not duplicates:
        return None

    labels = [cat.value for cat in duplicates]
    return FinancialInsight(
        id="vendor_consolidation",
        kind=InsightKind.VENDOR_ANALYSIS,
        title="Vendor Consolidation Opportunity",
        description=(
            f"You have multiple vendors in {', '.join(labels)}. "
            "Consolidating could reduce costs."
        ),
        impact=Impact.MEDIUM,
        potential_savings=config.vendor_savings_per_category * len(duplicates),
        action_items=tuple(config.action_items[InsightKind.VENDOR_ANALYSIS]),
        confidence=config.vendor_confidence,
        data_points=tuple(labels),
    )


def _variability_insight(
    patterns: list[SpendingPattern],
    config: InsightConfig,
) -> Optional[FinancialInsight]:
    variable = [p for p in patterns if p.seasonality == SeasonalityLevel.HIGH]
    if not variable:
        return None

    names = ", ".join(p.category.value for p in variable)
    return FinancialInsight(
        id="spending_variability",
        kind=InsightKind.SPENDING_PATTERN,
        title="High Spending Variability Detected",
        description=(
            f"Categories like {names} show high variability. "
            "Better planning could reduce costs."
        ),
        impact=Impact.MEDIUM,
        action_items=tuple(config.action_items[InsightKind.SPENDING_PATTERN]),
        confidence=config.variability_confidence,
        data_points=tuple(variable),
    )


def _cost_reduction_insight(
    patterns: list[SpendingPattern],
    config: InsightConfig,
) -> Optional[FinancialInsight]:
    expensive = [p for p in patterns if p.average_amount > config.cost_reduction_average_amount]
    if not expensive:
        return None

    savings = sum(
        (p.average_amount * config.cost_reduction_rate for p in expensive),
        Decimal("0"),
    )
    return FinancialInsight(
        id="cost_saving",
        kind=InsightKind.COST_SAVING,
        title="Cost Reduction Opportunities",
        description="High-value categories could benefit from strategic sourcing and negotiation.",
        impact=Impact.HIGH,
        potential_savings=savings,
        action_items=tuple(config.action_items[InsightKind.COST_SAVING]),
        confidence=config.cost_reduction_confidence,
        data_points=tuple(expensive),
    )


def generate_insights(
    transactions: Iterable[Transaction],
    patterns: list[SpendingPattern],
    config: Optional[InsightConfig] = None,
) -> list[FinancialInsight]:
    """Run all insight heuristics.

    Args:
        transactions: The analysed transactions (for vendor metadata)
        patterns: Spending patterns from ``build_spending_patterns``
        config: Insight policy (defaults apply when omitted)

    Returns:
        Insights in heuristic order: vendor, variability, cost reduction
    """
    config = config or InsightConfig()
    candidates = [
        _vendor_consolidation_insight(transactions, config),
        _variability_insight(patterns, config),
        _cost_reduction_insight(patterns, config),
    ]
    insights = [insight for insight in candidates if insight is not None]

    for insight in insights:
        logger.info(
            "insight_generated",
            insight_id=insight.id,
            impact=insight.impact.value,
            potential_savings=str(insight.potential_savings) if insight.potential_savings is not None else None,
        )
    return insights
