"""Per-category spending pattern synthesis."""

from typing import Optional

import structlog

from .aggregator import Aggregation
from .config import AnalyticsConfig
from .models import SpendingPattern
from .trends import analyze_trend, classify_seasonality

logger = structlog.get_logger()


def build_spending_patterns(
    aggregation: Aggregation,
    config: Optional[AnalyticsConfig] = None,
) -> list[SpendingPattern]:
    """Build one SpendingPattern per category, largest average first.

    Ties on average amount are broken by category label ascending.

    Args:
        aggregation: Output of ``aggregate``
        config: Analytics policy (defaults apply when omitted)

    Returns:
        Patterns sorted by average amount descending
    """
    config = config or AnalyticsConfig()
    patterns = []

    for category in aggregation.categories:
        total = aggregation.category_totals[category]
        count = aggregation.category_counts[category]
        series = aggregation.monthly_series(category)
        trend = analyze_trend(series, config.trend)
        seasonality = classify_seasonality(series.values(), config.seasonality)

        pattern = SpendingPattern(
            category=category,
            trend=trend.direction,
            change_percentage=trend.change_percentage,
            average_amount=total / count,
            frequency=count,
            seasonality=seasonality,
        )
        logger.debug(
            "spending_pattern_built",
            category=category.value,
            trend=pattern.trend.value,
            change=round(pattern.change_percentage, 2),
            seasonality=pattern.seasonality.value,
        )
        patterns.append(pattern)

    patterns.sort(key=lambda p: (-p.average_amount, p.category.value))
    return patterns
