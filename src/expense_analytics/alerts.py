"""Budget alert rules over spending patterns.

Rules are evaluated in a fixed order:

1. Overspend: an increasing trend whose change exceeds the overspend threshold.
2. Unusual pattern: rare (low frequency) but high-value spend, which has too
   few data points for the trend and seasonality rules to catch.
3. Cost optimization: large categories among the top patterns by average.

A pattern may trigger several rules. Alerts carry no identity across runs.
"""

from decimal import Decimal
from typing import Optional

import structlog

from .config import AlertConfig
from .models import AlertKind, BudgetAlert, Severity, SpendingPattern, TrendDirection

logger = structlog.get_logger()


def _overspend_alert(pattern: SpendingPattern, config: AlertConfig) -> Optional[BudgetAlert]:
    if pattern.trend != TrendDirection.INCREASING:
        return None
    if pattern.change_percentage <= config.overspend_change_percent:
        return None

    category = pattern.category.value
    severity = (
        Severity.HIGH
        if pattern.change_percentage > config.overspend_high_change_percent
        else Severity.MEDIUM
    )
    return BudgetAlert(
        id=f"overspend_{category}",
        kind=AlertKind.OVERSPEND,
        severity=severity,
        category=pattern.category,
        message=f"{category} spending has increased by {pattern.change_percentage:.1f}%",
        recommendation=f"Review {category} expenses and consider cost optimization measures",
        amount=Decimal(str(round(pattern.change_percentage, 4))),
        threshold=Decimal(str(config.overspend_change_percent)),
        confidence=config.overspend_confidence,
    )


def _unusual_pattern_alert(pattern: SpendingPattern, config: AlertConfig) -> Optional[BudgetAlert]:
    if pattern.average_amount <= config.unusual_average_amount:
        return None
    if pattern.frequency >= config.unusual_max_frequency:
        return None

    category = pattern.category.value
    return BudgetAlert(
        id=f"unusual_{category}",
        kind=AlertKind.UNUSUAL_PATTERN,
        severity=Severity.MEDIUM,
        category=pattern.category,
        message=f"Infrequent but high-value {category} expenses detected",
        recommendation=f"Consider bulk purchasing or negotiating better rates for {category}",
        amount=pattern.average_amount,
        threshold=config.unusual_average_amount,
        confidence=config.unusual_confidence,
    )


def _cost_optimization_alert(pattern: SpendingPattern, config: AlertConfig) -> Optional[BudgetAlert]:
    if pattern.average_amount <= config.optimization_average_amount:
        return None

    category = pattern.category.value
    return BudgetAlert(
        id=f"optimization_{category}",
        kind=AlertKind.COST_OPTIMIZATION,
        severity=Severity.LOW,
        category=pattern.category,
        message=f"{category} is a major expense category",
        recommendation=f"Explore vendor negotiations or alternative suppliers for {category}",
        amount=pattern.average_amount,
        threshold=config.optimization_average_amount,
        confidence=config.optimization_confidence,
    )


def generate_budget_alerts(
    patterns: list[SpendingPattern],
    config: Optional[AlertConfig] = None,
) -> list[BudgetAlert]:
    """Apply the alert rule set to spending patterns.

    Args:
        patterns: Spending patterns sorted by average amount descending
        config: Alert thresholds (defaults apply when omitted)

    Returns:
        Overspend and unusual-pattern alerts in pattern order, followed by
        cost-optimization alerts for the top patterns
    """
    config = config or AlertConfig()
    alerts: list[BudgetAlert] = []

    for pattern in patterns:
        for rule in (_overspend_alert, _unusual_pattern_alert):
            alert = rule(pattern, config)
            if alert is not None:
                alerts.append(alert)

    for pattern in patterns[: config.optimization_top_n]:
        alert = _cost_optimization_alert(pattern, config)
        if alert is not None:
            alerts.append(alert)

    for alert in alerts:
        logger.info(
            "budget_alert_raised",
            alert_id=alert.id,
            kind=alert.kind.value,
            severity=alert.severity.value,
        )
    return alerts
