"""Short-horizon spending forecast.

Fits an ordinary-least-squares slope over the most recent monthly totals
and projects one month ahead, then extends that figure over the months of
the current year that have no data yet.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from .aggregator import Aggregation
from .config import ForecastConfig
from .models import Prediction

logger = structlog.get_logger()

ZERO = Decimal("0")


def linear_trend(values: Sequence[Decimal]) -> Decimal:
    """Least-squares slope of ``values`` against their index 0..n-1.

    Uses the closed form ``(nΣxy - ΣxΣy) / (nΣx² - (Σx)²)``. Fewer than two
    values carry no slope and return zero.
    """
    n = len(values)
    if n < 2:
        return ZERO

    sum_x = Decimal(n * (n - 1) // 2)
    sum_y = sum(values, ZERO)
    sum_xy = sum((value * index for index, value in enumerate(values)), ZERO)
    sum_xx = Decimal(sum(index * index for index in range(n)))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return ZERO
    return (n * sum_xy - sum_x * sum_y) / denominator


def forecast_spending(
    aggregation: Aggregation,
    config: Optional[ForecastConfig] = None,
    as_of: Optional[date] = None,
) -> Prediction:
    """Project next month's spending and a year-end total.

    Args:
        aggregation: Output of ``aggregate``
        config: Forecast settings (defaults apply when omitted)
        as_of: Reference date whose year is projected (defaults to today)

    Returns:
        Prediction; zero with fallback confidence when history is too short
    """
    config = config or ForecastConfig()
    as_of = as_of or date.today()

    months = aggregation.months
    if len(months) < config.min_months:
        logger.info(
            "forecast_insufficient_history",
            months=len(months),
            required=config.min_months,
        )
        return Prediction(
            next_month_spending=ZERO,
            year_end_projection=ZERO,
            confidence=config.fallback_confidence,
        )

    recent_months = months[-config.window_months:]
    amounts = [aggregation.month_totals[m] for m in recent_months]

    mean = sum(amounts, ZERO) / len(amounts)
    slope = linear_trend(amounts)
    next_month = max(ZERO, mean + slope)

    year_prefix = f"{as_of.year:04d}-"
    current_year_months = [m for m in months if m.startswith(year_prefix)]
    current_year_spending = sum(
        (aggregation.month_totals[m] for m in current_year_months), ZERO
    )
    months_remaining = max(0, 12 - len(current_year_months))
    year_end = current_year_spending + next_month * months_remaining

    confidence = min(config.max_confidence, len(recent_months) / config.window_months)

    logger.info(
        "forecast_generated",
        months_used=len(recent_months),
        slope=str(slope),
        next_month=str(next_month),
        year_end=str(year_end),
        confidence=confidence,
    )
    return Prediction(
        next_month_spending=next_month,
        year_end_projection=year_end,
        confidence=confidence,
    )
