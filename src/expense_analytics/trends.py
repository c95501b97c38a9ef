"""Trend detection and seasonality classification for monthly series."""

import statistics
from decimal import Decimal
from typing import Iterable, Mapping, NamedTuple, Optional

import structlog

from .config import SeasonalityConfig, TrendConfig
from .models import SeasonalityLevel, TrendDirection

logger = structlog.get_logger()


class TrendResult(NamedTuple):
    direction: TrendDirection
    change_percentage: float


STABLE_NO_SIGNAL = TrendResult(TrendDirection.STABLE, 0.0)


def _average(values: list[Decimal]) -> Decimal:
    return sum(values, Decimal("0")) / len(values)


def analyze_trend(
    monthly_totals: Mapping[str, Decimal],
    config: Optional[TrendConfig] = None,
) -> TrendResult:
    """Compare the most recent window of months against the window before it.

    With the default three-month windows, the last 3 months form the recent
    window and the 3 before them the older one. Until a full older window of
    history exists, the recent average serves as its own baseline, which
    yields a stable result.

    Args:
        monthly_totals: Spend keyed by YYYY-MM month key
        config: Trend settings (defaults apply when omitted)

    Returns:
        TrendResult with direction and absolute percentage change
    """
    config = config or TrendConfig()
    months = sorted(monthly_totals)
    if len(months) < 2:
        return STABLE_NO_SIGNAL

    window = config.window_months
    recent = [monthly_totals[m] for m in months[-window:]]
    older = [monthly_totals[m] for m in months[-2 * window:-window]]

    recent_avg = _average(recent)
    older_avg = _average(older) if len(older) == window else recent_avg

    if older_avg == 0:
        signed_change = 0.0
    else:
        signed_change = float((recent_avg - older_avg) / older_avg * 100)

    if abs(signed_change) < config.stable_band_percent:
        direction = TrendDirection.STABLE
    elif signed_change > 0:
        direction = TrendDirection.INCREASING
    else:
        direction = TrendDirection.DECREASING

    return TrendResult(direction, abs(signed_change))


def coefficient_of_variation(amounts: Iterable[Decimal]) -> float:
    """Population standard deviation divided by the mean.

    Returns 0.0 for an empty series or a zero mean.
    """
    values = list(amounts)
    if not values:
        return 0.0
    mean = statistics.mean(values)
    if mean == 0:
        return 0.0
    return float(statistics.pstdev(values, mu=mean) / mean)


def classify_seasonality(
    amounts: Iterable[Decimal],
    config: Optional[SeasonalityConfig] = None,
) -> SeasonalityLevel:
    """Bucket a category's monthly totals into a volatility tier.

    Order of the amounts is irrelevant. Fewer than ``min_points`` values
    is not enough evidence to claim seasonality and classifies as low.
    """
    config = config or SeasonalityConfig()
    values = list(amounts)
    if len(values) < config.min_points:
        return SeasonalityLevel.LOW

    cv = coefficient_of_variation(values)
    if cv > config.high_cv:
        return SeasonalityLevel.HIGH
    if cv > config.medium_cv:
        return SeasonalityLevel.MEDIUM
    return SeasonalityLevel.LOW
