"""Policy configuration for the expense analytics engine.

Every threshold, confidence score and action-item template the analyses
consume lives here, so policy can be tuned (or pinned in tests) without
touching the algorithms. Settings are Pydantic Settings classes and can be
overridden from environment variables or a .env file.

Usage:
    from expense_analytics.config import AnalyticsConfig

    # Load from environment variables and .env file
    config = AnalyticsConfig()

    # Override a single policy section
    config = AnalyticsConfig(alerts=AlertConfig(overspend_change_percent=75))
"""

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import ExpenseCategory, InsightKind


DEFAULT_ACTION_ITEMS: dict[InsightKind, list[str]] = {
    InsightKind.VENDOR_ANALYSIS: [
        "Review vendor contracts in duplicate categories",
        "Negotiate volume discounts with preferred vendors",
        "Standardize procurement processes",
    ],
    InsightKind.SPENDING_PATTERN: [
        "Implement budget planning for variable categories",
        "Consider bulk purchasing during low-cost periods",
        "Set up spending alerts for these categories",
    ],
    InsightKind.COST_SAVING: [
        "Conduct market research for alternative suppliers",
        "Negotiate annual contracts for better rates",
        "Implement approval workflows for high-value purchases",
    ],
}


class TrendConfig(BaseSettings):
    """Trend analysis settings.

    Environment Variables:
        EXPENSE_ANALYTICS_TREND_WINDOW_MONTHS: Months in each comparison window
        EXPENSE_ANALYTICS_TREND_STABLE_BAND_PERCENT: Change below this is "stable"
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_ANALYTICS_TREND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    window_months: int = Field(
        default=3,
        ge=1,
        le=12,
        description="Months in the recent window (and in the older window before it)",
    )
    stable_band_percent: float = Field(
        default=10.0,
        ge=0.0,
        description="Absolute change below this percentage classifies as stable",
    )


class SeasonalityConfig(BaseSettings):
    """Seasonality classification settings.

    Environment Variables:
        EXPENSE_ANALYTICS_SEASONALITY_MIN_POINTS: Monthly points needed to classify
        EXPENSE_ANALYTICS_SEASONALITY_HIGH_CV: CV above this is "high"
        EXPENSE_ANALYTICS_SEASONALITY_MEDIUM_CV: CV above this is "medium"
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_ANALYTICS_SEASONALITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    min_points: int = Field(default=3, ge=1, description="Minimum monthly data points")
    high_cv: float = Field(default=0.5, ge=0.0, description="Coefficient of variation for high")
    medium_cv: float = Field(default=0.25, ge=0.0, description="Coefficient of variation for medium")


class AlertConfig(BaseSettings):
    """Budget alert rule settings.

    Environment Variables:
        EXPENSE_ANALYTICS_ALERTS_OVERSPEND_CHANGE_PERCENT: Increase that raises an alert
        EXPENSE_ANALYTICS_ALERTS_OVERSPEND_HIGH_CHANGE_PERCENT: Increase that makes it high severity
        EXPENSE_ANALYTICS_ALERTS_UNUSUAL_AVERAGE_AMOUNT: Average above which rare spend is unusual
        EXPENSE_ANALYTICS_ALERTS_UNUSUAL_MAX_FREQUENCY: Transaction count below which spend is rare
        EXPENSE_ANALYTICS_ALERTS_OPTIMIZATION_TOP_N: Largest categories checked for optimization
        EXPENSE_ANALYTICS_ALERTS_OPTIMIZATION_AVERAGE_AMOUNT: Average above which to suggest optimization
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_ANALYTICS_ALERTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    overspend_change_percent: float = Field(default=50.0, ge=0.0)
    overspend_high_change_percent: float = Field(default=100.0, ge=0.0)
    overspend_confidence: float = Field(default=0.8, ge=0.0, le=1.0)

    unusual_average_amount: Decimal = Field(default=Decimal("5000"), ge=Decimal("0"))
    unusual_max_frequency: int = Field(
        default=3,
        ge=1,
        description="Frequency strictly below this counts as infrequent",
    )
    unusual_confidence: float = Field(default=0.7, ge=0.0, le=1.0)

    optimization_top_n: int = Field(default=3, ge=0)
    optimization_average_amount: Decimal = Field(default=Decimal("1000"), ge=Decimal("0"))
    optimization_confidence: float = Field(default=0.6, ge=0.0, le=1.0)


class InsightConfig(BaseSettings):
    """Insight heuristic settings and action-item templates.

    Environment Variables:
        EXPENSE_ANALYTICS_INSIGHTS_VENDOR_THRESHOLD: Distinct vendors above which a category is flagged
        EXPENSE_ANALYTICS_INSIGHTS_VENDOR_SAVINGS_PER_CATEGORY: Estimated savings per flagged category
        EXPENSE_ANALYTICS_INSIGHTS_COST_REDUCTION_AVERAGE_AMOUNT: Average above which to suggest reduction
        EXPENSE_ANALYTICS_INSIGHTS_COST_REDUCTION_RATE: Share of the average counted as savings
        EXPENSE_ANALYTICS_INSIGHTS_ACTION_ITEMS: JSON object of action items keyed by insight kind
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_ANALYTICS_INSIGHTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    vendor_threshold: int = Field(default=2, ge=0)
    vendor_savings_per_category: Decimal = Field(default=Decimal("500"), ge=Decimal("0"))
    vendor_confidence: float = Field(default=0.7, ge=0.0, le=1.0)

    variability_confidence: float = Field(default=0.8, ge=0.0, le=1.0)

    cost_reduction_average_amount: Decimal = Field(default=Decimal("2000"), ge=Decimal("0"))
    cost_reduction_rate: Decimal = Field(default=Decimal("0.10"), ge=Decimal("0"), le=Decimal("1"))
    cost_reduction_confidence: float = Field(default=0.9, ge=0.0, le=1.0)

    action_items: dict[InsightKind, list[str]] = Field(
        default_factory=lambda: {kind: list(items) for kind, items in DEFAULT_ACTION_ITEMS.items()},
        description="Static action-item templates keyed by insight kind",
    )

    @field_validator("action_items")
    @classmethod
    def fill_missing_kinds(cls, v: dict[InsightKind, list[str]]) -> dict[InsightKind, list[str]]:
        """Fall back to the default template for kinds left out of an override."""
        merged = {kind: list(items) for kind, items in DEFAULT_ACTION_ITEMS.items()}
        merged.update(v)
        return merged


class ForecastConfig(BaseSettings):
    """Forecast settings.

    Environment Variables:
        EXPENSE_ANALYTICS_FORECAST_MIN_MONTHS: Months of history needed to forecast
        EXPENSE_ANALYTICS_FORECAST_WINDOW_MONTHS: Most recent months used for the fit
        EXPENSE_ANALYTICS_FORECAST_FALLBACK_CONFIDENCE: Confidence reported without enough history
        EXPENSE_ANALYTICS_FORECAST_MAX_CONFIDENCE: Upper bound on forecast confidence
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_ANALYTICS_FORECAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    min_months: int = Field(default=3, ge=2)
    window_months: int = Field(default=6, ge=2, le=24)
    fallback_confidence: float = Field(default=0.1, ge=0.0, le=1.0)
    max_confidence: float = Field(default=0.9, ge=0.0, le=1.0)


class SuggesterConfig(BaseSettings):
    """Category suggester settings.

    Environment Variables:
        EXPENSE_ANALYTICS_SUGGESTER_MAX_CONFIDENCE: Cap on a purely lexical match
        EXPENSE_ANALYTICS_SUGGESTER_FALLBACK_CATEGORY: Category returned when nothing matches
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_ANALYTICS_SUGGESTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_confidence: float = Field(default=0.95, ge=0.0, le=1.0)
    fallback_category: ExpenseCategory = Field(default=ExpenseCategory.OTHER)


class AnalyticsConfig(BaseSettings):
    """Root configuration for the analytics engine.

    Combines all policy sections. Each section also reads its own
    environment prefix, so a single threshold can be overridden without
    restating the rest.

    Example:
        config = AnalyticsConfig(
            trend=TrendConfig(stable_band_percent=5),
            forecast=ForecastConfig(window_months=12),
        )
        config.validate_consistency()
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    trend: TrendConfig = Field(default_factory=TrendConfig)
    seasonality: SeasonalityConfig = Field(default_factory=SeasonalityConfig)
    alerts: AlertConfig = Field(default_factory=AlertConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)
    forecast: ForecastConfig = Field(default_factory=ForecastConfig)
    suggester: SuggesterConfig = Field(default_factory=SuggesterConfig)

    def validate_consistency(self) -> None:
        """Check relations between settings that single fields cannot express.

        Raises:
            ConfigurationError: If two settings contradict each other
        """
        if self.seasonality.medium_cv > self.seasonality.high_cv:
            raise ConfigurationError(
                "Seasonality medium_cv must not exceed high_cv",
                config_key="seasonality.medium_cv",
                expected=f"<= {self.seasonality.high_cv}",
                actual=self.seasonality.medium_cv,
            )
        if self.alerts.overspend_high_change_percent < self.alerts.overspend_change_percent:
            raise ConfigurationError(
                "High-severity overspend threshold must not be below the overspend threshold",
                config_key="alerts.overspend_high_change_percent",
                expected=f">= {self.alerts.overspend_change_percent}",
                actual=self.alerts.overspend_high_change_percent,
            )
        if self.alerts.overspend_change_percent < self.trend.stable_band_percent:
            raise ConfigurationError(
                "Overspend threshold lies inside the stable trend band",
                config_key="alerts.overspend_change_percent",
                expected=f">= {self.trend.stable_band_percent}",
                actual=self.alerts.overspend_change_percent,
            )
        if self.forecast.min_months > self.forecast.window_months:
            raise ConfigurationError(
                "Forecast min_months must not exceed window_months",
                config_key="forecast.min_months",
                expected=f"<= {self.forecast.window_months}",
                actual=self.forecast.min_months,
            )
        if self.forecast.fallback_confidence > self.forecast.max_confidence:
            raise ConfigurationError(
                "Forecast fallback_confidence must not exceed max_confidence",
                config_key="forecast.fallback_confidence",
                expected=f"<= {self.forecast.max_confidence}",
                actual=self.forecast.fallback_confidence,
            )
