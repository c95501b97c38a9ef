"""Tests for the analytics policy configuration."""

from decimal import Decimal

import pytest

from expense_analytics.config import (
    DEFAULT_ACTION_ITEMS,
    AlertConfig,
    AnalyticsConfig,
    ForecastConfig,
    InsightConfig,
    SeasonalityConfig,
    SuggesterConfig,
    TrendConfig,
)
from expense_analytics.exceptions import ConfigurationError
from expense_analytics.models import ExpenseCategory, InsightKind


class TestSectionDefaults:
    """Every policy section ships the documented defaults."""

    def test_trend_defaults(self):
        config = TrendConfig()
        assert config.window_months == 3
        assert config.stable_band_percent == 10.0

    def test_seasonality_defaults(self):
        config = SeasonalityConfig()
        assert config.min_points == 3
        assert config.high_cv == 0.5
        assert config.medium_cv == 0.25

    def test_alert_defaults(self):
        config = AlertConfig()
        assert config.overspend_change_percent == 50.0
        assert config.overspend_high_change_percent == 100.0
        assert config.unusual_average_amount == Decimal("5000")
        assert config.unusual_max_frequency == 3
        assert config.optimization_top_n == 3
        assert config.optimization_average_amount == Decimal("1000")

    def test_insight_defaults(self):
        config = InsightConfig()
        assert config.vendor_threshold == 2
        assert config.vendor_savings_per_category == Decimal("500")
        assert config.cost_reduction_average_amount == Decimal("2000")
        assert config.cost_reduction_rate == Decimal("0.10")
        assert config.action_items == DEFAULT_ACTION_ITEMS

    def test_forecast_defaults(self):
        config = ForecastConfig()
        assert config.min_months == 3
        assert config.window_months == 6
        assert config.fallback_confidence == 0.1
        assert config.max_confidence == 0.9

    def test_suggester_defaults(self):
        config = SuggesterConfig()
        assert config.max_confidence == 0.95
        assert config.fallback_category == ExpenseCategory.OTHER


class TestValidation:
    """Field-level constraints reject nonsensical policy."""

    def test_confidence_bounds(self):
        with pytest.raises(ValueError):
            AlertConfig(overspend_confidence=1.5)
        with pytest.raises(ValueError):
            InsightConfig(vendor_confidence=-0.1)

    def test_window_must_be_positive(self):
        with pytest.raises(ValueError):
            TrendConfig(window_months=0)

    def test_action_items_override_keeps_other_kinds(self):
        config = InsightConfig(action_items={InsightKind.COST_SAVING: ["One", "Two", "Three"]})

        assert config.action_items[InsightKind.COST_SAVING] == ["One", "Two", "Three"]
        assert config.action_items[InsightKind.VENDOR_ANALYSIS] == DEFAULT_ACTION_ITEMS[
            InsightKind.VENDOR_ANALYSIS
        ]

    def test_default_action_items_are_not_shared(self):
        first = InsightConfig()
        first.action_items[InsightKind.COST_SAVING].append("Extra")

        assert len(InsightConfig().action_items[InsightKind.COST_SAVING]) == 3
        assert len(DEFAULT_ACTION_ITEMS[InsightKind.COST_SAVING]) == 3


class TestEnvironment:
    """Settings load from prefixed environment variables."""

    def test_section_from_environment(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_ANALYTICS_ALERTS_OVERSPEND_CHANGE_PERCENT", "75")
        monkeypatch.setenv("EXPENSE_ANALYTICS_ALERTS_UNUSUAL_AVERAGE_AMOUNT", "2500.50")

        config = AlertConfig()

        assert config.overspend_change_percent == 75.0
        assert config.unusual_average_amount == Decimal("2500.50")

    def test_root_config_picks_up_section_environment(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_ANALYTICS_FORECAST_WINDOW_MONTHS", "12")
        monkeypatch.setenv("EXPENSE_ANALYTICS_SUGGESTER_FALLBACK_CATEGORY", "Services")

        config = AnalyticsConfig()

        assert config.forecast.window_months == 12
        assert config.suggester.fallback_category == ExpenseCategory.SERVICES


class TestConsistency:
    """AnalyticsConfig.validate_consistency() catches contradictory settings."""

    def test_defaults_are_consistent(self):
        AnalyticsConfig().validate_consistency()

    def test_seasonality_bands_inverted(self):
        config = AnalyticsConfig(seasonality=SeasonalityConfig(high_cv=0.2, medium_cv=0.3))
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_consistency()
        assert exc_info.value.config_key == "seasonality.medium_cv"

    def test_overspend_severity_thresholds_inverted(self):
        config = AnalyticsConfig(
            alerts=AlertConfig(overspend_change_percent=80, overspend_high_change_percent=60)
        )
        with pytest.raises(ConfigurationError):
            config.validate_consistency()

    def test_overspend_inside_stable_band(self):
        config = AnalyticsConfig(
            trend=TrendConfig(stable_band_percent=20),
            alerts=AlertConfig(overspend_change_percent=15),
        )
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_consistency()
        assert exc_info.value.details["config_key"] == "alerts.overspend_change_percent"

    def test_forecast_min_exceeds_window(self):
        config = AnalyticsConfig(forecast=ForecastConfig(min_months=8, window_months=6))
        with pytest.raises(ConfigurationError):
            config.validate_consistency()

    def test_forecast_fallback_exceeds_cap(self):
        config = AnalyticsConfig(
            forecast=ForecastConfig(fallback_confidence=0.95, max_confidence=0.9)
        )
        with pytest.raises(ConfigurationError):
            config.validate_consistency()
