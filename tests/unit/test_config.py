"""
Unit tests for configuration management.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from onyx_terminal.config import Config, IndicatorConfig, PatternConfig, TrendConfig


class TestConfig:
    """Test configuration loading and validation."""

    def test_config_loads_defaults(self) -> None:
        """Test that configuration loads with default values."""
        config = Config()

        assert config.indicators.rsi_period == 14
        assert config.indicators.bollinger_period == 20
        assert config.indicators.bollinger_multiplier == 2.0
        assert config.patterns.min_candles == 5
        assert config.patterns.max_results == 8
        assert config.trend.min_candles == 30
        assert config.trend.strong_threshold == 0.65
        assert config.trend.bias_threshold == 0.20
        assert config.feed.tick_throttle_ms == 1500
        assert config.feed.history_count == 150
        assert config.feed.default_symbol == "BTC"
        assert config.logging.level == "INFO"
        assert config.logging.file_path is None

    def test_config_loads_from_env(self, mock_env_vars: dict) -> None:
        """Test that configuration loads from environment variables."""
        config = Config.load_from_env()

        assert config.indicators.rsi_period == 10
        assert config.indicators.bollinger_period == 18
        assert config.patterns.max_results == 5
        assert config.trend.min_candles == 40
        assert config.feed.tick_throttle_ms == 1000
        assert config.feed.history_count == 120
        assert config.feed.default_symbol == "ETH"
        assert config.logging.level == "DEBUG"

    def test_config_loads_from_env_file(self, temp_dir: Path) -> None:
        """Test that an explicit .env file is honoured."""
        env_file = temp_dir / "onyx.env"
        env_file.write_text("MAX_PATTERNS=3\nHISTORY_COUNT=90\n")

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("MAX_PATTERNS", None)
            os.environ.pop("HISTORY_COUNT", None)
            config = Config.load_from_env(str(env_file))

        assert config.patterns.max_results == 3
        assert config.feed.history_count == 90

    def test_indicator_periods_from_env(self) -> None:
        env = {"STOCH_K_PERIOD": "9", "STOCH_D_PERIOD": "4", "MACD_SIGNAL_PERIOD": "7"}
        with patch.dict(os.environ, env, clear=False):
            config = Config.load_from_env()

        assert config.indicators.stochastic_k_period == 9
        assert config.indicators.stochastic_d_period == 4
        assert config.indicators.macd_signal_period == 7

    def test_invalid_env_value_rejected(self) -> None:
        with patch.dict(os.environ, {"MAX_PATTERNS": "0"}, clear=False):
            with pytest.raises(ValidationError):
                Config.load_from_env()


class TestSectionValidation:
    """Test per-section validation rules."""

    def test_strong_threshold_must_exceed_bias(self) -> None:
        with pytest.raises(ValidationError):
            TrendConfig(strong_threshold=0.3, bias_threshold=0.5)

    def test_pattern_min_candles_floor(self) -> None:
        with pytest.raises(ValidationError):
            PatternConfig(min_candles=2)

    def test_indicator_periods_positive(self) -> None:
        with pytest.raises(ValidationError):
            IndicatorConfig(rsi_period=0)
        with pytest.raises(ValidationError):
            IndicatorConfig(bollinger_multiplier=0.0)
