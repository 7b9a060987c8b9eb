"""
Configuration management for the ONYX Terminal analytics core.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class IndicatorConfig(BaseModel):
    """Indicator periods used by the candle processor."""

    rsi_period: int = Field(default=14, ge=1, le=200)
    bollinger_period: int = Field(default=20, ge=1, le=500)
    bollinger_multiplier: float = Field(default=2.0, gt=0.0, le=10.0)
    adx_period: int = Field(default=14, ge=1, le=200)
    stochastic_k_period: int = Field(default=14, ge=1, le=200)
    stochastic_d_period: int = Field(default=3, ge=1, le=50)
    macd_signal_period: int = Field(default=9, ge=1, le=100)


class PatternConfig(BaseModel):
    """Pattern scanner limits."""

    min_candles: int = Field(default=5, ge=3)
    max_results: int = Field(default=8, ge=1, le=50)


class TrendConfig(BaseModel):
    """Trend reading thresholds."""

    min_candles: int = Field(default=30, ge=2)
    bias_threshold: float = Field(default=0.20, ge=0.0, le=1.0)
    strong_threshold: float = Field(default=0.65, gt=0.0, le=1.0)
    adx_trend_threshold: float = Field(default=20.0, ge=0.0, le=100.0)
    momentum_lookback: int = Field(default=10, ge=1)

    @field_validator('strong_threshold')
    @classmethod
    def validate_strong_threshold(cls, v, info) -> float:
        """Strong threshold must sit above the bias threshold."""
        bias = info.data.get('bias_threshold')
        if bias is not None and v <= bias:
            raise ValueError(f"strong_threshold {v} must be greater than bias_threshold {bias}")
        return v


class FeedConfig(BaseModel):
    """Live feed and history defaults."""

    tick_throttle_ms: int = Field(default=1500, ge=0)
    history_count: int = Field(default=150, ge=1, le=5000)
    default_symbol: str = Field(default="BTC")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    file_path: Optional[str] = Field(default=None)
    max_size: str = Field(default="10MB")
    backup_count: int = Field(default=5)


class Config(BaseModel):
    """Main configuration class."""

    indicators: IndicatorConfig = Field(default_factory=IndicatorConfig)
    patterns: PatternConfig = Field(default_factory=PatternConfig)
    trend: TrendConfig = Field(default_factory=TrendConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load_from_env(cls, env_file: Optional[str] = None) -> "Config":
        """Load configuration from environment variables."""
        if env_file:
            load_dotenv(env_file)
        else:
            # Try to load from .env file in current directory
            env_path = Path(".env")
            if env_path.exists():
                load_dotenv(env_path)

        indicators = IndicatorConfig(
            rsi_period=int(os.getenv("RSI_PERIOD", "14")),
            bollinger_period=int(os.getenv("BOLLINGER_PERIOD", "20")),
            bollinger_multiplier=float(os.getenv("BOLLINGER_MULTIPLIER", "2.0")),
            adx_period=int(os.getenv("ADX_PERIOD", "14")),
            stochastic_k_period=int(os.getenv("STOCH_K_PERIOD", "14")),
            stochastic_d_period=int(os.getenv("STOCH_D_PERIOD", "3")),
            macd_signal_period=int(os.getenv("MACD_SIGNAL_PERIOD", "9")),
        )

        patterns = PatternConfig(
            max_results=int(os.getenv("MAX_PATTERNS", "8"))
        )

        trend = TrendConfig(
            min_candles=int(os.getenv("TREND_MIN_CANDLES", "30"))
        )

        feed = FeedConfig(
            tick_throttle_ms=int(os.getenv("TICK_THROTTLE_MS", "1500")),
            history_count=int(os.getenv("HISTORY_COUNT", "150")),
            default_symbol=os.getenv("DEFAULT_SYMBOL", "BTC").upper().strip()
        )

        logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            file_path=os.getenv("LOG_FILE_PATH") or None,
            max_size=os.getenv("LOG_MAX_SIZE", "10MB"),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5"))
        )

        return cls(
            indicators=indicators,
            patterns=patterns,
            trend=trend,
            feed=feed,
            logging=logging
        )
