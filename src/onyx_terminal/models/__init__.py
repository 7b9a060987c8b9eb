"""
ONYX Terminal Models Package

Data models for the candle analytics pipeline: raw and enriched candles,
detected patterns, indicator signals and trend verdicts.
"""

from .market_data import (
    Candle,
    EnrichedCandle,
    IndicatorField,
    CandleColor,
    Timeframe,
    Coin,
    COINS,
    get_coin,
    candles_from_klines,
)

from .signals import (
    Pattern,
    PatternBias,
    Signal,
    TrendClass,
    TrendVerdict,
    TREND_LABELS,
)

__all__ = [
    # Market data
    "Candle",
    "EnrichedCandle",
    "IndicatorField",
    "CandleColor",
    "Timeframe",
    "Coin",
    "COINS",
    "get_coin",
    "candles_from_klines",

    # Signals
    "Pattern",
    "PatternBias",
    "Signal",
    "TrendClass",
    "TrendVerdict",
    "TREND_LABELS",
]
