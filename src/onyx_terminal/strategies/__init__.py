"""
ONYX Terminal Analytics Package

Indicator math, candle processing, pattern recognition and trend reading
over OHLCV candle histories.

Includes:
- Composable technical indicators (EMA, SMA, MACD, RSI, Bollinger, ADX,
  Stochastic, OBV)
- Full-rebuild and live-tick candle processing
- Candlestick and chart-structure pattern scanning
- Weighted multi-signal trend classification
"""

from .candle_processor import (
    CandleProcessor,
    enrich_candle,
    generate_mock_history,
    process_full,
    tick_update,
)
from .live_feed import LiveTickFeed
from .market_snapshot import MarketAnalyzer, MarketSnapshot, analyze_market
from .patterns import PatternScanner, detect_patterns
from .trend_reading import TrendReadingEngine, classify_trend

__all__ = [
    "CandleProcessor",
    "enrich_candle",
    "generate_mock_history",
    "process_full",
    "tick_update",
    "LiveTickFeed",
    "MarketAnalyzer",
    "MarketSnapshot",
    "analyze_market",
    "PatternScanner",
    "detect_patterns",
    "TrendReadingEngine",
    "classify_trend",
]
