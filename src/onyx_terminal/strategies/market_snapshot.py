"""
Market Snapshot

One-call analysis that hands a presentation layer everything it renders:
enriched candles, detected patterns and the trend verdict.
"""

from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from ..config import Config
from ..models.market_data import Candle, EnrichedCandle
from ..models.signals import Pattern, TrendVerdict
from .candle_processor import CandleProcessor
from .patterns.scanner import PatternScanner
from .trend_reading import TrendReadingEngine


class MarketSnapshot(BaseModel):
    """Analysis results for one candle history."""

    candles: List[EnrichedCandle] = Field(default_factory=list)
    patterns: List[Pattern] = Field(default_factory=list)
    verdict: TrendVerdict = Field(default_factory=TrendVerdict.loading)
    last_price: Optional[float] = Field(None, description="Close of the latest candle")
    price_change_pct: float = Field(
        default=0.0,
        description="Change from the first open to the last close, in percent"
    )

    model_config = ConfigDict(frozen=True)


class MarketAnalyzer:
    """Wires the candle processor, pattern scanner and trend engine together."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.processor = CandleProcessor(self.config.indicators)
        self.scanner = PatternScanner(self.config.patterns)
        self.engine = TrendReadingEngine(self.config.trend)

    def analyze(self, raw_candles: Sequence[Union[Candle, EnrichedCandle]]) -> MarketSnapshot:
        """Process raw history and analyze it."""
        return self.analyze_enriched(self.processor.process_full(raw_candles))

    def analyze_enriched(self, candles: Sequence[EnrichedCandle]) -> MarketSnapshot:
        """Analyze an already processed history (e.g. after a tick update)."""
        candles = list(candles)
        if not candles:
            return MarketSnapshot()

        first_open = candles[0].open
        last_close = candles[-1].close
        change = (last_close - first_open) / first_open * 100 if first_open else 0.0

        return MarketSnapshot(
            candles=candles,
            patterns=self.scanner.scan(candles),
            verdict=self.engine.classify(candles),
            last_price=last_close,
            price_change_pct=change,
        )


def analyze_market(raw_candles: Sequence[Union[Candle, EnrichedCandle]]) -> MarketSnapshot:
    """Analyze a raw history with default settings."""
    return MarketAnalyzer().analyze(raw_candles)
