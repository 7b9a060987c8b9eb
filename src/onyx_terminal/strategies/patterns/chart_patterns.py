"""
Chart Structure Pattern Recognition

Whole-window structural detectors that look at the recent history rather than
the last few candles: trend structure, tight consolidation, volume climax and
Bollinger squeeze. Patterns from this module are flagged ``is_chart``.
"""

from typing import Optional, Sequence

from ...models.market_data import EnrichedCandle
from ...models.signals import Pattern, PatternBias
from .base import PatternDetector


class TrendStructureDetector(PatternDetector):
    """
    Higher-high/higher-low or lower-high/lower-low structure.

    Compares highs and lows at positions 1, 6 and 11 of the last 12 candles.
    """

    WINDOW = 12
    PIVOTS = (1, 6, 11)
    CONFIDENCE = 91

    def get_required_candles(self) -> int:
        return self.WINDOW

    def detect(self, candles: Sequence[EnrichedCandle]) -> Optional[Pattern]:
        if len(candles) < self.WINDOW:
            return None

        window = candles[-self.WINDOW:]
        first, middle, last = (window[i] for i in self.PIVOTS)

        rising = (
            last.high > middle.high > first.high
            and last.low > middle.low > first.low
        )
        falling = (
            last.high < middle.high < first.high
            and last.low < middle.low < first.low
        )

        if rising:
            return self._create_pattern(
                "HH + HL Uptrend",
                PatternBias.BULLISH,
                "Higher highs and higher lows confirm active uptrend",
                self.CONFIDENCE,
                is_chart=True,
            )
        if falling:
            return self._create_pattern(
                "LH + LL Downtrend",
                PatternBias.BEARISH,
                "Lower highs and lower lows confirm active downtrend",
                self.CONFIDENCE,
                is_chart=True,
            )
        return None


class ConsolidationDetector(PatternDetector):
    """Tight range: the last 10 candles span less than 1.2% of the last close."""

    WINDOW = 10
    MAX_RANGE_RATIO = 0.012
    CONFIDENCE = 72

    def get_required_candles(self) -> int:
        return 1

    def detect(self, candles: Sequence[EnrichedCandle]) -> Optional[Pattern]:
        if not candles:
            return None
        last_close = candles[-1].close
        if last_close == 0:
            return None

        window = candles[-self.WINDOW:]
        span = max(c.high for c in window) - min(c.low for c in window)
        if span / last_close < self.MAX_RANGE_RATIO:
            return self._create_pattern(
                "Tight Consolidation",
                PatternBias.NEUTRAL,
                "Narrow range compression, expect volatility breakout",
                self.CONFIDENCE,
                is_chart=True,
            )
        return None


class VolumeClimaxDetector(PatternDetector):
    """Last volume above 2.5x the mean volume of the last 20 candles."""

    WINDOW = 20
    SPIKE_MULTIPLIER = 2.5
    CONFIDENCE = 81

    def get_required_candles(self) -> int:
        return 1

    def detect(self, candles: Sequence[EnrichedCandle]) -> Optional[Pattern]:
        if not candles:
            return None
        last = candles[-1]
        volumes = [c.volume for c in candles[-self.WINDOW:]]
        average = sum(volumes) / len(volumes)
        if average <= 0 or last.volume <= average * self.SPIKE_MULTIPLIER:
            return None

        return self._create_pattern(
            "Volume Climax",
            PatternBias.BULLISH if last.is_bullish else PatternBias.BEARISH,
            "Extreme volume spike, potential exhaustion or breakout",
            self.CONFIDENCE,
            is_chart=True,
        )


class BollingerSqueezeDetector(PatternDetector):
    """Last band width below half the mean width of the recent non-null widths."""

    WINDOW = 20
    SQUEEZE_RATIO = 0.5
    CONFIDENCE = 77

    def get_required_candles(self) -> int:
        return 1

    def detect(self, candles: Sequence[EnrichedCandle]) -> Optional[Pattern]:
        if not candles or candles[-1].bb_width is None:
            return None

        widths = [c.bb_width for c in candles[-self.WINDOW:] if c.bb_width is not None]
        average = sum(widths) / len(widths)
        if candles[-1].bb_width < average * self.SQUEEZE_RATIO:
            return self._create_pattern(
                "Bollinger Squeeze",
                PatternBias.NEUTRAL,
                "Volatility contracting, directional move approaching",
                self.CONFIDENCE,
                is_chart=True,
            )
        return None
