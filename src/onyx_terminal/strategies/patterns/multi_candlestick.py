"""
Multi-Candlestick Pattern Recognition

This module implements recognition rules for two- and three-candle patterns:
Engulfing, Tweezer, Harami, Piercing Line, Dark Cloud Cover, Morning/Evening
Star and Three White Soldiers/Three Black Crows.

Candles are named from the newest backwards: c0 is the latest candle, c1 the
one before it and c2 the one before that.
"""

from abc import abstractmethod
from typing import Optional, Sequence

from ...models.market_data import EnrichedCandle
from ...models.signals import Pattern, PatternBias
from .base import PatternDetector


class TwoCandleDetector(PatternDetector):
    """Abstract base class for patterns formed by c1 and c0."""

    def get_required_candles(self) -> int:
        return 2

    def detect(self, candles: Sequence[EnrichedCandle]) -> Optional[Pattern]:
        if len(candles) < self.get_required_candles():
            return None
        return self._detect(candles[-1], candles[-2])

    @abstractmethod
    def _detect(self, c0: EnrichedCandle, c1: EnrichedCandle) -> Optional[Pattern]:
        pass


class ThreeCandleDetector(PatternDetector):
    """Abstract base class for patterns formed by c2, c1 and c0."""

    def get_required_candles(self) -> int:
        return 3

    def detect(self, candles: Sequence[EnrichedCandle]) -> Optional[Pattern]:
        if len(candles) < self.get_required_candles():
            return None
        return self._detect(candles[-1], candles[-2], candles[-3])

    @abstractmethod
    def _detect(
        self,
        c0: EnrichedCandle,
        c1: EnrichedCandle,
        c2: EnrichedCandle
    ) -> Optional[Pattern]:
        pass


class EngulfingDetector(TwoCandleDetector):
    """
    Engulfing pattern detector.

    The latest candle has the opposite color of the previous one and its body
    strictly contains the previous body.
    """

    CONFIDENCE = 83

    def _detect(self, c0, c1) -> Optional[Pattern]:
        if c1.body_size == 0 or c0.body_size <= c1.body_size:
            return None

        if not c1.is_bullish and c0.is_bullish and c0.open < c1.close and c0.close > c1.open:
            return self._create_pattern(
                "Bullish Engulfing",
                PatternBias.BULLISH,
                "Buyers overwhelm sellers, strong reversal signal",
                self.CONFIDENCE,
            )
        if c1.is_bullish and not c0.is_bullish and c0.open > c1.close and c0.close < c1.open:
            return self._create_pattern(
                "Bearish Engulfing",
                PatternBias.BEARISH,
                "Sellers overwhelm buyers, strong reversal signal",
                self.CONFIDENCE,
            )
        return None


class TweezerDetector(TwoCandleDetector):
    """
    Tweezer Top / Bottom detector.

    Opposite-colored candles testing the same low (bottom) or high (top) within
    5% of the latest candle's range.
    """

    TOLERANCE_RATIO = 0.05
    CONFIDENCE = 74

    def _detect(self, c0, c1) -> Optional[Pattern]:
        tolerance = c0.price_range * self.TOLERANCE_RATIO

        if not c1.is_bullish and c0.is_bullish and abs(c0.low - c1.low) < tolerance:
            return self._create_pattern(
                "Tweezer Bottom",
                PatternBias.BULLISH,
                "Double support test rejected, buyers stepping in",
                self.CONFIDENCE,
            )
        if c1.is_bullish and not c0.is_bullish and abs(c0.high - c1.high) < tolerance:
            return self._create_pattern(
                "Tweezer Top",
                PatternBias.BEARISH,
                "Double resistance test rejected, sellers stepping in",
                self.CONFIDENCE,
            )
        return None


class HaramiDetector(TwoCandleDetector):
    """
    Harami detector.

    A small opposite-colored body (under half the previous body) sitting
    strictly inside the previous body.
    """

    MAX_BODY_RATIO = 0.5
    CONFIDENCE = 67

    def _detect(self, c0, c1) -> Optional[Pattern]:
        if c1.body_size == 0:
            return None
        if c0.is_bullish == c1.is_bullish:
            return None
        if not (
            c0.body_size < c1.body_size * self.MAX_BODY_RATIO
            and c0.body_top < c1.body_top
            and c0.body_bottom > c1.body_bottom
        ):
            return None

        if c0.is_bullish:
            return self._create_pattern(
                "Bullish Harami",
                PatternBias.BULLISH,
                "Inside candle after bearish move, slowing momentum",
                self.CONFIDENCE,
            )
        return self._create_pattern(
            "Bearish Harami",
            PatternBias.BEARISH,
            "Inside candle after bullish move, slowing momentum",
            self.CONFIDENCE,
        )


class PiercingLineDetector(TwoCandleDetector):
    """
    Piercing Line detector.

    After a down candle, an up candle opens below its close and closes above
    the midpoint of its body.
    """

    CONFIDENCE = 72

    def _detect(self, c0, c1) -> Optional[Pattern]:
        if not c0.is_bullish or c1.is_bullish:
            return None
        if (
            c0.open < c1.close
            and c0.close > c1.body_midpoint
            and c0.body_size > c1.body_size * 0.5
        ):
            return self._create_pattern(
                "Piercing Line",
                PatternBias.BULLISH,
                "Bullish counter-attack, buyers pierce bearish candle",
                self.CONFIDENCE,
            )
        return None


class DarkCloudCoverDetector(TwoCandleDetector):
    """
    Dark Cloud Cover detector.

    After an up candle, a down candle opens above its close and closes below
    the midpoint of its body.
    """

    CONFIDENCE = 72

    def _detect(self, c0, c1) -> Optional[Pattern]:
        if c0.is_bullish or not c1.is_bullish:
            return None
        if (
            c0.open > c1.close
            and c0.close < c1.body_midpoint
            and c0.body_size > c1.body_size * 0.5
        ):
            return self._create_pattern(
                "Dark Cloud Cover",
                PatternBias.BEARISH,
                "Bearish counter-attack, sellers pierce bullish candle",
                self.CONFIDENCE,
            )
        return None


class MorningStarDetector(ThreeCandleDetector):
    """
    Morning Star detector.

    Down candle, small star (body under 30% of the first body), then an up
    candle closing above the first candle's midpoint.
    """

    MAX_STAR_RATIO = 0.3
    CONFIDENCE = 86

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        if (
            not c2.is_bullish
            and c1.body_size < c2.body_size * self.MAX_STAR_RATIO
            and c0.is_bullish
            and c0.close > c2.body_midpoint
        ):
            return self._create_pattern(
                "Morning Star",
                PatternBias.BULLISH,
                "3-candle reversal, strong bottom confirmation",
                self.CONFIDENCE,
            )
        return None


class EveningStarDetector(ThreeCandleDetector):
    """
    Evening Star detector.

    Up candle, small star, then a down candle closing below the first
    candle's midpoint.
    """

    MAX_STAR_RATIO = 0.3
    CONFIDENCE = 86

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        if (
            c2.is_bullish
            and c1.body_size < c2.body_size * self.MAX_STAR_RATIO
            and not c0.is_bullish
            and c0.close < c2.body_midpoint
        ):
            return self._create_pattern(
                "Evening Star",
                PatternBias.BEARISH,
                "3-candle reversal, strong top confirmation",
                self.CONFIDENCE,
            )
        return None


class ThreeWhiteSoldiersDetector(ThreeCandleDetector):
    """
    Three White Soldiers detector.

    Three up candles with rising opens and closes; the last two bodies fill
    more than 55% of their ranges.
    """

    MIN_BODY_RATIO = 0.55
    CONFIDENCE = 89

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        if not (c0.is_bullish and c1.is_bullish and c2.is_bullish):
            return None
        if not (c0.close > c1.close > c2.close and c0.open > c1.open > c2.open):
            return None
        if not (
            c0.body_size > c0.price_range * self.MIN_BODY_RATIO
            and c1.body_size > c1.price_range * self.MIN_BODY_RATIO
        ):
            return None
        return self._create_pattern(
            "Three White Soldiers",
            PatternBias.BULLISH,
            "Sustained bullish momentum across 3 sessions",
            self.CONFIDENCE,
        )


class ThreeBlackCrowsDetector(ThreeCandleDetector):
    """
    Three Black Crows detector.

    Three down candles with falling opens and closes; the last two bodies fill
    more than 55% of their ranges.
    """

    MIN_BODY_RATIO = 0.55
    CONFIDENCE = 89

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        if c0.is_bullish or c1.is_bullish or c2.is_bullish:
            return None
        if not (c0.close < c1.close < c2.close and c0.open < c1.open < c2.open):
            return None
        if not (
            c0.body_size > c0.price_range * self.MIN_BODY_RATIO
            and c1.body_size > c1.price_range * self.MIN_BODY_RATIO
        ):
            return None
        return self._create_pattern(
            "Three Black Crows",
            PatternBias.BEARISH,
            "Sustained bearish pressure across 3 sessions",
            self.CONFIDENCE,
        )
