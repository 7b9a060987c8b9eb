"""
Single Candlestick Pattern Recognition

This module implements recognition rules for single-candlestick patterns:
Doji, Hammer/Hanging Man, Shooting Star/Inverted Hammer, Marubozu and
Spinning Top.

Every detector reads the latest candle (c0). Hammer and Shooting Star also
look at the two preceding candles (c1, c2) to decide which label applies.
Confidence values are fixed per pattern kind.
"""

from abc import abstractmethod
from typing import Optional, Sequence

from ...models.market_data import EnrichedCandle
from ...models.signals import Pattern, PatternBias
from .base import PatternDetector


class SinglePatternDetector(PatternDetector):
    """
    Abstract base class for single candlestick pattern detectors.

    Needs three candles so the prior-trend context (c1, c2) is available.
    """

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
        """Detect the pattern on the latest candle given its two predecessors."""
        pass


class DojiDetector(SinglePatternDetector):
    """
    Doji pattern detector.

    Open and close nearly equal: body smaller than 8% of the range.
    """

    MAX_BODY_RATIO = 0.08
    CONFIDENCE = 68

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        if c0.price_range == 0:
            return None
        if c0.body_size >= c0.price_range * self.MAX_BODY_RATIO:
            return None
        return self._create_pattern(
            "Doji",
            PatternBias.NEUTRAL,
            "Market indecision, watch for follow-through",
            self.CONFIDENCE,
        )


class HammerDetector(SinglePatternDetector):
    """
    Hammer / Hanging Man detector.

    Long lower shadow (more than twice the body) and a short upper shadow
    (under half the body). After two down candles it reads as a bullish
    Hammer, otherwise as a bearish Hanging Man.
    """

    HAMMER_CONFIDENCE = 76
    HANGING_MAN_CONFIDENCE = 70

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        body = c0.body_size
        if body == 0:
            return None
        if not (c0.lower_shadow > body * 2 and c0.upper_shadow < body * 0.5):
            return None

        prior_down = not c1.is_bullish and not c2.is_bullish
        if prior_down:
            return self._create_pattern(
                "Hammer",
                PatternBias.BULLISH,
                "Bullish reversal, buyers rejected lower prices",
                self.HAMMER_CONFIDENCE,
            )
        return self._create_pattern(
            "Hanging Man",
            PatternBias.BEARISH,
            "Bearish warning at potential resistance",
            self.HANGING_MAN_CONFIDENCE,
        )


class ShootingStarDetector(SinglePatternDetector):
    """
    Shooting Star / Inverted Hammer detector.

    Mirror of the Hammer: long upper shadow, short lower shadow. After two up
    candles it is a bearish Shooting Star, otherwise a bullish Inverted Hammer.
    """

    SHOOTING_STAR_CONFIDENCE = 74
    INVERTED_HAMMER_CONFIDENCE = 65

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        body = c0.body_size
        if body == 0:
            return None
        if not (c0.upper_shadow > body * 2 and c0.lower_shadow < body * 0.5):
            return None

        prior_up = c1.is_bullish and c2.is_bullish
        if prior_up:
            return self._create_pattern(
                "Shooting Star",
                PatternBias.BEARISH,
                "Bearish reversal, sellers rejected higher prices",
                self.SHOOTING_STAR_CONFIDENCE,
            )
        return self._create_pattern(
            "Inverted Hammer",
            PatternBias.BULLISH,
            "Potential bullish reversal, needs follow-up",
            self.INVERTED_HAMMER_CONFIDENCE,
        )


class MarubozuDetector(SinglePatternDetector):
    """
    Marubozu detector: body above 92% of the range with both shadows under 5%
    of the body.
    """

    MIN_BODY_RATIO = 0.92
    MAX_SHADOW_TO_BODY = 0.05
    CONFIDENCE = 79

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        if c0.price_range == 0:
            return None
        body = c0.body_size
        if not (
            body > c0.price_range * self.MIN_BODY_RATIO
            and c0.upper_shadow < body * self.MAX_SHADOW_TO_BODY
            and c0.lower_shadow < body * self.MAX_SHADOW_TO_BODY
        ):
            return None

        if c0.is_bullish:
            return self._create_pattern(
                "Bullish Marubozu",
                PatternBias.BULLISH,
                "Full buyer control, strong momentum candle",
                self.CONFIDENCE,
            )
        return self._create_pattern(
            "Bearish Marubozu",
            PatternBias.BEARISH,
            "Full seller control, strong bearish momentum",
            self.CONFIDENCE,
        )


class SpinningTopDetector(SinglePatternDetector):
    """Spinning Top: small body (under 25% of range) with both shadows longer than the body."""

    MAX_BODY_RATIO = 0.25
    CONFIDENCE = 60

    def _detect(self, c0, c1, c2) -> Optional[Pattern]:
        if c0.price_range == 0:
            return None
        body = c0.body_size
        if not (
            body < c0.price_range * self.MAX_BODY_RATIO
            and c0.upper_shadow > body
            and c0.lower_shadow > body
        ):
            return None
        return self._create_pattern(
            "Spinning Top",
            PatternBias.NEUTRAL,
            "Balanced pressure, neither side in control",
            self.CONFIDENCE,
        )
