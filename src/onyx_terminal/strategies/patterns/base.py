"""
Pattern detector interface shared by candlestick and chart-structure detectors.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...models.market_data import EnrichedCandle
from ...models.signals import Pattern, PatternBias


class PatternDetector(ABC):
    """
    Abstract base class for pattern detectors.

    A detector inspects the tail of an enriched candle sequence and yields at
    most one pattern. Detectors are stateless and may be shared freely.
    """

    @abstractmethod
    def detect(self, candles: Sequence[EnrichedCandle]) -> Optional[Pattern]:
        """
        Detect the pattern at the end of the sequence.

        Args:
            candles: Enriched candles, oldest first

        Returns:
            Pattern if detected, None otherwise
        """
        pass

    @abstractmethod
    def get_required_candles(self) -> int:
        """Return the minimum number of candles this detector needs."""
        pass

    def _create_pattern(
        self,
        name: str,
        bias: PatternBias,
        description: str,
        confidence: int,
        is_chart: bool = False
    ) -> Pattern:
        """Create a Pattern instance with standard fields."""
        return Pattern(
            name=name,
            type=bias,
            description=description,
            confidence=confidence,
            is_chart=is_chart,
        )
