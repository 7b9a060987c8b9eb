"""
Pattern Scanner

Runs the full detector battery against an enriched candle sequence and ranks
the matches.
"""

import logging
from typing import List, Optional, Sequence

from ...config import PatternConfig
from ...models.market_data import EnrichedCandle
from ...models.signals import Pattern
from .base import PatternDetector
from .chart_patterns import (
    BollingerSqueezeDetector,
    ConsolidationDetector,
    TrendStructureDetector,
    VolumeClimaxDetector,
)
from .multi_candlestick import (
    DarkCloudCoverDetector,
    EngulfingDetector,
    EveningStarDetector,
    HaramiDetector,
    MorningStarDetector,
    PiercingLineDetector,
    ThreeBlackCrowsDetector,
    ThreeWhiteSoldiersDetector,
    TweezerDetector,
)
from .single_candlestick import (
    DojiDetector,
    HammerDetector,
    MarubozuDetector,
    ShootingStarDetector,
    SpinningTopDetector,
)


logger = logging.getLogger(__name__)


def default_detectors() -> List[PatternDetector]:
    """
    The detector battery in declaration order.

    The order is the tie-break between patterns of equal confidence.
    """
    return [
        # Single-candle
        DojiDetector(),
        HammerDetector(),
        ShootingStarDetector(),
        MarubozuDetector(),
        SpinningTopDetector(),
        # Two-candle
        EngulfingDetector(),
        TweezerDetector(),
        HaramiDetector(),
        PiercingLineDetector(),
        DarkCloudCoverDetector(),
        # Three-candle
        MorningStarDetector(),
        EveningStarDetector(),
        ThreeWhiteSoldiersDetector(),
        ThreeBlackCrowsDetector(),
        # Chart structure
        TrendStructureDetector(),
        ConsolidationDetector(),
        VolumeClimaxDetector(),
        BollingerSqueezeDetector(),
    ]


class PatternScanner:
    """
    Comprehensive pattern scanner.

    Evaluates every registered detector independently, then ranks matches by
    confidence (highest first, stable for ties) and caps the result.
    """

    def __init__(
        self,
        config: Optional[PatternConfig] = None,
        detectors: Optional[List[PatternDetector]] = None
    ):
        self.config = config or PatternConfig()
        self.detectors = detectors if detectors is not None else default_detectors()

    def scan(self, candles: Sequence[EnrichedCandle]) -> List[Pattern]:
        """
        Detect patterns at the end of the candle sequence.

        Args:
            candles: Enriched candles, oldest first

        Returns:
            Up to ``max_results`` patterns sorted by confidence, empty when
            fewer than ``min_candles`` candles are available
        """
        if len(candles) < self.config.min_candles:
            return []

        matches = [
            pattern
            for pattern in (detector.detect(candles) for detector in self.detectors)
            if pattern is not None
        ]
        matches.sort(key=lambda p: p.confidence, reverse=True)

        logger.debug(f"Detected {len(matches)} patterns over {len(candles)} candles")
        return matches[:self.config.max_results]

    def get_best_pattern(self, candles: Sequence[EnrichedCandle]) -> Optional[Pattern]:
        """Get the highest confidence pattern, if any."""
        patterns = self.scan(candles)
        return patterns[0] if patterns else None


_default_scanner = PatternScanner()


def detect_patterns(candles: Sequence[EnrichedCandle]) -> List[Pattern]:
    """Scan with the default detector battery and limits."""
    return _default_scanner.scan(candles)
