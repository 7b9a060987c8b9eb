"""
Live Tick Feed

Holds the current enriched history for one market and folds live trade
prices into it. Ticks are throttled: a price is always recorded as the latest
price, but the last candle is only rewritten when the throttle interval has
passed since the previous applied tick.

Indicator fields on the last candle go stale between full rebuilds; call
``load`` (or ``refresh``) periodically to recompute them.
"""

import logging
import time
from typing import List, Optional, Sequence, Union

from ..config import FeedConfig
from ..models.market_data import Candle, EnrichedCandle
from .candle_processor import CandleProcessor


logger = logging.getLogger(__name__)


class LiveTickFeed:
    """Throttled live-price holder for one candle history."""

    def __init__(
        self,
        processor: Optional[CandleProcessor] = None,
        config: Optional[FeedConfig] = None
    ):
        self.processor = processor or CandleProcessor()
        self.config = config or FeedConfig()
        self.candles: List[EnrichedCandle] = []
        self.latest_price: Optional[float] = None
        self.ticks_applied = 0
        self._last_tick_ms: Optional[int] = None

    def load(self, raw_candles: Sequence[Union[Candle, EnrichedCandle]]) -> List[EnrichedCandle]:
        """Replace the history with a full rebuild of ``raw_candles``."""
        self.candles = self.processor.process_full(raw_candles)
        if self.candles:
            self.latest_price = self.candles[-1].close
        logger.debug(f"Loaded {len(self.candles)} candles into live feed")
        return self.candles

    def refresh(self) -> List[EnrichedCandle]:
        """Recompute every indicator over the current history."""
        return self.load(self.candles)

    def on_price(self, price: float, now_ms: Optional[int] = None) -> bool:
        """
        Record a trade price and apply it if the throttle allows.

        Args:
            price: Latest trade price
            now_ms: Current time in milliseconds, wall clock when omitted

        Returns:
            True if the last candle was updated
        """
        self.latest_price = price
        now = now_ms if now_ms is not None else int(time.time() * 1000)

        if (
            self._last_tick_ms is not None
            and now - self._last_tick_ms <= self.config.tick_throttle_ms
        ):
            return False

        self.candles = self.processor.tick_update(self.candles, price)
        self._last_tick_ms = now
        self.ticks_applied += 1
        return True
