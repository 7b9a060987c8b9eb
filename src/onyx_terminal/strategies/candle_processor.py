"""
Candle Processor

Runs the full indicator pipeline over raw OHLCV candles, enriches them with
display fields and applies live price ticks to the most recent candle.

Also generates mock OHLCV history for offline/fallback use.
"""

import logging
import random
import time
from typing import List, Optional, Sequence, Union

from ..config import IndicatorConfig
from ..models.market_data import Candle, CandleColor, EnrichedCandle, Timeframe
from .indicators import (
    calc_adx,
    calc_bollinger,
    calc_ema,
    calc_macd,
    calc_obv,
    calc_rsi,
    calc_sma,
    calc_stochastic,
)


logger = logging.getLogger(__name__)

MOCK_VOLATILITY = 0.0022
MOCK_DRIFT_CENTER = 0.475
MOCK_WICK_FACTOR = 0.4


def enrich_candle(candle: EnrichedCandle) -> EnrichedCandle:
    """Return a copy carrying is_up, color, body and wick."""
    is_up = candle.close >= candle.open
    return candle.model_copy(update={
        "is_up": is_up,
        "color": CandleColor.BULL if is_up else CandleColor.BEAR,
        "body": (min(candle.open, candle.close), max(candle.open, candle.close)),
        "wick": (candle.low, candle.high),
    })


class CandleProcessor:
    """
    Candle pipeline orchestrator.

    Indicator order: EMA(9), EMA(21), SMA(50), MACD, RSI, Bollinger, ADX, OBV,
    then the display enrichment pass.
    """

    def __init__(self, config: Optional[IndicatorConfig] = None):
        self.config = config or IndicatorConfig()

    def process_full(self, raw_candles: Sequence[Union[Candle, EnrichedCandle]]) -> List[EnrichedCandle]:
        """
        Rebuild every indicator over the full history.

        Args:
            raw_candles: Candles, oldest first

        Returns:
            New list of enriched candles (empty for empty input)
        """
        if not raw_candles:
            return []

        cfg = self.config
        candles = calc_ema(raw_candles, 9)
        candles = calc_ema(candles, 21)
        candles = calc_sma(candles, 50)
        candles = calc_macd(candles, cfg.macd_signal_period)
        candles = calc_rsi(candles, cfg.rsi_period)
        candles = calc_bollinger(candles, cfg.bollinger_period, cfg.bollinger_multiplier)
        candles = calc_adx(candles, cfg.adx_period)
        candles = calc_obv(candles)
        candles = [enrich_candle(c) for c in candles]

        logger.debug(f"Processed {len(candles)} candles")
        return candles

    def apply_stochastic(self, candles: Sequence[Union[Candle, EnrichedCandle]]) -> List[EnrichedCandle]:
        """Add stoch_k and stoch_d with the configured periods; other fields are kept."""
        return calc_stochastic(candles, self.config.stochastic_k_period, self.config.stochastic_d_period)

    def tick_update(self, prev_candles: Sequence[EnrichedCandle], price: float) -> List[EnrichedCandle]:
        """
        Apply a live price to the last candle.

        Only OHLC and display fields of the last candle change; its indicator
        fields stay as computed by the last ``process_full``. Every other
        element is shared with ``prev_candles``.

        Args:
            prev_candles: Current enriched candles
            price: Latest trade price

        Returns:
            New list of the same length
        """
        candles = list(prev_candles)
        if not candles:
            return candles

        last = EnrichedCandle.from_candle(candles[-1])
        updated = last.model_copy(update={
            "close": price,
            "high": max(last.high, price),
            "low": min(last.low, price),
        })
        candles[-1] = enrich_candle(updated)
        return candles

    def generate_mock_history(
        self,
        base_price: float,
        count: int = 150,
        rng: Optional[random.Random] = None,
        end_time_ms: Optional[int] = None
    ) -> List[EnrichedCandle]:
        """
        Generate a random-walk OHLCV history ending now, one candle per minute.

        Args:
            base_price: Starting price; volatility scales with it
            count: Number of candles
            rng: Random source, ambient randomness when omitted
            end_time_ms: Time of the last candle, current time when omitted

        Returns:
            Processed candle list
        """
        rng = rng or random.Random()
        now = end_time_ms if end_time_ms is not None else int(time.time() * 1000)
        step = Timeframe.ONE_MINUTE.milliseconds
        volatility = base_price * MOCK_VOLATILITY

        raw: List[Candle] = []
        price = base_price
        for i in range(count - 1, -1, -1):
            open_price = price
            close = open_price + (rng.random() - MOCK_DRIFT_CENTER) * volatility
            high = max(open_price, close) + rng.random() * volatility * MOCK_WICK_FACTOR
            low = min(open_price, close) - rng.random() * volatility * MOCK_WICK_FACTOR
            volume = rng.random() * 1200 + 200
            raw.append(Candle(
                time=now - i * step,
                open=open_price,
                high=high,
                low=low,
                close=close,
                volume=volume,
            ))
            price = close

        logger.debug(f"Generated {count} mock candles around {base_price}")
        return self.process_full(raw)


_default_processor = CandleProcessor()


def process_full(raw_candles: Sequence[Union[Candle, EnrichedCandle]]) -> List[EnrichedCandle]:
    """Run the full pipeline with default indicator settings."""
    return _default_processor.process_full(raw_candles)


def tick_update(prev_candles: Sequence[EnrichedCandle], price: float) -> List[EnrichedCandle]:
    """Apply a live price to the last candle."""
    return _default_processor.tick_update(prev_candles, price)


def generate_mock_history(base_price: float, count: int = 150) -> List[EnrichedCandle]:
    """Generate processed mock history with ambient randomness."""
    return _default_processor.generate_mock_history(base_price, count)
