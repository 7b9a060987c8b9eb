"""
Trend Reading Engine

Aggregates indicator signals from an enriched candle sequence into one
composite trend verdict.

Each signal reader inspects the latest candle (MACD also looks at the one
before it for a histogram sign flip; momentum looks back a fixed number of
candles) and yields a weighted Signal, or nothing when its inputs are still
warming up. Signals without a directional opinion (``bull is None``) are
reported but do not contribute to the score.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from ..config import TrendConfig
from ..models.market_data import EnrichedCandle
from ..models.signals import Signal, TrendClass, TrendVerdict


logger = logging.getLogger(__name__)

SignalReader = Callable[[Sequence[EnrichedCandle]], Optional[Signal]]

COMMENTARY: Dict[TrendClass, str] = {
    TrendClass.STRONG_BULL: "Strong bullish confluence. RSI {rsi}, EMA stack bullish, MACD positive.",
    TrendClass.BULLISH: "Moderate bullish bias. RSI {rsi}. Monitor for pullback entries.",
    TrendClass.CONSOLIDATING: "No directional edge detected. RSI {rsi}. Await breakout confirmation.",
    TrendClass.BEARISH: "Moderate bearish bias. RSI {rsi}. Watch for relief bounce traps.",
    TrendClass.STRONG_BEAR: "Strong bearish confluence. RSI {rsi}, EMA stack bearish, MACD negative.",
}


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _pct(value: float, base: float) -> float:
    """Percentage distance of value from base, 0 for a zero base."""
    if base == 0:
        return 0.0
    return (value - base) / base * 100


class TrendReadingEngine:
    """
    Master trend classifier.

    Signal readers run in a fixed order, which is also the order of the
    signals in the verdict.
    """

    def __init__(self, config: Optional[TrendConfig] = None):
        self.config = config or TrendConfig()
        self.signal_readers: List[SignalReader] = [
            self._ema_cross_signal,
            self._macd_signal,
            self._rsi_signal,
            self._adx_signal,
            self._bollinger_signal,
            self._sma50_signal,
            self._momentum_signal,
        ]

    def classify(self, candles: Sequence[EnrichedCandle]) -> TrendVerdict:
        """
        Classify the trend of a fully processed candle sequence.

        Args:
            candles: Enriched candles with indicators applied, oldest first

        Returns:
            TrendVerdict; LOADING while fewer than ``min_candles`` are available
        """
        if len(candles) < self.config.min_candles:
            return TrendVerdict.loading()

        signals = [
            signal
            for signal in (reader(candles) for reader in self.signal_readers)
            if signal is not None
        ]

        score = self.aggregate(signals)
        trend = self.classify_score(score)
        momentum = self._momentum_signal(candles)
        last = candles[-1]

        verdict = TrendVerdict(
            trend=trend,
            strength=round(abs(score) * 100),
            score=score,
            signals=signals,
            bull_count=sum(1 for s in signals if s.bull is True),
            bear_count=sum(1 for s in signals if s.bull is False),
            neutral_count=sum(1 for s in signals if s.bull is None),
            momentum=self._describe_momentum(momentum),
            commentary=COMMENTARY[trend].format(
                rsi=f"{last.rsi:.0f}" if last.rsi is not None else "n/a"
            ),
        )

        logger.debug(f"Trend {trend.value} score={score:.3f} from {len(signals)} signals")
        return verdict

    @staticmethod
    def aggregate(signals: Sequence[Signal]) -> float:
        """
        Normalized weighted score in [-1, 1].

        Only signals with a directional opinion count; with none the score is 0.
        """
        opinionated = [s for s in signals if s.bull is not None]
        total_weight = sum(s.weight for s in opinionated)
        if total_weight <= 0:
            return 0.0
        weighted = sum(s.signed_weight for s in opinionated)
        return max(-1.0, min(1.0, weighted / total_weight))

    def classify_score(self, score: float) -> TrendClass:
        """Map a normalized score onto a trend class; boundaries fall inward."""
        strong = self.config.strong_threshold
        bias = self.config.bias_threshold
        if score > strong:
            return TrendClass.STRONG_BULL
        if score > bias:
            return TrendClass.BULLISH
        if score < -strong:
            return TrendClass.STRONG_BEAR
        if score < -bias:
            return TrendClass.BEARISH
        return TrendClass.CONSOLIDATING

    # Signal readers

    def _ema_cross_signal(self, candles: Sequence[EnrichedCandle]) -> Optional[Signal]:
        """EMA 9/21 crossover."""
        last = candles[-1]
        if last.ema9 is None or last.ema21 is None:
            return None
        bull = last.ema9 > last.ema21
        gap = round(_pct(last.ema9, last.ema21), 2)
        return Signal(
            name="EMA 9 / 21 Cross",
            display_value=f"↑ Bullish ({gap:.2f}%)" if bull else f"↓ Bearish ({gap:.2f}%)",
            raw_value=gap,
            bull=bull,
            weight=1.5,
        )

    def _macd_signal(self, candles: Sequence[EnrichedCandle]) -> Optional[Signal]:
        """MACD histogram, weighted double on a fresh sign flip."""
        last = candles[-1]
        if last.macd_hist is None:
            return None
        prev = candles[-2] if len(candles) > 1 else None
        bull = last.macd_hist > 0
        crossing = (
            prev is not None
            and prev.macd_hist is not None
            and _sign(last.macd_hist) != _sign(prev.macd_hist)
        )
        suffix = " ⚡ Cross!" if crossing else ""
        return Signal(
            name="MACD Histogram",
            display_value=f"{'+' if bull else ''}{last.macd_hist:.2f}{suffix}",
            raw_value=last.macd_hist,
            bull=bull,
            weight=2.0 if crossing else 1.0,
            highlight=crossing,
        )

    def _rsi_signal(self, candles: Sequence[EnrichedCandle]) -> Optional[Signal]:
        last = candles[-1]
        if last.rsi is None:
            return None
        bull = last.rsi > 50
        if last.rsi > 70:
            label = "Overbought"
        elif last.rsi < 30:
            label = "Oversold"
        else:
            label = "Bullish" if bull else "Bearish"
        return Signal(
            name="RSI (14)",
            display_value=f"{last.rsi:.1f} ({label})",
            raw_value=last.rsi,
            bull=bull,
            weight=1.0,
        )

    def _adx_signal(self, candles: Sequence[EnrichedCandle]) -> Optional[Signal]:
        """ADX direction; only opinionated once the trend is strong enough."""
        last = candles[-1]
        if last.adx is None:
            return None
        threshold = self.config.adx_trend_threshold
        strong = last.adx > threshold
        plus_dominant = (last.di_plus or 0.0) > (last.di_minus or 0.0)
        if last.adx > 30:
            quality = "Strong"
        elif strong:
            quality = "Moderate"
        else:
            quality = "Weak"
        return Signal(
            name="ADX Directional",
            display_value=f"{last.adx:.1f} {quality} ({'+DI' if plus_dominant else '-DI'} dominant)",
            raw_value=last.adx,
            bull=plus_dominant if strong else None,
            weight=1.5 if strong else 0.5,
        )

    def _bollinger_signal(self, candles: Sequence[EnrichedCandle]) -> Optional[Signal]:
        """Close relative to the Bollinger midline."""
        last = candles[-1]
        if last.bb_mid is None:
            return None
        bull = last.close > last.bb_mid
        near_upper = last.bb_upper is not None and last.close > last.bb_upper * 0.99
        near_lower = last.bb_lower is not None and last.close < last.bb_lower * 1.01
        if near_upper:
            suffix = " (Near upper)"
        elif near_lower:
            suffix = " (Near lower)"
        else:
            suffix = ""
        return Signal(
            name="Bollinger Position",
            display_value=f"{'Above' if bull else 'Below'} midline{suffix}",
            raw_value=_pct(last.close, last.bb_mid),
            bull=bull,
            weight=1.0,
        )

    def _sma50_signal(self, candles: Sequence[EnrichedCandle]) -> Optional[Signal]:
        """Long-term bias: close against the 50-candle SMA."""
        last = candles[-1]
        if last.sma50 is None:
            return None
        bull = last.close > last.sma50
        pct = round(_pct(last.close, last.sma50), 2)
        return Signal(
            name="Price vs SMA 50",
            display_value=f"↑ {pct:.2f}% above" if bull else f"↓ {abs(pct):.2f}% below",
            raw_value=pct,
            bull=bull,
            weight=1.0,
        )

    def _momentum_signal(self, candles: Sequence[EnrichedCandle]) -> Optional[Signal]:
        """Close against the close ``momentum_lookback`` candles ago."""
        lookback = self.config.momentum_lookback
        if len(candles) < lookback + 1:
            return None
        last = candles[-1]
        past = candles[-1 - lookback]
        pct = _pct(last.close, past.close)
        bull = last.close > past.close
        return Signal(
            name=f"Momentum ({lookback}c)",
            display_value=f"{'+' if bull else ''}{pct:.2f}%",
            raw_value=pct,
            bull=bull,
            weight=0.75,
        )

    def _describe_momentum(self, momentum: Optional[Signal]) -> str:
        if momentum is None:
            return "n/a"
        direction = "Positive" if momentum.bull else "Negative"
        return (
            f"{direction} {abs(momentum.raw_value):.2f}% over "
            f"{self.config.momentum_lookback} candles"
        )


_default_engine = TrendReadingEngine()


def classify_trend(candles: Sequence[EnrichedCandle]) -> TrendVerdict:
    """Classify with the default thresholds."""
    return _default_engine.classify(candles)
