"""
Technical Indicator Library

Pure, composable indicator transforms over candle sequences. Two layers:

- ``*_series`` functions work on plain float lists and return one value per
  input element, ``None`` during the warm-up period.
- ``calc_*`` functions take a candle sequence (oldest first), and return a new
  list of EnrichedCandle with the indicator written into its declared field.
  Inputs are never mutated and empty or short inputs never raise.

Recursive indicators (EMA, MACD signal, ADX smoothing, OBV) are expressed as
folds with ``itertools.accumulate`` so the running state is an explicit
accumulator rather than a captured variable.

Some formulas intentionally differ from textbook definitions and are kept as-is:
- MACD signal is seeded with the first MACD value instead of a 9-period average
- ADX is a single-smoothed DX with no second Wilder smoothing pass
"""

import math
from itertools import accumulate
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..models.market_data import Candle, EnrichedCandle, IndicatorField


Series = List[Optional[float]]
CandleInput = Sequence[Union[Candle, EnrichedCandle]]

EMA_FIELDS: Dict[int, IndicatorField] = {
    9: IndicatorField.EMA9,
    12: IndicatorField.EMA12,
    21: IndicatorField.EMA21,
    26: IndicatorField.EMA26,
}

SMA_FIELDS: Dict[int, IndicatorField] = {
    50: IndicatorField.SMA50,
}

RSI_OVERFLOW = 100.0
STOCHASTIC_FLAT = 50.0


# Series math

def ema_series(values: Sequence[float], period: int) -> Series:
    """
    Exponential moving average seeded with the simple mean of the first
    ``period`` values.
    """
    n = len(values)
    if period < 1 or n < period:
        return [None] * n

    k = 2 / (period + 1)
    seed = sum(values[:period]) / period
    smoothed = accumulate(
        values[period:],
        lambda prev, value: value * k + prev * (1 - k),
        initial=seed,
    )
    return [None] * (period - 1) + list(smoothed)


def sma_series(values: Sequence[float], period: int) -> Series:
    """Trailing-window arithmetic mean."""
    if period < 1:
        return [None] * len(values)
    return [
        sum(values[i - period + 1:i + 1]) / period if i >= period - 1 else None
        for i in range(len(values))
    ]


def macd_series(
    closes: Sequence[float],
    signal_period: int = 9
) -> Tuple[Series, Series, Series, Series, Series]:
    """
    MACD line, signal and histogram.

    Returns:
        (ema12, ema26, macd_line, macd_signal, macd_hist)
    """
    fast = ema_series(closes, 12)
    slow = ema_series(closes, 26)
    line = [
        f - s if f is not None and s is not None else None
        for f, s in zip(fast, slow)
    ]

    k = 2 / (signal_period + 1)

    def smooth(prev: Optional[float], value: Optional[float]) -> Optional[float]:
        if value is None:
            return prev
        base = value if prev is None else prev
        return value * k + base * (1 - k)

    running = list(accumulate(line, smooth))
    signal = [s if value is not None else None for s, value in zip(running, line)]
    hist = [
        value - s if value is not None and s is not None else None
        for value, s in zip(line, signal)
    ]
    return fast, slow, line, signal, hist


def rsi_series(closes: Sequence[float], period: int = 14) -> Series:
    """
    Relative Strength Index over the ``period`` close-to-close deltas ending at
    each index. A window without losses reads 100.
    """
    values: Series = []
    for i in range(len(closes)):
        if period < 1 or i < period:
            values.append(None)
            continue

        gains = 0.0
        losses = 0.0
        for j in range(i - period + 1, i + 1):
            diff = closes[j] - closes[j - 1]
            if diff > 0:
                gains += diff
            else:
                losses -= diff

        if losses == 0:
            values.append(RSI_OVERFLOW)
        else:
            rs = gains / losses
            values.append(100 - 100 / (1 + rs))
    return values


def bollinger_series(
    closes: Sequence[float],
    period: int = 20,
    multiplier: float = 2.0
) -> Tuple[Series, Series, Series, Series]:
    """
    Bollinger Bands using the population standard deviation.

    Returns:
        (upper, mid, lower, width) where width = (upper - lower) / mid
    """
    upper: Series = []
    mid: Series = []
    lower: Series = []
    width: Series = []

    for i in range(len(closes)):
        if period < 1 or i < period - 1:
            for column in (upper, mid, lower, width):
                column.append(None)
            continue

        window = closes[i - period + 1:i + 1]
        mean = sum(window) / period
        std = math.sqrt(sum((c - mean) ** 2 for c in window) / period)
        band_upper = mean + multiplier * std
        band_lower = mean - multiplier * std

        upper.append(band_upper)
        mid.append(mean)
        lower.append(band_lower)
        width.append((band_upper - band_lower) / mean if mean != 0 else 0.0)

    return upper, mid, lower, width


def adx_series(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14
) -> Tuple[Series, Series, Series]:
    """
    Single-smoothed directional movement index.

    True range and directional movements are smoothed with
    ``sm = sm - sm / period + value``, the first value seeding the sum. The
    reported ADX is the DX of the smoothed indicators.

    Returns:
        (adx, di_plus, di_minus), all None at index 0
    """
    n = len(closes)
    if n == 0:
        return [], [], []

    movements = []
    for i in range(1, n):
        up_move = highs[i] - highs[i - 1]
        down_move = lows[i - 1] - lows[i]
        tr = max(
            highs[i] - lows[i],
            abs(highs[i] - closes[i - 1]),
            abs(lows[i] - closes[i - 1]),
        )
        dm_plus = max(up_move, 0.0) if up_move > down_move else 0.0
        dm_minus = max(down_move, 0.0) if down_move > up_move else 0.0
        movements.append((tr, dm_plus, dm_minus))

    def smooth(prev: Tuple[float, float, float], current: Tuple[float, float, float]):
        return tuple(p - p / period + c for p, c in zip(prev, current))

    adx: Series = [None]
    di_plus: Series = [None]
    di_minus: Series = [None]

    for sm_tr, sm_plus, sm_minus in accumulate(movements, smooth):
        dip = sm_plus / sm_tr * 100 if sm_tr else 0.0
        din = sm_minus / sm_tr * 100 if sm_tr else 0.0
        total = dip + din
        adx.append(abs(dip - din) / total * 100 if total > 0 else 0.0)
        di_plus.append(dip)
        di_minus.append(din)

    return adx, di_plus, di_minus


def stochastic_series(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    k_period: int = 14,
    d_period: int = 3
) -> Tuple[Series, Series]:
    """
    Stochastic oscillator.

    %K reads 50 when the window has no range. %D is the mean of the last
    ``d_period`` %K values and stays None until that many are available.

    Returns:
        (stoch_k, stoch_d)
    """
    k_values: Series = []
    for i in range(len(closes)):
        if k_period < 1 or i < k_period - 1:
            k_values.append(None)
            continue
        lowest = min(lows[i - k_period + 1:i + 1])
        highest = max(highs[i - k_period + 1:i + 1])
        if highest == lowest:
            k_values.append(STOCHASTIC_FLAT)
        else:
            k_values.append((closes[i] - lowest) / (highest - lowest) * 100)

    d_values: Series = []
    for i in range(len(k_values)):
        window = [k for k in k_values[max(0, i - d_period + 1):i + 1] if k is not None]
        if d_period < 1 or len(window) < d_period:
            d_values.append(None)
        else:
            d_values.append(sum(window) / d_period)

    return k_values, d_values


def obv_series(closes: Sequence[float], volumes: Sequence[float]) -> List[float]:
    """On-balance volume, starting at 0 on the first candle."""
    if not closes:
        return []

    flows = [0.0]
    for i in range(1, len(closes)):
        if closes[i] > closes[i - 1]:
            flows.append(volumes[i])
        elif closes[i] < closes[i - 1]:
            flows.append(-volumes[i])
        else:
            flows.append(0.0)
    return list(accumulate(flows))


# Candle transforms

def _assign(
    candles: CandleInput,
    columns: Dict[IndicatorField, Sequence[Optional[float]]]
) -> List[EnrichedCandle]:
    """Write indicator columns onto fresh copies of the candles."""
    return [
        EnrichedCandle.from_candle(candle).with_indicators(
            {field: column[i] for field, column in columns.items()}
        )
        for i, candle in enumerate(candles)
    ]


def _closes(candles: CandleInput) -> List[float]:
    return [c.close for c in candles]


def calc_ema(
    candles: CandleInput,
    period: int,
    field: Optional[IndicatorField] = None
) -> List[EnrichedCandle]:
    """
    Add an EMA of close.

    Args:
        candles: Candles, oldest first
        period: EMA period
        field: Target field; defaults to the field declared for ``period``

    Raises:
        ValueError: If no field is given and none is declared for ``period``
    """
    target = field or EMA_FIELDS.get(period)
    if target is None:
        raise ValueError(f"No indicator field declared for EMA({period})")
    return _assign(candles, {target: ema_series(_closes(candles), period)})


def calc_sma(
    candles: CandleInput,
    period: int,
    field: Optional[IndicatorField] = None
) -> List[EnrichedCandle]:
    """Add an SMA of close. Field resolution follows ``calc_ema``."""
    target = field or SMA_FIELDS.get(period)
    if target is None:
        raise ValueError(f"No indicator field declared for SMA({period})")
    return _assign(candles, {target: sma_series(_closes(candles), period)})


def calc_macd(candles: CandleInput, signal_period: int = 9) -> List[EnrichedCandle]:
    """Add ema12, ema26, macd_line, macd_signal and macd_hist."""
    fast, slow, line, signal, hist = macd_series(_closes(candles), signal_period)
    return _assign(candles, {
        IndicatorField.EMA12: fast,
        IndicatorField.EMA26: slow,
        IndicatorField.MACD_LINE: line,
        IndicatorField.MACD_SIGNAL: signal,
        IndicatorField.MACD_HIST: hist,
    })


def calc_rsi(candles: CandleInput, period: int = 14) -> List[EnrichedCandle]:
    """Add rsi."""
    return _assign(candles, {IndicatorField.RSI: rsi_series(_closes(candles), period)})


def calc_bollinger(
    candles: CandleInput,
    period: int = 20,
    multiplier: float = 2.0
) -> List[EnrichedCandle]:
    """Add bb_upper, bb_mid, bb_lower and bb_width."""
    upper, mid, lower, width = bollinger_series(_closes(candles), period, multiplier)
    return _assign(candles, {
        IndicatorField.BB_UPPER: upper,
        IndicatorField.BB_MID: mid,
        IndicatorField.BB_LOWER: lower,
        IndicatorField.BB_WIDTH: width,
    })


def calc_adx(candles: CandleInput, period: int = 14) -> List[EnrichedCandle]:
    """Add adx, di_plus and di_minus."""
    adx, di_plus, di_minus = adx_series(
        [c.high for c in candles],
        [c.low for c in candles],
        _closes(candles),
        period,
    )
    return _assign(candles, {
        IndicatorField.ADX: adx,
        IndicatorField.DI_PLUS: di_plus,
        IndicatorField.DI_MINUS: di_minus,
    })


def calc_stochastic(
    candles: CandleInput,
    k_period: int = 14,
    d_period: int = 3
) -> List[EnrichedCandle]:
    """Add stoch_k and stoch_d."""
    k_values, d_values = stochastic_series(
        [c.high for c in candles],
        [c.low for c in candles],
        _closes(candles),
        k_period,
        d_period,
    )
    return _assign(candles, {
        IndicatorField.STOCH_K: k_values,
        IndicatorField.STOCH_D: d_values,
    })


def calc_obv(candles: CandleInput) -> List[EnrichedCandle]:
    """Add obv."""
    return _assign(candles, {
        IndicatorField.OBV: obv_series(_closes(candles), [c.volume for c in candles]),
    })
