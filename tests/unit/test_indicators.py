"""
Unit tests for the technical indicator library.
"""

import math

import pytest

from onyx_terminal.models.market_data import Candle, EnrichedCandle, IndicatorField
from onyx_terminal.strategies.indicators import (
    adx_series,
    bollinger_series,
    calc_adx,
    calc_bollinger,
    calc_ema,
    calc_macd,
    calc_obv,
    calc_rsi,
    calc_sma,
    calc_stochastic,
    ema_series,
    macd_series,
    obv_series,
    rsi_series,
    sma_series,
    stochastic_series,
)


def create_closes_candles(closes, volume: float = 100.0):
    """Candles whose open/high/low collapse onto the close."""
    return [
        Candle(time=i * 60_000, open=c, high=c, low=c, close=c, volume=volume)
        for i, c in enumerate(closes)
    ]


class TestMovingAverages:
    """Test EMA and SMA series."""

    def test_ema_seeded_with_simple_mean(self):
        assert ema_series([1, 2, 3, 4, 5], 3) == [None, None, 2.0, 3.0, 4.0]

    def test_ema_short_input_is_all_null(self):
        assert ema_series([1, 2], 3) == [None, None]

    def test_ema_empty(self):
        assert ema_series([], 9) == []

    def test_sma_trailing_window(self):
        assert sma_series([1, 2, 3, 4], 2) == [None, 1.5, 2.5, 3.5]

    def test_sma_short_input_is_all_null(self):
        assert sma_series([1, 2, 3], 5) == [None, None, None]


class TestRsi:
    """Test RSI series."""

    def test_rsi_all_gains_reads_100(self):
        closes = list(range(10, 160, 10))
        assert len(closes) == 15

        values = rsi_series(closes, 14)

        assert values[13] is None
        assert values[14] == 100.0

    def test_rsi_all_losses_reads_zero(self):
        closes = list(range(150, 0, -10))
        assert rsi_series(closes, 14)[14] == 0.0

    def test_rsi_balanced_window(self):
        values = rsi_series([1, 2, 1, 2, 1], 2)
        assert values[:2] == [None, None]
        assert values[2] == pytest.approx(50.0)
        assert values[4] == pytest.approx(50.0)

    def test_rsi_flat_closes_reads_100(self):
        assert rsi_series([5.0] * 16, 14)[15] == 100.0

    def test_rsi_stays_in_range(self):
        closes = [100, 102, 101, 105, 103, 99, 98, 104, 107, 106, 108, 103, 101, 102, 110, 109]
        for value in rsi_series(closes, 14):
            assert value is None or 0.0 <= value <= 100.0


class TestBollinger:
    """Test Bollinger Bands."""

    def test_population_standard_deviation(self):
        upper, mid, lower, width = bollinger_series([1, 2, 3, 4], 4, 2.0)
        std = math.sqrt(1.25)

        assert mid[:3] == [None, None, None]
        assert mid[3] == pytest.approx(2.5)
        assert upper[3] == pytest.approx(2.5 + 2 * std)
        assert lower[3] == pytest.approx(2.5 - 2 * std)
        assert width[3] == pytest.approx(4 * std / 2.5)

    def test_constant_closes_collapse_bands(self):
        upper, mid, lower, width = bollinger_series([5.0] * 20, 20, 2.0)
        assert upper[19] == mid[19] == lower[19] == 5.0
        assert width[19] == 0.0

    def test_zero_mean_width_is_zero(self):
        _, _, _, width = bollinger_series([0.0] * 20, 20, 2.0)
        assert width[19] == 0.0


class TestAdx:
    """Test the directional movement index."""

    def test_steady_uptrend_is_fully_plus_dominant(self):
        highs = [10 + i for i in range(20)]
        lows = [8 + i for i in range(20)]
        closes = [9 + i for i in range(20)]

        adx, di_plus, di_minus = adx_series(highs, lows, closes, 14)

        assert adx[0] is None and di_plus[0] is None and di_minus[0] is None
        assert adx[19] == pytest.approx(100.0)
        assert di_plus[19] > 0
        assert di_minus[19] == 0.0

    def test_zero_true_range_falls_back_to_zero(self):
        adx, di_plus, di_minus = adx_series([5.0] * 5, [5.0] * 5, [5.0] * 5, 14)
        assert adx[1:] == [0.0] * 4
        assert di_plus[1:] == [0.0] * 4
        assert di_minus[1:] == [0.0] * 4

    def test_mixed_moves_follow_single_smoothing(self):
        highs = [10, 12, 11, 13, 12]
        lows = [8, 9, 7, 10, 9]
        closes = [9, 11, 8, 12, 10]

        adx, di_plus, di_minus = adx_series(highs, lows, closes, 3)

        # Seed (tr, +dm, -dm) = (3, 2, 0)
        assert di_plus[1] == pytest.approx(200 / 3)
        assert di_minus[1] == 0.0
        assert adx[1] == pytest.approx(100.0)

        # (3 - 1 + 4, 2 - 2/3 + 0, 0 - 0 + 2) = (6, 4/3, 2)
        assert di_plus[2] == pytest.approx(200 / 9)
        assert di_minus[2] == pytest.approx(100 / 3)
        assert adx[2] == pytest.approx(20.0)

        # (9, 26/9, 4/3) after index 3, then (9, 52/27, 51/27)
        assert di_plus[4] == pytest.approx(5200 / 243)
        assert di_minus[4] == pytest.approx(5100 / 243)
        assert adx[4] == pytest.approx(100 / 103)

    def test_empty(self):
        assert adx_series([], [], [], 14) == ([], [], [])


class TestStochastic:
    """Test the stochastic oscillator."""

    def test_k_position_in_range(self):
        k_values, d_values = stochastic_series([10, 12, 14], [8, 9, 10], [9, 11, 13], 3, 1)
        assert k_values[:2] == [None, None]
        assert k_values[2] == pytest.approx(5 / 6 * 100)
        assert d_values[2] == pytest.approx(5 / 6 * 100)

    def test_flat_window_reads_50(self):
        k_values, _ = stochastic_series([5.0] * 3, [5.0] * 3, [5.0] * 3, 3, 3)
        assert k_values[2] == 50.0

    def test_d_waits_for_enough_k_values(self):
        highs = [10 + i for i in range(6)]
        lows = [5 + i for i in range(6)]
        closes = [8 + i for i in range(6)]

        k_values, d_values = stochastic_series(highs, lows, closes, 3, 3)

        assert d_values[3] is None
        assert d_values[4] == pytest.approx(sum(k_values[2:5]) / 3)


class TestObv:
    """Test on-balance volume."""

    def test_running_volume_flow(self):
        assert obv_series([10, 11, 10, 10], [5, 6, 7, 8]) == [0.0, 6, -1, -1]

    def test_rising_closes_accumulate_volume(self):
        volumes = [5, 6, 7, 8, 9]

        obv = obv_series([1, 2, 3, 4, 5], volumes)

        assert obv == [0.0, 6, 13, 21, 30]
        assert all(b >= a for a, b in zip(obv, obv[1:]))
        assert obv[-1] == sum(volumes[1:])

    def test_empty(self):
        assert obv_series([], []) == []


class TestMacd:
    """Test MACD line, signal and histogram."""

    def test_short_history_has_no_macd(self):
        _, _, line, signal, hist = macd_series([float(i) for i in range(20)])
        assert line == [None] * 20
        assert signal == [None] * 20
        assert hist == [None] * 20

    def test_signal_seeded_with_first_line_value(self):
        closes = [100 + i * 0.5 + (i % 3) for i in range(40)]

        fast, slow, line, signal, hist = macd_series(closes)

        assert len(fast) == len(slow) == len(line) == len(signal) == len(hist) == 40
        assert line[24] is None and signal[24] is None
        assert line[25] == pytest.approx(fast[25] - slow[25])
        assert signal[25] == pytest.approx(line[25])
        assert hist[25] == pytest.approx(0.0, abs=1e-9)

        k = 2 / 10
        assert signal[26] == pytest.approx(line[26] * k + signal[25] * (1 - k))
        assert hist[39] == pytest.approx(line[39] - signal[39])


class TestCandleTransforms:
    """Test the calc_* candle transforms."""

    def setup_method(self):
        self.candles = create_closes_candles([100 + i for i in range(30)])

    def test_calc_ema_writes_declared_field(self):
        result = calc_ema(self.candles, 9)

        assert all(isinstance(c, EnrichedCandle) for c in result)
        assert result[7].ema9 is None
        assert result[8].ema9 == pytest.approx(104.0)
        assert result[8].ema21 is None

    def test_calc_ema_unmapped_period_requires_field(self):
        with pytest.raises(ValueError):
            calc_ema(self.candles, 7)

        result = calc_ema(self.candles, 7, field=IndicatorField.EMA9)
        assert result[6].ema9 == pytest.approx(103.0)

    def test_calc_sma(self):
        result = calc_sma(self.candles, 50)
        assert all(c.sma50 is None for c in result)

    def test_transforms_preserve_earlier_indicators(self):
        result = calc_rsi(calc_ema(self.candles, 9), 14)
        assert result[20].ema9 is not None
        assert result[20].rsi == 100.0

    def test_input_not_mutated(self):
        result = calc_macd(self.candles)
        assert result is not self.candles
        assert all(type(c) is Candle for c in self.candles)
        assert result[29].macd_line is not None

    def test_empty_input_never_raises(self):
        for transform in (calc_macd, calc_rsi, calc_bollinger, calc_adx, calc_stochastic, calc_obv):
            assert transform([]) == []
        assert calc_ema([], 9) == []
        assert calc_sma([], 50) == []

    def test_calc_obv_and_stochastic(self):
        result = calc_stochastic(calc_obv(self.candles))
        assert result[0].obv == 0.0
        assert result[29].obv == pytest.approx(100.0 * 29)
        # Collapsed candles have a range only across the window
        assert result[29].stoch_k == pytest.approx(100.0)
        assert result[29].stoch_d == pytest.approx(100.0)
