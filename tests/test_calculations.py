"""Tests for the NumPy indicator primitives."""

import numpy as np
import pytest

from stockscope.services.indicators.calculations import (
    sma,
    ema,
    rsi,
    macd,
    bollinger_bands,
    rolling_volume_correlation,
    sample_std,
)


class TestMovingAverages:
    def test_sma_windows(self):
        assert sma([1, 2, 3, 4, 5], 3).tolist() == pytest.approx([2, 3, 4])

    def test_sma_short_input_is_empty(self):
        assert len(sma([1, 2], 3)) == 0

    def test_ema_of_constant_series_is_constant(self):
        result = ema([5.0] * 10, 3)

        assert len(result) == 8
        assert result.tolist() == pytest.approx([5.0] * 8)

    def test_ema_seeded_with_simple_average(self):
        # seed = mean(1, 2, 3) = 2, then 4 * 0.5 + 2 * 0.5 = 3
        assert ema([1, 2, 3, 4], 3).tolist() == pytest.approx([2.0, 3.0])

    def test_non_positive_period_is_empty(self):
        assert len(ema([1, 2, 3], 0)) == 0
        assert len(sma([1, 2, 3], -1)) == 0


class TestRSI:
    def test_insufficient_history(self):
        assert rsi(list(range(14)), 14) is None

    def test_all_gains_saturate_at_100(self):
        values, avg_gains, avg_losses = rsi(list(range(1, 20)), 14)

        assert len(values) == 5
        assert values.tolist() == pytest.approx([100.0] * 5)
        assert avg_losses.tolist() == pytest.approx([0.0] * 5)

    def test_balanced_moves_give_50(self):
        values, _, _ = rsi([1, 2, 1], 2)

        assert values.tolist() == pytest.approx([50.0])

    def test_values_bounded(self):
        closes = 100 + np.cumsum(np.sin(np.arange(60)))
        values, _, _ = rsi(closes, 14)

        assert np.all(values >= 0)
        assert np.all(values <= 100)


class TestMACD:
    def test_insufficient_history(self):
        assert macd(list(range(34)), 12, 26, 9) is None

    def test_lengths_are_tail_aligned(self):
        macd_line, signal_line, histogram = macd(list(range(35)), 12, 26, 9)

        assert len(macd_line) == 10
        assert len(signal_line) == 2
        assert len(histogram) == 2
        assert histogram[-1] == pytest.approx(macd_line[-1] - signal_line[-1])

    def test_constant_series_is_flat(self):
        macd_line, signal_line, histogram = macd([50.0] * 40)

        assert macd_line.tolist() == pytest.approx([0.0] * len(macd_line))
        assert histogram.tolist() == pytest.approx([0.0] * len(histogram))

    def test_fast_ema_aligned_to_slow(self):
        closes = [float(i * i) for i in range(40)]
        macd_line, _, _ = macd(closes, 3, 5, 2)

        expected = ema(closes, 3)[-len(ema(closes, 5)):] - ema(closes, 5)
        assert macd_line.tolist() == pytest.approx(expected.tolist())


class TestBollingerBands:
    def test_insufficient_history(self):
        assert bollinger_bands([1, 2, 3], 5) is None

    def test_zero_width_bands_equal_middle(self):
        closes = [10, 12, 11, 13, 12, 14]
        middle, _, upper, lower, _ = bollinger_bands(closes, 3, std_dev=0)

        assert upper.tolist() == pytest.approx(middle.tolist())
        assert lower.tolist() == pytest.approx(middle.tolist())

    def test_population_standard_deviation(self):
        middle, std, upper, lower, bandwidth = bollinger_bands([2, 4, 4, 4, 5, 5, 7, 9], 8)

        assert middle[0] == pytest.approx(5.0)
        assert std[0] == pytest.approx(2.0)
        assert upper[0] == pytest.approx(9.0)
        assert lower[0] == pytest.approx(1.0)
        assert bandwidth[0] == pytest.approx(8.0 / 5.0)


class TestRollingVolumeCorrelation:
    def test_matches_pearson_per_window(self):
        closes = [10, 11, 13, 12, 15, 14, 18, 17, 16, 20]
        volumes = [500, 700, 650, 900, 800, 1200, 1100, 950, 1300, 1250]
        period = 4

        avg_volume, correlation = rolling_volume_correlation(closes, volumes, period)

        assert len(correlation) == len(closes) - period + 1
        for k in range(len(correlation)):
            window_v = volumes[k:k + period]
            window_p = closes[k:k + period]
            assert avg_volume[k] == pytest.approx(np.mean(window_v))
            assert correlation[k] == pytest.approx(np.corrcoef(window_v, window_p)[0, 1])

    def test_perfect_positive_correlation(self):
        closes = [1, 3, 2, 5, 4, 6]
        volumes = [2 * c for c in closes]

        _, correlation = rolling_volume_correlation(closes, volumes, 3)

        assert correlation.tolist() == pytest.approx([1.0] * 4)

    def test_constant_volume_has_zero_correlation(self):
        _, correlation = rolling_volume_correlation([1, 2, 3, 4], [100] * 4, 2)

        assert correlation.tolist() == [0.0, 0.0, 0.0]

    def test_insufficient_or_mismatched(self):
        assert rolling_volume_correlation([1, 2], [1, 2], 3) is None
        assert rolling_volume_correlation([1, 2, 3], [1, 2], 2) is None


class TestSampleStd:
    def test_constant_series_is_exactly_zero(self):
        assert sample_std([101.3] * 25) == 0.0

    def test_uses_n_minus_one(self):
        assert sample_std([1, 2, 3]) == pytest.approx(1.0)

    def test_single_point(self):
        assert sample_std([1]) is None
