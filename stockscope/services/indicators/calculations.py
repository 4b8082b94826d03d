"""
Technical Indicator Calculations

Pure NumPy implementations of the indicator primitives.
Each function returns compact arrays (no NaN padding): output element k
belongs to input position `offset + k`, where the offset is documented per
function. Insufficient input yields an empty array or None, never an error.
"""

import math
import numpy as np
from typing import Optional, Sequence
from numpy.lib.stride_tricks import sliding_window_view


def _as_array(data: Sequence[float]) -> np.ndarray:
    return np.asarray(data, dtype=float)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: Sequence[float], period: int) -> np.ndarray:
    """
    Simple Moving Average.

    One value per window of `period` consecutive elements;
    length is len(data) - period + 1, offset period - 1.
    """
    values = _as_array(data)
    if period < 1 or len(values) < period:
        return np.array([], dtype=float)
    return sliding_window_view(values, period).mean(axis=1)


def ema(data: Sequence[float], period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the simple average of the first `period` elements;
    length is len(data) - period + 1, offset period - 1.
    """
    values = _as_array(data)
    if period < 1 or len(values) < period:
        return np.array([], dtype=float)

    multiplier = 2 / (period + 1)
    result = np.empty(len(values) - period + 1)

    # Start with SMA
    result[0] = np.mean(values[:period])

    for i in range(1, len(result)):
        result[i] = values[period - 1 + i] * multiplier + result[i - 1] * (1 - multiplier)

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    # No losses in the window: RS is infinite and RSI saturates at 100
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(
    closes: Sequence[float], period: int = 14
) -> Optional[tuple[np.ndarray, np.ndarray, np.ndarray]]:
    """
    Relative Strength Index with Wilder smoothing.

    Returns: (rsi, avg_gain, avg_loss), offset `period`, or None when
    len(closes) < period + 1.
    """
    prices = _as_array(closes)
    if period < 1 or len(prices) < period + 1:
        return None

    deltas = np.diff(prices)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # First average
    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    count = len(deltas) - period + 1
    values = np.empty(count)
    avg_gains = np.empty(count)
    avg_losses = np.empty(count)

    values[0] = _rsi_value(avg_gain, avg_loss)
    avg_gains[0] = avg_gain
    avg_losses[0] = avg_loss

    # Subsequent values use smoothed averages
    for k, i in enumerate(range(period, len(deltas)), start=1):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        values[k] = _rsi_value(avg_gain, avg_loss)
        avg_gains[k] = avg_gain
        avg_losses[k] = avg_loss

    return values, avg_gains, avg_losses


def macd(
    closes: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> Optional[tuple[np.ndarray, np.ndarray, np.ndarray]]:
    """
    MACD (Moving Average Convergence Divergence).

    The fast EMA is truncated to the slow EMA's tail before subtraction so
    both operands refer to the same closes. The signal line and histogram
    are tail-aligned with the MACD line.

    Returns: (macd_line, signal_line, histogram) or None when
    len(closes) < slow_period + signal_period.
    """
    if min(fast_period, slow_period, signal_period) < 1:
        return None
    if len(closes) < slow_period + signal_period:
        return None

    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    aligned = min(len(fast_ema), len(slow_ema))
    macd_line = fast_ema[-aligned:] - slow_ema[-aligned:]

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)
    if len(signal_line) == 0:
        return None

    histogram = macd_line[-len(signal_line):] - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: Sequence[float], period: int = 20, std_dev: float = 2.0
) -> Optional[tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]]:
    """
    Bollinger Bands over every full window, offset period - 1.

    Standard deviation is the population value of each window.

    Returns: (middle, std, upper, lower, bandwidth) or None when
    len(closes) < period.
    """
    prices = _as_array(closes)
    if period < 1 or len(prices) < period:
        return None

    windows = sliding_window_view(prices, period)
    middle = windows.mean(axis=1)
    std = windows.std(axis=1)

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    with np.errstate(divide="ignore", invalid="ignore"):
        bandwidth = (upper - lower) / middle

    return middle, std, upper, lower, bandwidth


# =============================================================================
# VOLUME INDICATORS
# =============================================================================


def rolling_volume_correlation(
    closes: Sequence[float], volumes: Sequence[float], period: int = 20
) -> Optional[tuple[np.ndarray, np.ndarray]]:
    """
    Rolling average volume and Pearson volume/price correlation.

    Keeps running sums of volume, price, volume*price, volume^2 and price^2
    over the window, adding the newest element and dropping the oldest, so
    each step costs O(1). A zero (or rounding-negative) denominator gives a
    correlation of 0.

    Returns: (avg_volume, correlation), offset period - 1, or None when
    fewer than `period` pairs are supplied.
    """
    if period < 1 or len(closes) != len(volumes) or len(closes) < period:
        return None

    prices = _as_array(closes).tolist()
    vols = _as_array(volumes).tolist()

    count = len(prices) - period + 1
    avg_volume = np.empty(count)
    correlation = np.empty(count)

    volume_sum = 0.0
    price_sum = 0.0
    volume_price_sum = 0.0
    volume_squared_sum = 0.0
    price_squared_sum = 0.0

    for i, (price, volume) in enumerate(zip(prices, vols)):
        volume_sum += volume
        price_sum += price
        volume_price_sum += volume * price
        volume_squared_sum += volume * volume
        price_squared_sum += price * price

        if i < period - 1:
            continue

        k = i - period + 1
        avg_volume[k] = volume_sum / period

        numerator = (period * volume_price_sum) - (volume_sum * price_sum)
        spread = (
            ((period * volume_squared_sum) - (volume_sum * volume_sum))
            * ((period * price_squared_sum) - (price_sum * price_sum))
        )
        correlation[k] = numerator / math.sqrt(spread) if spread > 0 else 0.0

        # Drop the oldest pair before the window advances
        old_price = prices[k]
        old_volume = vols[k]
        volume_sum -= old_volume
        price_sum -= old_price
        volume_price_sum -= old_volume * old_price
        volume_squared_sum -= old_volume * old_volume
        price_squared_sum -= old_price * old_price

    return avg_volume, correlation


# =============================================================================
# STATISTICS
# =============================================================================


def sample_std(data: Sequence[float]) -> Optional[float]:
    """Sample standard deviation (n - 1 denominator); None below 2 points."""
    values = _as_array(data)
    if len(values) < 2:
        return None
    # Shifting by the first value keeps a constant series at exactly 0
    return float(np.std(values - values[0], ddof=1))
