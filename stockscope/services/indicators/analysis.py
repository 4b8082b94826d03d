"""
Indicator Analysis

Turns the raw arrays from `calculations` into indicator result objects:
trailing windows of anchored points, a current snapshot and per-kind
summary statistics. Every function returns None when history is too short.
"""

import math
from datetime import datetime
from typing import Optional, Sequence
import numpy as np

from stockscope.schemas.indicators import (
    RSIPoint,
    RSIResult,
    MACDPoint,
    MACDSnapshot,
    MACDResult,
    BollingerBand,
    BollingerBandsResult,
    MovingAverageSeries,
    MovingAverageCrossover,
    MovingAveragesResult,
    VolumePoint,
    VolumeAnalysisResult,
    CrossoverType,
)
from stockscope.services.indicators.calculations import (
    sma,
    ema,
    rsi,
    macd,
    bollinger_bands,
    rolling_volume_correlation,
)
from stockscope.services.indicators.crossover import detect_crossover

RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30
SQUEEZE_THRESHOLD = 0.02
VOLUME_SPIKE_MULTIPLIER = 2

# Trailing points reported per indicator
MACD_WINDOW = 30
MOVING_AVERAGE_WINDOW = 30
BOLLINGER_WINDOW = 50
VOLUME_WINDOW = 50

DEFAULT_MA_PERIODS = (5, 10, 20, 50)


def _date_at(dates: Optional[Sequence[datetime]], index: int) -> Optional[datetime]:
    if dates is None or index >= len(dates):
        return None
    return dates[index]


def _is_number(value: Optional[float]) -> bool:
    return value is not None and not math.isnan(value)


# =============================================================================
# RSI
# =============================================================================


def analyze_rsi(
    closes: Sequence[float],
    period: int = 14,
    dates: Optional[Sequence[datetime]] = None,
) -> Optional[RSIResult]:
    """RSI points for the whole series, with overbought/oversold counts."""
    series = rsi(closes, period)
    if series is None:
        return None

    values, avg_gains, avg_losses = series
    points = [
        RSIPoint(
            index=period + k,
            date=_date_at(dates, period + k),
            value=float(value),
            avg_gain=float(gain),
            avg_loss=float(loss),
        )
        for k, (value, gain, loss) in enumerate(zip(values, avg_gains, avg_losses))
    ]

    return RSIResult(
        period=period,
        values=points,
        current=points[-1].value,
        overbought=int(np.sum(values > RSI_OVERBOUGHT)),
        oversold=int(np.sum(values < RSI_OVERSOLD)),
    )


# =============================================================================
# MACD
# =============================================================================


def analyze_macd(
    closes: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
    dates: Optional[Sequence[datetime]] = None,
) -> Optional[MACDResult]:
    """Trailing MACD/signal/histogram and the latest MACD-vs-signal crossover."""
    series = macd(closes, fast_period, slow_period, signal_period)
    if series is None:
        return None

    macd_line, signal_line, histogram = series
    last = len(closes) - 1

    macd_tail = macd_line[-MACD_WINDOW:].tolist()
    signal_tail = signal_line[-MACD_WINDOW:].tolist()
    histogram_tail = histogram[-MACD_WINDOW:].tolist()

    # Signal and histogram start later than the MACD line; pad their heads
    padding = [None] * (len(macd_tail) - len(signal_tail))
    points = []
    for k, (macd_value, signal_value, histogram_value) in enumerate(
        zip(macd_tail, padding + signal_tail, padding + histogram_tail)
    ):
        index = last - (len(macd_tail) - 1 - k)
        points.append(
            MACDPoint(
                index=index,
                date=_date_at(dates, index),
                macd=macd_value,
                signal=signal_value,
                histogram=histogram_value,
            )
        )

    return MACDResult(
        fast_period=fast_period,
        slow_period=slow_period,
        signal_period=signal_period,
        macd_line=macd_tail,
        signal_line=signal_tail,
        histogram=histogram_tail,
        points=points,
        current=MACDSnapshot(
            macd=float(macd_line[-1]),
            signal=float(signal_line[-1]),
            histogram=float(histogram[-1]),
        ),
        crossover=detect_crossover(
            macd_line, signal_line, index=last, date=_date_at(dates, last)
        ),
    )


# =============================================================================
# BOLLINGER BANDS
# =============================================================================


def analyze_bollinger_bands(
    closes: Sequence[float],
    period: int = 20,
    std_dev: float = 2.0,
    dates: Optional[Sequence[datetime]] = None,
) -> Optional[BollingerBandsResult]:
    """Trailing bands with squeeze count and mean bandwidth over all windows."""
    series = bollinger_bands(closes, period, std_dev)
    if series is None:
        return None

    middle, std, upper, lower, bandwidth = series
    squeeze = std < (middle * SQUEEZE_THRESHOLD)

    start = max(0, len(middle) - BOLLINGER_WINDOW)
    bands = [
        BollingerBand(
            index=period - 1 + k,
            date=_date_at(dates, period - 1 + k),
            sma=float(middle[k]),
            upper_band=float(upper[k]),
            lower_band=float(lower[k]),
            standard_deviation=float(std[k]),
            bandwidth=float(bandwidth[k]),
            squeeze=bool(squeeze[k]),
        )
        for k in range(start, len(middle))
    ]

    return BollingerBandsResult(
        period=period,
        std_dev=std_dev,
        bands=bands,
        current=bands[-1],
        squeeze_count=int(np.sum(squeeze)),
        avg_bandwidth=float(np.mean(bandwidth)),
    )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def analyze_moving_averages(
    closes: Sequence[float],
    periods: Sequence[int] = DEFAULT_MA_PERIODS,
    dates: Optional[Sequence[datetime]] = None,
) -> Optional[MovingAveragesResult]:
    """
    SMA/EMA per period plus crossovers between each adjacent pair of
    periods (ascending), compared on their EMA series.
    """
    ordered = sorted({p for p in periods if p >= 1})
    last = len(closes) - 1

    moving_averages: dict[int, MovingAverageSeries] = {}
    full_ema: dict[int, np.ndarray] = {}

    for period in ordered:
        if len(closes) < period:
            continue
        sma_values = sma(closes, period)
        ema_values = ema(closes, period)
        full_ema[period] = ema_values
        moving_averages[period] = MovingAverageSeries(
            period=period,
            sma=sma_values[-MOVING_AVERAGE_WINDOW:].tolist(),
            ema=ema_values[-MOVING_AVERAGE_WINDOW:].tolist(),
            current_sma=float(sma_values[-1]),
            current_ema=float(ema_values[-1]),
        )

    if not moving_averages:
        return None

    crossovers = []
    for short_period, long_period in zip(ordered, ordered[1:]):
        if short_period not in full_ema or long_period not in full_ema:
            continue
        event = detect_crossover(
            full_ema[short_period],
            full_ema[long_period],
            index=last,
            date=_date_at(dates, last),
        )
        if event:
            crossovers.append(
                MovingAverageCrossover(
                    short_period=short_period,
                    long_period=long_period,
                    type=event.type,
                    index=event.index,
                    date=event.date,
                )
            )

    return MovingAveragesResult(
        periods=list(moving_averages),
        moving_averages=moving_averages,
        crossovers=crossovers,
        golden_cross=next((c for c in crossovers if c.type == CrossoverType.BULLISH), None),
        death_cross=next((c for c in crossovers if c.type == CrossoverType.BEARISH), None),
    )


# =============================================================================
# VOLUME
# =============================================================================


def analyze_volume(
    closes: Sequence[float],
    volumes: Sequence[Optional[float]],
    period: int = 20,
    dates: Optional[Sequence[datetime]] = None,
) -> Optional[VolumeAnalysisResult]:
    """
    Rolling volume/price correlation and volume spikes.

    Records without a volume are skipped; points keep the index of the
    record they came from.
    """
    pairs = [
        (i, float(close), float(volume))
        for i, (close, volume) in enumerate(zip(closes, volumes))
        if _is_number(close) and _is_number(volume)
    ]
    if period < 1 or len(pairs) < period:
        return None

    indices = [p[0] for p in pairs]
    prices = [p[1] for p in pairs]
    vols = [p[2] for p in pairs]

    avg_volume, correlation = rolling_volume_correlation(prices, vols, period)
    window_volumes = np.asarray(vols[period - 1:])
    spikes = window_volumes > (avg_volume * VOLUME_SPIKE_MULTIPLIER)

    start = max(0, len(avg_volume) - VOLUME_WINDOW)
    analysis = []
    for k in range(start, len(avg_volume)):
        position = period - 1 + k
        close = prices[position]
        volume = vols[position]
        analysis.append(
            VolumePoint(
                index=indices[position],
                date=_date_at(dates, indices[position]),
                close=close,
                volume=volume,
                avg_volume=float(avg_volume[k]),
                correlation=float(correlation[k]),
                is_volume_spike=bool(spikes[k]),
                volume_price_ratio=volume / close if close else None,
            )
        )

    return VolumeAnalysisResult(
        period=period,
        analysis=analysis,
        current=analysis[-1],
        volume_spikes=int(np.sum(spikes)),
        avg_correlation=float(np.mean(correlation)),
    )
