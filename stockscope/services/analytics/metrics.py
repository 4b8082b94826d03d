"""
Single-symbol metrics over a daily time series.

Every function returns None when the series cannot support the metric.
"""

from typing import Optional, Sequence

import numpy as np

from stockscope.schemas.market import OHLCVRecord, SymbolMeta
from stockscope.services.indicators.calculations import sample_std

POSITIVE_KEYWORDS = ("positive", "bull", "buy")
NEGATIVE_KEYWORDS = ("negative", "bear", "sell")

FUTURE_POTENTIAL_PROFIT = 50
THIRTY_DAY_WINDOW = 30
UNKNOWN_SECTOR = "Unknown"


def _closes(series: Sequence[OHLCVRecord]) -> list[float]:
    return [r.close for r in series if r.close is not None]


def compute_profit_percent(series: Sequence[OHLCVRecord]) -> Optional[float]:
    """(last close - first close) / first close * 100."""
    if len(series) < 2:
        return None
    first = series[0].close
    last = series[-1].close
    if first is None or last is None or first == 0:
        return None
    return (last - first) / first * 100


def compute_window_profit_percent(
    series: Sequence[OHLCVRecord], window: int = THIRTY_DAY_WINDOW
) -> Optional[float]:
    """Profit % over only the last `window` records."""
    return compute_profit_percent(series[-window:])


def compute_volatility(series: Sequence[OHLCVRecord]) -> Optional[float]:
    """Sample standard deviation of closes."""
    return sample_std(_closes(series))


def compute_average_volume(series: Sequence[OHLCVRecord]) -> Optional[float]:
    volumes = [r.volume for r in series if r.volume is not None]
    if not volumes:
        return None
    return float(np.mean(volumes))


def compute_sentiment_signal(series: Sequence[OHLCVRecord]) -> Optional[float]:
    """
    (positive - negative) / (positive + negative) mentions in the news field.

    A text counts once per side when it contains any keyword of that side,
    so one headline may count as both.
    """
    positive = 0
    negative = 0
    for record in series:
        if not record.news:
            continue
        text = record.news.lower()
        if any(keyword in text for keyword in POSITIVE_KEYWORDS):
            positive += 1
        if any(keyword in text for keyword in NEGATIVE_KEYWORDS):
            negative += 1

    if positive + negative == 0:
        return None
    return (positive - negative) / (positive + negative)


def compute_future_potential(
    profit_percent: Optional[float], sentiment_signal: Optional[float]
) -> bool:
    """Strong gain without negative sentiment."""
    if profit_percent is None or profit_percent <= FUTURE_POTENTIAL_PROFIT:
        return False
    return sentiment_signal is None or sentiment_signal >= 0


def resolve_sector(meta: Optional[SymbolMeta], series: Sequence[OHLCVRecord]) -> str:
    """Universe sector, else the first sector embedded in the series, else 'Unknown'."""
    if meta is not None and meta.sector:
        return meta.sector
    for record in series:
        if record.sector:
            return record.sector
    return UNKNOWN_SECTOR
