"""
CONTRACT 2: Indicator Engine

Input: closing prices (and volumes) for a symbol
Output: one result object per indicator kind

Every point is anchored by `index`, its position in the close series it was
computed from, plus the record date when one was supplied.
Values are full precision; rounding is a presentation concern.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorKind(str, Enum):
    RSI = "RSI"
    MACD = "MACD"
    BOLLINGER = "BB"
    MOVING_AVERAGES = "MA"
    VOLUME = "VOLUME"


class CrossoverType(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"


# =============================================================================
# SHARED
# =============================================================================


class CrossoverEvent(BaseModel):
    """Two series inverted their relative order on the latest point."""

    type: CrossoverType
    index: int = Field(..., ge=0)
    date: Optional[datetime] = None


# =============================================================================
# RSI
# =============================================================================


class RSIPoint(BaseModel):
    index: int
    date: Optional[datetime] = None
    value: float = Field(..., ge=0, le=100)
    avg_gain: float
    avg_loss: float


class RSIResult(BaseModel):
    """Relative Strength Index with overbought/oversold counts."""

    period: int
    values: list[RSIPoint]
    current: Optional[float] = None
    overbought: int = Field(..., ge=0, description="Points above 70")
    oversold: int = Field(..., ge=0, description="Points below 30")


# =============================================================================
# MACD
# =============================================================================


class MACDPoint(BaseModel):
    index: int
    date: Optional[datetime] = None
    macd: float
    signal: Optional[float] = None
    histogram: Optional[float] = None


class MACDSnapshot(BaseModel):
    macd: float
    signal: float
    histogram: float


class MACDResult(BaseModel):
    """MACD line, signal line and histogram (trailing 30 each)."""

    fast_period: int
    slow_period: int
    signal_period: int
    macd_line: list[float]
    signal_line: list[float]
    histogram: list[float]
    points: list[MACDPoint]
    current: MACDSnapshot
    crossover: Optional[CrossoverEvent] = None


# =============================================================================
# BOLLINGER BANDS
# =============================================================================


class BollingerBand(BaseModel):
    index: int
    date: Optional[datetime] = None
    sma: float
    upper_band: float
    lower_band: float
    standard_deviation: float
    bandwidth: float
    squeeze: bool


class BollingerBandsResult(BaseModel):
    """Bollinger Bands over the trailing 50 windows."""

    period: int
    std_dev: float
    bands: list[BollingerBand]
    current: Optional[BollingerBand] = None
    squeeze_count: int = Field(..., ge=0)
    avg_bandwidth: float = Field(..., description="Mean over all computed windows")


# =============================================================================
# MOVING AVERAGES
# =============================================================================


class MovingAverageSeries(BaseModel):
    period: int
    sma: list[float]
    ema: list[float]
    current_sma: float
    current_ema: float


class MovingAverageCrossover(BaseModel):
    short_period: int
    long_period: int
    type: CrossoverType
    index: int
    date: Optional[datetime] = None


class MovingAveragesResult(BaseModel):
    """SMA/EMA per period plus golden/death crosses between adjacent periods."""

    periods: list[int]
    moving_averages: dict[int, MovingAverageSeries]
    crossovers: list[MovingAverageCrossover]
    golden_cross: Optional[MovingAverageCrossover] = None
    death_cross: Optional[MovingAverageCrossover] = None


# =============================================================================
# VOLUME
# =============================================================================


class VolumePoint(BaseModel):
    index: int
    date: Optional[datetime] = None
    close: float
    volume: float
    avg_volume: float
    correlation: float = Field(..., description="Pearson volume/price over the window")
    is_volume_spike: bool
    volume_price_ratio: Optional[float] = None


class VolumeAnalysisResult(BaseModel):
    """Rolling volume/price correlation with spike detection."""

    period: int
    analysis: list[VolumePoint]
    current: Optional[VolumePoint] = None
    volume_spikes: int = Field(..., ge=0)
    avg_correlation: float


# =============================================================================
# OUTPUT: TechnicalIndicatorsOutput
# =============================================================================


class TechnicalIndicatorsOutput(BaseModel):
    """
    All indicators for one symbol.
    Each component is null when history is too short for it.
    """

    symbol: str
    rsi: Optional[RSIResult] = None
    macd: Optional[MACDResult] = None
    bollinger_bands: Optional[BollingerBandsResult] = None
    moving_averages: Optional[MovingAveragesResult] = None
    volume_analysis: Optional[VolumeAnalysisResult] = None


class CacheStats(BaseModel):
    size: int
    keys: list[str]
