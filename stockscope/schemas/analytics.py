"""
CONTRACT 3: Analytics

Single-symbol metrics and cross-sectional aggregates over the universe.
"""

from typing import Optional
from pydantic import BaseModel, Field

from stockscope.schemas.market import ComparisonTimeframe, OHLCVRecord


# =============================================================================
# SINGLE SYMBOL
# =============================================================================


class StockMetrics(BaseModel):
    profit_percent: Optional[float] = None
    profit_percent_30d: Optional[float] = None
    volatility: Optional[float] = Field(default=None, ge=0)
    avg_volume: Optional[float] = None
    sentiment_signal: Optional[float] = Field(default=None, ge=-1, le=1)


class StockAnalytics(BaseModel):
    """
    Analytics for one symbol.
    Returned by: AnalyticsService.load_stock_analytics
    """

    symbol: str
    name: str
    sector: str
    metrics: StockMetrics
    future_potential: bool
    sample: list[OHLCVRecord] = Field(..., description="Last 30 records")
    timeseries: list[OHLCVRecord]


# =============================================================================
# RANKINGS
# =============================================================================


class RankedSymbol(BaseModel):
    symbol: str
    name: str = ""
    profit_percent: float


class SectorPerformance(BaseModel):
    sector: str
    avg_profit_percent: float
    count: int


class VolumeVolatility(BaseModel):
    symbol: str
    avg_volume: float
    volatility: float


class SentimentEffect(BaseModel):
    symbol: str
    sentiment_signal: float
    profit_percent: float


class Fundamentals(BaseModel):
    """Dividend yield and P/E are reserved; no source supplies them yet."""

    symbol: str
    dividend_yield: Optional[float] = None
    pe_ratio: Optional[float] = None
    profit_percent: float


class AnalyticsGrid(BaseModel):
    sector_performance: list[SectorPerformance]
    volume_volatility: list[VolumeVolatility]
    sentiment_effect: list[SentimentEffect]
    fundamentals: list[Fundamentals]
    thirty_day_gainers: list[RankedSymbol]
    thirty_day_losers: list[RankedSymbol]


# =============================================================================
# SECTOR HEATMAP
# =============================================================================


class HeatmapStock(BaseModel):
    symbol: str
    sector: str
    profit_percent: Optional[float] = None
    volatility: Optional[float] = None
    rsi: Optional[float] = None


class SectorRollup(BaseModel):
    """
    Per-sector averages over members with profit, volatility and RSI all set.
    `count` is the number of those valid members; averages stay null when
    there are none.
    """

    sector: str
    avg_profit_percent: Optional[float] = None
    avg_volatility: Optional[float] = None
    avg_rsi: Optional[float] = None
    count: int = Field(..., ge=0)
    member_count: int = Field(..., ge=0)
    stocks: list[HeatmapStock]


# =============================================================================
# PERFORMANCE COMPARISON
# =============================================================================


class PerformanceEntry(BaseModel):
    symbol: str
    profit_percent: float
    volatility: Optional[float] = None
    avg_volume: Optional[float] = None
    start_price: float
    end_price: float
    data_points: int


class PerformanceComparison(BaseModel):
    timeframe: ComparisonTimeframe
    results: list[PerformanceEntry]
