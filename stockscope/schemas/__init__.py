"""
StockScope Schema Contracts

This module defines all JSON contracts between system components.
"""

from stockscope.schemas.market import (
    ComparisonTimeframe,
    OHLCVRecord,
    SymbolMeta,
    OHLCBar,
    OHLCWindow,
)
from stockscope.schemas.indicators import (
    IndicatorKind,
    CrossoverType,
    CrossoverEvent,
    RSIResult,
    MACDResult,
    BollingerBandsResult,
    MovingAveragesResult,
    VolumeAnalysisResult,
    TechnicalIndicatorsOutput,
    CacheStats,
)
from stockscope.schemas.analytics import (
    StockMetrics,
    StockAnalytics,
    RankedSymbol,
    AnalyticsGrid,
    SectorRollup,
    PerformanceComparison,
)

__all__ = [
    # Market
    "ComparisonTimeframe",
    "OHLCVRecord",
    "SymbolMeta",
    "OHLCBar",
    "OHLCWindow",
    # Indicators
    "IndicatorKind",
    "CrossoverType",
    "CrossoverEvent",
    "RSIResult",
    "MACDResult",
    "BollingerBandsResult",
    "MovingAveragesResult",
    "VolumeAnalysisResult",
    "TechnicalIndicatorsOutput",
    "CacheStats",
    # Analytics
    "StockMetrics",
    "StockAnalytics",
    "RankedSymbol",
    "AnalyticsGrid",
    "SectorRollup",
    "PerformanceComparison",
]
