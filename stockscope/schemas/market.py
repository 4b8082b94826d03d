"""
CONTRACT 1: Time-Series Source

Input: symbol
Output: ordered list of OHLCVRecord

Records arrive already normalized from the source collaborator
(CSV decoding, column aliasing). The core never mutates them.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class ComparisonTimeframe(str, Enum):
    D7 = "7d"
    D30 = "30d"
    D90 = "90d"


# Trailing record counts for each comparison timeframe
TIMEFRAME_RECORDS = {
    ComparisonTimeframe.D7: 7,
    ComparisonTimeframe.D30: 30,
    ComparisonTimeframe.D90: 90,
}


# =============================================================================
# RECORDS
# =============================================================================


class OHLCVRecord(BaseModel):
    """Single daily candle for a symbol. Only `close` is guaranteed."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: float
    prev_close: Optional[float] = None
    volume: Optional[float] = None
    sector: str = ""
    name: str = ""
    news: Optional[str] = None


class SymbolMeta(BaseModel):
    """Universe entry, read-only lookup input."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1)
    name: str = ""
    sector: str = ""


class OHLCBar(BaseModel):
    """OHLCV bar for charting."""

    date: datetime
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: float
    volume: Optional[float] = None


class OHLCWindow(BaseModel):
    """Date-filtered trailing window of bars for a symbol."""

    symbol: str
    data: list[OHLCBar]
    count: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
