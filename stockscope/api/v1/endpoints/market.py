"""
Market Data API Endpoints

Symbol search, single-symbol analytics and OHLC windows.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from stockscope.schemas.analytics import StockAnalytics
from stockscope.schemas.market import OHLCWindow
from stockscope.services.analytics import get_analytics_service
from stockscope.services.data_ingestion import get_time_series_service
from stockscope.services.data_ingestion.stock_list import get_sectors
from stockscope.services.scanner import get_scanner

router = APIRouter()


@router.get("/search")
async def search_stocks_endpoint(
    query: str = Query(default="", description="Search query"),
):
    """
    Search stocks by symbol or name.

    Returns matching stocks for autocomplete; an empty query matches nothing.
    """
    if not query.strip():
        return {"query": query, "results": [], "count": 0}

    results = await get_scanner().search(query)
    return {"query": query, "results": results, "count": len(results)}


@router.get("/sectors")
async def get_sectors_endpoint():
    """Get list of sectors in the universe."""
    universe = await get_time_series_service().get_universe()
    return {"sectors": get_sectors(universe)}


@router.get("/stock/{symbol}", response_model=StockAnalytics)
async def get_stock_analytics(symbol: str):
    """
    Profit, volatility, volume and sentiment metrics for one symbol.

    The symbol is matched case-insensitively against the universe.
    """
    result = await get_analytics_service().load_stock_analytics(symbol)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Stock not found: {symbol}")
    return result


@router.get("/{symbol}/ohlc", response_model=OHLCWindow)
async def get_ohlc(
    symbol: str,
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    limit: int = Query(default=100, ge=1, le=5000),
):
    """Trailing OHLCV bars within an optional date range."""
    result = await get_scanner().get_ohlc_data(symbol.upper().strip(), start_date, end_date, limit)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Data not found for {symbol}")
    return result
