"""
Market Scanner API Endpoints

Cross-sectional rankings over the symbol universe.
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from stockscope.schemas.analytics import AnalyticsGrid, PerformanceComparison, SectorRollup
from stockscope.schemas.market import ComparisonTimeframe
from stockscope.services.base import ValidationError
from stockscope.services.scanner import get_scanner

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/top-five")
async def get_top_five():
    """Top five symbols by profit % over their full history."""
    results = await get_scanner().compute_top_five()
    return {"results": results}


@router.get("/analytics", response_model=AnalyticsGrid)
async def get_analytics_grid():
    """
    Sector performance, volume x volatility, sentiment x profit,
    fundamentals and 30-day gainers/losers.
    """
    return await get_scanner().compute_analytics_grid()


@router.get("/sector-heatmap", response_model=list[SectorRollup])
async def get_sector_heatmap():
    """Per-sector profit, volatility and RSI averages."""
    return await get_scanner().get_sector_heatmap()


@router.get("/compare", response_model=PerformanceComparison)
async def compare_performance(
    symbols: str = Query(..., description="Comma-separated symbols (max 10)"),
    timeframe: ComparisonTimeframe = Query(default=ComparisonTimeframe.D30),
):
    """
    Compare symbols over a trailing 7d, 30d or 90d window.

    Example:
    - `/scanner/compare?symbols=TCS,INFY&timeframe=7d`
    """
    symbol_list = [s.strip().upper() for s in symbols.split(",") if s.strip()]
    try:
        return await get_scanner().get_performance_comparison(symbol_list, timeframe)
    except ValidationError as e:
        logger.error(f"Comparison rejected: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)
