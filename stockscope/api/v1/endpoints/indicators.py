"""
Indicator API Endpoints

Endpoints for technical indicator calculations and the indicator cache.
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from stockscope.schemas.indicators import (
    RSIResult,
    MACDResult,
    BollingerBandsResult,
    MovingAveragesResult,
    VolumeAnalysisResult,
    TechnicalIndicatorsOutput,
    CacheStats,
)
from stockscope.services.indicators import get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_enough_data(symbol: str, indicator: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail=f"Not enough data to compute {indicator} for {symbol}",
    )


def _parse_periods(periods: str) -> list[int]:
    try:
        values = [int(p) for p in periods.split(",") if p.strip()]
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid periods: {periods}")
    if not values or any(p <= 0 for p in values):
        raise HTTPException(status_code=400, detail=f"Invalid periods: {periods}")
    return values


# Cache routes are registered before /{symbol} so "cache" is not read as a symbol.


@router.get("/cache", response_model=CacheStats)
async def get_cache_stats():
    """Indicator cache size and keys."""
    return get_indicator_service().cache_stats()


@router.delete("/cache")
async def clear_all_cache():
    """Drop every cached indicator and time series."""
    get_indicator_service().clear_all_cache()
    logger.info("Indicator cache cleared")
    return {"cleared": "all"}


@router.delete("/cache/{symbol}")
async def clear_symbol_cache(symbol: str):
    """Drop cached indicators for one symbol."""
    symbol = symbol.upper().strip()
    removed = get_indicator_service().clear_cache(symbol)
    return {"cleared": symbol, "removed": removed}


@router.get("/{symbol}", response_model=TechnicalIndicatorsOutput)
async def get_indicators(symbol: str):
    """
    Get complete indicator analysis for a symbol.

    Returns:
        - RSI (14)
        - MACD (12, 26, 9)
        - Bollinger Bands (20, 2)
        - SMA/EMA for 5, 10, 20, 50 with crossovers
        - Volume/price correlation (20)

    Components are null when the history is too short for them.
    """
    symbol = symbol.upper().strip()
    result = await get_indicator_service().get_technical_indicators(symbol)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Data not found for {symbol}")
    return result


@router.get("/{symbol}/rsi", response_model=RSIResult)
async def get_rsi(symbol: str, period: int = Query(default=14, ge=1, le=200)):
    symbol = symbol.upper().strip()
    result = await get_indicator_service().compute_rsi(symbol, period)
    if result is None:
        raise _not_enough_data(symbol, "RSI")
    return result


@router.get("/{symbol}/macd", response_model=MACDResult)
async def get_macd(
    symbol: str,
    fast_period: int = Query(default=12, ge=1, le=200),
    slow_period: int = Query(default=26, ge=1, le=400),
    signal_period: int = Query(default=9, ge=1, le=200),
):
    symbol = symbol.upper().strip()
    if fast_period >= slow_period:
        raise HTTPException(status_code=400, detail="fast_period must be less than slow_period")
    result = await get_indicator_service().compute_macd(symbol, fast_period, slow_period, signal_period)
    if result is None:
        raise _not_enough_data(symbol, "MACD")
    return result


@router.get("/{symbol}/bollinger", response_model=BollingerBandsResult)
async def get_bollinger_bands(
    symbol: str,
    period: int = Query(default=20, ge=2, le=200),
    std_dev: float = Query(default=2.0, ge=0, le=5),
):
    symbol = symbol.upper().strip()
    result = await get_indicator_service().compute_bollinger_bands(symbol, period, std_dev)
    if result is None:
        raise _not_enough_data(symbol, "Bollinger Bands")
    return result


@router.get("/{symbol}/moving-averages", response_model=MovingAveragesResult)
async def get_moving_averages(
    symbol: str,
    periods: str = Query(default="5,10,20,50", description="Comma-separated periods"),
):
    symbol = symbol.upper().strip()
    result = await get_indicator_service().compute_moving_averages(symbol, _parse_periods(periods))
    if result is None:
        raise _not_enough_data(symbol, "moving averages")
    return result


@router.get("/{symbol}/volume", response_model=VolumeAnalysisResult)
async def get_volume_analysis(symbol: str, period: int = Query(default=20, ge=2, le=200)):
    symbol = symbol.upper().strip()
    result = await get_indicator_service().compute_volume_analysis(symbol, period)
    if result is None:
        raise _not_enough_data(symbol, "volume analysis")
    return result
