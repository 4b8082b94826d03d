"""
Indicator Engine Service

CONTRACT:
    Input:  symbol (daily closes and volumes via the time-series service)
    Output: TechnicalIndicatorsOutput

RESPONSIBILITIES:
    - RSI with Wilder smoothing
    - MACD with index-aligned fast/slow EMAs
    - Bollinger Bands with squeeze detection
    - SMA/EMA per period with golden/death crosses
    - Rolling volume/price correlation and volume spikes
    - Memoize results per (symbol, indicator, parameters)

Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from stockscope.services.indicators.interface import IndicatorServiceInterface
from stockscope.services.indicators.service import IndicatorService, get_indicator_service
from stockscope.services.indicators.crossover import detect_crossover

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
    "detect_crossover",
]
