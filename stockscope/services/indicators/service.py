"""
Indicator Engine Service Implementation

Loads a symbol's closes through the time-series service, computes
indicators with the pure functions in `analysis` and memoizes the results
in the indicator cache.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence

from stockscope.schemas.indicators import (
    IndicatorKind,
    RSIResult,
    MACDResult,
    BollingerBandsResult,
    MovingAveragesResult,
    VolumeAnalysisResult,
    TechnicalIndicatorsOutput,
    CacheStats,
)
from stockscope.services.cache import IndicatorCache, get_indicator_cache, serialize_params
from stockscope.services.data_ingestion import TimeSeriesService, get_time_series_service
from stockscope.services.indicators.interface import IndicatorServiceInterface
from stockscope.services.indicators.analysis import (
    DEFAULT_MA_PERIODS,
    analyze_rsi,
    analyze_macd,
    analyze_bollinger_bands,
    analyze_moving_averages,
    analyze_volume,
)

logger = logging.getLogger(__name__)


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Owns its cache; identical (symbol, indicator, parameters) requests
    return the same result object until the cache is cleared.
    """

    def __init__(self, time_series: TimeSeriesService, cache: IndicatorCache):
        self._time_series = time_series
        self._cache = cache

    @property
    def cache(self) -> IndicatorCache:
        return self._cache

    async def execute(self, input_data: str) -> Optional[TechnicalIndicatorsOutput]:
        return await self.get_technical_indicators(input_data)

    async def _cached(
        self,
        symbol: str,
        kind: IndicatorKind,
        params: str,
        compute: Callable[[list], Any],
    ) -> Optional[Any]:
        async def load_and_compute():
            records = await self._time_series.get_time_series(symbol)
            result = compute(records)
            if result is None:
                logger.debug(f"Insufficient data for {kind.value} on {symbol} ({len(records)} records)")
            return result

        return await self._cache.get_or_compute(symbol, kind.value, params, load_and_compute)

    async def compute_rsi(self, symbol: str, period: int = 14) -> Optional[RSIResult]:
        return await self._cached(
            symbol,
            IndicatorKind.RSI,
            serialize_params(period),
            lambda records: analyze_rsi(
                [r.close for r in records], period, [r.date for r in records]
            ),
        )

    async def compute_macd(
        self,
        symbol: str,
        fast_period: int = 12,
        slow_period: int = 26,
        signal_period: int = 9,
    ) -> Optional[MACDResult]:
        return await self._cached(
            symbol,
            IndicatorKind.MACD,
            serialize_params(fast_period, slow_period, signal_period),
            lambda records: analyze_macd(
                [r.close for r in records],
                fast_period,
                slow_period,
                signal_period,
                [r.date for r in records],
            ),
        )

    async def compute_bollinger_bands(
        self, symbol: str, period: int = 20, std_dev: float = 2.0
    ) -> Optional[BollingerBandsResult]:
        return await self._cached(
            symbol,
            IndicatorKind.BOLLINGER,
            serialize_params(period, std_dev),
            lambda records: analyze_bollinger_bands(
                [r.close for r in records], period, std_dev, [r.date for r in records]
            ),
        )

    async def compute_moving_averages(
        self, symbol: str, periods: Sequence[int] = DEFAULT_MA_PERIODS
    ) -> Optional[MovingAveragesResult]:
        periods = tuple(sorted(set(periods)))
        return await self._cached(
            symbol,
            IndicatorKind.MOVING_AVERAGES,
            serialize_params(periods),
            lambda records: analyze_moving_averages(
                [r.close for r in records], periods, [r.date for r in records]
            ),
        )

    async def compute_volume_analysis(
        self, symbol: str, period: int = 20
    ) -> Optional[VolumeAnalysisResult]:
        return await self._cached(
            symbol,
            IndicatorKind.VOLUME,
            serialize_params(period),
            lambda records: analyze_volume(
                [r.close for r in records],
                [r.volume for r in records],
                period,
                [r.date for r in records],
            ),
        )

    async def get_technical_indicators(self, symbol: str) -> Optional[TechnicalIndicatorsOutput]:
        """All indicators with default parameters; None when the symbol has no data."""
        records = await self._time_series.get_time_series(symbol)
        if not records:
            return None

        rsi, macd, bollinger, moving_averages, volume = await asyncio.gather(
            self.compute_rsi(symbol),
            self.compute_macd(symbol),
            self.compute_bollinger_bands(symbol),
            self.compute_moving_averages(symbol),
            self.compute_volume_analysis(symbol),
        )

        return TechnicalIndicatorsOutput(
            symbol=symbol,
            rsi=rsi,
            macd=macd,
            bollinger_bands=bollinger,
            moving_averages=moving_averages,
            volume_analysis=volume,
        )

    def clear_cache(self, symbol: str) -> int:
        """Drop cached indicators and the cached series for a symbol."""
        self._time_series.clear(symbol)
        return self._cache.clear(symbol)

    def clear_all_cache(self) -> None:
        self._time_series.clear_all()
        self._cache.clear_all()

    def cache_stats(self) -> CacheStats:
        return CacheStats(**self._cache.stats())

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService(get_time_series_service(), get_indicator_cache())
    return _service_instance
