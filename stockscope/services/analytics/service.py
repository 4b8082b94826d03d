"""
Single-Symbol Analytics Service

Profit, volatility, average volume, sentiment and the future-potential flag
for one symbol of the universe.
"""

import logging
from typing import Optional

from stockscope.schemas.analytics import StockAnalytics, StockMetrics
from stockscope.services.base import BaseService
from stockscope.services.data_ingestion import TimeSeriesService, get_time_series_service
from stockscope.services.analytics.metrics import (
    THIRTY_DAY_WINDOW,
    compute_profit_percent,
    compute_window_profit_percent,
    compute_volatility,
    compute_average_volume,
    compute_sentiment_signal,
    compute_future_potential,
    resolve_sector,
)

logger = logging.getLogger(__name__)


class AnalyticsService(BaseService[str, Optional[StockAnalytics]]):
    """
    Analytics Service.

    Usage:
        service = AnalyticsService(time_series)
        analytics = await service.load_stock_analytics("tcs")
    """

    def __init__(self, time_series: TimeSeriesService):
        self._time_series = time_series

    @property
    def name(self) -> str:
        return "AnalyticsService"

    async def execute(self, input_data: str) -> Optional[StockAnalytics]:
        return await self.load_stock_analytics(input_data)

    async def load_stock_analytics(self, symbol: str) -> Optional[StockAnalytics]:
        """
        Analytics for a symbol matched case-insensitively against the universe.

        Returns None when the symbol is not in the universe or has no
        readable time series.
        """
        meta = await self._time_series.find_symbol(symbol)
        if meta is None:
            logger.debug(f"Symbol not in universe: {symbol}")
            return None

        series = await self._time_series.get_time_series(meta.symbol)
        if not series:
            logger.debug(f"No time series for {meta.symbol}")
            return None

        profit_percent = compute_profit_percent(series)
        sentiment_signal = compute_sentiment_signal(series)

        return StockAnalytics(
            symbol=meta.symbol,
            name=meta.name,
            sector=resolve_sector(meta, series),
            metrics=StockMetrics(
                profit_percent=profit_percent,
                profit_percent_30d=compute_window_profit_percent(series, THIRTY_DAY_WINDOW),
                volatility=compute_volatility(series),
                avg_volume=compute_average_volume(series),
                sentiment_signal=sentiment_signal,
            ),
            future_potential=compute_future_potential(profit_percent, sentiment_signal),
            sample=series[-THIRTY_DAY_WINDOW:],
            timeseries=series,
        )

    async def health_check(self) -> bool:
        return True


# Singleton instance
_service_instance: Optional[AnalyticsService] = None


def get_analytics_service() -> AnalyticsService:
    """Get or create analytics service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AnalyticsService(get_time_series_service())
    return _service_instance
