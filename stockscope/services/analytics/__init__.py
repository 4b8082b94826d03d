"""
Analytics Service

Single-symbol profit, volatility, volume and sentiment metrics.
"""

from stockscope.services.analytics.service import AnalyticsService, get_analytics_service
from stockscope.services.analytics.metrics import (
    compute_profit_percent,
    compute_window_profit_percent,
    compute_volatility,
    compute_average_volume,
    compute_sentiment_signal,
    compute_future_potential,
    resolve_sector,
)

__all__ = [
    "AnalyticsService",
    "get_analytics_service",
    "compute_profit_percent",
    "compute_window_profit_percent",
    "compute_volatility",
    "compute_average_volume",
    "compute_sentiment_signal",
    "compute_future_potential",
    "resolve_sector",
]
