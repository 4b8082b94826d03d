"""
Cache module for StockScope.

Process-lifetime memoization of computed indicator results.
"""

from stockscope.services.cache.indicator_cache import (
    IndicatorCache,
    get_indicator_cache,
    serialize_params,
)

__all__ = [
    "IndicatorCache",
    "get_indicator_cache",
    "serialize_params",
]
