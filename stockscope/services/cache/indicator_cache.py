"""
In-process cache for computed indicator results.

Keys are (symbol, indicator kind, serialized parameters). Entries live for
the process lifetime and are never re-validated against newer data; they
go away only through clear(symbol) or clear_all().

Growth is unbounded by default. Passing `max_entries` switches on LRU
eviction for long-lived deployments.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Optional

from stockscope.core.config import settings

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str, str]


def serialize_params(*params: Any) -> str:
    """Stable string form of indicator parameters, e.g. (12, 26, 9) -> '12_26_9'."""
    parts = []
    for param in params:
        if isinstance(param, (list, tuple)):
            parts.append("_".join(str(p) for p in param))
        else:
            parts.append(str(param))
    return "_".join(parts)


class IndicatorCache:
    """
    Memoizes indicator results per (symbol, kind, params).

    Usage:
        cache = IndicatorCache()
        result = await cache.get_or_compute("TCS", "RSI", "14", compute)
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._max_entries = max_entries
        self._entries: OrderedDict[CacheKey, Any] = OrderedDict()
        self._locks: dict[CacheKey, asyncio.Lock] = {}

    @staticmethod
    def make_key(symbol: str, kind: str, params: str = "") -> CacheKey:
        return (symbol, kind, params)

    def get(self, symbol: str, kind: str, params: str = "") -> Optional[Any]:
        key = self.make_key(symbol, kind, params)
        if key not in self._entries:
            return None
        if self._max_entries is not None:
            self._entries.move_to_end(key)
        return self._entries[key]

    def set(self, symbol: str, kind: str, params: str, value: Any) -> None:
        key = self.make_key(symbol, kind, params)
        self._entries[key] = value
        if self._max_entries is not None:
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted indicator cache entry {self._format_key(evicted)}")

    async def get_or_compute(
        self,
        symbol: str,
        kind: str,
        params: str,
        compute: Callable[[], Awaitable[Optional[Any]]],
    ) -> Optional[Any]:
        """
        Return the cached value, or compute, store and return it.

        Concurrent callers for one key wait on a per-key lock so the
        value is computed at most once. None results are not stored.
        """
        cached = self.get(symbol, kind, params)
        if cached is not None:
            return cached

        key = self.make_key(symbol, kind, params)
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = self.get(symbol, kind, params)
            if cached is not None:
                return cached

            value = await compute()
            if value is not None:
                self.set(symbol, kind, params, value)
            return value

    def clear(self, symbol: str) -> int:
        """Remove every entry for a symbol. Returns the number removed."""
        keys = [key for key in self._entries if key[0] == symbol]
        for key in keys:
            del self._entries[key]
            self._locks.pop(key, None)
        logger.info(f"Cleared {len(keys)} indicator cache entries for {symbol}")
        return len(keys)

    def clear_all(self) -> None:
        self._entries.clear()
        self._locks.clear()
        logger.info("Cleared indicator cache")

    def stats(self) -> dict[str, Any]:
        return {
            "size": len(self._entries),
            "keys": [self._format_key(key) for key in self._entries],
        }

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _format_key(key: CacheKey) -> str:
        return "_".join(part for part in key if part)


# Singleton instance
_cache_instance: Optional[IndicatorCache] = None


def get_indicator_cache() -> IndicatorCache:
    """Get or create the application's indicator cache."""
    global _cache_instance
    if _cache_instance is None:
        _cache_instance = IndicatorCache(max_entries=settings.indicator_cache_max_entries)
    return _cache_instance
