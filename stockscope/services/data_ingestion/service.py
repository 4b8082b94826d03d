"""
Time-Series Service Implementation

Wraps a TimeSeriesSource with a process-lifetime cache and the tolerant
failure mode the analytics rely on: a missing file, an unreadable CSV or
any other source failure resolves to an empty series, never an exception.
"""

import asyncio
import logging
from typing import Optional

from stockscope.core.config import settings
from stockscope.schemas.market import OHLCVRecord, SymbolMeta
from stockscope.services.base import BaseService, DataSourceError
from stockscope.services.data_ingestion.interface import TimeSeriesSource

logger = logging.getLogger(__name__)


class TimeSeriesService(BaseService[str, list[OHLCVRecord]]):
    """
    Time-Series Service.

    Concurrent requests for one symbol share a single in-flight load.
    Non-empty series are cached until cleared; empty ones are not, so a
    later request retries the source.
    """

    def __init__(self, source: TimeSeriesSource):
        self._source = source
        self._series: dict[str, list[OHLCVRecord]] = {}
        self._in_flight: dict[str, asyncio.Task] = {}
        self._universe: Optional[list[SymbolMeta]] = None
        self._universe_lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return "TimeSeriesService"

    @property
    def source(self) -> TimeSeriesSource:
        return self._source

    async def execute(self, input_data: str) -> list[OHLCVRecord]:
        return await self.get_time_series(input_data)

    async def get_time_series(self, symbol: str) -> list[OHLCVRecord]:
        """Ordered records for a symbol; [] when the source has none."""
        cached = self._series.get(symbol)
        if cached is not None:
            return cached

        task = self._in_flight.get(symbol)
        if task is None:
            task = asyncio.ensure_future(self._load(symbol))
            self._in_flight[symbol] = task
            task.add_done_callback(lambda _: self._in_flight.pop(symbol, None))

        return await asyncio.shield(task)

    async def _load(self, symbol: str) -> list[OHLCVRecord]:
        try:
            records = await self._source.load_time_series(symbol)
        except DataSourceError as e:
            logger.warning(f"No time series for {symbol}: {e.message}")
            return []
        except Exception as e:
            logger.warning(f"Failed to load time series for {symbol}: {e}")
            return []

        if records:
            self._series[symbol] = records
        else:
            logger.debug(f"Empty time series for {symbol}")
        return records

    async def get_universe(self) -> list[SymbolMeta]:
        """Symbol universe, loaded once and cached."""
        if self._universe is not None:
            return self._universe

        async with self._universe_lock:
            if self._universe is not None:
                return self._universe
            try:
                universe = await self._source.load_symbol_universe()
            except DataSourceError as e:
                logger.warning(f"Symbol universe unavailable: {e.message}")
                return []
            except Exception as e:
                logger.warning(f"Failed to load symbol universe: {e}")
                return []

            if universe:
                self._universe = universe
            return universe

    async def find_symbol(self, symbol: str) -> Optional[SymbolMeta]:
        """Case-insensitive universe lookup."""
        wanted = symbol.strip().lower()
        for meta in await self.get_universe():
            if meta.symbol.lower() == wanted:
                return meta
        return None

    def clear(self, symbol: str) -> None:
        self._series.pop(symbol, None)

    def clear_all(self) -> None:
        self._series.clear()
        self._universe = None

    def cached_symbols(self) -> list[str]:
        return list(self._series)

    async def health_check(self) -> bool:
        return bool(await self.get_universe())


def build_source() -> TimeSeriesSource:
    """Source selected by settings.data_source."""
    if settings.data_source == "mock":
        from stockscope.services.data_ingestion.mock_data import build_mock_source

        return build_mock_source(settings.mock_universe_size, settings.mock_history_days)

    from stockscope.services.data_ingestion.csv_source import CsvTimeSeriesSource

    return CsvTimeSeriesSource(settings.data_root, settings.manifest_path)


# Singleton instance
_service_instance: Optional[TimeSeriesService] = None


def get_time_series_service() -> TimeSeriesService:
    """Get or create time-series service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = TimeSeriesService(build_source())
    return _service_instance
