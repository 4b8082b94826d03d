"""Shared fixtures: in-memory sources and services wired around them."""

from collections import Counter
from datetime import datetime, timedelta
from typing import Optional, Sequence

import pytest

from stockscope.schemas.market import OHLCVRecord, SymbolMeta
from stockscope.services.cache import IndicatorCache
from stockscope.services.data_ingestion import (
    InMemoryTimeSeriesSource,
    TimeSeriesService,
    generate_mock_time_series,
)
from stockscope.services.indicators import IndicatorService
from stockscope.services.analytics import AnalyticsService
from stockscope.services.scanner import MarketScanner

START = datetime(2024, 1, 1)


def build_series(
    closes: Sequence[float],
    volumes: Optional[Sequence[Optional[float]]] = None,
    news: Optional[Sequence[Optional[str]]] = None,
    sector: str = "",
    start: datetime = START,
) -> list[OHLCVRecord]:
    """Daily records with the given closes, one day apart."""
    records = []
    for i, close in enumerate(closes):
        records.append(
            OHLCVRecord(
                date=start + timedelta(days=i),
                open=close,
                high=close,
                low=close,
                close=close,
                volume=volumes[i] if volumes is not None else 1000.0,
                sector=sector,
                news=news[i] if news is not None else None,
            )
        )
    return records


class CountingSource(InMemoryTimeSeriesSource):
    """In-memory source that records how often each symbol is read."""

    def __init__(self, series, universe=None, failing: Sequence[str] = ()):
        super().__init__(series, universe)
        self.loads: Counter = Counter()
        self.universe_loads = 0
        self._failing = set(failing)

    async def load_time_series(self, symbol: str) -> list[OHLCVRecord]:
        self.loads[symbol] += 1
        if symbol in self._failing:
            raise RuntimeError(f"disk error reading {symbol}")
        return await super().load_time_series(symbol)

    async def load_symbol_universe(self) -> list[SymbolMeta]:
        self.universe_loads += 1
        return await super().load_symbol_universe()


@pytest.fixture
def make_series():
    return build_series


@pytest.fixture
def make_source():
    return CountingSource


@pytest.fixture
def ab_source():
    """Two Tech symbols: A gains 21%, B loses 20%."""
    return CountingSource(
        {
            "A": build_series([100, 110, 121]),
            "B": build_series([100, 90, 80]),
        },
        universe=[
            SymbolMeta(symbol="A", name="Alpha", sector="Tech"),
            SymbolMeta(symbol="B", name="Beta", sector="Tech"),
        ],
    )


@pytest.fixture
def mock_source():
    """Two realistic symbols with 120 days of history each."""
    universe = [
        SymbolMeta(symbol="TCS", name="Tata Consultancy Services Ltd", sector="IT"),
        SymbolMeta(symbol="HDFCBANK", name="HDFC Bank Ltd", sector="Banking"),
    ]
    series = {
        meta.symbol: generate_mock_time_series(
            meta.symbol, days=120, seed=7, sector=meta.sector, name=meta.name
        )
        for meta in universe
    }
    return CountingSource(series, universe)


@pytest.fixture
def source(mock_source):
    return mock_source


@pytest.fixture
def time_series(source):
    return TimeSeriesService(source)


@pytest.fixture
def indicator_cache():
    return IndicatorCache()


@pytest.fixture
def indicator_service(time_series, indicator_cache):
    return IndicatorService(time_series, indicator_cache)


@pytest.fixture
def analytics_service(time_series):
    return AnalyticsService(time_series)


@pytest.fixture
def scanner(time_series, indicator_service):
    return MarketScanner(time_series, indicator_service)
