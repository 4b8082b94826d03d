"""
Mock Data Generator

Generates realistic mock daily series for development and testing, and an
in-memory source that serves them.
"""

import random
from datetime import datetime, timedelta
from typing import Optional

from stockscope.schemas.market import OHLCVRecord, SymbolMeta
from stockscope.services.data_ingestion.interface import TimeSeriesSource


# Base prices for common symbols
SYMBOL_BASE_PRICES = {
    "RELIANCE": 2450.0,
    "TCS": 3800.0,
    "INFY": 1500.0,
    "HDFCBANK": 1650.0,
    "ICICIBANK": 1050.0,
    "SBIN": 750.0,
    "ITC": 440.0,
    "TATAMOTORS": 950.0,
    "WIPRO": 480.0,
    "BHARTIARTL": 1150.0,
}

MOCK_UNIVERSE = [
    SymbolMeta(symbol="RELIANCE", name="Reliance Industries Ltd", sector="Oil & Gas"),
    SymbolMeta(symbol="TCS", name="Tata Consultancy Services Ltd", sector="IT"),
    SymbolMeta(symbol="HDFCBANK", name="HDFC Bank Ltd", sector="Banking"),
    SymbolMeta(symbol="INFY", name="Infosys Ltd", sector="IT"),
    SymbolMeta(symbol="ICICIBANK", name="ICICI Bank Ltd", sector="Banking"),
    SymbolMeta(symbol="SBIN", name="State Bank of India", sector="Banking"),
    SymbolMeta(symbol="ITC", name="ITC Ltd", sector="FMCG"),
    SymbolMeta(symbol="TATAMOTORS", name="Tata Motors Ltd", sector="Automobile"),
    SymbolMeta(symbol="WIPRO", name="Wipro Ltd", sector="IT"),
    SymbolMeta(symbol="BHARTIARTL", name="Bharti Airtel Ltd", sector="Telecom"),
]

MOCK_HEADLINES = [
    "Analysts turn bullish after strong quarter",
    "Brokerage reiterates buy rating",
    "Positive outlook on margin expansion",
    "Bearish pressure as input costs rise",
    "Sell-off deepens on weak guidance",
    "Negative surprise in order book",
]


def get_base_price(symbol: str, rng: random.Random) -> float:
    """Get base price for a symbol."""
    return SYMBOL_BASE_PRICES.get(symbol, 100.0 + rng.random() * 1900)


def generate_mock_time_series(
    symbol: str,
    days: int = 250,
    seed: Optional[int] = None,
    sector: str = "",
    name: str = "",
    end_date: Optional[datetime] = None,
    news_probability: float = 0.1,
) -> list[OHLCVRecord]:
    """Generate a random-walk daily series ending at `end_date`."""
    rng = random.Random(seed if seed is not None else symbol)
    if end_date is None:
        end_date = datetime(2024, 12, 31)

    price = get_base_price(symbol, rng)
    drift = rng.uniform(-0.001, 0.002)
    records = []

    for i in range(days):
        date = end_date - timedelta(days=days - 1 - i)
        open_price = price
        close_price = max(0.01, open_price * (1 + drift + rng.gauss(0, 0.015)))
        high = max(open_price, close_price) * (1 + abs(rng.gauss(0, 0.005)))
        low = min(open_price, close_price) * (1 - abs(rng.gauss(0, 0.005)))
        volume = float(int(rng.uniform(100_000, 2_000_000)))
        news = rng.choice(MOCK_HEADLINES) if rng.random() < news_probability else None

        records.append(
            OHLCVRecord(
                date=date,
                open=round(open_price, 2),
                high=round(high, 2),
                low=round(low, 2),
                close=round(close_price, 2),
                prev_close=records[-1].close if records else None,
                volume=volume,
                sector=sector,
                name=name,
                news=news,
            )
        )
        price = close_price

    return records


class InMemoryTimeSeriesSource(TimeSeriesSource):
    """Serves pre-built series; unknown symbols yield an empty list."""

    def __init__(
        self,
        series: dict[str, list[OHLCVRecord]],
        universe: Optional[list[SymbolMeta]] = None,
    ):
        self._series = dict(series)
        if universe is None:
            universe = [SymbolMeta(symbol=symbol) for symbol in self._series]
        self._universe = list(universe)

    async def load_time_series(self, symbol: str) -> list[OHLCVRecord]:
        return list(self._series.get(symbol, []))

    async def load_symbol_universe(self) -> list[SymbolMeta]:
        return list(self._universe)


def build_mock_source(universe_size: int = 40, days: int = 250) -> InMemoryTimeSeriesSource:
    """Mock universe: the named symbols plus generated ones up to `universe_size`."""
    universe = list(MOCK_UNIVERSE[:universe_size])
    sectors = sorted({meta.sector for meta in MOCK_UNIVERSE})
    for i in range(len(universe), universe_size):
        universe.append(
            SymbolMeta(symbol=f"MOCK{i:03d}", name=f"Mock Company {i}", sector=sectors[i % len(sectors)])
        )

    series = {
        meta.symbol: generate_mock_time_series(
            meta.symbol, days=days, sector=meta.sector, name=meta.name
        )
        for meta in universe
    }
    return InMemoryTimeSeriesSource(series, universe)
