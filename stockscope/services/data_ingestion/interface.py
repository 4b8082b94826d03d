"""
Time-Series Source Interface

Defines the contract for the data sources behind the indicator engine.
"""

from abc import ABC, abstractmethod

from stockscope.schemas.market import OHLCVRecord, SymbolMeta


class TimeSeriesSource(ABC):
    """
    Time-Series Source Contract.

    load_time_series(symbol)
        - Ordered (ascending by date) OHLCV records for the symbol
        - Malformed rows are skipped; records without a close never appear
        - May raise DataSourceError; TimeSeriesService maps that to []

    load_symbol_universe()
        - Every known symbol with its name and sector
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def load_time_series(self, symbol: str) -> list[OHLCVRecord]:
        """Load the full daily history for a symbol."""
        pass

    @abstractmethod
    async def load_symbol_universe(self) -> list[SymbolMeta]:
        """Load the symbol universe."""
        pass
