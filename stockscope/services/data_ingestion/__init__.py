"""
Data Ingestion Service

CONTRACT:
    Input:  symbol
    Output: ordered list of OHLCVRecord

RESPONSIBILITIES:
    - Read per-symbol daily CSV files and the universe manifest
    - Normalize column names and coerce values
    - Cache loaded series for the process lifetime
    - Degrade to empty series on any source failure

NO INDICATOR MATH - Pure data loading and transformation.
"""

from stockscope.services.data_ingestion.interface import TimeSeriesSource
from stockscope.services.data_ingestion.csv_source import CsvTimeSeriesSource
from stockscope.services.data_ingestion.mock_data import (
    InMemoryTimeSeriesSource,
    generate_mock_time_series,
)
from stockscope.services.data_ingestion.service import (
    TimeSeriesService,
    get_time_series_service,
)
from stockscope.services.data_ingestion.stock_list import search_symbols

__all__ = [
    "TimeSeriesSource",
    "CsvTimeSeriesSource",
    "InMemoryTimeSeriesSource",
    "generate_mock_time_series",
    "TimeSeriesService",
    "get_time_series_service",
    "search_symbols",
]
