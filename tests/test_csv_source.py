"""Tests for the CSV-backed time-series source."""

from datetime import datetime

import pandas as pd
import pytest

from stockscope.services.base import DataSourceError
from stockscope.services.data_ingestion import CsvTimeSeriesSource, TimeSeriesService
from stockscope.services.data_ingestion.csv_source import (
    coerce_numeric,
    normalize_header,
    parse_time_series,
)

PRICES = """Date,Open,High,Low,Close,Prev Close,Volume,Sector,Company,Sentiment
2024-01-03,101,103,100,"1,102.5",101,"12,000",IT,Tata Consultancy,bullish note
2024-01-01,99,101,98,100,,10000,IT,Tata Consultancy,
2024-01-02,100,102,99,abc,100,11000,IT,Tata Consultancy,
not a date,100,102,99,105,100,11000,IT,Tata Consultancy,
2024-01-04,102,104,101,104,1102.5,,IT,Tata Consultancy,Sell rating
"""

MANIFEST = """Ticker,Company,Industry
TCS,Tata Consultancy Services,IT
,Blank Row,IT
INFY,Infosys,IT
"""


@pytest.fixture
def data_dir(tmp_path):
    scrip = tmp_path / "scrip"
    scrip.mkdir()
    (scrip / "TCS.csv").write_text(PRICES)
    (scrip / "BROKEN.csv").write_text("")
    manifest = tmp_path / "manifest.csv"
    manifest.write_text(MANIFEST)
    return tmp_path


@pytest.fixture
def csv_source(data_dir):
    return CsvTimeSeriesSource(str(data_dir / "scrip"), str(data_dir / "manifest.csv"))


class TestHelpers:
    def test_normalize_header(self):
        assert normalize_header(" Prev Close ") == "prevclose"
        assert normalize_header("Volume") == "volume"

    def test_coerce_numeric(self):
        result = coerce_numeric(pd.Series(["1,234.5", " 7 ", "n/a", "", "inf"]))

        assert result.iloc[0] == pytest.approx(1234.5)
        assert result.iloc[1] == pytest.approx(7.0)
        assert result.iloc[2:].isna().all()

    def test_missing_close_column(self):
        assert parse_time_series(pd.DataFrame({"date": ["2024-01-01"]})) == []


class TestCsvTimeSeriesSource:
    async def test_rows_normalized_and_sorted(self, csv_source):
        records = await csv_source.load_time_series("TCS")

        assert [r.date for r in records] == [
            datetime(2024, 1, 1),
            datetime(2024, 1, 3),
            datetime(2024, 1, 4),
        ]
        assert [r.close for r in records] == [100.0, 1102.5, 104.0]

    async def test_aliases_and_nulls(self, csv_source):
        first, second, third = await csv_source.load_time_series("TCS")

        assert first.prev_close is None
        assert first.news is None
        assert second.volume == 12000.0
        assert second.name == "Tata Consultancy"
        assert second.sector == "IT"
        assert second.news == "bullish note"
        assert third.volume is None

    async def test_missing_file(self, csv_source):
        with pytest.raises(DataSourceError):
            await csv_source.load_time_series("NOPE")

    async def test_path_traversal_rejected(self, csv_source):
        with pytest.raises(DataSourceError):
            await csv_source.load_time_series("../manifest")

    async def test_manifest(self, csv_source):
        universe = await csv_source.load_symbol_universe()

        assert [m.symbol for m in universe] == ["TCS", "INFY"]
        assert universe[0].name == "Tata Consultancy Services"
        assert universe[0].sector == "IT"


class TestTimeSeriesServiceOverCsv:
    async def test_failures_resolve_to_empty(self, csv_source):
        service = TimeSeriesService(csv_source)

        assert await service.get_time_series("NOPE") == []
        assert await service.get_time_series("BROKEN") == []
        assert await service.get_time_series("../manifest") == []

    async def test_case_insensitive_universe_lookup(self, csv_source):
        service = TimeSeriesService(csv_source)

        meta = await service.find_symbol("infy")

        assert meta.symbol == "INFY"
        assert await service.find_symbol("XYZ") is None
