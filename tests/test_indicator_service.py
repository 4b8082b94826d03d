"""Tests for IndicatorService."""

import asyncio

import pytest

from stockscope.services.cache import IndicatorCache
from stockscope.services.data_ingestion import TimeSeriesService
from stockscope.services.indicators import IndicatorService
from stockscope.services.indicators.analysis import analyze_rsi


class TestIndicatorService:
    async def test_rsi_matches_pure_function(self, indicator_service, source):
        records = await source.load_time_series("TCS")
        expected = analyze_rsi([r.close for r in records], 14)

        result = await indicator_service.compute_rsi("TCS")

        assert result.current == pytest.approx(expected.current)
        assert result.values[-1].date == records[-1].date

    async def test_repeat_request_returns_cached_object(self, indicator_service, source):
        first = await indicator_service.compute_macd("TCS")
        second = await indicator_service.compute_macd("TCS")

        assert first is second
        assert source.loads["TCS"] == 1

    async def test_parameters_are_part_of_the_key(self, indicator_service):
        rsi_14 = await indicator_service.compute_rsi("TCS", 14)
        rsi_7 = await indicator_service.compute_rsi("TCS", 7)

        assert rsi_14 is not rsi_7
        assert rsi_7.period == 7

    async def test_moving_average_period_order_shares_entry(self, indicator_service):
        first = await indicator_service.compute_moving_averages("TCS", (50, 5, 20))
        second = await indicator_service.compute_moving_averages("TCS", (5, 20, 50))

        assert first is second
        assert first.periods == [5, 20, 50]

    async def test_unknown_symbol_gives_none(self, indicator_service):
        assert await indicator_service.compute_rsi("NOPE") is None
        assert await indicator_service.get_technical_indicators("NOPE") is None

    async def test_technical_indicators_bundle(self, indicator_service, source):
        result = await indicator_service.get_technical_indicators("TCS")

        assert result.symbol == "TCS"
        assert result.rsi is not None
        assert result.macd is not None
        assert result.bollinger_bands is not None
        assert result.moving_averages is not None
        assert result.volume_analysis is not None
        assert source.loads["TCS"] == 1

    async def test_short_history_nulls_components(self, make_series, make_source):
        source = make_source({"X": make_series([float(i) for i in range(1, 21)])})
        service = IndicatorService(TimeSeriesService(source), IndicatorCache())

        result = await service.get_technical_indicators("X")

        assert result.rsi is not None
        assert result.macd is None
        assert result.bollinger_bands is not None
        assert result.moving_averages.periods == [5, 10, 20]

    async def test_concurrent_requests_load_once(self, indicator_service, source):
        results = await asyncio.gather(*(indicator_service.compute_rsi("HDFCBANK") for _ in range(4)))

        assert all(r is results[0] for r in results)
        assert source.loads["HDFCBANK"] == 1

    async def test_clear_cache_recomputes(self, indicator_service, source):
        first = await indicator_service.compute_rsi("TCS")

        removed = indicator_service.clear_cache("TCS")
        second = await indicator_service.compute_rsi("TCS")

        assert removed == 1
        assert first is not second
        assert source.loads["TCS"] == 2

    async def test_cache_stats(self, indicator_service):
        await indicator_service.compute_rsi("TCS")
        await indicator_service.compute_bollinger_bands("TCS")

        stats = indicator_service.cache_stats()

        assert stats.size == 2
        assert "TCS_RSI_14" in stats.keys
        assert "TCS_BB_20_2.0" in stats.keys

        indicator_service.clear_all_cache()
        assert indicator_service.cache_stats().size == 0
