"""Endpoint tests over an in-memory universe."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from stockscope.api.v1.endpoints import indicators as indicator_endpoints
from stockscope.api.v1.endpoints import market as market_endpoints
from stockscope.api.v1.endpoints import scanner as scanner_endpoints
from stockscope.main import app


@pytest_asyncio.fixture
async def client(monkeypatch, time_series, indicator_service, analytics_service, scanner):
    """HTTP client with services wired to the in-memory source."""
    monkeypatch.setattr(indicator_endpoints, "get_indicator_service", lambda: indicator_service)
    monkeypatch.setattr(market_endpoints, "get_analytics_service", lambda: analytics_service)
    monkeypatch.setattr(market_endpoints, "get_time_series_service", lambda: time_series)
    monkeypatch.setattr(market_endpoints, "get_scanner", lambda: scanner)
    monkeypatch.setattr(scanner_endpoints, "get_scanner", lambda: scanner)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestMarketEndpoints:
    async def test_search(self, client):
        response = await client.get("/api/v1/market/search", params={"query": "tata"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["results"][0]["symbol"] == "TCS"

    async def test_search_without_query(self, client):
        response = await client.get("/api/v1/market/search")

        assert response.json()["results"] == []

    async def test_sectors(self, client):
        response = await client.get("/api/v1/market/sectors")

        assert response.json()["sectors"] == ["Banking", "IT"]

    async def test_stock_analytics(self, client):
        response = await client.get("/api/v1/market/stock/tcs")

        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "TCS"
        assert len(data["sample"]) == 30
        assert "profit_percent" in data["metrics"]

    async def test_stock_not_found(self, client):
        response = await client.get("/api/v1/market/stock/NOPE")

        assert response.status_code == 404

    async def test_ohlc(self, client):
        response = await client.get("/api/v1/market/TCS/ohlc", params={"limit": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 10
        assert data["symbol"] == "TCS"


class TestIndicatorEndpoints:
    async def test_all_indicators(self, client):
        response = await client.get("/api/v1/indicators/TCS")

        assert response.status_code == 200
        data = response.json()
        assert data["rsi"]["period"] == 14
        assert data["macd"]["slow_period"] == 26
        assert len(data["bollinger_bands"]["bands"]) == 50

    async def test_unknown_symbol(self, client):
        response = await client.get("/api/v1/indicators/NOPE")

        assert response.status_code == 404

    async def test_rsi_with_period(self, client):
        response = await client.get("/api/v1/indicators/tcs/rsi", params={"period": 7})

        assert response.status_code == 200
        assert response.json()["period"] == 7

    async def test_insufficient_history_is_404(self, client):
        response = await client.get("/api/v1/indicators/TCS/rsi", params={"period": 200})

        assert response.status_code == 404

    async def test_macd_rejects_inverted_periods(self, client):
        response = await client.get(
            "/api/v1/indicators/TCS/macd", params={"fast_period": 30, "slow_period": 10}
        )

        assert response.status_code == 400

    async def test_moving_averages(self, client):
        response = await client.get(
            "/api/v1/indicators/TCS/moving-averages", params={"periods": "20,5"}
        )

        assert response.status_code == 200
        assert response.json()["periods"] == [5, 20]

    async def test_moving_averages_bad_periods(self, client):
        response = await client.get(
            "/api/v1/indicators/TCS/moving-averages", params={"periods": "5,x"}
        )

        assert response.status_code == 400

    async def test_bollinger_and_volume(self, client):
        bollinger = await client.get("/api/v1/indicators/TCS/bollinger")
        volume = await client.get("/api/v1/indicators/TCS/volume")

        assert bollinger.status_code == 200
        assert volume.status_code == 200
        assert volume.json()["period"] == 20

    async def test_cache_lifecycle(self, client):
        await client.get("/api/v1/indicators/TCS/rsi")

        stats = (await client.get("/api/v1/indicators/cache")).json()
        assert stats["size"] == 1
        assert stats["keys"] == ["TCS_RSI_14"]

        cleared = (await client.delete("/api/v1/indicators/cache/tcs")).json()
        assert cleared["removed"] == 1

        await client.get("/api/v1/indicators/TCS/rsi")
        await client.delete("/api/v1/indicators/cache")
        stats = (await client.get("/api/v1/indicators/cache")).json()
        assert stats["size"] == 0


class TestScannerEndpoints:
    async def test_top_five(self, client):
        response = await client.get("/api/v1/scanner/top-five")

        assert response.status_code == 200
        assert len(response.json()["results"]) == 2

    async def test_analytics_grid(self, client):
        response = await client.get("/api/v1/scanner/analytics")

        assert response.status_code == 200
        sectors = {s["sector"] for s in response.json()["sector_performance"]}
        assert sectors == {"IT", "Banking"}

    async def test_sector_heatmap(self, client):
        response = await client.get("/api/v1/scanner/sector-heatmap")

        assert response.status_code == 200
        assert {r["sector"] for r in response.json()} == {"IT", "Banking"}

    async def test_compare(self, client):
        response = await client.get(
            "/api/v1/scanner/compare", params={"symbols": "tcs,HDFCBANK", "timeframe": "7d"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["timeframe"] == "7d"
        assert all(r["data_points"] == 7 for r in data["results"])

    @pytest.mark.parametrize("timeframe", ["1y", "7"])
    async def test_compare_invalid_timeframe(self, client, timeframe):
        response = await client.get(
            "/api/v1/scanner/compare", params={"symbols": "TCS", "timeframe": timeframe}
        )

        assert response.status_code == 422

    async def test_compare_too_many_symbols(self, client):
        symbols = ",".join(f"S{i}" for i in range(11))

        response = await client.get("/api/v1/scanner/compare", params={"symbols": symbols})

        assert response.status_code == 400
