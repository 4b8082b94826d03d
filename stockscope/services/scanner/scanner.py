"""
Market Scanner Service

Cross-sectional scans over a bounded prefix of the symbol universe:
top movers, the analytics grid, the sector heatmap and multi-symbol
performance comparison.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from stockscope.core.config import settings
from stockscope.schemas.analytics import (
    RankedSymbol,
    SectorPerformance,
    VolumeVolatility,
    SentimentEffect,
    Fundamentals,
    AnalyticsGrid,
    HeatmapStock,
    SectorRollup,
    PerformanceEntry,
    PerformanceComparison,
)
from stockscope.schemas.market import (
    ComparisonTimeframe,
    TIMEFRAME_RECORDS,
    OHLCVRecord,
    SymbolMeta,
    OHLCBar,
    OHLCWindow,
)
from stockscope.services.base import ValidationError
from stockscope.services.analytics.metrics import (
    THIRTY_DAY_WINDOW,
    compute_profit_percent,
    compute_window_profit_percent,
    compute_volatility,
    compute_average_volume,
    compute_sentiment_signal,
    resolve_sector,
)
from stockscope.services.data_ingestion import TimeSeriesService, get_time_series_service, search_symbols
from stockscope.services.indicators import IndicatorService, get_indicator_service

logger = logging.getLogger(__name__)

Loaded = tuple[SymbolMeta, list[OHLCVRecord]]


class MarketScanner:
    """
    Scans the symbol universe.

    Time-series loads run in batches of `settings.load_concurrency`; a batch
    starts only after the previous one has fully completed. A failed load
    is treated as an empty series and never aborts its siblings.

    Usage:
        scanner = MarketScanner(time_series, indicator_service)
        top = await scanner.compute_top_five()
    """

    def __init__(self, time_series: TimeSeriesService, indicator_service: IndicatorService):
        self._time_series = time_series
        self._indicators = indicator_service

    async def _load_batched(self, metas: Sequence[SymbolMeta]) -> list[Loaded]:
        loaded: list[Loaded] = []
        concurrency = max(1, settings.load_concurrency)

        for i in range(0, len(metas), concurrency):
            batch = metas[i:i + concurrency]
            results = await asyncio.gather(
                *(self._time_series.get_time_series(meta.symbol) for meta in batch),
                return_exceptions=True,
            )
            for meta, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.warning(f"Load failed for {meta.symbol}: {result}")
                    result = []
                loaded.append((meta, result))

        return loaded

    # =========================================================================
    # TOP MOVERS
    # =========================================================================

    async def compute_top_five(self) -> list[RankedSymbol]:
        """Top `settings.top_n` symbols by profit % among the first `top_movers_limit`."""
        universe = await self._time_series.get_universe()
        loaded = await self._load_batched(universe[:settings.top_movers_limit])

        ranked = []
        for meta, series in loaded:
            profit = compute_profit_percent(series)
            if profit is not None:
                ranked.append(RankedSymbol(symbol=meta.symbol, name=meta.name, profit_percent=profit))

        ranked.sort(key=lambda r: r.profit_percent, reverse=True)
        logger.info(f"Top movers scan: {len(ranked)}/{len(loaded)} symbols ranked")
        return ranked[:settings.top_n]

    # =========================================================================
    # ANALYTICS GRID
    # =========================================================================

    async def compute_analytics_grid(self) -> AnalyticsGrid:
        """
        Rankings over up to `analytics_batch_count` sequential chunks of
        `analytics_batch_size` symbols.
        """
        universe = await self._time_series.get_universe()
        size = settings.analytics_batch_size

        loaded: list[Loaded] = []
        for chunk in range(settings.analytics_batch_count):
            metas = universe[chunk * size:(chunk + 1) * size]
            if not metas:
                break
            loaded.extend(await self._load_batched(metas))

        limit = settings.ranking_limit

        # Sector performance
        sector_profits: dict[str, list[float]] = defaultdict(list)
        for meta, series in loaded:
            profit = compute_profit_percent(series)
            if profit is not None:
                sector_profits[resolve_sector(meta, series)].append(profit)

        sector_performance = sorted(
            (
                SectorPerformance(
                    sector=sector,
                    avg_profit_percent=float(np.mean(profits)),
                    count=len(profits),
                )
                for sector, profits in sector_profits.items()
            ),
            key=lambda s: s.avg_profit_percent,
            reverse=True,
        )[:limit]

        # Volume x volatility
        volume_volatility = []
        for meta, series in loaded:
            avg_volume = compute_average_volume(series)
            volatility = compute_volatility(series)
            if avg_volume is not None and volatility is not None:
                volume_volatility.append(
                    VolumeVolatility(symbol=meta.symbol, avg_volume=avg_volume, volatility=volatility)
                )
        volume_volatility.sort(key=lambda v: v.avg_volume * v.volatility, reverse=True)

        # Sentiment x profit
        sentiment_effect = []
        for meta, series in loaded:
            signal = compute_sentiment_signal(series)
            profit = compute_profit_percent(series)
            if signal is not None and profit is not None:
                sentiment_effect.append(
                    SentimentEffect(symbol=meta.symbol, sentiment_signal=signal, profit_percent=profit)
                )
        sentiment_effect.sort(key=lambda s: s.sentiment_signal * s.profit_percent, reverse=True)

        fundamentals = []
        for meta, series in loaded:
            profit = compute_profit_percent(series)
            if profit is not None:
                fundamentals.append(Fundamentals(symbol=meta.symbol, profit_percent=profit))
        fundamentals.sort(key=lambda f: f.profit_percent, reverse=True)

        # 30-day window
        thirty_day = []
        for meta, series in loaded:
            profit = compute_window_profit_percent(series, THIRTY_DAY_WINDOW)
            if profit is not None:
                thirty_day.append(RankedSymbol(symbol=meta.symbol, name=meta.name, profit_percent=profit))

        gainers = sorted(thirty_day, key=lambda r: r.profit_percent, reverse=True)
        losers = sorted(thirty_day, key=lambda r: r.profit_percent)

        logger.info(f"Analytics grid: {len(loaded)} symbols scanned, {len(sector_performance)} sectors")

        return AnalyticsGrid(
            sector_performance=sector_performance,
            volume_volatility=volume_volatility[:limit],
            sentiment_effect=sentiment_effect[:limit],
            fundamentals=fundamentals[:limit],
            thirty_day_gainers=gainers[:settings.top_n],
            thirty_day_losers=losers[:settings.top_n],
        )

    # =========================================================================
    # SECTOR HEATMAP
    # =========================================================================

    async def _heatmap_stock(self, meta: SymbolMeta) -> HeatmapStock:
        series, rsi = await asyncio.gather(
            self._time_series.get_time_series(meta.symbol),
            self._indicators.compute_rsi(meta.symbol),
        )
        return HeatmapStock(
            symbol=meta.symbol,
            sector=meta.sector or "Unknown",
            profit_percent=compute_profit_percent(series),
            volatility=compute_volatility(series),
            rsi=rsi.current if rsi else None,
        )

    async def get_sector_heatmap(self) -> list[SectorRollup]:
        """
        Per-sector averages over the first `heatmap_sample_size` symbols.

        Averages use only members with profit, volatility and RSI all
        present. Sectors without such members are listed with null
        averages and sort last.
        """
        universe = await self._time_series.get_universe()
        sample = universe[:settings.heatmap_sample_size]
        concurrency = max(1, settings.load_concurrency)

        by_sector: dict[str, list[HeatmapStock]] = defaultdict(list)
        for i in range(0, len(sample), concurrency):
            batch = sample[i:i + concurrency]
            results = await asyncio.gather(
                *(self._heatmap_stock(meta) for meta in batch),
                return_exceptions=True,
            )
            for meta, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.warning(f"Heatmap entry failed for {meta.symbol}: {result}")
                    continue
                by_sector[result.sector].append(result)

        rollups = []
        for sector, stocks in by_sector.items():
            valid = [
                s for s in stocks
                if s.profit_percent is not None and s.volatility is not None and s.rsi is not None
            ]
            rollup = SectorRollup(
                sector=sector,
                count=len(valid),
                member_count=len(stocks),
                stocks=stocks,
            )
            if valid:
                rollup.avg_profit_percent = float(np.mean([s.profit_percent for s in valid]))
                rollup.avg_volatility = float(np.mean([s.volatility for s in valid]))
                rollup.avg_rsi = float(np.mean([s.rsi for s in valid]))
            rollups.append(rollup)

        rollups.sort(
            key=lambda r: (r.avg_profit_percent is None, -(r.avg_profit_percent or 0.0))
        )
        return rollups

    # =========================================================================
    # PERFORMANCE COMPARISON
    # =========================================================================

    async def get_performance_comparison(
        self,
        symbols: Sequence[str],
        timeframe: ComparisonTimeframe = ComparisonTimeframe.D30,
    ) -> PerformanceComparison:
        """
        Compare symbols over a trailing window of 7, 30 or 90 records.

        Symbols with fewer than 2 records in the window are left out.

        Raises:
            ValidationError: no symbols, or more than `comparison_max_symbols`
        """
        symbols = [s.strip() for s in symbols if s and s.strip()]
        if not symbols:
            raise ValidationError("MarketScanner", "At least one symbol is required")
        if len(symbols) > settings.comparison_max_symbols:
            raise ValidationError(
                "MarketScanner",
                f"At most {settings.comparison_max_symbols} symbols can be compared",
                {"count": len(symbols)},
            )

        timeframe = ComparisonTimeframe(timeframe)
        window = TIMEFRAME_RECORDS[timeframe]

        series_list = await asyncio.gather(
            *(self._time_series.get_time_series(symbol) for symbol in symbols)
        )

        results = []
        for symbol, series in zip(symbols, series_list):
            relevant = series[-window:]
            profit = compute_profit_percent(relevant)
            if profit is None:
                logger.debug(f"Comparison skipped {symbol}: {len(relevant)} records in window")
                continue
            results.append(
                PerformanceEntry(
                    symbol=symbol,
                    profit_percent=profit,
                    volatility=compute_volatility(relevant),
                    avg_volume=compute_average_volume(relevant),
                    start_price=relevant[0].close,
                    end_price=relevant[-1].close,
                    data_points=len(relevant),
                )
            )

        results.sort(key=lambda r: r.profit_percent, reverse=True)
        return PerformanceComparison(timeframe=timeframe, results=results)

    # =========================================================================
    # OHLC & SEARCH
    # =========================================================================

    async def get_ohlc_data(
        self,
        symbol: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
    ) -> Optional[OHLCWindow]:
        """Trailing `limit` bars inside [start_date, end_date]; None when the symbol has no data."""
        series = await self._time_series.get_time_series(symbol)
        if not series:
            return None

        filtered = [
            r for r in series
            if (start_date is None or r.date >= start_date)
            and (end_date is None or r.date <= end_date)
        ]
        bars = [
            OHLCBar(date=r.date, open=r.open, high=r.high, low=r.low, close=r.close, volume=r.volume)
            for r in (filtered[-limit:] if limit > 0 else [])
        ]

        return OHLCWindow(
            symbol=symbol,
            data=bars,
            count=len(bars),
            start_date=bars[0].date if bars else None,
            end_date=bars[-1].date if bars else None,
        )

    async def search(self, query: str) -> list[SymbolMeta]:
        universe = await self._time_series.get_universe()
        return search_symbols(universe, query, settings.search_limit)


# Singleton instance
_scanner_instance: Optional[MarketScanner] = None


def get_scanner() -> MarketScanner:
    """Get or create scanner instance."""
    global _scanner_instance
    if _scanner_instance is None:
        _scanner_instance = MarketScanner(get_time_series_service(), get_indicator_service())
    return _scanner_instance
