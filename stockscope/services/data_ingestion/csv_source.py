"""
CSV Time-Series Source

Reads one `<SYMBOL>.csv` per symbol from a data directory plus a manifest
CSV listing the universe. Files are parsed with pandas in a worker thread
so the event loop only waits on I/O.
"""

import asyncio
import logging
import math
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from stockscope.schemas.market import OHLCVRecord, SymbolMeta
from stockscope.services.base import DataSourceError
from stockscope.services.data_ingestion.interface import TimeSeriesSource

logger = logging.getLogger(__name__)

# Normalized column name -> accepted header spellings (lower-case, no spaces)
COLUMN_ALIASES = {
    "date": ("date", "timestamp", "datetime"),
    "open": ("open",),
    "high": ("high",),
    "low": ("low",),
    "close": ("close",),
    "prev_close": ("prev_close", "prevclose"),
    "volume": ("volume",),
    "sector": ("sector",),
    "name": ("name", "company"),
    "news": ("news", "sentiment"),
}

MANIFEST_ALIASES = {
    "symbol": ("symbol", "ticker", "code"),
    "name": ("name", "company", "description"),
    "sector": ("sector", "industry"),
}

NUMERIC_COLUMNS = ("open", "high", "low", "close", "prev_close", "volume")
TEXT_COLUMNS = ("sector", "name")


def normalize_header(header: str) -> str:
    """'Prev Close' -> 'prevclose'."""
    return "".join(str(header).lower().split())


def _select_columns(frame: pd.DataFrame, aliases: dict[str, tuple[str, ...]]) -> pd.DataFrame:
    """Rename the first matching alias of each field, drop everything else."""
    frame = frame.rename(columns=normalize_header)
    selected = {}
    for field, candidates in aliases.items():
        for candidate in candidates:
            if candidate in frame.columns:
                selected[field] = frame[candidate]
                break
    return pd.DataFrame(selected, index=frame.index)


def coerce_numeric(series: pd.Series) -> pd.Series:
    """Parse numbers like '1,234.5'; anything unparseable or infinite becomes NaN."""
    cleaned = series.astype(str).str.replace(r"[,\s]", "", regex=True)
    numbers = pd.to_numeric(cleaned, errors="coerce")
    return numbers.where(numbers.abs() != math.inf)


def _clean(value: Any) -> Optional[Any]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    return value


def _clean_text(value: Any) -> Optional[str]:
    value = _clean(value)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_time_series(frame: pd.DataFrame) -> list[OHLCVRecord]:
    """
    Normalize a raw price frame into ordered OHLCV records.

    Rows without a parseable date or close are dropped; remaining rows are
    sorted ascending by date.
    """
    frame = _select_columns(frame, COLUMN_ALIASES)
    if "date" not in frame.columns or "close" not in frame.columns:
        return []

    frame["date"] = pd.to_datetime(frame["date"], errors="coerce", format="mixed")
    for column in NUMERIC_COLUMNS:
        if column in frame.columns:
            frame[column] = coerce_numeric(frame[column])

    frame = frame.dropna(subset=["date", "close"])
    frame = frame.sort_values("date", kind="stable")

    records = []
    for row in frame.to_dict("records"):
        try:
            records.append(
                OHLCVRecord(
                    date=row["date"].to_pydatetime(),
                    open=_clean(row.get("open")),
                    high=_clean(row.get("high")),
                    low=_clean(row.get("low")),
                    close=row["close"],
                    prev_close=_clean(row.get("prev_close")),
                    volume=_clean(row.get("volume")),
                    sector=_clean_text(row.get("sector")) or "",
                    name=_clean_text(row.get("name")) or "",
                    news=_clean_text(row.get("news")),
                )
            )
        except (ValueError, TypeError, AttributeError) as e:
            logger.debug(f"Skipping malformed row {row}: {e}")

    return records


def parse_manifest(frame: pd.DataFrame) -> list[SymbolMeta]:
    """Normalize a manifest frame; rows without a symbol are dropped."""
    frame = _select_columns(frame, MANIFEST_ALIASES)
    if "symbol" not in frame.columns:
        return []

    universe = []
    for row in frame.to_dict("records"):
        symbol = _clean_text(row.get("symbol"))
        if not symbol:
            continue
        universe.append(
            SymbolMeta(
                symbol=symbol,
                name=_clean_text(row.get("name")) or "",
                sector=_clean_text(row.get("sector")) or "",
            )
        )
    return universe


class CsvTimeSeriesSource(TimeSeriesSource):
    """
    File-backed source.

    Usage:
        source = CsvTimeSeriesSource("/data/scrip", "/data/manifest.csv")
        records = await source.load_time_series("TCS")
    """

    def __init__(self, data_root: str, manifest_path: str):
        self._data_root = Path(data_root)
        self._manifest_path = Path(manifest_path)

    def build_path(self, symbol: str) -> Path:
        # Reject anything that would escape the data directory
        if not symbol or Path(symbol).name != symbol or symbol in (".", ".."):
            raise DataSourceError(self.name, f"Invalid symbol: {symbol!r}")
        return self._data_root / f"{symbol}.csv"

    async def load_time_series(self, symbol: str) -> list[OHLCVRecord]:
        path = self.build_path(symbol)
        frame = await asyncio.to_thread(self._read_csv, path)
        records = parse_time_series(frame)
        logger.debug(f"Loaded {len(records)} records for {symbol} from {path}")
        return records

    async def load_symbol_universe(self) -> list[SymbolMeta]:
        frame = await asyncio.to_thread(self._read_csv, self._manifest_path)
        universe = parse_manifest(frame)
        logger.info(f"Loaded {len(universe)} symbols from {self._manifest_path}")
        return universe

    def _read_csv(self, path: Path) -> pd.DataFrame:
        try:
            return pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
        except FileNotFoundError as e:
            raise DataSourceError(self.name, f"File not found: {path}") from e
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise DataSourceError(self.name, f"Unreadable CSV {path}: {e}") from e
