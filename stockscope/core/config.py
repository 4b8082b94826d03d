"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "StockScope Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "info"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:5173"]

    # Data source: "csv" reads <SYMBOL>.csv files, "mock" generates random walks
    data_source: str = "csv"
    data_root: str = "./data/scrip"
    manifest_path: str = "./data/manifest.csv"
    mock_universe_size: int = 40
    mock_history_days: int = 250

    # Cross-sectional scan bounds
    load_concurrency: int = 12
    top_movers_limit: int = 200
    top_n: int = 5
    ranking_limit: int = 10
    analytics_batch_size: int = 750
    analytics_batch_count: int = 2
    heatmap_sample_size: int = 100
    comparison_max_symbols: int = 10
    search_limit: int = 25

    # Indicator cache (None = unbounded for the process lifetime)
    indicator_cache_max_entries: Optional[int] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
