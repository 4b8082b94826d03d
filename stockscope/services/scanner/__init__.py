"""
Market Scanner Service

Cross-sectional rankings, sector rollups and performance comparison.
"""

from stockscope.services.scanner.scanner import MarketScanner, get_scanner

__all__ = [
    "MarketScanner",
    "get_scanner",
]
