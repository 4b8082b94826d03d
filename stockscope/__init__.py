"""
StockScope

Technical indicator engine and cross-sectional market analytics
over per-symbol daily OHLCV series.
"""

__version__ = "0.1.0"
