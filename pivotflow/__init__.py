"""Pivot timing statistics for hourly OHLC candles."""

__version__ = "0.3.0"
