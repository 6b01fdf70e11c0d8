"""Pivot detection, occurrence statistics and heatmap colors."""

from .candles import HourlyCandle, make_candle, parse_hourly_candles, parse_mmt_candles
from .daily import DailyPivot, PivotType, calculate_daily_pivots, resolve_same_candle_order
from .weekly import WeeklyPivot, calculate_weekly_pivots
from .stats import (
    BucketStats,
    adjust_for_current_day,
    adjust_for_current_week,
    calculate_daily_stats,
    calculate_hourly_stats,
)
from .heatmap import HeatmapScheme, RGB, TextColor, color_for, text_color_for

__all__ = [
    "HourlyCandle",
    "make_candle",
    "parse_hourly_candles",
    "parse_mmt_candles",
    "DailyPivot",
    "PivotType",
    "calculate_daily_pivots",
    "resolve_same_candle_order",
    "WeeklyPivot",
    "calculate_weekly_pivots",
    "BucketStats",
    "adjust_for_current_day",
    "adjust_for_current_week",
    "calculate_daily_stats",
    "calculate_hourly_stats",
    "HeatmapScheme",
    "RGB",
    "TextColor",
    "color_for",
    "text_color_for",
]
