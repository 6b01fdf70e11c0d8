"""End-to-end pivot analysis for one candle batch.

``PivotAnalyzer`` wires the pure calculators together with the configured
defaults (weekday filter, heatmap scheme, histogram bins) and returns a
JSON-ready report for the rendering layer. "Now" is always an argument:
callers pass the current hour/weekday/day key when they want the
forward-adjusted view or today's insights.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import structlog

from pivotflow.config import Settings, get_settings
from pivotflow.pivots.candles import HourlyCandle
from pivotflow.pivots.daily import DailyPivot, calculate_daily_pivots, find_pivot
from pivotflow.pivots.heatmap import HeatmapScheme, color_for, rgb_css, text_color_for
from pivotflow.pivots.insights import (
    build_histogram,
    distance_insights,
    open_to_p1_distances,
    p1_to_p2_distances,
    timing_insights,
)
from pivotflow.pivots.stats import (
    BucketStats,
    adjust_for_current_day,
    adjust_for_current_week,
    calculate_daily_stats,
    calculate_hourly_stats,
)
from pivotflow.pivots.weekly import calculate_weekly_pivots, find_week_pivot, monday_key
from pivotflow.utils import MS_IN_DAY, get_logger, setup_logging


class PivotAnalyzer:
    """Run daily/weekly pivot statistics over hourly candles."""

    def __init__(
        self,
        settings: Settings | None = None,
        logger: structlog.BoundLogger | None = None,
    ):
        self.settings = settings or get_settings()
        self.logger = logger or get_logger("analysis")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PivotAnalyzer":
        """Create an analyzer and configure logging from settings."""
        settings = settings or get_settings()
        setup_logging(settings.log_level, settings.log_json)
        return cls(settings=settings)

    def heatmap_cells(
        self,
        stats: Sequence[BucketStats],
        *,
        scheme: HeatmapScheme | str | None = None,
        dark_mode: bool | None = None,
        intensity: float | None = None,
    ) -> list[dict[str, Any]]:
        """Background/text colors for the P1 and P2 cell of every bucket."""

        scheme = HeatmapScheme(scheme or self.settings.heatmap_scheme)
        dark = self.settings.dark_mode if dark_mode is None else dark_mode
        power = intensity if intensity is not None else self.settings.heatmap_intensity

        cells: list[dict[str, Any]] = []
        for s in stats:
            p1_bg = color_for(s.p1_probability, dark, scheme, power)
            p2_bg = color_for(s.p2_probability, dark, scheme, power)
            cells.append(
                {
                    "bucket": s.bucket_index,
                    "p1Background": rgb_css(p1_bg),
                    "p1Text": text_color_for(p1_bg).value,
                    "p2Background": rgb_css(p2_bg),
                    "p2Text": text_color_for(p2_bg).value,
                }
            )
        return cells

    def _check_span(self, candles: Sequence[HourlyCandle]) -> None:
        if not candles:
            return
        timestamps = [c.timestamp_ms for c in candles]
        span_days = (max(timestamps) - min(timestamps)) / MS_IN_DAY
        if span_days > self.settings.max_lookback_days:
            self.logger.warning(
                "candle_span_exceeds_lookback",
                span_days=round(span_days, 1),
                max_lookback_days=self.settings.max_lookback_days,
            )

    def _today_insights(
        self,
        pivots: Sequence[DailyPivot],
        filtered: Sequence[DailyPivot],
        today_key: str,
        current_hour: int | None,
    ) -> dict[str, Any]:
        today = find_pivot(pivots, today_key)
        if today is None:
            return {"date": today_key, "pivot": None, "timing": None, "distance": None}

        timing = None
        if current_hour is not None:
            timing = timing_insights(filtered, today.p1_hour, today.p2_hour, current_hour)
        distance = distance_insights(
            filtered,
            today.daily_open,
            today.p1_price,
            today.p2_price,
            today.p1_type,
            today.p2_type,
        )
        return {"date": today_key, "pivot": today.to_dict(), "timing": timing, "distance": distance}

    def analyze(
        self,
        candles: Iterable[HourlyCandle],
        *,
        weekdays: Iterable[int] | None = None,
        current_hour: int | None = None,
        current_weekday: int | None = None,
        today_key: str | None = None,
    ) -> dict[str, Any]:
        """Build the full pivot report.

        Args:
            candles: Hourly candles (any order, ms timestamps).
            weekdays: Weekday filter (0 = Sunday); None uses the configured filter.
            current_hour: UTC hour; when set, hourly stats are forward-adjusted.
            current_weekday: Weekday (0 = Sunday); when set, weekday stats are forward-adjusted.
            today_key: ``YYYY-MM-DD`` of the running day, enables today's insights.
        """

        candles = list(candles)
        self._check_span(candles)

        selected_days = sorted(set(weekdays)) if weekdays is not None else self.settings.weekday_list

        daily = calculate_daily_pivots(candles)
        weekly = calculate_weekly_pivots(daily)

        hourly_stats = calculate_hourly_stats(daily, selected_days)
        if current_hour is not None:
            hourly_stats = adjust_for_current_day(hourly_stats, current_hour)

        weekday_stats = calculate_daily_stats(weekly)
        if current_weekday is not None:
            weekday_stats = adjust_for_current_week(weekday_stats, current_weekday)

        filtered = [p for p in daily if not selected_days or p.day_of_week in selected_days]
        bins = self.settings.histogram_bins

        report: dict[str, Any] = {
            "candleCount": len(candles),
            "weekdayFilter": selected_days,
            "dailyPivots": [p.to_dict() for p in daily],
            "weeklyPivots": [w.to_dict() for w in weekly],
            "hourlyStats": [s.to_dict() for s in hourly_stats],
            "weekdayStats": [s.to_dict() for s in weekday_stats],
            "hourlyHeatmap": self.heatmap_cells(hourly_stats),
            "weekdayHeatmap": self.heatmap_cells(weekday_stats),
            "histograms": {
                "openToP1": [b.to_dict() for b in build_histogram(open_to_p1_distances(filtered), bins)],
                "p1ToP2": [b.to_dict() for b in build_histogram(p1_to_p2_distances(filtered), bins)],
            },
            "forwardAdjusted": {
                "hour": current_hour,
                "weekday": current_weekday,
            },
        }

        if today_key is not None:
            report["today"] = self._today_insights(daily, filtered, today_key, current_hour)
            this_week = find_week_pivot(weekly, monday_key(today_key))
            report["thisWeek"] = this_week.to_dict() if this_week else None

        self.logger.info(
            "pivot_analysis_complete",
            candles=len(candles),
            days=len(daily),
            weeks=len(weekly),
            filtered_days=len(filtered),
        )
        return report
