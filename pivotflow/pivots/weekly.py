"""Weekly pivot detection (P1/P2 per ISO week, Monday to Sunday UTC).

Weeks are assembled from daily pivots rather than raw candles. The weekly high
and low are the extremes of the constituent days, and the first day (in date
order) reaching each extreme is where it was touched. When the weekly high and
low first appear on the same day, that day's own P1/P2 order decides.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Iterable, Sequence

from pivotflow.utils import get_logger, parse_date_key
from .daily import DailyPivot, PivotType

logger = get_logger("pivots.weekly")


@dataclass(frozen=True)
class WeeklyPivot:
    """P1/P2 turning points of one ISO week. Day fields use 0 = Sunday."""

    week_start_key: str
    week_end_key: str
    iso_week_number: int
    iso_year: int
    weekly_open: float
    weekly_high: float
    weekly_low: float
    high_day: int
    low_day: int
    p1_type: PivotType
    p1_day: int
    p1_price: float
    p2_type: PivotType
    p2_day: int
    p2_price: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekStart": self.week_start_key,
            "weekEnd": self.week_end_key,
            "weekNumber": self.iso_week_number,
            "year": self.iso_year,
            "open": self.weekly_open,
            "high": self.weekly_high,
            "low": self.weekly_low,
            "highDay": self.high_day,
            "lowDay": self.low_day,
            "p1Type": self.p1_type.value,
            "p1Day": self.p1_day,
            "p1Price": self.p1_price,
            "p2Type": self.p2_type.value,
            "p2Day": self.p2_day,
            "p2Price": self.p2_price,
        }


def week_start_key(pivot: DailyPivot) -> str:
    """Monday of the ISO week containing ``pivot``."""
    day = parse_date_key(pivot.date_key)
    monday = day - timedelta(days=(pivot.day_of_week + 6) % 7)
    return monday.isoformat()


def monday_key(day_key: str) -> str:
    """Monday of the ISO week containing the ``YYYY-MM-DD`` day."""
    day = parse_date_key(day_key)
    return (day - timedelta(days=day.weekday())).isoformat()


def _pivot_for_week(start_key: str, days: Sequence[DailyPivot]) -> WeeklyPivot:
    """Build the weekly pivot from one week's daily pivots, ascending by date."""

    weekly_high = max(d.daily_high for d in days)
    weekly_low = min(d.daily_low for d in days)

    high_day = next(d for d in days if d.daily_high == weekly_high)
    low_day = next(d for d in days if d.daily_low == weekly_low)

    if high_day.date_key == low_day.date_key:
        first = high_day.p1_type
    elif high_day.date_key < low_day.date_key:
        first = PivotType.HIGH
    else:
        first = PivotType.LOW

    if first is PivotType.HIGH:
        p1, p1_price, p2, p2_price = high_day, weekly_high, low_day, weekly_low
    else:
        p1, p1_price, p2, p2_price = low_day, weekly_low, high_day, weekly_high

    monday = parse_date_key(start_key)
    iso_year, iso_week, _ = monday.isocalendar()

    return WeeklyPivot(
        week_start_key=start_key,
        week_end_key=(monday + timedelta(days=6)).isoformat(),
        iso_week_number=iso_week,
        iso_year=iso_year,
        weekly_open=days[0].daily_open,
        weekly_high=weekly_high,
        weekly_low=weekly_low,
        high_day=high_day.day_of_week,
        low_day=low_day.day_of_week,
        p1_type=first,
        p1_day=p1.day_of_week,
        p1_price=p1_price,
        p2_type=first.other,
        p2_day=p2.day_of_week,
        p2_price=p2_price,
    )


def calculate_weekly_pivots(daily_pivots: Iterable[DailyPivot]) -> list[WeeklyPivot]:
    """Group daily pivots into ISO weeks and compute each week's P1/P2.

    Returns:
        One ``WeeklyPivot`` per week holding at least one day, ascending by week start.
    """

    by_week: dict[str, list[DailyPivot]] = defaultdict(list)
    for p in daily_pivots:
        by_week[week_start_key(p)].append(p)

    weeks: list[WeeklyPivot] = []
    for key in sorted(by_week):
        days = sorted(by_week[key], key=lambda d: d.date_key)
        weeks.append(_pivot_for_week(key, days))

    logger.debug("weekly_pivots_built", weeks=len(weeks))
    return weeks


def find_week_pivot(pivots: Iterable[WeeklyPivot], start_key: str) -> WeeklyPivot | None:
    """Return the pivot for the week starting on Monday ``start_key``, if present."""
    for p in pivots:
        if p.week_start_key == start_key:
            return p
    return None
