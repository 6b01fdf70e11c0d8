"""Daily pivot detection (P1/P2 per UTC calendar day).

For every day we find the day's high and low, then the hour in which each
extreme was *first* touched. Whichever extreme was touched first is P1, the
other is P2.

Hourly candles do not tell us the order of events inside an hour. When both
extremes first appear in the same candle the order is guessed from the
candle's direction, see ``resolve_same_candle_order``. A day built from a
single candle always goes through that path, so its ``p1_hour == p2_hour``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Sequence

from pivotflow.utils import date_key, get_logger, parse_date_key
from .candles import HourlyCandle, is_finite_candle

logger = get_logger("pivots.daily")


class PivotType(str, Enum):
    HIGH = "HIGH"
    LOW = "LOW"

    @property
    def other(self) -> "PivotType":
        return PivotType.LOW if self is PivotType.HIGH else PivotType.HIGH


@dataclass(frozen=True)
class DailyPivot:
    """P1/P2 turning points of one UTC day. ``day_of_week``: 0 = Sunday."""

    date_key: str
    day_of_week: int
    daily_open: float
    daily_high: float
    daily_low: float
    high_hour: int
    low_hour: int
    p1_type: PivotType
    p1_hour: int
    p1_price: float
    p2_type: PivotType
    p2_hour: int
    p2_price: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date_key,
            "dayOfWeek": self.day_of_week,
            "open": self.daily_open,
            "high": self.daily_high,
            "low": self.daily_low,
            "highHour": self.high_hour,
            "lowHour": self.low_hour,
            "p1Type": self.p1_type.value,
            "p1Hour": self.p1_hour,
            "p1Price": self.p1_price,
            "p2Type": self.p2_type.value,
            "p2Hour": self.p2_hour,
            "p2Price": self.p2_price,
        }


def sunday_based_weekday(key: str) -> int:
    """Weekday of a ``YYYY-MM-DD`` key with 0 = Sunday ... 6 = Saturday."""
    return (parse_date_key(key).weekday() + 1) % 7


def resolve_same_candle_order(candle: HourlyCandle) -> PivotType:
    """Guess which extreme a candle touched first when it holds both.

    A net-bullish (or flat) candle is assumed to have dipped to its low
    before rallying into the close, so LOW comes first; a bearish candle is
    the mirror image. This is a heuristic, not an observation; finer-grained
    data should replace it when available.
    """
    return PivotType.LOW if candle.is_bullish else PivotType.HIGH


def _pivot_for_day(key: str, candles: Sequence[HourlyCandle]) -> DailyPivot:
    """Build the pivot for one day's finite candles, sorted by timestamp."""

    daily_high = max(c.high for c in candles)
    daily_low = min(c.low for c in candles)

    # Both searches succeed: the extremes are drawn from this same candle set.
    high_candle = next(c for c in candles if c.high >= daily_high)
    low_candle = next(c for c in candles if c.low <= daily_low)

    if high_candle.timestamp_ms == low_candle.timestamp_ms:
        first = resolve_same_candle_order(high_candle)
        logger.debug(
            "same_candle_tie_break",
            date=key,
            hour=high_candle.hour_of_day,
            first=first.value,
        )
    elif high_candle.timestamp_ms < low_candle.timestamp_ms:
        first = PivotType.HIGH
    else:
        first = PivotType.LOW

    high_hour = high_candle.hour_of_day
    low_hour = low_candle.hour_of_day
    if first is PivotType.HIGH:
        p1_hour, p1_price, p2_hour, p2_price = high_hour, daily_high, low_hour, daily_low
    else:
        p1_hour, p1_price, p2_hour, p2_price = low_hour, daily_low, high_hour, daily_high

    return DailyPivot(
        date_key=key,
        day_of_week=sunday_based_weekday(key),
        daily_open=candles[0].open,
        daily_high=daily_high,
        daily_low=daily_low,
        high_hour=high_hour,
        low_hour=low_hour,
        p1_type=first,
        p1_hour=p1_hour,
        p1_price=p1_price,
        p2_type=first.other,
        p2_hour=p2_hour,
        p2_price=p2_price,
    )


def calculate_daily_pivots(candles: Iterable[HourlyCandle]) -> list[DailyPivot]:
    """Group candles into UTC days and compute each day's P1/P2.

    Candles with a non-finite price are ignored entirely. Days left without
    any candle produce no pivot.

    Returns:
        One ``DailyPivot`` per represented day, ascending by date.
    """

    by_day: dict[str, list[HourlyCandle]] = defaultdict(list)
    dropped = 0
    for c in candles:
        if not is_finite_candle(c):
            dropped += 1
            continue
        by_day[date_key(c.timestamp_ms)].append(c)

    if dropped:
        logger.debug("candles_dropped_non_finite", dropped=dropped)

    pivots: list[DailyPivot] = []
    for key in sorted(by_day):
        day_candles = sorted(by_day[key], key=lambda c: c.timestamp_ms)
        pivots.append(_pivot_for_day(key, day_candles))

    logger.debug("daily_pivots_built", days=len(pivots))
    return pivots


def find_pivot(pivots: Iterable[DailyPivot], key: str) -> DailyPivot | None:
    """Return the pivot for day ``key`` (``YYYY-MM-DD``), if present."""
    for p in pivots:
        if p.date_key == key:
            return p
    return None
