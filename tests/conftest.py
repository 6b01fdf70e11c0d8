from datetime import date, datetime, timedelta, timezone

import pytest
import structlog

from pivotflow.pivots.candles import HourlyCandle
from pivotflow.pivots.daily import DailyPivot, PivotType, sunday_based_weekday
from pivotflow.utils import configure_default_logging


def ts_ms(day: str, hour: int = 0) -> int:
    d = date.fromisoformat(day)
    return int(datetime(d.year, d.month, d.day, hour, tzinfo=timezone.utc).timestamp() * 1000)


def candle(day: str, hour: int, open: float, high: float, low: float, close: float) -> HourlyCandle:
    return HourlyCandle(timestamp_ms=ts_ms(day, hour), open=open, high=high, low=low, close=close)


def flat_day(day: str, hours=range(24), price: float = 95.0) -> list[HourlyCandle]:
    """A quiet day: every candle trades price +/- 1."""
    return [candle(day, h, price, price + 1, price - 1, price) for h in hours]


def daily_pivot(
    day: str,
    p1_hour: int,
    p2_hour: int,
    p1_type: PivotType = PivotType.HIGH,
    high: float = 110.0,
    low: float = 90.0,
    open: float = 100.0,
) -> DailyPivot:
    """Hand-built daily pivot for statistics tests."""
    p2_type = p1_type.other
    high_hour = p1_hour if p1_type is PivotType.HIGH else p2_hour
    low_hour = p2_hour if p1_type is PivotType.HIGH else p1_hour
    return DailyPivot(
        date_key=day,
        day_of_week=sunday_based_weekday(day),
        daily_open=open,
        daily_high=high,
        daily_low=low,
        high_hour=high_hour,
        low_hour=low_hour,
        p1_type=p1_type,
        p1_hour=p1_hour,
        p1_price=high if p1_type is PivotType.HIGH else low,
        p2_type=p2_type,
        p2_hour=p2_hour,
        p2_price=low if p1_type is PivotType.HIGH else high,
    )


def day_keys(start: str, count: int) -> list[str]:
    first = date.fromisoformat(start)
    return [(first + timedelta(days=i)).isoformat() for i in range(count)]


@pytest.fixture
def scenario_a_candles() -> list[HourlyCandle]:
    """2024-01-01: low of 90 at 03:00, high of 100 at 14:00."""
    candles = flat_day("2024-01-01")
    candles[3] = candle("2024-01-01", 3, 95, 96, 90, 95)
    candles[14] = candle("2024-01-01", 14, 95, 100, 94, 99)
    return candles


@pytest.fixture
def restore_logging():
    """Put the package's default structlog setup back after the test."""
    yield
    structlog.reset_defaults()
    configure_default_logging()
