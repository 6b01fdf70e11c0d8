"""UTC time helpers shared by the pivot calculators."""

from __future__ import annotations

from datetime import date, datetime, timezone

# Milliseconds in one day (UTC)
MS_IN_DAY = 86_400_000


def ms_to_datetime(ts_ms: int) -> datetime:
    """Convert a millisecond timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc)


def date_key(ts_ms: int) -> str:
    """UTC calendar day of ``ts_ms`` as ``YYYY-MM-DD``."""
    return ms_to_datetime(ts_ms).strftime("%Y-%m-%d")


def parse_date_key(key: str) -> date:
    return date.fromisoformat(key)
