"""Candle normalization.

Providers deliver hourly OHLC rows in different shapes and time units. Everything
entering the pivot pipeline is converted to ``HourlyCandle`` first:

- Bybit klines: ``[startTime(ms), open, high, low, close, volume, turnover]``,
  numbers usually encoded as strings.
- MMT candles: ``{"t": unix_seconds, "o": ..., "h": ..., "l": ..., "c": ...}``.

Malformed prices are kept as ``nan`` rather than dropped here; the daily detector
treats any candle with a non-finite price as absent. Rows without a usable
timestamp cannot be placed in a day and are skipped.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from pivotflow.utils import get_logger, ms_to_datetime

logger = get_logger("pivots.candles")

# Anything below this is a unix-seconds timestamp (10**11 ms is 1973-03-03).
_SECONDS_CUTOFF = 10**11


@dataclass(frozen=True)
class HourlyCandle:
    """One hourly OHLC sample. ``hour_of_day`` is derived from the timestamp (UTC)."""

    timestamp_ms: int
    open: float
    high: float
    low: float
    close: float
    hour_of_day: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "hour_of_day", ms_to_datetime(self.timestamp_ms).hour)

    @property
    def is_finite(self) -> bool:
        return is_finite_candle(self)

    @property
    def is_bullish(self) -> bool:
        return self.close >= self.open


def is_finite_candle(candle: HourlyCandle) -> bool:
    """True when all four prices are finite numbers."""
    return all(math.isfinite(v) for v in (candle.open, candle.high, candle.low, candle.close))


def normalize_timestamp_ms(ts: int | float | str) -> int:
    """Return ``ts`` in milliseconds, accepting seconds or milliseconds."""
    value = int(float(ts))
    if abs(value) < _SECONDS_CUTOFF:
        return value * 1000
    return value


def _to_float(value: Any) -> float:
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def make_candle(
    timestamp: int | float | str,
    open: Any,
    high: Any,
    low: Any,
    close: Any,
) -> HourlyCandle:
    """Build a candle from loosely-typed provider values."""
    return HourlyCandle(
        timestamp_ms=normalize_timestamp_ms(timestamp),
        open=_to_float(open),
        high=_to_float(high),
        low=_to_float(low),
        close=_to_float(close),
    )


def parse_hourly_candles(rows: Iterable[Sequence[Any]]) -> list[HourlyCandle]:
    """Convert Bybit hourly kline rows to candles."""
    out: list[HourlyCandle] = []
    skipped = 0
    for row in rows:
        try:
            ts = row[0]
            out.append(make_candle(ts, *_padded(row[1:5])))
        except (IndexError, TypeError, ValueError, OverflowError):
            skipped += 1
    if skipped:
        logger.debug("kline_rows_skipped", provider="bybit", skipped=skipped, parsed=len(out))
    return out


def parse_mmt_candles(rows: Iterable[Mapping[str, Any]]) -> list[HourlyCandle]:
    """Convert MMT candle dicts (``t`` in unix seconds) to candles."""
    out: list[HourlyCandle] = []
    skipped = 0
    for row in rows:
        try:
            out.append(
                make_candle(row["t"], row.get("o"), row.get("h"), row.get("l"), row.get("c"))
            )
        except (KeyError, TypeError, ValueError, OverflowError, AttributeError):
            skipped += 1
    if skipped:
        logger.debug("kline_rows_skipped", provider="mmt", skipped=skipped, parsed=len(out))
    return out


def _padded(values: Sequence[Any]) -> list[Any]:
    """Pad short rows with ``None`` so missing prices become ``nan``."""
    vals = list(values)
    return vals + [None] * (4 - len(vals))
