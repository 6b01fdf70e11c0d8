"""Distance and timing insights for the current day.

These compare today's partially-formed pivot against the historical daily
pivots (usually already filtered by weekday):

- distance series + histograms: how far from the open P1 forms, and how far
  P2 travels from P1 (percent);
- timing insights: given today's P1/P2 hours, how often history formed them later;
- distance insights: given today's P1/P2 prices, how often history went further.

Today's values are passed in explicitly; nothing here reads the clock.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

from .daily import DailyPivot, PivotType


@dataclass(frozen=True)
class HistogramBin:
    start: float
    end: float
    mid: float
    count: int

    @property
    def label(self) -> str:
        return f"{self.start:.1f}% to {self.end:.1f}%"

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": self.start,
            "max": self.end,
            "mid": self.mid,
            "count": self.count,
            "rangeLabel": self.label,
        }


def _pct(count: int, total: int) -> float:
    return count / total * 100.0 if total > 0 else 0.0


def open_to_p1_distances(pivots: Sequence[DailyPivot]) -> list[float]:
    """Signed distance from the daily open to P1, in percent of the open."""
    return [
        (p.p1_price - p.daily_open) / p.daily_open * 100.0
        for p in pivots
        if p.daily_open
    ]


def p1_to_p2_distances(pivots: Sequence[DailyPivot]) -> list[float]:
    """Signed distance from P1 to P2, in percent of P1 (open when P1 is 0)."""
    out: list[float] = []
    for p in pivots:
        base = p.p1_price or p.daily_open
        if not base:
            continue
        out.append((p.p2_price - p.p1_price) / base * 100.0)
    return out


def build_histogram(values: Sequence[float], bin_count: int = 32) -> list[HistogramBin]:
    """Equal-width histogram; width is at least ``1 / bin_count`` percent."""
    if not values:
        return []
    if bin_count < 1:
        raise ValueError(f"bin_count must be >= 1, got {bin_count}")

    lo = min(values)
    hi = max(values)
    step = max(1.0, hi - lo) / bin_count

    counts = [0] * bin_count
    for v in values:
        idx = math.floor((v - lo) / step)
        counts[min(bin_count - 1, max(0, idx))] += 1

    bins: list[HistogramBin] = []
    for i, count in enumerate(counts):
        start = lo + i * step
        bins.append(HistogramBin(start=start, end=start + step, mid=start + step / 2, count=count))
    return bins


def timing_insights(
    pivots: Sequence[DailyPivot],
    today_p1_hour: int | None,
    today_p2_hour: int | None,
    current_hour: int,
) -> dict[str, Any] | None:
    """How often history formed P1/P2 later than today's provisional pivots."""

    if today_p1_hour is None or today_p2_hour is None:
        return None
    total = len(pivots)
    if total == 0:
        return None

    p1_after_p1 = sum(1 for p in pivots if p.p1_hour > today_p1_hour)
    p1_at_or_after_p2 = sum(1 for p in pivots if p.p1_hour >= today_p2_hour)
    p2_after_p2 = sum(1 for p in pivots if p.p2_hour > today_p2_hour)
    p2_after_now = sum(1 for p in pivots if p.p2_hour > current_hour)

    flip_pct = _pct(p1_at_or_after_p2, total)
    p2_pending_pct = _pct(p2_after_now, total)

    # Thresholds apply to the one-decimal figure shown to users.
    shown_flip = round(flip_pct, 1)
    if shown_flip < 20:
        flip_risk = "Low"
    elif shown_flip < 40:
        flip_risk = "Moderate"
    else:
        flip_risk = "High"

    return {
        "totalDays": total,
        "p1AfterTodayP1Pct": _pct(p1_after_p1, total),
        "p1AtOrAfterTodayP2Pct": flip_pct,
        "p2AfterTodayP2Pct": _pct(p2_after_p2, total),
        "p2AfterNowPct": p2_pending_pct,
        "flipRisk": flip_risk,
        # A high share of P2s still to come means today's P2 is probably not in yet.
        "p2Status": "Unlikely" if round(p2_pending_pct, 1) > 50 else "Likely",
    }


def distance_insights(
    pivots: Sequence[DailyPivot],
    today_open: float | None,
    today_p1_price: float | None,
    today_p2_price: float | None,
    today_p1_type: PivotType | None,
    today_p2_type: PivotType | None,
) -> dict[str, Any] | None:
    """How often history moved further than today's provisional P1/P2."""

    if not today_open or not today_p1_price or not today_p2_price:
        return None
    if today_p1_type is None or today_p2_type is None:
        return None
    today_p1_type = PivotType(today_p1_type)
    today_p2_type = PivotType(today_p2_type)

    history = [p for p in pivots if p.daily_open]
    total = len(history)
    if total == 0:
        return None

    def from_open(price: float, p_open: float) -> float:
        return (price - p_open) / p_open * 100.0

    p1_dist = from_open(today_p1_price, today_open)
    p2_dist = from_open(today_p2_price, today_open)
    p1_is_low = today_p1_type is PivotType.LOW
    p2_is_high = today_p2_type is PivotType.HIGH

    p1_beyond = 0
    p2_reached = 0
    flip = 0
    reached_level: list[DailyPivot] = []
    for p in history:
        d1 = from_open(p.p1_price, p.daily_open)
        d2 = from_open(p.p2_price, p.daily_open)
        high_d = from_open(p.daily_high, p.daily_open)
        low_d = from_open(p.daily_low, p.daily_open)

        if (d1 < p1_dist) if p1_is_low else (d1 > p1_dist):
            p1_beyond += 1
        if (d2 >= p2_dist) if p2_is_high else (d2 <= p2_dist):
            p2_reached += 1
        if (low_d < p1_dist) if p1_is_low else (high_d > p1_dist):
            flip += 1
        if (high_d >= p2_dist) if p2_is_high else (low_d <= p2_dist):
            reached_level.append(p)

    became_p1 = sum(1 for p in reached_level if p.p1_type is today_p2_type)

    current_disp = abs((today_p2_price - today_p1_price) / today_p1_price) * 100.0
    disp_exceeds = sum(
        1
        for p in history
        if abs((p.p2_price - p.p1_price) / (p.p1_price or p.daily_open)) * 100.0 > current_disp
    )

    flip_pct = _pct(flip, total)
    disp_pct = _pct(disp_exceeds, total)

    shown_flip = round(flip_pct, 1)
    shown_disp = round(disp_pct, 1)
    if shown_flip > 40:
        flip_risk = "High"
    elif shown_flip > 20:
        flip_risk = "Moderate"
    else:
        flip_risk = "Low"

    if shown_disp > 50:
        p2_in = "Unlikely"
    elif shown_disp > 20:
        p2_in = "Uncertain"
    else:
        p2_in = "Likely"

    return {
        "dataPoints": total,
        "p1DistancePct": p1_dist,
        "p2DistancePct": p2_dist,
        "p1ExceedsPct": _pct(p1_beyond, total),
        "p2ReachPct": _pct(p2_reached, total),
        "reachedLevelDays": len(reached_level),
        "becameP1Pct": _pct(became_p1, len(reached_level)),
        "flipRiskPct": flip_pct,
        "flipRisk": flip_risk,
        "displacementExceedsPct": disp_pct,
        "p2In": p2_in,
    }
