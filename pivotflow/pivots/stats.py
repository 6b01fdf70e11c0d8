"""Occurrence statistics over daily/weekly pivots.

For each bucket (hour of day for daily pivots, day of week for weekly pivots)
we count how often P1 and P2 fell there, the share of periods that represents,
and how many periods ago it last happened.

``adjust_for_current_day`` / ``adjust_for_current_week`` turn those shares into
forward-looking ones: given that we are already in bucket ``c`` and the pivot
has not happened yet, how likely is each remaining bucket.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Sequence, TypeVar

from pivotflow.utils import get_logger, parse_date_key
from .daily import DailyPivot
from .weekly import WeeklyPivot

logger = get_logger("pivots.stats")

HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7

P = TypeVar("P")


@dataclass(frozen=True)
class BucketStats:
    """P1/P2 occurrence statistics for one bucket (hour or weekday)."""

    bucket_index: int
    p1_count: int
    p2_count: int
    total_samples: int
    p1_probability: float
    p2_probability: float
    last_p1_ago: int | None
    last_p2_ago: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "bucket": self.bucket_index,
            "p1Count": self.p1_count,
            "p2Count": self.p2_count,
            "totalSamples": self.total_samples,
            "p1Probability": self.p1_probability,
            "p2Probability": self.p2_probability,
            "lastP1Ago": self.last_p1_ago,
            "lastP2Ago": self.last_p2_ago,
        }


def _percent(count: int, total: int) -> float:
    return count / total * 100.0 if total > 0 else 0.0


def _occurrence_stats(
    periods: Sequence[P],
    bucket_count: int,
    p1_bucket: Callable[[P], int],
    p2_bucket: Callable[[P], int],
    ordinal: Callable[[P], int],
    period_days: int,
) -> list[BucketStats]:
    """Shared aggregation for hourly and weekday statistics.

    ``ordinal`` maps a period to its day number (``date.toordinal``); recency is
    the day difference to the latest period divided by ``period_days``.
    """

    ordered = sorted(periods, key=ordinal)
    total = len(ordered)

    p1_counts = [0] * bucket_count
    p2_counts = [0] * bucket_count
    last_p1: list[int | None] = [None] * bucket_count
    last_p2: list[int | None] = [None] * bucket_count

    for p in ordered:
        b1 = p1_bucket(p)
        b2 = p2_bucket(p)
        day = ordinal(p)
        p1_counts[b1] += 1
        p2_counts[b2] += 1
        last_p1[b1] = day
        last_p2[b2] = day

    latest = ordinal(ordered[-1]) if ordered else None

    def _ago(last: int | None) -> int | None:
        if last is None or latest is None:
            return None
        return (latest - last) // period_days

    return [
        BucketStats(
            bucket_index=b,
            p1_count=p1_counts[b],
            p2_count=p2_counts[b],
            total_samples=total,
            p1_probability=_percent(p1_counts[b], total),
            p2_probability=_percent(p2_counts[b], total),
            last_p1_ago=_ago(last_p1[b]),
            last_p2_ago=_ago(last_p2[b]),
        )
        for b in range(bucket_count)
    ]


def calculate_hourly_stats(
    pivots: Iterable[DailyPivot],
    weekdays: Iterable[int] | None = None,
) -> list[BucketStats]:
    """Per-hour P1/P2 statistics over daily pivots.

    Args:
        pivots: Daily pivots, any order.
        weekdays: Optional weekday filter (0 = Sunday). Empty or None keeps every day.

    Returns:
        Exactly 24 ``BucketStats``, one per UTC hour; ``last*Ago`` is in days.
    """

    allowed = set(weekdays or ())
    selected = [p for p in pivots if not allowed or p.day_of_week in allowed]
    if allowed:
        logger.debug("weekday_filter_applied", weekdays=sorted(allowed), days=len(selected))

    return _occurrence_stats(
        selected,
        HOURS_PER_DAY,
        p1_bucket=lambda p: p.p1_hour,
        p2_bucket=lambda p: p.p2_hour,
        ordinal=lambda p: parse_date_key(p.date_key).toordinal(),
        period_days=1,
    )


def calculate_daily_stats(pivots: Iterable[WeeklyPivot]) -> list[BucketStats]:
    """Per-weekday P1/P2 statistics over weekly pivots.

    Returns:
        Exactly 7 ``BucketStats`` indexed by weekday (0 = Sunday); ``last*Ago`` is in weeks.
    """

    return _occurrence_stats(
        list(pivots),
        DAYS_PER_WEEK,
        p1_bucket=lambda p: p.p1_day,
        p2_bucket=lambda p: p.p2_day,
        ordinal=lambda p: parse_date_key(p.week_start_key).toordinal(),
        period_days=7,
    )


def _adjust_forward(
    stats: Sequence[BucketStats],
    is_remaining: Callable[[int], bool],
) -> list[BucketStats]:
    remaining = [s for s in stats if is_remaining(s.bucket_index)]
    if not remaining:
        return list(stats)

    total_p1 = sum(s.p1_count for s in remaining)
    total_p2 = sum(s.p2_count for s in remaining)

    out: list[BucketStats] = []
    for s in stats:
        if not is_remaining(s.bucket_index):
            out.append(replace(s, p1_probability=0.0, p2_probability=0.0))
            continue
        out.append(
            replace(
                s,
                p1_probability=_percent(s.p1_count, total_p1),
                p2_probability=_percent(s.p2_count, total_p2),
            )
        )
    return out


def adjust_for_current_day(stats: Sequence[BucketStats], current_bucket: int) -> list[BucketStats]:
    """Condition probabilities on the pivot not having happened before ``current_bucket``.

    Buckets below ``current_bucket`` get probability 0; the rest are renormalised
    over the counts of the remaining buckets. Counts and recency pass through.
    """
    return _adjust_forward(stats, lambda b: b >= current_bucket)


def week_position(weekday: int) -> int:
    """Position of a weekday (0 = Sunday) inside a Monday-start week."""
    return (weekday + 6) % 7


def adjust_for_current_week(stats: Sequence[BucketStats], current_weekday: int) -> list[BucketStats]:
    """Weekday variant of ``adjust_for_current_day``.

    Weekday buckets are numbered from Sunday but the week runs Monday to
    Sunday, so "still to come" is judged by position in the week: on a
    Wednesday, Sunday (bucket 0) is still ahead and Monday is past.
    """
    current = week_position(current_weekday)
    return _adjust_forward(stats, lambda b: week_position(b) >= current)
