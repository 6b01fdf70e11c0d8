import math

from pivotflow.pivots.daily import (
    PivotType,
    calculate_daily_pivots,
    find_pivot,
    resolve_same_candle_order,
)

from conftest import candle, flat_day


def test_low_then_high_gives_low_p1(scenario_a_candles):
    pivots = calculate_daily_pivots(scenario_a_candles)

    assert len(pivots) == 1
    p = pivots[0]
    assert p.date_key == "2024-01-01"
    assert p.day_of_week == 1
    assert (p.p1_type, p.p1_hour, p.p1_price) == (PivotType.LOW, 3, 90)
    assert (p.p2_type, p.p2_hour, p.p2_price) == (PivotType.HIGH, 14, 100)
    assert p.low_hour == 3
    assert p.high_hour == 14


def test_input_order_does_not_matter(scenario_a_candles):
    shuffled = list(reversed(scenario_a_candles))
    assert calculate_daily_pivots(shuffled) == calculate_daily_pivots(scenario_a_candles)


def test_first_touch_wins_when_extreme_repeats():
    candles = flat_day("2024-01-02")
    candles[5] = candle("2024-01-02", 5, 95, 105, 94, 95)
    candles[9] = candle("2024-01-02", 9, 95, 105, 94, 95)
    candles[20] = candle("2024-01-02", 20, 95, 96, 80, 95)

    p = calculate_daily_pivots(candles)[0]

    assert p.high_hour == 5
    assert p.p1_type is PivotType.HIGH
    assert p.p1_hour == 5
    assert p.p2_hour == 20


def test_daily_open_comes_from_first_candle():
    candles = [
        candle("2024-01-03", 7, 120, 121, 119, 120),
        candle("2024-01-03", 1, 101, 102, 100, 101),
    ]
    p = calculate_daily_pivots(candles)[0]
    assert p.daily_open == 101


def test_same_candle_bullish_means_low_first():
    candles = flat_day("2024-01-04")
    candles[8] = candle("2024-01-04", 8, 95, 110, 80, 105)

    p = calculate_daily_pivots(candles)[0]

    assert p.high_hour == p.low_hour == 8
    assert p.p1_type is PivotType.LOW
    assert p.p1_price == 80


def test_same_candle_bearish_means_high_first():
    candles = flat_day("2024-01-04")
    candles[8] = candle("2024-01-04", 8, 105, 110, 80, 85)

    p = calculate_daily_pivots(candles)[0]

    assert p.p1_type is PivotType.HIGH
    assert p.p1_price == 110
    assert p.p2_price == 80


def test_resolve_same_candle_order_doji_counts_as_bullish():
    assert resolve_same_candle_order(candle("2024-01-01", 0, 10, 11, 9, 10)) is PivotType.LOW


def test_resolve_same_candle_order_follows_candle_direction():
    up = candle("2024-01-01", 0, 10, 12, 9, 11)
    down = candle("2024-01-01", 1, 11, 12, 9, 10)

    assert up.is_bullish and not down.is_bullish
    assert resolve_same_candle_order(up) is PivotType.LOW
    assert resolve_same_candle_order(down) is PivotType.HIGH


def test_single_candle_day_is_degenerate_but_present():
    p = calculate_daily_pivots([candle("2024-01-05", 12, 50, 50, 50, 50)])[0]

    assert p.p1_hour == p.p2_hour == 12
    assert p.daily_high == p.daily_low == 50
    # Flat candle resolves as bullish: LOW is P1.
    assert p.p1_type is PivotType.LOW
    assert p.p2_type is PivotType.HIGH


def test_non_finite_candles_are_ignored():
    candles = flat_day("2024-01-06")
    candles[2] = candle("2024-01-06", 2, 95, math.inf, 94, 95)
    candles[4] = candle("2024-01-06", 4, 95, 96, math.nan, 95)
    candles[0] = candle("2024-01-06", 0, math.nan, 96, 94, 95)

    p = calculate_daily_pivots(candles)[0]

    assert p.daily_high == 96
    assert p.daily_low == 94
    assert p.daily_open == 95
    assert p.high_hour == 1


def test_day_with_only_bad_candles_produces_nothing():
    assert calculate_daily_pivots([candle("2024-01-07", 0, math.nan, 1, 1, 1)]) == []
    assert calculate_daily_pivots([]) == []


def test_days_are_split_on_utc_midnight_and_sorted():
    candles = flat_day("2024-01-09", hours=[0, 1]) + flat_day("2024-01-08", hours=[22, 23])
    pivots = calculate_daily_pivots(candles)
    assert [p.date_key for p in pivots] == ["2024-01-08", "2024-01-09"]


def test_complementary_types_and_prices():
    candles = []
    for i, day in enumerate(["2024-02-01", "2024-02-02", "2024-02-03"]):
        day_candles = flat_day(day)
        day_candles[i + 2] = candle(day, i + 2, 95, 99, 94, 98)
        day_candles[20 - i] = candle(day, 20 - i, 95, 96, 91, 92)
        candles.extend(day_candles)

    for p in calculate_daily_pivots(candles):
        assert {p.p1_type, p.p2_type} == {PivotType.HIGH, PivotType.LOW}
        assert {p.p1_price, p.p2_price} == {p.daily_high, p.daily_low}
        assert p.daily_high >= p.daily_low


def test_find_pivot_and_to_dict(scenario_a_candles):
    pivots = calculate_daily_pivots(scenario_a_candles)

    assert find_pivot(pivots, "2024-01-02") is None
    d = find_pivot(pivots, "2024-01-01").to_dict()
    assert d["p1Type"] == "LOW"
    assert d["p1Hour"] == 3
    assert d["open"] == 95
