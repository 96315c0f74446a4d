"""Tests for plan availability and pricing."""

from datetime import datetime

import pytest

from tariff_calc.models import Plan
from tariff_calc.pricing import is_plan_available, price

PER_MINUTE = Plan(
    id="cyber-hour", name="Cyber Hour", duration_minutes=60,
    price_weekday=139, price_weekend=159, per_minute=True,
)
TRIPLE = Plan(
    id="triple-kill", name="Triple Kill", duration_minutes=180,
    price_weekday=349, price_weekend=399,
)

MONDAY_NOON = datetime(2025, 6, 2, 12, 0)
SATURDAY_NOON = datetime(2025, 6, 7, 12, 0)


def window(start_hour, end_hour) -> Plan:
    return Plan(
        id="w", name="Window", duration_minutes=60, price_weekday=1, price_weekend=1,
        available_from_hour=start_hour, available_to_hour=end_hour,
    )


# ── Availability ─────────────────────────────────────────────────────────────


def test_available_without_window():
    assert all(is_plan_available(TRIPLE, h) for h in range(24))


@pytest.mark.parametrize("hour,expected", [
    (9, False), (10, True), (13, True), (14, False), (23, False),
])
def test_available_daytime_window(hour, expected):
    assert is_plan_available(window(10, 14), hour) is expected


@pytest.mark.parametrize("hour,expected", [
    (21, False), (22, True), (23, True), (0, True), (7, True), (8, False), (12, False),
])
def test_available_window_wraps_midnight(hour, expected):
    assert is_plan_available(window(22, 8), hour) is expected


def test_available_with_one_bound_only():
    assert is_plan_available(window(10, None), 3) is True
    assert is_plan_available(window(None, 10), 20) is True


# ── Flat plans ───────────────────────────────────────────────────────────────


def test_flat_price_ignores_minutes_and_start():
    for minutes in (1, 180, 999):
        result = price(TRIPLE, minutes, False)
        assert result.price == 349
        assert result.was_rounded is False

    result = price(TRIPLE, 60, True, start=datetime(2025, 6, 5, 23, 0))
    assert result.price == 399
    assert result.exact_price == 399.0
    assert result.weekday_minutes is None


# ── Per-minute plans ─────────────────────────────────────────────────────────


def test_per_minute_rounds_up():
    result = price(PER_MINUTE, 10, False)
    assert result.price == 24
    assert result.was_rounded is True
    assert result.exact_price == pytest.approx(139 / 60 * 10)


def test_per_minute_whole_hour_is_not_rounded():
    result = price(PER_MINUTE, 60, False)
    assert result.price == 139
    assert result.was_rounded is False


def test_per_minute_weekend_rate():
    assert price(PER_MINUTE, 190, True).price == 504  # ceil(159 / 60 * 190)
    assert price(PER_MINUTE, 190, False).price == 441


def test_per_minute_with_start_inside_one_day_type():
    result = price(PER_MINUTE, 190, False, start=MONDAY_NOON)
    assert result.price == 441
    assert result.weekday_minutes is None
    assert result.weekend_minutes is None


def test_per_minute_without_crossing_uses_given_day_type():
    # The start is a Saturday but the caller forced weekday pricing
    assert price(PER_MINUTE, 60, False, start=SATURDAY_NOON).price == 139
    assert price(PER_MINUTE, 60, True, start=SATURDAY_NOON).price == 159


def test_per_minute_crossing_into_weekend():
    result = price(PER_MINUTE, 120, False, start=datetime(2025, 6, 5, 23, 0))
    assert result.price == 139 + 159
    assert result.was_rounded is False
    assert result.weekday_minutes == 60
    assert result.weekend_minutes == 60

    pure_weekday = price(PER_MINUTE, 120, False).price
    pure_weekend = price(PER_MINUTE, 120, True).price
    assert pure_weekday < result.price < pure_weekend


def test_per_minute_crossing_into_weekday_rounds_up():
    # Sunday 23:50 for 30 minutes: 10 weekend + 20 weekday
    result = price(PER_MINUTE, 30, True, start=datetime(2025, 6, 8, 23, 50))
    assert result.weekend_minutes == 10
    assert result.weekday_minutes == 20
    assert result.price == 73  # ceil((159 * 10 + 139 * 20) / 60) = ceil(72.83)
    assert result.was_rounded is True


@pytest.mark.parametrize("start,minutes,expected", [
    # the minute starting at 23:59:04 is still Thursday's
    (datetime(2025, 6, 5, 23, 55, 4), 21, 54),   # ceil((139 * 5 + 159 * 16) / 60)
    (datetime(2025, 6, 5, 23, 55, 13), 24, 62),  # ceil((139 * 5 + 159 * 19) / 60)
])
def test_per_minute_crossing_from_start_with_seconds(start, minutes, expected):
    result = price(PER_MINUTE, minutes, False, start=start)
    assert result.weekday_minutes == 5
    assert result.price == expected
