"""Plan availability and pricing."""

import math
from datetime import datetime
from fractions import Fraction
from typing import Optional

from .daytype import minutes_in_weekday_and_weekend
from .models import Minutes, Plan, PriceResult

RATE_MINUTES = 60  # per-minute prices are quoted per hour


def is_plan_available(plan: Plan, current_hour: int) -> bool:
    """Check the plan's half-open ``[from, to)`` hour window.

    A window with ``from > to`` wraps past midnight (e.g. 22 -> 8).
    Plans with no window, or only one bound, are always available.
    """
    start_hour = plan.available_from_hour
    end_hour = plan.available_to_hour
    if start_hour is None or end_hour is None:
        return True
    if start_hour > end_hour:
        return current_hour >= start_hour or current_hour < end_hour
    return start_hour <= current_hour < end_hour


def _rounded(exact: Fraction, **minutes) -> PriceResult:
    charged = math.ceil(exact)
    return PriceResult(
        price=charged,
        exact_price=float(exact),
        was_rounded=exact != charged,
        **minutes,
    )


def price(
    plan: Plan,
    minutes: Minutes,
    is_weekend_at_start: bool,
    start: Optional[datetime] = None,
) -> PriceResult:
    """Price *plan* for a span of *minutes*.

    Per-minute plans are billed at ``price / 60`` per minute and rounded up
    to a whole unit. When *start* is given and the span crosses into the
    other day-type, each side is billed at its own rate. Flat plans always
    cost their fixed price for the day-type, whatever *minutes* says.
    """
    if plan.per_minute and start is not None:
        split = minutes_in_weekday_and_weekend(start, minutes)
        if split.weekday_minutes > 0 and split.weekend_minutes > 0:
            exact = (
                Fraction(plan.price_weekday) / RATE_MINUTES * Fraction(split.weekday_minutes)
                + Fraction(plan.price_weekend) / RATE_MINUTES * Fraction(split.weekend_minutes)
            )
            return _rounded(
                exact,
                weekday_minutes=split.weekday_minutes,
                weekend_minutes=split.weekend_minutes,
            )

    base = plan.base_price(is_weekend_at_start)
    if plan.per_minute:
        return _rounded(Fraction(base) / RATE_MINUTES * Fraction(minutes))

    return PriceResult(price=base, exact_price=float(base), was_rounded=False)
