"""Weekday/weekend classification of local wall-clock time.

The venue treats Friday, Saturday and Sunday as weekend days.
"""

from datetime import datetime, time, timedelta
from typing import Optional

from .models import DayTypeMinutes, Minutes, SpanInfo

# datetime.weekday(): Monday == 0 ... Sunday == 6
WEEKEND_DAYS = frozenset({4, 5, 6})

ONE_MINUTE = timedelta(minutes=1)


def is_weekend(moment: datetime) -> bool:
    """True if *moment* falls on a Friday, Saturday or Sunday."""
    return moment.weekday() in WEEKEND_DAYS


def effective_is_weekend(moment: datetime, force: Optional[bool] = None) -> bool:
    """Day-type for *moment*, unless *force* pins it to weekend/weekday."""
    if force is not None:
        return force
    return is_weekend(moment)


def _next_midnight(moment: datetime) -> datetime:
    return datetime.combine(moment.date() + timedelta(days=1), time.min, tzinfo=moment.tzinfo)


def _minutes_until(start: datetime, moment: datetime) -> int:
    """Whole minutes from *start* to the first minute mark at or after *moment*."""
    return -(-(moment - start) // ONE_MINUTE)


def _as_minutes(value: Minutes) -> Minutes:
    return int(value) if float(value).is_integer() else value


def minutes_in_weekday_and_weekend(start: datetime, duration_minutes: Minutes) -> DayTypeMinutes:
    """Split ``[start, start + duration)`` into weekday and weekend minutes.

    Minutes are counted from *start*, and each one belongs to the day-type
    of the instant it begins. A trailing partial minute counts for its own
    fraction. The span is cut at the first minute mark on or after each
    local midnight, so a start with seconds keeps whole minutes intact.
    """
    if duration_minutes <= 0:
        return DayTypeMinutes(0, 0)

    weekday = 0
    weekend = 0

    offset = 0
    while offset < duration_minutes:
        cursor = start + offset * ONE_MINUTE
        piece_end = min(_minutes_until(start, _next_midnight(cursor)), duration_minutes)
        if is_weekend(cursor):
            weekend += piece_end - offset
        else:
            weekday += piece_end - offset
        offset = piece_end

    return DayTypeMinutes(_as_minutes(weekday), _as_minutes(weekend))


def spans_both_weekday_and_weekend(start: datetime, duration_minutes: Minutes) -> SpanInfo:
    """Whether the span touches both day-types.

    Only used to decide which displayed price to de-emphasize; pricing
    goes through :func:`minutes_in_weekday_and_weekend` directly.
    """
    split = minutes_in_weekday_and_weekend(start, duration_minutes)
    return SpanInfo(
        spans=split.weekday_minutes > 0 and split.weekend_minutes > 0,
        start_is_weekend=is_weekend(start),
    )
