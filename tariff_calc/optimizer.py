"""Cheapest-combination search over a zone's tariffs.

Explores multisets of flat packages (in non-decreasing catalog index, at most
``MAX_REPEATS`` copies of one package per step) optionally finished by a
per-minute tail, and keeps the cheapest combination that covers the request.
Ties keep the combination found first, so a branch can be cut as soon as its
partial price reaches the best total, and a package mix already explored
through other repeat counts is not explored again. Neither cut changes the
answer.
"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from .models import Combination, Plan, Segment, format_minutes
from .pricing import is_plan_available, price

logger = logging.getLogger(__name__)

MAX_REPEATS = 5


@dataclass(frozen=True)
class _Search:
    """Fixed inputs shared by every branch of the search."""
    requested_minutes: int
    packages: tuple[Plan, ...]
    per_minute: Optional[Plan]
    is_weekend: bool
    start: datetime


def _cheaper(candidate: Combination, best: Optional[Combination]) -> Optional[Combination]:
    if best is None or candidate.total_price < best.total_price:
        return candidate
    return best


def _per_minute_segment(search: _Search, minutes: int, consumed: int) -> Segment:
    tail_start = search.start + timedelta(minutes=consumed)
    result = price(search.per_minute, minutes, search.is_weekend, tail_start)
    return Segment(
        plan=search.per_minute,
        quantity=1,
        minutes=minutes,
        price=result.price,
        label=format_minutes(minutes),
    )


def _package_segment(search: _Search, plan: Plan, count: int) -> Segment:
    unit = price(plan, plan.duration_minutes, search.is_weekend)
    return Segment(
        plan=plan,
        quantity=count,
        minutes=plan.duration_minutes * count,
        price=unit.price * count,
        label=format_minutes(plan.duration_minutes),
    )


def _extend(segments: tuple[Segment, ...], segment: Segment) -> tuple[Segment, ...]:
    """Append *segment*, folding it into the last one if it is the same package."""
    if segments and segments[-1].plan is segment.plan:
        last = segments[-1]
        merged = replace(
            last,
            quantity=last.quantity + segment.quantity,
            minutes=last.minutes + segment.minutes,
            price=last.price + segment.price,
        )
        return segments[:-1] + (merged,)
    return segments + (segment,)


def _search_packages(
    search: _Search,
    remaining: int,
    segments: tuple[Segment, ...],
    first_index: int,
    best: Optional[Combination],
    visited: set,
) -> Optional[Combination]:
    consumed = sum(s.minutes for s in segments)

    for index in range(first_index, len(search.packages)):
        plan = search.packages[index]
        needed = math.ceil(remaining / plan.duration_minutes)

        for count in range(1, min(needed, MAX_REPEATS) + 1):
            segment = _package_segment(search, plan, count)
            branch = _extend(segments, segment)
            # prices are non-negative, so nothing grown from here can be strictly cheaper
            if best is not None and sum(s.price for s in branch) >= best.total_price:
                break
            # the same packages reached through other repeat counts yield the same subtree
            if branch in visited:
                continue
            visited.add(branch)
            left = remaining - segment.minutes

            if left <= 0:
                best = _cheaper(Combination.from_segments(branch, search.requested_minutes), best)
                continue

            if search.per_minute is not None:
                tail = _per_minute_segment(search, left, consumed + segment.minutes)
                best = _cheaper(
                    Combination.from_segments(branch + (tail,), search.requested_minutes),
                    best,
                )

            best = _search_packages(search, left, branch, index, best, visited)

    return best


def optimize(
    requested_minutes: int,
    current_hour: int,
    is_weekend_at_start: bool,
    start: datetime,
    plans,
) -> Optional[Combination]:
    """
    Find the cheapest combination of *plans* covering *requested_minutes*.

    Args:
        requested_minutes: Time to cover, in minutes
        current_hour: Local hour (0-23) used for availability windows
        is_weekend_at_start: Day-type used for flat prices and for per-minute
            spans that stay inside one day-type
        start: Start of the requested span; per-minute spans that cross the
            weekday/weekend boundary are pro-rated from here
        plans: The zone's tariffs in catalog order

    Returns:
        The cheapest Combination, or None when nothing was requested or no
        plan can be sold at *current_hour*.
    """
    if requested_minutes <= 0:
        logger.debug(f"Nothing to price for {requested_minutes} requested minutes")
        return None

    available = [
        p for p in plans
        if not p.display_only and is_plan_available(p, current_hour)
    ]
    if not available:
        logger.debug(f"No plan available at {current_hour:02d}:00")
        return None

    search = _Search(
        requested_minutes=requested_minutes,
        packages=tuple(p for p in available if not p.per_minute),
        per_minute=next((p for p in available if p.per_minute), None),
        is_weekend=is_weekend_at_start,
        start=start,
    )

    best = None
    if search.per_minute is not None:
        baseline = _per_minute_segment(search, requested_minutes, 0)
        best = Combination.from_segments((baseline,), requested_minutes)

    best = _search_packages(search, requested_minutes, (), 0, best, set())

    if best is not None:
        logger.debug(f"Best combination: {best.format_summary()}")
    return best
