"""Data models for tariff-calc venue pricing."""

from dataclasses import dataclass, field
from typing import Optional, Union

Minutes = Union[int, float]


def format_minutes(minutes: Minutes) -> str:
    """Render a duration as "3h", "3h 10m" or "10m"."""
    total = int(minutes)
    h = total // 60
    m = total % 60
    if h and m:
        return f"{h}h {m}m"
    if h:
        return f"{h}h"
    return f"{m}m"


@dataclass(frozen=True)
class Plan:
    """A single tariff offered in a zone.

    Prices are whole currency units for the full ``duration_minutes``.
    For a per-minute plan ``duration_minutes`` is the nominal reference
    duration the prices are quoted for (normally 60).
    """
    id: str
    name: str
    duration_minutes: int
    price_weekday: int
    price_weekend: int
    name_ru: str = ""
    available_from_hour: Optional[int] = None
    available_to_hour: Optional[int] = None
    per_minute: bool = False
    display_only: bool = False
    description: Optional[str] = None

    def base_price(self, is_weekend: bool) -> int:
        return self.price_weekend if is_weekend else self.price_weekday

    def hours_display(self) -> str:
        if self.available_from_hour is None or self.available_to_hour is None:
            return "any time"
        return f"{self.available_from_hour:02d}:00-{self.available_to_hour:02d}:00"


@dataclass(frozen=True)
class Segment:
    """One priced slice of a combination."""
    plan: Plan
    quantity: int
    minutes: Minutes
    price: int
    label: str

    def describe(self) -> str:
        prefix = f"({self.quantity}x) " if self.quantity > 1 else ""
        if self.plan.per_minute or self.quantity == 1:
            return f"{prefix}{self.plan.name} - {self.label}"
        return f"{prefix}{self.plan.name}"


@dataclass(frozen=True)
class Combination:
    """The optimizer's answer: segments in discovery order plus totals."""
    segments: tuple[Segment, ...]
    total_price: int
    total_minutes: Minutes
    requested_minutes: int
    wasted_minutes: Minutes

    @classmethod
    def from_segments(cls, segments, requested_minutes: int) -> "Combination":
        segments = tuple(segments)
        total_minutes = sum(s.minutes for s in segments)
        return cls(
            segments=segments,
            total_price=sum(s.price for s in segments),
            total_minutes=total_minutes,
            requested_minutes=requested_minutes,
            wasted_minutes=max(0, total_minutes - requested_minutes),
        )

    def format_summary(self) -> str:
        """One-line summary of the combination."""
        parts = " + ".join(s.describe() for s in self.segments)
        return f"{self.total_price} for {format_minutes(self.requested_minutes)}: {parts}"


@dataclass(frozen=True)
class PriceResult:
    """Outcome of pricing one plan for one span."""
    price: int
    exact_price: float
    was_rounded: bool
    weekday_minutes: Optional[Minutes] = None
    weekend_minutes: Optional[Minutes] = None


@dataclass(frozen=True)
class DayTypeMinutes:
    """Weekday/weekend partition of a span."""
    weekday_minutes: Minutes = 0
    weekend_minutes: Minutes = 0

    @property
    def total(self) -> Minutes:
        return self.weekday_minutes + self.weekend_minutes


@dataclass(frozen=True)
class SpanInfo:
    spans: bool
    start_is_weekend: bool


@dataclass(frozen=True)
class Zone:
    """A room or class of seats within a branch, with its own tariffs."""
    id: str
    name: str
    plans: tuple[Plan, ...] = field(default_factory=tuple)
    name_ru: str = ""
    description: Optional[str] = None
    seats: Optional[int] = None


@dataclass(frozen=True)
class Branch:
    """One venue location."""
    id: str
    name: str
    color: str
    zones: tuple[Zone, ...] = field(default_factory=tuple)
    address: Optional[str] = None
    is_active: bool = True
