"""tariff-calc - cheapest tariff combinations for a gaming venue."""

from .daytype import is_weekend, minutes_in_weekday_and_weekend, spans_both_weekday_and_weekend
from .models import Combination, Plan, PriceResult, Segment
from .optimizer import optimize
from .pricing import is_plan_available, price

__version__ = "0.1.0"

__all__ = [
    "Combination",
    "Plan",
    "PriceResult",
    "Segment",
    "is_plan_available",
    "is_weekend",
    "minutes_in_weekday_and_weekend",
    "optimize",
    "price",
    "spans_both_weekday_and_weekend",
]
