"""Venue catalog: branches, their zones and the tariffs sold in each zone.

The built-in catalog lives in ``DEFAULT_CATALOG`` below. A different one can
be loaded from a JSON file with the same shape::

    {"branches": [{"id": "...", "name": "...", "color": "#...",
                   "zones": [{"id": "...", "name": "...",
                              "plans": [{"id": "...", "name": "...",
                                         "duration_minutes": 180,
                                         "price_weekday": 349,
                                         "price_weekend": 399}]}]}]}

Every plan is validated on load, so the pricing code never sees a zero
duration or a negative price.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    field_validator,
)

from .models import Branch, Plan, Zone

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when catalog data violates the plan invariants."""


def _tariffs(prefix: str, hour: tuple, triple: tuple, ultra: tuple,
             night: tuple, day: Optional[tuple] = None) -> list[dict]:
    """Standard tariff ladder for one zone, prices as (weekday, weekend)."""
    ladder = [
        {
            "id": f"{prefix}cyber-hour", "name": "Cyber Hour", "name_ru": "Кибер час",
            "duration_minutes": 60, "price_weekday": hour[0], "price_weekend": hour[1],
            "per_minute": True,
            "description": "Per-minute billing at the hourly rate",
        },
        {
            "id": f"{prefix}triple-kill", "name": "Triple Kill", "name_ru": "Трипл килл",
            "duration_minutes": 180, "price_weekday": triple[0], "price_weekend": triple[1],
        },
        {
            "id": f"{prefix}ultra-kill", "name": "Ultra Kill", "name_ru": "Ультра килл",
            "duration_minutes": 300, "price_weekday": ultra[0], "price_weekend": ultra[1],
        },
        {
            "id": f"{prefix}cyber-night", "name": "Cyber Night", "name_ru": "Кибер ночь",
            "duration_minutes": 600, "price_weekday": night[0], "price_weekend": night[1],
            "available_from_hour": 22, "available_to_hour": 8,
        },
    ]
    if day:
        ladder.append({
            "id": f"{prefix}cyber-day", "name": "Cyber Day", "name_ru": "Кибер день",
            "duration_minutes": 540, "price_weekday": day[0], "price_weekend": day[1],
            "available_from_hour": 8, "available_to_hour": 14,
        })
    ladder.append({
        "id": f"{prefix}cyber-24", "name": "Cyber 24", "name_ru": "Кибер 24",
        "duration_minutes": 1440, "price_weekday": 1490, "price_weekend": 1690,
        "display_only": True,
        "description": "Subscription only, sold in the mobile app",
    })
    return ladder


DEFAULT_CATALOG: dict[str, Any] = {
    "branches": [
        {
            "id": "muzhestva", "name": "Muzhestva", "address": "ul. Muzhestva, 10",
            "color": "#00bfff",
            "zones": [
                {"id": "normal", "name": "Standard", "name_ru": "Стандарт", "seats": 30,
                 "plans": _tariffs("", (139, 159), (349, 399), (529, 599), (549, 649), (449, 499))},
                {"id": "vip", "name": "VIP", "name_ru": "VIP", "seats": 10,
                 "description": "360 Hz monitors and premium peripherals",
                 "plans": _tariffs("vip-", (179, 199), (449, 509), (689, 769), (699, 799))},
                {"id": "bootcamp", "name": "Bootcamp", "name_ru": "Буткемп", "seats": 5,
                 "description": "Closed room for a team of five",
                 "plans": _tariffs("bootcamp-", (199, 229), (499, 579), (779, 879), (799, 899))},
            ],
        },
        {
            "id": "kirenskogo", "name": "Kirenskogo", "address": "ul. Kirenskogo, 2",
            "color": "#ff3366",
            "zones": [
                {"id": "normal", "name": "Standard", "name_ru": "Стандарт", "seats": 24,
                 "plans": _tariffs("", (129, 149), (329, 379), (499, 569), (519, 619), (429, 479))},
                {"id": "tv", "name": "Console", "name_ru": "Консоли", "seats": 4,
                 "description": "PlayStation 5 with a 65\" TV",
                 "plans": _tariffs("tv-", (249, 289), (649, 749), (999, 1149), (999, 1199))},
            ],
        },
        {
            "id": "molokova", "name": "Molokova", "color": "#ffd700",
            "zones": [
                {"id": "normal", "name": "Standard", "name_ru": "Стандарт", "seats": 20,
                 "plans": _tariffs("", (129, 149), (329, 379), (499, 569), (519, 619))},
            ],
        },
        {
            "id": "lomako", "name": "Lomako", "color": "#ffffff", "is_active": False,
            "zones": [],
        },
        {
            "id": "aerovokzalnaya", "name": "Aerovokzalnaya", "color": "#7cfc00",
            "is_active": False, "zones": [],
        },
    ],
}


class PlanSchema(BaseModel):
    """A tariff as written in a catalog file."""

    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    name_ru: str = ""
    duration_minutes: StrictInt = Field(..., gt=0)
    price_weekday: int = Field(..., ge=0)
    price_weekend: int = Field(..., ge=0)
    available_from_hour: Optional[StrictInt] = Field(None, ge=0, le=23)
    available_to_hour: Optional[StrictInt] = Field(None, ge=0, le=23)
    per_minute: StrictBool = False
    display_only: StrictBool = False
    description: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("price_weekday", "price_weekend", mode="before")
    @classmethod
    def price_is_a_number(cls, value: Any) -> Any:
        # whole floats such as 349.0 are accepted, numeric strings and bools are not
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("must be a number")
        return value

    def to_plan(self) -> Plan:
        return Plan(
            id=self.id,
            name=self.name or self.id,
            name_ru=self.name_ru,
            duration_minutes=self.duration_minutes,
            price_weekday=self.price_weekday,
            price_weekend=self.price_weekend,
            available_from_hour=self.available_from_hour,
            available_to_hour=self.available_to_hour,
            per_minute=self.per_minute,
            display_only=self.display_only,
            description=self.description,
        )


class ZoneSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    name_ru: str = ""
    description: Optional[str] = None
    seats: Optional[StrictInt] = Field(None, ge=0)
    plans: list[PlanSchema] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def to_zone(self) -> Zone:
        return Zone(
            id=self.id,
            name=self.name or self.id,
            name_ru=self.name_ru,
            description=self.description,
            seats=self.seats,
            plans=tuple(p.to_plan() for p in self.plans),
        )


class BranchSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    color: str = "#ffffff"
    address: Optional[str] = None
    is_active: StrictBool = True
    zones: list[ZoneSchema] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def to_branch(self) -> Branch:
        return Branch(
            id=self.id,
            name=self.name or self.id,
            color=self.color,
            address=self.address,
            is_active=self.is_active,
            zones=tuple(z.to_zone() for z in self.zones),
        )


class CatalogSchema(BaseModel):
    branches: list[BranchSchema] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc']) or 'catalog'}: {e['msg']}"
        for e in error.errors()
    )


def validate_plan(raw: Any) -> Plan:
    """Build a Plan from a catalog dict, rejecting invalid data."""
    try:
        return PlanSchema.model_validate(raw).to_plan()
    except ValidationError as e:
        raise CatalogError(f"Invalid plan: {_describe(e)}") from e


def parse_catalog(data: Any) -> tuple[Branch, ...]:
    """Validate catalog data and turn it into Branch records."""
    try:
        catalog = CatalogSchema.model_validate(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog: {_describe(e)}") from e
    return tuple(b.to_branch() for b in catalog.branches)


def load_catalog(path: Path) -> tuple[Branch, ...]:
    """Load and validate a JSON catalog file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogError(f"{path}: invalid JSON ({e})") from e
    branches = parse_catalog(data)
    logger.debug(f"Loaded {len(branches)} branches from {path}")
    return branches


ALL_BRANCHES: tuple[Branch, ...] = parse_catalog(DEFAULT_CATALOG)


def get_branch_by_id(branch_id: str, branches=ALL_BRANCHES) -> Optional[Branch]:
    return next((b for b in branches if b.id == branch_id), None)


def get_zone_by_id(branch_id: str, zone_id: str, branches=ALL_BRANCHES) -> Optional[Zone]:
    branch = get_branch_by_id(branch_id, branches)
    if branch is None:
        return None
    return next((z for z in branch.zones if z.id == zone_id), None)


def get_plans(branch_id: str, zone_id: str, branches=ALL_BRANCHES) -> tuple[Plan, ...]:
    """Tariffs of a zone, or an empty tuple for an unknown branch/zone."""
    zone = get_zone_by_id(branch_id, zone_id, branches)
    return zone.plans if zone else ()


def get_active_branches(branches=ALL_BRANCHES) -> list[Branch]:
    return [b for b in branches if b.is_active]


def get_available_zones(branch_id: str, branches=ALL_BRANCHES) -> tuple[Zone, ...]:
    branch = get_branch_by_id(branch_id, branches)
    return branch.zones if branch else ()


def default_branch(branches=ALL_BRANCHES) -> Branch:
    """First active branch, falling back to the first one listed."""
    active = get_active_branches(branches)
    if active:
        return active[0]
    if not branches:
        raise CatalogError("Catalog has no branches")
    return branches[0]
