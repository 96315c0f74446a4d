"""Tests for the venue catalog."""

import json

import pytest

from tariff_calc.catalog import (
    ALL_BRANCHES,
    CatalogError,
    default_branch,
    get_active_branches,
    get_available_zones,
    get_branch_by_id,
    get_plans,
    get_zone_by_id,
    load_catalog,
    parse_catalog,
    validate_plan,
)


def plan_dict(**overrides) -> dict:
    raw = {
        "id": "triple-kill",
        "name": "Triple Kill",
        "duration_minutes": 180,
        "price_weekday": 349,
        "price_weekend": 399,
    }
    raw.update(overrides)
    return raw


def test_builtin_catalog_lookup():
    branch = get_branch_by_id("muzhestva")
    assert branch is not None
    assert branch.is_active

    zone = get_zone_by_id("muzhestva", "vip")
    assert zone.name == "VIP"
    assert all(p.id.startswith("vip-") for p in zone.plans)


def test_unknown_ids_return_nothing():
    assert get_branch_by_id("mars") is None
    assert get_zone_by_id("muzhestva", "mars") is None
    assert get_zone_by_id("mars", "normal") is None
    assert get_plans("mars", "normal") == ()
    assert get_available_zones("mars") == ()


def test_builtin_zones_have_one_per_minute_plan_first():
    for branch in get_active_branches():
        for zone in branch.zones:
            per_minute = [p for p in zone.plans if p.per_minute]
            assert len(per_minute) == 1
            assert zone.plans[0].per_minute


def test_builtin_display_only_plan():
    plans = get_plans("muzhestva", "normal")
    app_only = [p for p in plans if p.display_only]
    assert [p.id for p in app_only] == ["cyber-24"]


def test_night_plan_wraps_midnight():
    night = next(p for p in get_plans("kirenskogo", "normal") if p.id == "cyber-night")
    assert night.available_from_hour == 22
    assert night.available_to_hour == 8


def test_inactive_branches_have_no_zones():
    inactive = [b for b in ALL_BRANCHES if not b.is_active]
    assert inactive
    assert all(b.zones == () for b in inactive)
    assert all(b.is_active for b in get_active_branches())


def test_default_branch_is_first_active():
    assert default_branch().id == "muzhestva"
    closed = parse_catalog({"branches": [{"id": "x", "is_active": False}]})
    assert default_branch(closed).id == "x"
    with pytest.raises(CatalogError):
        default_branch(())


def test_validate_plan_defaults():
    plan = validate_plan(plan_dict())
    assert plan.name == "Triple Kill"
    assert plan.per_minute is False
    assert plan.display_only is False
    assert plan.available_from_hour is None


def test_validate_plan_accepts_whole_float_prices():
    plan = validate_plan(plan_dict(price_weekday=349.0))
    assert plan.price_weekday == 349
    assert isinstance(plan.price_weekday, int)


@pytest.mark.parametrize("overrides", [
    {"duration_minutes": 0},
    {"duration_minutes": -60},
    {"duration_minutes": "180"},
    {"price_weekday": -1},
    {"price_weekend": 10.5},
    {"price_weekend": None},
    {"available_from_hour": 24},
    {"available_to_hour": -1},
    {"id": ""},
    {"duration_minutes": True},
    {"duration_minutes": 180.5},
    {"price_weekday": True},
    {"price_weekday": "349"},
    {"per_minute": "false"},
    {"display_only": 1},
    {"available_from_hour": "22"},
    {"colour": "red"},
])
def test_validate_plan_rejects_bad_data(overrides):
    with pytest.raises(CatalogError):
        validate_plan(plan_dict(**overrides))


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "branches": [{
            "id": "test", "name": "Test", "color": "#000000",
            "zones": [{"id": "normal", "name": "Standard", "plans": [
                plan_dict(),
                plan_dict(id="minute", duration_minutes=60, price_weekday=100,
                          price_weekend=120, per_minute=True),
            ]}],
        }],
    }), encoding="utf-8")

    branches = load_catalog(path)
    assert [b.id for b in branches] == ["test"]
    plans = get_plans("test", "normal", branches)
    assert [p.id for p in plans] == ["triple-kill", "minute"]
    assert plans[1].per_minute


def test_load_catalog_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_load_catalog_missing_field(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"branches": [{"name": "No id"}]}), encoding="utf-8")
    with pytest.raises(CatalogError, match="Field required"):
        load_catalog(path)


def test_load_catalog_rejects_zero_duration(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"branches": [{
        "id": "b", "zones": [{"id": "z", "plans": [plan_dict(duration_minutes=0)]}],
    }]}), encoding="utf-8")
    with pytest.raises(CatalogError, match="duration_minutes"):
        load_catalog(path)


def test_load_catalog_string_flag_is_not_truthy(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"branches": [{
        "id": "b", "zones": [{"id": "z", "plans": [plan_dict(per_minute="false")]}],
    }]}), encoding="utf-8")
    with pytest.raises(CatalogError, match="per_minute"):
        load_catalog(path)


@pytest.mark.parametrize("content", ["[]", '"branches"', "null", '{"branches": {}}'])
def test_load_catalog_wrong_top_level_shape(tmp_path, content):
    path = tmp_path / "catalog.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_parse_catalog_rejects_unknown_branch_fields():
    with pytest.raises(CatalogError, match="is_open"):
        parse_catalog({"branches": [{"id": "x", "is_open": False}]})
