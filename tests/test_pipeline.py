"""Unit tests for the filter/search pipeline and statistics."""

import pytest

from carvault.catalog.pipeline import compute_statistics, count_label, filter_vehicles
from carvault.catalog.schemas import CATEGORIES, Vehicle

from .helpers import vehicle_doc


def _vehicle(vid: str, **fields) -> Vehicle:
    return Vehicle.from_document(vid, vehicle_doc(**fields))


@pytest.fixture
def fleet() -> list:
    return [
        _vehicle("a", make="Tata", model="Nexon", chassis="TN001", category="SUV"),
        _vehicle("b", make="Honda", model="City", chassis="HC002", category="Sedan"),
        _vehicle("c", make="Mahindra", model="XUV700", chassis="MX003", category="SUV"),
        _vehicle("d", make="Hyundai", model="Verna", chassis="HV004", category="Sedan"),
        _vehicle("e", make="Kia", model="Seltos", chassis="KS005", category="SUV"),
    ]


def test_all_filter_without_search_keeps_everything_in_order(fleet):
    result = filter_vehicles(fleet, "All", "")
    assert [v.id for v in result] == ["a", "b", "c", "d", "e"]


def test_category_filter_three_suvs(fleet):
    result = filter_vehicles(fleet, "SUV", "")
    assert len(result) == 3
    assert all(v.category == "SUV" for v in result)
    assert count_label(len(result)) == "3 VEHICLES AVAILABLE"


@pytest.mark.parametrize("category", CATEGORIES)
def test_filter_only_returns_requested_category(fleet, category):
    assert all(v.category == category for v in filter_vehicles(fleet, category, ""))


def test_search_is_case_insensitive_across_make_model_and_chassis(fleet):
    assert [v.id for v in filter_vehicles(fleet, "All", "HONDA")] == ["b"]
    assert [v.id for v in filter_vehicles(fleet, "All", "xuv")] == ["c"]
    assert [v.id for v in filter_vehicles(fleet, "All", "hv00")] == ["d"]


@pytest.mark.parametrize("term", ["a", "N", "00", "sel", "zzz"])
def test_every_search_hit_contains_the_term(fleet, term):
    needle = term.lower()
    for v in filter_vehicles(fleet, "All", term):
        assert needle in v.make.lower() or needle in v.model.lower() or needle in v.chassis.lower()


def test_filter_and_search_compose(fleet):
    result = filter_vehicles(fleet, "Sedan", "h")
    assert [v.id for v in result] == ["b", "d"]
    assert filter_vehicles(fleet, "SUV", "city") == []


def test_search_term_is_not_trimmed(fleet):
    assert filter_vehicles(fleet, "All", " tata") == []


def test_pipeline_is_idempotent(fleet):
    first = filter_vehicles(fleet, "SUV", "a")
    second = filter_vehicles(fleet, "SUV", "a")
    assert first == second


def test_pipeline_does_not_mutate_source(fleet):
    before = list(fleet)
    filter_vehicles(fleet, "Sedan", "x")
    assert fleet == before


def test_statistics_cover_the_full_sequence(fleet):
    stats = compute_statistics(fleet)
    assert stats.total == 5
    assert stats.by_category == {"SUV": 3, "Sedan": 2, "Hatchback": 0, "Sub4m": 0}


def test_statistics_treat_unparsable_prices_as_zero():
    vehicles = [
        _vehicle("a", price=500000),
        _vehicle("b", price="abc"),
        _vehicle("c", price=None),
        _vehicle("d", price="250000.5"),
    ]
    stats = compute_statistics(vehicles)
    assert stats.total == 4
    assert stats.total_value == pytest.approx(750000.5)


def test_statistics_ignore_unknown_categories():
    stats = compute_statistics([_vehicle("a", category="Coupe")])
    assert stats.total == 1
    assert sum(stats.by_category.values()) == 0


@pytest.mark.parametrize(
    "count, label",
    [(0, "0 VEHICLES AVAILABLE"), (1, "1 VEHICLE AVAILABLE"), (2, "2 VEHICLES AVAILABLE")],
)
def test_count_label_pluralization(count, label):
    assert count_label(count) == label
