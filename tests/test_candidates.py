from __future__ import annotations

import math

import pytest
from factories import make_place

from fuel_stops.services.candidates import (
    build_candidate,
    classify_brand,
    collect_candidates,
    estimate_amenities,
    is_truck_stop,
    project_candidates,
)
from fuel_stops.services.types import RoutePath

MILES_PER_DEGREE_LON_NEAR_35 = math.cos(math.radians(35.25)) * 69.172


@pytest.mark.parametrize(
    ("name", "brand"),
    [
        ("Pilot Travel Center", "pilot"),
        ("Flying J Travel Plaza", "pilot"),
        ("Love's Travel Stop", "loves"),
        ("TA Express", "ta"),
        ("Petro Stopping Center", "ta"),
        ("Sapp Bros.", "sapp"),
        ("Buc-ee's", "bucees"),
        ("Shell", "shell"),
        ("Exxon", "exxon"),
        ("Chevron", "chevron"),
        ("BP", "bp"),
        ("Joe's Gas", "generic"),
    ],
)
def test_classify_brand(name: str, brand: str) -> None:
    assert classify_brand(name) == brand


def test_major_brands_get_truck_stop_amenities() -> None:
    assert estimate_amenities(["gas_station"], "loves") == [
        "Showers",
        "Restaurant",
        "WiFi",
        "Parking",
    ]


def test_amenities_are_inferred_from_place_types() -> None:
    types = ["gas_station", "food", "convenience_store", "car_wash"]

    amenities = estimate_amenities(types, "shell")

    assert amenities == ["Restaurant", "Convenience Store", "Car Wash", "Restrooms"]
    assert estimate_amenities(["gas_station"], "generic") == ["Restrooms"]


def test_build_candidate_derives_flags() -> None:
    major = build_candidate(make_place("1", 30.0, -100.0, name="Pilot Travel Center"))
    local = build_candidate(
        make_place("2", 30.0, -100.0, name="Corner Gas", city="", fuel_types=("REGULAR_UNLEADED",))
    )

    assert major.brand == "pilot"
    assert major.has_parking
    assert major.has_diesel
    assert not local.has_parking
    assert not local.has_diesel
    assert local.city == "Unknown"


def test_truck_stop_filter_needs_chain_or_keyword_and_gas_station() -> None:
    chain = build_candidate(make_place("1", 30.0, -100.0, name="Love's Travel Stops #412"))
    keyword = build_candidate(make_place("2", 30.0, -100.0, name="Big Rig Truck Stop"))
    not_fuel = build_candidate(
        make_place("3", 30.0, -100.0, name="Big Rig Truck Stop", types=("restaurant",))
    )
    plain = build_candidate(make_place("4", 30.0, -100.0, name="Corner Gas"))

    assert is_truck_stop(chain)
    assert is_truck_stop(keyword)
    assert not is_truck_stop(not_fuel)
    assert not is_truck_stop(plain)


def test_first_seen_place_wins_on_duplicate_ids() -> None:
    seen: set[str] = set()
    first = make_place("dup", 30.0, -100.0, name="First")
    second = make_place("dup", 31.0, -100.0, name="Second")

    candidates = collect_candidates([first, second, make_place("other", 32.0, -100.0)], seen)
    again = collect_candidates([make_place("dup", 33.0, -100.0)], seen)

    assert [candidate.name for candidate in candidates] == ["First", "Station other"]
    assert again == []


def test_candidates_beyond_thirty_miles_are_dropped(north_route: RoutePath) -> None:
    inside = build_candidate(
        make_place("inside", 35.1, -100.0 + 29.0 / MILES_PER_DEGREE_LON_NEAR_35)
    )
    outside = build_candidate(
        make_place("outside", 35.1, -100.0 + 31.0 / MILES_PER_DEGREE_LON_NEAR_35)
    )

    projected = project_candidates([inside, outside], north_route)

    assert [value.candidate.candidate_id for value in projected] == ["inside"]
    assert projected[0].distance_from_route_miles == pytest.approx(29.0, rel=1e-6)


def test_distance_limit_follows_settings(settings, north_route: RoutePath) -> None:
    settings.MAX_DISTANCE_FROM_ROUTE_MILES = 10
    near = build_candidate(make_place("near", 35.1, -100.0 + 9.0 / MILES_PER_DEGREE_LON_NEAR_35))
    far = build_candidate(make_place("far", 35.1, -100.0 + 12.0 / MILES_PER_DEGREE_LON_NEAR_35))

    projected = project_candidates([near, far], north_route)

    assert [value.candidate.candidate_id for value in projected] == ["near"]
