from __future__ import annotations

import logging
from collections.abc import Iterable

from django.conf import settings

from fuel_stops.services.route_geometry import project_onto_path
from fuel_stops.services.types import Candidate, GeoPoint, ProjectedCandidate, RawPlace, RoutePath

logger = logging.getLogger(__name__)

MAJOR_TRUCK_STOP_BRANDS = ("pilot", "loves", "ta")

_BRAND_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("pilot", "flying j"), "pilot"),
    (("love",), "loves"),
    (("ta ", "petro"), "ta"),
    (("sapp",), "sapp"),
    (("buc-ee",), "bucees"),
    (("shell",), "shell"),
    (("exxon",), "exxon"),
    (("chevron",), "chevron"),
    (("bp",), "bp"),
)

TRUCK_STOP_CHAINS = (
    "pilot flying j",
    "love's travel stops",
    "ta travel centers",
    "petro stopping centers",
    "travelcenters of america",
    "speedway",
    "kwik trip",
    "casey's general store",
    "buc-ee's",
    "maverik",
)

TRUCK_KEYWORDS = ("truck stop", "travel center", "travel plaza", "truck plaza")


def classify_brand(name: str) -> str:
    lowered = name.lower()
    for needles, brand in _BRAND_RULES:
        if any(needle in lowered for needle in needles):
            return brand
    return "generic"


def estimate_amenities(types: Iterable[str], brand: str) -> list[str]:
    if brand in MAJOR_TRUCK_STOP_BRANDS:
        return ["Showers", "Restaurant", "WiFi", "Parking"]

    type_set = set(types)
    amenities: list[str] = []
    if "restaurant" in type_set or "food" in type_set:
        amenities.append("Restaurant")
    if "convenience_store" in type_set:
        amenities.append("Convenience Store")
    if "car_wash" in type_set:
        amenities.append("Car Wash")
    amenities.append("Restrooms")
    return amenities


def is_truck_stop(candidate: Candidate) -> bool:
    name = candidate.name.lower()
    known_chain = any(chain in name for chain in TRUCK_STOP_CHAINS)
    truck_keyword = any(keyword in name for keyword in TRUCK_KEYWORDS)
    return (known_chain or truck_keyword) and "gas_station" in candidate.types


def build_candidate(place: RawPlace) -> Candidate:
    brand = classify_brand(place.name)
    if place.fuel_types:
        has_diesel = any("DIESEL" in fuel_type.upper() for fuel_type in place.fuel_types)
    else:
        has_diesel = True

    return Candidate(
        candidate_id=place.place_id,
        name=place.name,
        brand=brand,
        address=place.address,
        city=place.city or "Unknown",
        state=place.state,
        position=GeoPoint(latitude=place.latitude, longitude=place.longitude),
        rating=place.rating,
        review_count=place.review_count,
        has_parking=brand != "generic",
        has_diesel=has_diesel,
        amenities=tuple(estimate_amenities(place.types, brand)),
        types=place.types,
        price=place.fuel_price,
        price_level=place.price_level,
    )


def collect_candidates(places: Iterable[RawPlace], seen_ids: set[str]) -> list[Candidate]:
    """Turn places into candidates; later duplicates of an id are dropped."""
    candidates: list[Candidate] = []
    for place in places:
        if place.place_id in seen_ids:
            continue
        seen_ids.add(place.place_id)
        candidates.append(build_candidate(place))
    return candidates


def project_candidates(
    candidates: Iterable[Candidate],
    route: RoutePath,
    max_distance_miles: float | None = None,
) -> list[ProjectedCandidate]:
    if max_distance_miles is None:
        max_distance_miles = float(settings.MAX_DISTANCE_FROM_ROUTE_MILES)

    projected: list[ProjectedCandidate] = []
    dropped = 0
    for candidate in candidates:
        projection = project_onto_path(candidate.position, route)
        if projection.distance_from_route_miles > max_distance_miles:
            dropped += 1
            continue
        projected.append(
            ProjectedCandidate(
                candidate=candidate,
                miles_along_route=projection.miles_along_route,
                distance_from_route_miles=projection.distance_from_route_miles,
            )
        )

    if dropped:
        logger.debug(
            "Dropped %d candidates farther than %.0f miles from route",
            dropped,
            max_distance_miles,
        )
    return projected
