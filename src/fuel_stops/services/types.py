from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Route coordinates are (longitude, latitude) pairs, GeoJSON order.
Coordinate = tuple[float, float]


@dataclass(slots=True, frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def as_coordinate(self) -> Coordinate:
        return (self.longitude, self.latitude)


@dataclass(slots=True, frozen=True)
class RoutePath:
    coordinates: list[Coordinate]
    cumulative_miles: list[float]
    total_distance_miles: float
    encoded_polyline: str | None = None

    def __post_init__(self) -> None:
        if len(self.cumulative_miles) != len(self.coordinates):
            raise ValueError("cumulative_miles must be parallel to coordinates")

    @property
    def is_straight_line(self) -> bool:
        return self.encoded_polyline is None and len(self.coordinates) <= 2


@dataclass(slots=True, frozen=True)
class Projection:
    miles_along_route: float
    distance_from_route_miles: float


@dataclass(slots=True, frozen=True)
class RawPlace:
    place_id: str
    name: str
    address: str
    city: str
    state: str
    latitude: float
    longitude: float
    rating: float = 0.0
    review_count: int = 0
    types: tuple[str, ...] = ()
    price_level: int | None = None
    fuel_price: float | None = None
    fuel_types: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class Candidate:
    candidate_id: str
    name: str
    brand: str
    address: str
    city: str
    state: str
    position: GeoPoint
    rating: float
    review_count: int
    has_parking: bool
    has_diesel: bool
    amenities: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    price: float | None = None
    price_level: int | None = None


@dataclass(slots=True, frozen=True)
class ProjectedCandidate:
    candidate: Candidate
    miles_along_route: float
    distance_from_route_miles: float


@dataclass(slots=True, frozen=True)
class ScoredCandidate:
    projected: ProjectedCandidate
    score: float

    @property
    def miles_along_route(self) -> float:
        return self.projected.miles_along_route


class PlannerState(str, Enum):
    NO_ROUTE = "no_route"
    ROUTE_FETCHED = "route_fetched"
    SEARCHED_ALONG_ROUTE = "searched_along_route"
    FALLBACK_WAYPOINT_SEARCH = "fallback_waypoint_search"
    SELECTED = "selected"


@dataclass(slots=True)
class FuelStopSearch:
    route: RoutePath
    stops: list[ProjectedCandidate]
    strategy: str
    states: list[PlannerState] = field(default_factory=list)
