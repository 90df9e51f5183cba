from __future__ import annotations

import math

from fuel_stops.services.polyline import evenly_spaced_indices
from fuel_stops.services.types import Coordinate, GeoPoint

MAX_ROUTE_SEARCH_POINTS = 12
MIN_ROUTE_SEARCH_POINTS = 4
ROUTE_MILES_PER_SEARCH_POINT = 120.0

MAX_LINEAR_INTERMEDIATE_POINTS = 8
MIN_LINEAR_INTERMEDIATE_POINTS = 2
LINEAR_MILES_PER_SEARCH_POINT = 150.0


def build_route_search_points(
    coordinates: list[Coordinate], total_distance_miles: float, max_stops: int
) -> list[GeoPoint]:
    desired_points = min(
        MAX_ROUTE_SEARCH_POINTS,
        max(
            max(MIN_ROUTE_SEARCH_POINTS, max_stops + 2),
            math.ceil(total_distance_miles / ROUTE_MILES_PER_SEARCH_POINT),
        ),
    )
    points = [
        GeoPoint(latitude=coordinates[index][1], longitude=coordinates[index][0])
        for index in evenly_spaced_indices(len(coordinates), desired_points)
    ]
    return _dedupe(points)


def build_linear_search_points(
    origin: GeoPoint, destination: GeoPoint, total_distance_miles: float, max_stops: int
) -> list[GeoPoint]:
    # Interpolated in lat/lon space; coarse sampling only.
    intermediate_count = min(
        MAX_LINEAR_INTERMEDIATE_POINTS,
        max(
            MIN_LINEAR_INTERMEDIATE_POINTS,
            math.ceil(total_distance_miles / LINEAR_MILES_PER_SEARCH_POINT),
            max_stops,
        ),
    )

    points = [origin]
    for index in range(1, intermediate_count + 1):
        fraction = index / (intermediate_count + 1)
        points.append(
            GeoPoint(
                latitude=origin.latitude + (destination.latitude - origin.latitude) * fraction,
                longitude=origin.longitude + (destination.longitude - origin.longitude) * fraction,
            )
        )
    points.append(destination)
    return _dedupe(points)


def _dedupe(points: list[GeoPoint]) -> list[GeoPoint]:
    seen: set[tuple[float, float]] = set()
    unique: list[GeoPoint] = []
    for point in points:
        key = (round(point.latitude, 4), round(point.longitude, 4))
        if key in seen:
            continue
        seen.add(key)
        unique.append(point)
    return unique
