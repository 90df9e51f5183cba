from __future__ import annotations

import math

from fuel_stops.services.geo import distance_between, haversine_miles, local_flat_xy
from fuel_stops.services.types import Coordinate, GeoPoint, Projection, RoutePath


def build_cumulative_miles(coordinates: list[Coordinate]) -> list[float]:
    if not coordinates:
        return []

    cumulative = [0.0]
    for index in range(1, len(coordinates)):
        prev_lon, prev_lat = coordinates[index - 1]
        lon, lat = coordinates[index]
        cumulative.append(cumulative[-1] + haversine_miles(prev_lat, prev_lon, lat, lon))
    return cumulative


def build_route_path(
    coordinates: list[Coordinate],
    total_distance_miles: float | None = None,
    encoded_polyline: str | None = None,
) -> RoutePath:
    cumulative = build_cumulative_miles(coordinates)
    if total_distance_miles is None:
        total_distance_miles = cumulative[-1] if cumulative else 0.0
    return RoutePath(
        coordinates=coordinates,
        cumulative_miles=cumulative,
        total_distance_miles=total_distance_miles,
        encoded_polyline=encoded_polyline,
    )


def straight_line_route(origin: GeoPoint, destination: GeoPoint) -> RoutePath:
    """Two-point stand-in used when no road route is available."""
    return build_route_path(
        [origin.as_coordinate(), destination.as_coordinate()],
        total_distance_miles=distance_between(origin, destination),
    )


def project_point_onto_route(
    point: GeoPoint,
    coordinates: list[Coordinate],
    cumulative_miles: list[float],
) -> Projection:
    """Nearest position on the polyline to ``point``.

    Each segment is measured in a flat frame centred on its own midpoint, so
    the planar error is bounded by the segment length rather than the route
    length.
    """
    if len(coordinates) < 2:
        return Projection(miles_along_route=0.0, distance_from_route_miles=0.0)

    best_distance = math.inf
    best_milepost = 0.0

    for index in range(len(coordinates) - 1):
        start_lon, start_lat = coordinates[index]
        end_lon, end_lat = coordinates[index + 1]
        ref_lon = (start_lon + end_lon) / 2.0
        ref_lat = (start_lat + end_lat) / 2.0

        start_x, start_y = local_flat_xy(start_lon, start_lat, ref_lon, ref_lat)
        end_x, end_y = local_flat_xy(end_lon, end_lat, ref_lon, ref_lat)
        point_x, point_y = local_flat_xy(point.longitude, point.latitude, ref_lon, ref_lat)

        vector_x = end_x - start_x
        vector_y = end_y - start_y
        vector_norm_sq = vector_x * vector_x + vector_y * vector_y
        if vector_norm_sq == 0:
            continue

        t = ((point_x - start_x) * vector_x + (point_y - start_y) * vector_y) / vector_norm_sq
        t = max(0.0, min(1.0, t))

        projected_x = start_x + t * vector_x
        projected_y = start_y + t * vector_y
        distance = math.hypot(point_x - projected_x, point_y - projected_y)

        if distance < best_distance:
            segment_length = cumulative_miles[index + 1] - cumulative_miles[index]
            best_distance = distance
            best_milepost = cumulative_miles[index] + (t * segment_length)

    if not math.isfinite(best_distance):
        return Projection(miles_along_route=0.0, distance_from_route_miles=0.0)

    return Projection(miles_along_route=best_milepost, distance_from_route_miles=best_distance)


def project_onto_path(point: GeoPoint, route: RoutePath) -> Projection:
    return project_point_onto_route(point, route.coordinates, route.cumulative_miles)
