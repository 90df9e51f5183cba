from __future__ import annotations

import math

from fuel_stops.services.types import GeoPoint

EARTH_RADIUS_MILES = 3959.0
MILES_PER_DEGREE_LAT = 69.0
MILES_PER_DEGREE_LON_AT_EQUATOR = 69.172


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2.0) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance_between(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_miles(a.latitude, a.longitude, b.latitude, b.longitude)


def local_flat_xy(
    lon: float, lat: float, ref_lon: float, ref_lat: float
) -> tuple[float, float]:
    """Planar (x, y) miles of a point relative to a nearby reference point.

    Only a local approximation: error grows with distance from the reference,
    so callers re-center the reference close to the geometry they measure.
    """
    miles_per_degree_lon = math.cos(math.radians(ref_lat)) * MILES_PER_DEGREE_LON_AT_EQUATOR
    return (lon - ref_lon) * miles_per_degree_lon, (lat - ref_lat) * MILES_PER_DEGREE_LAT
