from __future__ import annotations

import hashlib
from typing import Any

from django.core.cache import BaseCache

from fuel_stops.services.types import GeoPoint, RoutePath


class RouteCache:
    """Routes keyed by origin/destination pair, held for ``ttl_seconds``."""

    def __init__(self, backend: BaseCache, ttl_seconds: int) -> None:
        self.backend = backend
        self.ttl_seconds = ttl_seconds

    def get(self, origin: GeoPoint, destination: GeoPoint) -> RoutePath | None:
        cached: dict[str, Any] | None = self.backend.get(self._cache_key(origin, destination))
        if not cached:
            return None
        return RoutePath(
            coordinates=[tuple(coord) for coord in cached["coordinates"]],
            cumulative_miles=list(cached["cumulative_miles"]),
            total_distance_miles=cached["total_distance_miles"],
            encoded_polyline=cached.get("encoded_polyline"),
        )

    def set(self, origin: GeoPoint, destination: GeoPoint, route: RoutePath) -> None:
        self.backend.set(
            self._cache_key(origin, destination),
            {
                "coordinates": route.coordinates,
                "cumulative_miles": route.cumulative_miles,
                "total_distance_miles": route.total_distance_miles,
                "encoded_polyline": route.encoded_polyline,
            },
            timeout=self.ttl_seconds,
        )

    @staticmethod
    def _cache_key(origin: GeoPoint, destination: GeoPoint) -> str:
        encoded = "|".join(
            f"{point.latitude:.5f}:{point.longitude:.5f}" for point in (origin, destination)
        ).encode()
        digest = hashlib.sha256(encoded).hexdigest()
        return f"route:{digest}"
