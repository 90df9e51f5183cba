from __future__ import annotations

import time
from typing import Any

import httpx
from django.conf import settings

from fuel_stops.exceptions import ExternalProviderError, NoRouteFoundError
from fuel_stops.services.route_cache import RouteCache
from fuel_stops.services.route_geometry import build_route_path
from fuel_stops.services.types import GeoPoint, RoutePath

METERS_TO_MILES = 0.000621371


class OsrmDirectionsClient:
    def __init__(self, route_cache: RouteCache | None = None) -> None:
        self.base_url = settings.OSRM_BASE_URL.rstrip("/")
        self.timeout = settings.OSRM_TIMEOUT_SECONDS
        self.retry_count = settings.OSRM_RETRY_COUNT
        self.route_cache = route_cache

    def get_route(self, origin: GeoPoint, destination: GeoPoint) -> RoutePath:
        if self.route_cache is not None:
            cached = self.route_cache.get(origin, destination)
            if cached is not None:
                return cached

        coordinates = ";".join(
            f"{point.longitude:.6f},{point.latitude:.6f}" for point in (origin, destination)
        )
        endpoint = f"{self.base_url}/route/v1/driving/{coordinates}"
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
            "annotations": "false",
        }

        for attempt in range(self.retry_count + 1):
            try:
                response = httpx.get(endpoint, params=params, timeout=self.timeout)
                response.raise_for_status()
                route = self._parse_response(response.json())
                if self.route_cache is not None:
                    self.route_cache.set(origin, destination, route)
                return route
            except NoRouteFoundError:
                raise
            except (httpx.HTTPError, ValueError) as exc:
                if attempt >= self.retry_count:
                    raise ExternalProviderError("OSRM request failed") from exc
                time.sleep(0.3 * (attempt + 1))

        raise ExternalProviderError("OSRM request failed")

    @staticmethod
    def _parse_response(payload: Any) -> RoutePath:
        if not isinstance(payload, dict) or payload.get("code") != "Ok":
            raise NoRouteFoundError("Could not compute route")

        routes = payload.get("routes")
        if not isinstance(routes, list) or not routes:
            raise NoRouteFoundError("Could not compute route")

        first = routes[0]
        if not isinstance(first, dict):
            raise NoRouteFoundError("Route entry malformed")

        try:
            coordinates = [
                (float(coord[0]), float(coord[1]))
                for coord in (first.get("geometry") or {}).get("coordinates") or []
            ]
            distance_miles = float(first.get("distance") or 0.0) * METERS_TO_MILES
        except (AttributeError, IndexError, TypeError, ValueError) as exc:
            raise NoRouteFoundError("Route geometry malformed") from exc
        if len(coordinates) < 2:
            raise NoRouteFoundError("Route geometry unavailable")

        return build_route_path(coordinates, total_distance_miles=distance_miles or None)
