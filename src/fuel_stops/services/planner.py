from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from django.conf import settings

from fuel_stops.exceptions import ExternalProviderError
from fuel_stops.schemas import (
    FuelStopResponse,
    FuelStopsRequest,
    FuelStopsResponse,
    LocationResponse,
    RouteInfoResponse,
)
from fuel_stops.services.candidates import collect_candidates, is_truck_stop, project_candidates
from fuel_stops.services.polyline import encode, simplify
from fuel_stops.services.route_geometry import build_route_path, straight_line_route
from fuel_stops.services.search_points import (
    build_linear_search_points,
    build_route_search_points,
)
from fuel_stops.services.selection import select_distributed_stops
from fuel_stops.services.types import (
    Candidate,
    FuelStopSearch,
    GeoPoint,
    PlannerState,
    ProjectedCandidate,
    RawPlace,
    RoutePath,
)

logger = logging.getLogger(__name__)


class DirectionsProvider(Protocol):
    def get_route(self, origin: GeoPoint, destination: GeoPoint) -> RoutePath | None: ...


class PlacesProvider(Protocol):
    def search_nearby(self, point: GeoPoint, radius_miles: float) -> list[RawPlace]: ...

    def search_along_route(self, encoded_polyline: str, max_results: int) -> list[RawPlace]: ...


class FuelStopPlannerService:
    """Finds a bounded, evenly spread set of fuel stops for one trip.

    Every call builds its own route and candidate pool; nothing is shared
    between requests except the providers themselves.
    """

    def __init__(
        self,
        directions: DirectionsProvider,
        places: PlacesProvider,
    ) -> None:
        self.directions = directions
        self.places = places

    def plan(self, request: FuelStopsRequest) -> FuelStopsResponse:
        origin = GeoPoint(latitude=request.origin_lat, longitude=request.origin_lon)
        destination = GeoPoint(latitude=request.dest_lat, longitude=request.dest_lon)

        search = self.search(
            origin,
            destination,
            request.max_stops,
            truck_stops_only=request.truck_stops_only,
        )

        return FuelStopsResponse(
            success=True,
            fuel_stops=[
                FuelStopResponse(
                    id=stop.candidate.candidate_id,
                    name=stop.candidate.name,
                    brand=stop.candidate.brand,
                    address=stop.candidate.address,
                    city=stop.candidate.city,
                    state=stop.candidate.state,
                    lat=stop.candidate.position.latitude,
                    lon=stop.candidate.position.longitude,
                    price=stop.candidate.price,
                    price_level=stop.candidate.price_level,
                    amenities=list(stop.candidate.amenities),
                    distance_from_route=round(stop.distance_from_route_miles, 1),
                    miles_along_route=round(stop.miles_along_route),
                    has_parking=stop.candidate.has_parking,
                    has_diesel=stop.candidate.has_diesel,
                    rating=stop.candidate.rating,
                    review_count=stop.candidate.review_count,
                )
                for stop in search.stops
            ],
            total_distance_miles=round(search.route.total_distance_miles),
            route_info=RouteInfoResponse(
                origin=LocationResponse(lat=origin.latitude, lon=origin.longitude),
                destination=LocationResponse(lat=destination.latitude, lon=destination.longitude),
            ),
        )

    def search(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        max_stops: int,
        *,
        truck_stops_only: bool = False,
    ) -> FuelStopSearch:
        states = [PlannerState.NO_ROUTE]
        route = self._fetch_route(origin, destination)
        states.append(PlannerState.ROUTE_FETCHED)

        seen_ids: set[str] = set()
        projected: list[ProjectedCandidate] = []
        strategy = "along_route"

        if route.encoded_polyline is not None:
            states.append(PlannerState.SEARCHED_ALONG_ROUTE)
            try:
                places = self.places.search_along_route(
                    route.encoded_polyline, settings.PLACES_MAX_RESULTS
                )
            except ExternalProviderError as exc:
                logger.warning("Along-route place search failed: %s", exc)
                places = []
            candidates = self._filter(collect_candidates(places, seen_ids), truck_stops_only)
            projected = project_candidates(candidates, route)
            if not projected:
                logger.info("Along-route search found no usable candidates; sampling waypoints")

        if not projected:
            states.append(PlannerState.FALLBACK_WAYPOINT_SEARCH)
            strategy = "waypoints"
            if route.is_straight_line:
                waypoints = build_linear_search_points(
                    origin, destination, route.total_distance_miles, max_stops
                )
            else:
                waypoints = build_route_search_points(
                    route.coordinates, route.total_distance_miles, max_stops
                )
            candidates = self._filter(
                collect_candidates(self._search_waypoints(waypoints), seen_ids), truck_stops_only
            )
            projected = project_candidates(candidates, route)

        stops = select_distributed_stops(
            projected,
            route.total_distance_miles,
            max_stops,
            bucket_miles=float(settings.SELECTION_BUCKET_MILES),
        )
        states.append(PlannerState.SELECTED)

        logger.info(
            "Selected %d of %d fuel stops along %.0f mile route via %s search",
            len(stops),
            len(projected),
            route.total_distance_miles,
            strategy,
        )
        return FuelStopSearch(route=route, stops=stops, strategy=strategy, states=states)

    def _fetch_route(self, origin: GeoPoint, destination: GeoPoint) -> RoutePath:
        try:
            full_route = self.directions.get_route(origin, destination)
        except ExternalProviderError as exc:
            logger.warning("Directions unavailable, using straight-line route: %s", exc)
            return straight_line_route(origin, destination)
        if full_route is None:
            logger.warning("Directions returned no route, using straight-line route")
            return straight_line_route(origin, destination)

        # Projection and transport both run on the capped polyline.
        simplified = simplify(full_route.coordinates, settings.ROUTE_POLYLINE_MAX_POINTS)
        if len(simplified) < 2:
            return straight_line_route(origin, destination)
        return build_route_path(
            simplified,
            total_distance_miles=full_route.total_distance_miles,
            encoded_polyline=encode(simplified),
        )

    def _search_waypoints(self, waypoints: list[GeoPoint]) -> list[RawPlace]:
        if not waypoints:
            return []

        radius_miles = float(settings.PLACES_SEARCH_RADIUS_MILES)
        workers = max(1, min(int(settings.WAYPOINT_SEARCH_CONCURRENCY), len(waypoints)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            batches = list(
                executor.map(lambda point: self._search_waypoint(point, radius_miles), waypoints)
            )

        # Flattened in waypoint order so the first-seen duplicate is stable.
        return [place for batch in batches for place in batch]

    def _search_waypoint(self, point: GeoPoint, radius_miles: float) -> list[RawPlace]:
        try:
            return self.places.search_nearby(point, radius_miles)
        except ExternalProviderError as exc:
            logger.warning(
                "Place search near %.4f,%.4f failed: %s", point.latitude, point.longitude, exc
            )
            return []

    @staticmethod
    def _filter(candidates: list[Candidate], truck_stops_only: bool) -> list[Candidate]:
        if not truck_stops_only:
            return candidates
        return [candidate for candidate in candidates if is_truck_stop(candidate)]
