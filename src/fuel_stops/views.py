from __future__ import annotations

from django.conf import settings
from django.core.cache import caches
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET
from pydantic import ValidationError

from fuel_stops.exceptions import ConfigurationError
from fuel_stops.schemas import FuelStopsRequest
from fuel_stops.services.directions import OsrmDirectionsClient
from fuel_stops.services.places import GooglePlacesClient
from fuel_stops.services.planner import FuelStopPlannerService
from fuel_stops.services.route_cache import RouteCache

_planner_service: FuelStopPlannerService | None = None


def get_fuel_stop_planner() -> FuelStopPlannerService:
    global _planner_service
    if _planner_service is None:
        route_cache = RouteCache(caches["routes"], settings.ROUTE_CACHE_TTL_SECONDS)
        _planner_service = FuelStopPlannerService(
            directions=OsrmDirectionsClient(route_cache=route_cache),
            places=GooglePlacesClient(),
        )
    return _planner_service


@require_GET
def health_view(_: HttpRequest) -> HttpResponse:
    return JsonResponse(
        {
            "status": "ok",
            "providers": {
                "places_configured": bool(settings.GOOGLE_PLACES_API_KEY),
                "directions_base_url": settings.OSRM_BASE_URL,
            },
        }
    )


@require_GET
def fuel_stops_view(request: HttpRequest) -> HttpResponse:
    payload = {key: value for key, value in request.GET.items() if value != ""}

    try:
        stops_request = FuelStopsRequest.model_validate(payload)
    except ValidationError as exc:
        return JsonResponse(
            {
                "error": {
                    "code": "validation_error",
                    "message": "Invalid request parameters",
                    "details": exc.errors(include_url=False, include_context=False),
                }
            },
            status=400,
        )

    try:
        planner = get_fuel_stop_planner()
    except ConfigurationError as exc:
        return _error_response("configuration_error", str(exc), status=500)

    response = planner.plan(stops_request)
    return JsonResponse(response.model_dump(mode="json", by_alias=True), status=200)


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)
