from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from django.conf import settings

from fuel_stops.exceptions import ConfigurationError, ExternalProviderError, RecordParseError
from fuel_stops.services.types import GeoPoint, RawPlace

logger = logging.getLogger(__name__)

METERS_PER_MILE = 1609.344
MAX_SEARCH_RADIUS_METERS = 50_000.0
MAX_RESULT_COUNT = 20

FIELD_MASK = ",".join(
    f"places.{field}"
    for field in (
        "id",
        "displayName",
        "formattedAddress",
        "addressComponents",
        "location",
        "rating",
        "userRatingCount",
        "types",
        "priceLevel",
        "fuelOptions",
    )
)

PRICE_LEVELS = {
    "PRICE_LEVEL_INEXPENSIVE": 1,
    "PRICE_LEVEL_MODERATE": 2,
    "PRICE_LEVEL_EXPENSIVE": 3,
    "PRICE_LEVEL_VERY_EXPENSIVE": 4,
}


class GooglePlacesClient:
    def __init__(self) -> None:
        api_key = getattr(settings, "GOOGLE_PLACES_API_KEY", "")
        if not api_key:
            raise ConfigurationError("Google Places API key is not configured")
        self.api_key = api_key
        self.base_url = settings.GOOGLE_PLACES_BASE_URL.rstrip("/")
        self.timeout = settings.GOOGLE_PLACES_TIMEOUT_SECONDS
        self.retry_count = settings.GOOGLE_PLACES_RETRY_COUNT

    def search_nearby(self, point: GeoPoint, radius_miles: float) -> list[RawPlace]:
        radius_meters = min(MAX_SEARCH_RADIUS_METERS, radius_miles * METERS_PER_MILE)
        body = {
            "includedTypes": ["gas_station"],
            "maxResultCount": MAX_RESULT_COUNT,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": point.latitude, "longitude": point.longitude},
                    "radius": radius_meters,
                }
            },
        }
        return parse_places(self._post("places:searchNearby", body))

    def search_along_route(self, encoded_polyline: str, max_results: int) -> list[RawPlace]:
        body = {
            "textQuery": settings.PLACES_TEXT_QUERY,
            "includedType": "gas_station",
            "maxResultCount": min(MAX_RESULT_COUNT, max_results),
            "searchAlongRouteParameters": {"polyline": {"encodedPolyline": encoded_polyline}},
        }
        return parse_places(self._post("places:searchText", body))

    def _post(self, method: str, body: dict[str, Any]) -> Any:
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": FIELD_MASK,
        }

        for attempt in range(self.retry_count + 1):
            try:
                response = httpx.post(
                    f"{self.base_url}/{method}",
                    json=body,
                    headers=headers,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                if attempt >= self.retry_count:
                    raise ExternalProviderError(f"Google Places {method} failed") from exc
                time.sleep(0.3 * (attempt + 1))

        raise ExternalProviderError(f"Google Places {method} failed")


def parse_places(payload: Any) -> list[RawPlace]:
    if not isinstance(payload, dict):
        raise ExternalProviderError("Unexpected Google Places response")

    places: list[RawPlace] = []
    for item in payload.get("places") or []:
        try:
            places.append(parse_place(item))
        except RecordParseError as exc:
            logger.warning("Skipping place record: %s", exc)
    return places


def parse_place(item: Any) -> RawPlace:
    if not isinstance(item, dict):
        raise RecordParseError("place record is not an object")

    place_id = item.get("id")
    if not place_id:
        raise RecordParseError("place record has no id")

    location = item.get("location") or {}
    try:
        latitude = float(location["latitude"])
        longitude = float(location["longitude"])
    except (KeyError, TypeError, ValueError) as exc:
        raise RecordParseError(f"place {place_id} has no coordinates") from exc

    try:
        fuel_price, fuel_types = _fuel_price(item)
        city, state = _city_and_state(item.get("addressComponents") or [])
        return RawPlace(
            place_id=str(place_id),
            name=str((item.get("displayName") or {}).get("text") or "Gas Station"),
            address=str(item.get("formattedAddress") or ""),
            city=city,
            state=state,
            latitude=latitude,
            longitude=longitude,
            rating=float(item.get("rating") or 0.0),
            review_count=int(item.get("userRatingCount") or 0),
            types=tuple(str(value) for value in item.get("types") or ()),
            price_level=_price_level(item.get("priceLevel")),
            fuel_price=fuel_price,
            fuel_types=fuel_types,
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise RecordParseError(f"place {place_id} has malformed fields: {exc}") from exc


def parse_money(value: Any) -> float:
    """Parse a plain number or a ``{units, nanos}`` fixed-point money object."""
    if isinstance(value, bool):
        raise RecordParseError(f"unparseable money value: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, dict):
        try:
            units = int(value.get("units") or 0)
            nanos = int(value.get("nanos") or 0)
        except (TypeError, ValueError) as exc:
            raise RecordParseError(f"unparseable money value: {value!r}") from exc
        return units + nanos / 1e9
    raise RecordParseError(f"unparseable money value: {value!r}")


def _fuel_price(item: dict[str, Any]) -> tuple[float | None, tuple[str, ...]]:
    if item.get("fuelPrice") is not None:
        return parse_money(item["fuelPrice"]), ()

    fuel_options = item.get("fuelOptions")
    if not isinstance(fuel_options, dict):
        return None, ()

    fuel_prices = [
        entry for entry in fuel_options.get("fuelPrices") or [] if isinstance(entry, dict)
    ]
    if not fuel_prices:
        return None, ()

    fuel_types = tuple(str(entry.get("type") or "") for entry in fuel_prices)
    preferred = next(
        (entry for entry in fuel_prices if "DIESEL" in str(entry.get("type") or "").upper()),
        fuel_prices[0],
    )
    if preferred.get("price") is None:
        return None, fuel_types
    return parse_money(preferred["price"]), fuel_types


def _price_level(value: Any) -> int | None:
    if isinstance(value, int) and 1 <= value <= 4:
        return value
    if isinstance(value, str):
        return PRICE_LEVELS.get(value)
    return None


def _city_and_state(components: list[dict[str, Any]]) -> tuple[str, str]:
    city = ""
    state = ""
    for component in components:
        types = component.get("types") or []
        if "locality" in types:
            city = component.get("longText") or component.get("long_name") or ""
        if "administrative_area_level_1" in types:
            state = component.get("shortText") or component.get("short_name") or ""
    return city, state
