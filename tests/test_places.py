from __future__ import annotations

import httpx
import pytest

from fuel_stops.exceptions import ConfigurationError, ExternalProviderError, RecordParseError
from fuel_stops.services.places import (
    GooglePlacesClient,
    parse_money,
    parse_place,
    parse_places,
)
from fuel_stops.services.types import GeoPoint

PLACE = {
    "id": "ChIJ-pilot",
    "displayName": {"text": "Pilot Travel Center", "languageCode": "en"},
    "formattedAddress": "100 Interstate Dr, Amarillo, TX 79118, USA",
    "addressComponents": [
        {"longText": "Amarillo", "shortText": "Amarillo", "types": ["locality", "political"]},
        {
            "longText": "Texas",
            "shortText": "TX",
            "types": ["administrative_area_level_1", "political"],
        },
    ],
    "location": {"latitude": 35.16, "longitude": -101.78},
    "rating": 4.1,
    "userRatingCount": 2310,
    "types": ["gas_station", "convenience_store"],
    "priceLevel": "PRICE_LEVEL_MODERATE",
    "fuelOptions": {
        "fuelPrices": [
            {
                "type": "REGULAR_UNLEADED",
                "price": {"currencyCode": "USD", "units": "2", "nanos": 990000000},
            },
            {
                "type": "DIESEL",
                "price": {"currencyCode": "USD", "units": "3", "nanos": 459000000},
            },
        ]
    },
}


def _response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json=payload,
        request=httpx.Request("POST", "https://places.test/v1/places:searchNearby"),
    )


@pytest.fixture
def places_settings(settings):
    settings.GOOGLE_PLACES_API_KEY = "test-key"
    settings.GOOGLE_PLACES_BASE_URL = "https://places.test/v1/"
    settings.GOOGLE_PLACES_RETRY_COUNT = 1
    return settings


def test_parse_place_normalizes_google_fields() -> None:
    place = parse_place(PLACE)

    assert place.place_id == "ChIJ-pilot"
    assert place.name == "Pilot Travel Center"
    assert (place.city, place.state) == ("Amarillo", "TX")
    assert (place.latitude, place.longitude) == (35.16, -101.78)
    assert place.rating == 4.1
    assert place.review_count == 2310
    assert place.price_level == 2
    assert place.fuel_price == pytest.approx(3.459)
    assert place.fuel_types == ("REGULAR_UNLEADED", "DIESEL")


def test_parse_place_accepts_legacy_fields_and_defaults() -> None:
    place = parse_place(
        {
            "id": "legacy",
            "location": {"latitude": "30.5", "longitude": "-97.1"},
            "addressComponents": [
                {"long_name": "Round Rock", "types": ["locality"]},
                {"short_name": "TX", "types": ["administrative_area_level_1"]},
            ],
            "priceLevel": 3,
            "fuelPrice": 3.19,
        }
    )

    assert place.name == "Gas Station"
    assert place.address == ""
    assert (place.city, place.state) == ("Round Rock", "TX")
    assert place.rating == 0.0
    assert place.review_count == 0
    assert place.price_level == 3
    assert place.fuel_price == 3.19


@pytest.mark.parametrize(
    "record",
    [
        {"location": {"latitude": 30.0, "longitude": -97.0}},
        {"id": "no-location"},
        {"id": "bad-location", "location": {"latitude": "north"}},
        {
            "id": "bad-money",
            "location": {"latitude": 30.0, "longitude": -97.0},
            "fuelPrice": "n/a",
        },
        {"id": "bad-rating", "location": {"latitude": 30.0, "longitude": -97.0}, "rating": "n/a"},
        {"id": "bad-name", "location": {"latitude": 30.0, "longitude": -97.0}, "displayName": "X"},
        {
            "id": "bad-address",
            "location": {"latitude": 30.0, "longitude": -97.0},
            "addressComponents": ["Amarillo"],
        },
        {
            "id": "bad-fuel",
            "location": {"latitude": 30.0, "longitude": -97.0},
            "fuelOptions": {"fuelPrices": 3},
        },
        "not-a-record",
    ],
)
def test_parse_place_rejects_unusable_records(record) -> None:
    with pytest.raises(RecordParseError):
        parse_place(record)


def test_parse_money() -> None:
    assert parse_money({"units": "3", "nanos": 500000000}) == pytest.approx(3.5)
    assert parse_money({"units": 4}) == 4.0
    assert parse_money(2.75) == 2.75
    with pytest.raises(RecordParseError):
        parse_money({"units": "three"})
    with pytest.raises(RecordParseError):
        parse_money(True)


def test_parse_places_skips_bad_records_only() -> None:
    places = parse_places({"places": [{"id": "broken"}, PLACE]})

    assert [place.place_id for place in places] == ["ChIJ-pilot"]
    assert parse_places({}) == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"rating": "n/a"},
        {"userRatingCount": "lots"},
        {"displayName": "X"},
        {"addressComponents": [None]},
    ],
)
def test_malformed_optional_fields_drop_only_that_record(overrides) -> None:
    bad = {**PLACE, "id": "bad", **overrides}

    places = parse_places({"places": [PLACE, bad]})

    assert [place.place_id for place in places] == ["ChIJ-pilot"]


def test_client_requires_api_key(settings) -> None:
    settings.GOOGLE_PLACES_API_KEY = ""

    with pytest.raises(ConfigurationError):
        GooglePlacesClient()


def test_search_nearby_posts_radius_query(places_settings, mocker) -> None:
    post = mocker.patch(
        "fuel_stops.services.places.httpx.post", return_value=_response({"places": [PLACE]})
    )

    places = GooglePlacesClient().search_nearby(GeoPoint(latitude=35.0, longitude=-101.0), 10.0)

    assert [place.place_id for place in places] == ["ChIJ-pilot"]
    url = post.call_args.args[0]
    body = post.call_args.kwargs["json"]
    headers = post.call_args.kwargs["headers"]
    assert url == "https://places.test/v1/places:searchNearby"
    assert body["includedTypes"] == ["gas_station"]
    assert body["locationRestriction"]["circle"]["radius"] == pytest.approx(16093.44)
    assert headers["X-Goog-Api-Key"] == "test-key"
    assert "places.fuelOptions" in headers["X-Goog-FieldMask"]


def test_search_along_route_sends_encoded_polyline(places_settings, mocker) -> None:
    post = mocker.patch(
        "fuel_stops.services.places.httpx.post", return_value=_response({"places": []})
    )

    assert GooglePlacesClient().search_along_route("_p~iF~ps|U", 50) == []

    url = post.call_args.args[0]
    body = post.call_args.kwargs["json"]
    assert url == "https://places.test/v1/places:searchText"
    assert body["searchAlongRouteParameters"] == {"polyline": {"encodedPolyline": "_p~iF~ps|U"}}
    assert body["maxResultCount"] == 20


def test_search_failure_raises_after_retries(places_settings, mocker) -> None:
    mocker.patch("fuel_stops.services.places.time.sleep")
    post = mocker.patch(
        "fuel_stops.services.places.httpx.post",
        return_value=_response({"error": {"status": "PERMISSION_DENIED"}}, status_code=403),
    )

    with pytest.raises(ExternalProviderError):
        GooglePlacesClient().search_nearby(GeoPoint(latitude=35.0, longitude=-101.0), 10.0)

    assert post.call_count == 2
