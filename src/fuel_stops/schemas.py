from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FuelStopsRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    origin_lat: float = Field(ge=-90.0, le=90.0)
    origin_lon: float = Field(ge=-180.0, le=180.0)
    dest_lat: float = Field(ge=-90.0, le=90.0)
    dest_lon: float = Field(ge=-180.0, le=180.0)
    max_stops: int = Field(default=5, ge=1, le=10)
    truck_stops_only: bool = False


class LocationResponse(BaseModel):
    lat: float
    lon: float


class RouteInfoResponse(BaseModel):
    origin: LocationResponse
    destination: LocationResponse


class FuelStopResponse(CamelModel):
    id: str
    name: str
    brand: str
    address: str
    city: str
    state: str
    lat: float
    lon: float
    price: float | None = None
    price_level: int | None = None
    amenities: list[str]
    distance_from_route: float
    miles_along_route: int
    has_parking: bool
    has_diesel: bool
    rating: float
    review_count: int


class FuelStopsResponse(CamelModel):
    success: bool
    fuel_stops: list[FuelStopResponse]
    total_distance_miles: int
    route_info: RouteInfoResponse
