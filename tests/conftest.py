from __future__ import annotations

from collections.abc import Iterator

import pytest
from django.test import Client

from fuel_stops import views
from fuel_stops.services.route_geometry import build_route_path
from fuel_stops.services.types import RoutePath


@pytest.fixture
def api_client() -> Client:
    return Client()


@pytest.fixture(autouse=True)
def reset_planner_service() -> Iterator[None]:
    views._planner_service = None
    yield
    views._planner_service = None


@pytest.fixture
def north_route() -> RoutePath:
    # Due north along the -100 meridian, about 690 miles.
    coordinates = [(-100.0, 30.0 + index * 0.5) for index in range(21)]
    return build_route_path(coordinates)
