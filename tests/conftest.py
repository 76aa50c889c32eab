from __future__ import annotations

import math
from collections.abc import Callable

import pytest
from django.core.cache import cache
from django.test import Client

from trip_planner import views
from trip_planner.services.geo import EARTH_RADIUS_KM
from trip_planner.services.types import GeoPoint, Station

ORIGIN = GeoPoint(latitude=12.9716, longitude=77.5946)
KM_PER_DEGREE = EARTH_RADIUS_KM * math.pi / 180.0


def point_along(km: float, offset_km: float = 0.0) -> GeoPoint:
    """Point ``km`` north of ORIGIN, shifted ``offset_km`` east."""
    latitude = ORIGIN.latitude + km / KM_PER_DEGREE
    longitude = ORIGIN.longitude + offset_km / (KM_PER_DEGREE * math.cos(math.radians(latitude)))
    return GeoPoint(latitude=latitude, longitude=longitude)


@pytest.fixture
def api_client() -> Client:
    return Client()


@pytest.fixture(autouse=True)
def _isolated_state(monkeypatch: pytest.MonkeyPatch) -> None:
    cache.clear()
    monkeypatch.setattr(views, "_planner_service", None)
    monkeypatch.setattr(views, "_crowd_monitor", None)
    monkeypatch.setattr(views, "_trip_registry", None)


@pytest.fixture
def make_route() -> Callable[..., list[GeoPoint]]:
    def _make(total_km: float, step_km: float = 1.0) -> list[GeoPoint]:
        count = int(round(total_km / step_km))
        return [point_along(index * step_km) for index in range(count + 1)]

    return _make


@pytest.fixture
def make_station() -> Callable[..., Station]:
    def _make(
        station_id: str,
        km: float,
        offset_km: float = 0.0,
        connector_type: str = "DC Fast Charger",
    ) -> Station:
        return Station(
            station_id=station_id,
            name=f"Station {station_id}",
            address="NH44",
            city="Bengaluru",
            state="Karnataka",
            point=point_along(km, offset_km),
            connector_type=connector_type,
        )

    return _make
