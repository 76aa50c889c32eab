from __future__ import annotations

import pytest

from trip_planner.models import ChargingStation
from trip_planner.services.stations import StationDirectory
from trip_planner.services.types import GeoPoint

ROUTE = [
    GeoPoint(latitude=12.90, longitude=77.60),
    GeoPoint(latitude=13.00, longitude=77.70),
    GeoPoint(latitude=13.10, longitude=77.80),
]


def _station(key: str, latitude: float, longitude: float, **extra) -> ChargingStation:
    return ChargingStation.objects.create(
        name=f"Station {key}",
        address=f"{key} Ring Road",
        city="Bengaluru",
        state="Karnataka",
        latitude=latitude,
        longitude=longitude,
        canonical_key=key,
        **extra,
    )


@pytest.mark.django_db
def test_stations_near_route_uses_corridor_bounding_box() -> None:
    inside = _station("inside", 13.00, 77.70)
    edge = _station("edge", 13.13, 77.80)
    _station("north", 13.30, 77.80)
    _station("west", 13.00, 77.40)

    stations = StationDirectory().stations_near_route(ROUTE, corridor_km=5.0)

    assert {station.station_id for station in stations} == {str(inside.pk), str(edge.pk)}


@pytest.mark.django_db
def test_stations_near_empty_route() -> None:
    _station("inside", 13.00, 77.70)

    assert StationDirectory().stations_near_route([], corridor_km=5.0) == []


@pytest.mark.django_db
def test_all_stations_converts_models() -> None:
    model = _station("dc", 13.00, 77.70, connector_type="CCS2 DC")

    [station] = StationDirectory().all_stations()

    assert station.station_id == str(model.pk)
    assert station.point == GeoPoint(latitude=13.00, longitude=77.70)
    assert station.connector_type == "CCS2 DC"
    assert station.is_dc_fast
    assert model.is_dc_fast
