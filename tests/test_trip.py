from __future__ import annotations

import pytest

from trip_planner.exceptions import NoRouteFoundError
from trip_planner.services.trip import evaluate_trip
from trip_planner.services.types import GeoPoint, RouteData, TripDestination, VehicleProfile

DESTINATION = TripDestination(name="Hosur", point=GeoPoint(latitude=13.87, longitude=77.59))
VEHICLE = VehicleProfile(name="Test EV", max_range_km=100.0, battery_capacity_kwh=30.0)


def _route(make_route, total_km: float = 100.0, duration_minutes: float = 90.0) -> RouteData:
    return RouteData(
        coordinates=make_route(total_km),
        distance_km=total_km,
        duration_minutes=duration_minutes,
    )


def test_missing_route_raises() -> None:
    with pytest.raises(NoRouteFoundError):
        evaluate_trip(DESTINATION, None, 50.0, VEHICLE, [])


def test_short_trip_needs_no_charging(make_route, make_station) -> None:
    plan = evaluate_trip(
        DESTINATION,
        _route(make_route, total_km=50.0),
        90.0,
        VEHICLE,
        [make_station("a", 20.5)],
    )

    assert plan.status == "no_charging_needed"
    assert plan.can_complete_without_charging
    assert plan.reaches_destination
    assert plan.charging_stops == []
    assert plan.total_duration_minutes == 90.0


def test_trip_with_two_stops_adds_charging_and_wait_time(make_route, make_station) -> None:
    stations = [
        make_station("dc", 15.5, connector_type="DC Fast Charger"),
        make_station("ac", 60.5, connector_type="AC Charger"),
    ]

    plan = evaluate_trip(
        DESTINATION,
        _route(make_route),
        20.0,
        VEHICLE,
        stations,
        wait_time_source=lambda station: 10.0 if station.station_id == "dc" else None,
    )

    assert plan.status == "charging_planned"
    assert not plan.can_complete_without_charging
    assert plan.reaches_destination
    assert plan.total_charging_minutes == 255
    assert plan.total_wait_minutes == 10
    assert plan.total_duration_minutes == pytest.approx(90.0 + 255 + 10)


def test_partial_plan_is_marked_incomplete(make_route, make_station) -> None:
    plan = evaluate_trip(
        DESTINATION,
        _route(make_route),
        60.0,
        VEHICLE,
        [make_station("only", 10.5)],
    )

    assert plan.status == "charging_incomplete"
    assert not plan.reaches_destination
    assert len(plan.charging_stops) == 1


def test_no_stations_near_route(make_route) -> None:
    plan = evaluate_trip(DESTINATION, _route(make_route), 20.0, VEHICLE, [])

    assert plan.status == "no_stations_available"
    assert not plan.reaches_destination
    assert plan.charging_stops == []
    assert plan.total_duration_minutes == 90.0


def test_charge_inside_safety_margin_still_reaches_destination(make_route, make_station) -> None:
    vehicle = VehicleProfile(name="Long range", max_range_km=200.0, battery_capacity_kwh=60.0)

    plan = evaluate_trip(
        DESTINATION,
        _route(make_route),
        52.5,
        vehicle,
        [make_station("midway", 50.5)],
    )

    assert not plan.can_complete_without_charging
    assert plan.reaches_destination
    assert plan.charging_stops == []
    assert plan.status == "no_charging_needed"
