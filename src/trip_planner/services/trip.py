from __future__ import annotations

import logging
from collections.abc import Iterable

from trip_planner.exceptions import NoRouteFoundError
from trip_planner.services.charging import (
    DEFAULT_POLICY,
    ChargingPolicy,
    WaitTimeSource,
    needs_charging,
    plan_charging_stops,
    reaches_destination,
)
from trip_planner.services.types import (
    ChargingStop,
    RouteData,
    Station,
    TripDestination,
    TripPlan,
    TripStatus,
    VehicleProfile,
)

logger = logging.getLogger(__name__)


def evaluate_trip(
    destination: TripDestination,
    route: RouteData | None,
    current_soc_percent: float,
    vehicle: VehicleProfile,
    stations: Iterable[Station],
    *,
    policy: ChargingPolicy | None = None,
    wait_time_source: WaitTimeSource | None = None,
) -> TripPlan:
    if route is None:
        raise NoRouteFoundError("Could not compute route")

    policy = policy or DEFAULT_POLICY
    can_complete = not needs_charging(
        route.distance_km, current_soc_percent, vehicle.max_range_km, policy
    )

    stops: list[ChargingStop] = []
    if not can_complete:
        stops = plan_charging_stops(
            route.distance_km,
            current_soc_percent,
            vehicle.max_range_km,
            stations,
            route.coordinates,
            policy=policy,
            wait_time_source=wait_time_source,
        )

    reachable = can_complete or reaches_destination(
        stops, route.distance_km, current_soc_percent, vehicle.max_range_km
    )
    status = _trip_status(stops, reachable)

    charging_minutes = sum(stop.charging_time_minutes for stop in stops)
    wait_minutes = sum(stop.wait_time_minutes for stop in stops)

    logger.info(
        "Trip to %s: %.1f km, status=%s, %d stop(s)",
        destination.name or "destination",
        route.distance_km,
        status,
        len(stops),
    )

    return TripPlan(
        destination=destination,
        total_distance_km=route.distance_km,
        route_duration_minutes=route.duration_minutes,
        total_duration_minutes=route.duration_minutes + charging_minutes + wait_minutes,
        can_complete_without_charging=can_complete,
        reaches_destination=reachable,
        status=status,
        charging_stops=stops,
        route_coordinates=route.coordinates,
    )


def _trip_status(stops: list[ChargingStop], reachable: bool) -> TripStatus:
    if not stops:
        # Inside the safety margin the charge can still cover the route.
        return "no_charging_needed" if reachable else "no_stations_available"
    if reachable:
        return "charging_planned"
    return "charging_incomplete"
