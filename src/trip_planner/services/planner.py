from __future__ import annotations

from dataclasses import replace

from django.conf import settings

from trip_planner.schemas import (
    ChargingStopResponse,
    DestinationResponse,
    StationResponse,
    TripPlanRequest,
    TripPlanResponse,
    TripSummaryResponse,
)
from trip_planner.services.charging import ChargingPolicy, remaining_range_km
from trip_planner.services.crowd import CrowdMonitor
from trip_planner.services.geocoding import GeocodingClient
from trip_planner.services.osrm import OsrmClient
from trip_planner.services.stations import StationDirectory
from trip_planner.services.trip import evaluate_trip
from trip_planner.services.types import (
    GeoPoint,
    Station,
    TripDestination,
    TripPlan,
    VehicleProfile,
)
from trip_planner.services.vehicles import (
    CUSTOM_MODEL_NAME,
    build_vehicle_profile,
    get_vehicle_model,
)


class TripPlannerService:
    def __init__(
        self,
        geocoding_client: GeocodingClient | None = None,
        osrm_client: OsrmClient | None = None,
        station_directory: StationDirectory | None = None,
        crowd_monitor: CrowdMonitor | None = None,
    ) -> None:
        self.geocoding_client = geocoding_client or GeocodingClient()
        self.osrm_client = osrm_client or OsrmClient()
        self.station_directory = station_directory or StationDirectory()
        self.crowd_monitor = crowd_monitor

    def plan(self, request: TripPlanRequest) -> TripPlanResponse:
        vehicle = self.resolve_vehicle(request)
        policy = ChargingPolicy.from_settings()
        if request.corridor_km is not None:
            policy = replace(policy, corridor_km=request.corridor_km)

        origin = GeoPoint(latitude=request.origin.latitude, longitude=request.origin.longitude)
        destination = self.resolve_destination(request)

        route = self.osrm_client.route(origin, destination.point)
        stations = self.station_directory.stations_near_route(route.coordinates, policy.corridor_km)

        wait_time_source = None
        if self.crowd_monitor is not None and not self.crowd_monitor.disposed:
            wait_time_source = self.crowd_monitor.estimate_wait_minutes

        trip = evaluate_trip(
            destination,
            route,
            request.current_soc_percent,
            vehicle,
            stations,
            policy=policy,
            wait_time_source=wait_time_source,
        )
        return self._build_response(trip, request.current_soc_percent, vehicle, policy)

    def resolve_vehicle(self, request: TripPlanRequest) -> VehicleProfile:
        if request.vehicle_model:
            base = get_vehicle_model(request.vehicle_model)
        else:
            base = VehicleProfile(
                name=CUSTOM_MODEL_NAME,
                max_range_km=float(settings.DEFAULT_MAX_RANGE_KM),
                battery_capacity_kwh=float(settings.DEFAULT_BATTERY_CAPACITY_KWH),
            )

        return build_vehicle_profile(
            max_range_km=request.max_range_km or base.max_range_km,
            battery_capacity_kwh=request.battery_capacity_kwh or base.battery_capacity_kwh,
            name=base.name,
        )

    def resolve_destination(self, request: TripPlanRequest) -> TripDestination:
        if request.destination is not None:
            return TripDestination(
                name=request.destination_name,
                point=GeoPoint(
                    latitude=request.destination.latitude,
                    longitude=request.destination.longitude,
                ),
            )

        result = self.geocoding_client.geocode(request.destination_query or "")
        return TripDestination(
            name=request.destination_name or result.display_name,
            point=result.point,
        )

    @staticmethod
    def _build_response(
        trip: TripPlan,
        current_soc_percent: float,
        vehicle: VehicleProfile,
        policy: ChargingPolicy,
    ) -> TripPlanResponse:
        stops = [
            ChargingStopResponse(
                station=_station_response(stop.station),
                distance_from_start_km=round(stop.distance_from_start_km, 1),
                soc_on_arrival_percent=stop.soc_on_arrival_percent,
                charging_time_minutes=stop.charging_time_minutes,
                soc_after_charging_percent=round(stop.soc_after_charging_percent, 1),
                wait_time_minutes=stop.wait_time_minutes,
            )
            for stop in trip.charging_stops
        ]

        summary = TripSummaryResponse(
            distance_km=round(trip.total_distance_km, 3),
            route_duration_minutes=round(trip.route_duration_minutes, 2),
            total_duration_minutes=round(trip.total_duration_minutes, 2),
            total_charging_minutes=trip.total_charging_minutes,
            total_wait_minutes=trip.total_wait_minutes,
            remaining_range_km=round(
                remaining_range_km(current_soc_percent, vehicle.max_range_km), 1
            ),
        )

        return TripPlanResponse(
            destination=DestinationResponse(
                name=trip.destination.name,
                latitude=round(trip.destination.point.latitude, 6),
                longitude=round(trip.destination.point.longitude, 6),
            ),
            status=trip.status,
            can_complete_without_charging=trip.can_complete_without_charging,
            reaches_destination=trip.reaches_destination,
            charging_stops=stops,
            route_geojson={
                "type": "LineString",
                "coordinates": [
                    [point.longitude, point.latitude] for point in trip.route_coordinates
                ],
            },
            summary=summary,
            assumptions={
                "vehicle_model": vehicle.name,
                "max_range_km": vehicle.max_range_km,
                "battery_capacity_kwh": vehicle.battery_capacity_kwh,
                "corridor_km": policy.corridor_km,
                "target_soc_percent": policy.departure_soc_percent,
            },
        )


def _station_response(station: Station) -> StationResponse:
    return StationResponse(
        station_id=station.station_id,
        name=station.name,
        address=station.address,
        city=station.city,
        state=station.state,
        latitude=station.point.latitude,
        longitude=station.point.longitude,
        connector_type=station.connector_type,
        is_dc_fast=station.is_dc_fast,
    )
