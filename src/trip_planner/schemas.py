from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinate(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class TripPlanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    origin: Coordinate
    destination: Coordinate | None = None
    destination_query: str | None = Field(default=None, min_length=3, max_length=300)
    destination_name: str = Field(default="", max_length=300)
    current_soc_percent: float = Field(ge=0.0, le=100.0)
    vehicle_model: str | None = Field(default=None, max_length=100)
    max_range_km: float | None = Field(default=None, gt=0.0, le=2000.0)
    battery_capacity_kwh: float | None = Field(default=None, gt=0.0, le=300.0)
    corridor_km: float | None = Field(default=None, gt=0.0, le=50.0)
    client_id: str | None = Field(default=None, min_length=1, max_length=100)

    @model_validator(mode="after")
    def _require_destination(self) -> TripPlanRequest:
        if self.destination is None and self.destination_query is None:
            raise ValueError("Either destination or destination_query is required")
        return self


class PresenceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(min_length=1, max_length=100)
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class StationResponse(BaseModel):
    station_id: str
    name: str
    address: str
    city: str
    state: str
    latitude: float
    longitude: float
    connector_type: str
    is_dc_fast: bool


class ChargingStopResponse(BaseModel):
    station: StationResponse
    distance_from_start_km: float
    soc_on_arrival_percent: int
    charging_time_minutes: int
    soc_after_charging_percent: float
    wait_time_minutes: int


class DestinationResponse(BaseModel):
    name: str
    latitude: float
    longitude: float


class TripSummaryResponse(BaseModel):
    distance_km: float
    route_duration_minutes: float
    total_duration_minutes: float
    total_charging_minutes: int
    total_wait_minutes: int
    remaining_range_km: float


class TripPlanResponse(BaseModel):
    destination: DestinationResponse
    status: Literal[
        "no_charging_needed",
        "charging_planned",
        "charging_incomplete",
        "no_stations_available",
    ]
    can_complete_without_charging: bool
    reaches_destination: bool
    charging_stops: list[ChargingStopResponse]
    route_geojson: dict
    summary: TripSummaryResponse
    assumptions: dict[str, float | str]


class GeocodeResultResponse(BaseModel):
    display_name: str
    latitude: float
    longitude: float
    place_id: int | None


class VehicleModelResponse(BaseModel):
    name: str
    max_range_km: float
    battery_capacity_kwh: float


class StationCrowdStatusResponse(BaseModel):
    station_id: str
    density_level: Literal["LOW", "HIGH", "CRITICAL"]
    user_count: int
    trend: Literal["STABLE", "INCREASING", "DECREASING"]


class CrowdPointResponse(BaseModel):
    latitude: float
    longitude: float
    weight: float
