from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

DC_FAST_KEYWORDS = ("dc", "ccs", "chademo")


@dataclass(slots=True, frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(slots=True, frozen=True)
class GeocodeResult:
    display_name: str
    point: GeoPoint
    place_id: int | None = None


@dataclass(slots=True, frozen=True)
class RouteData:
    coordinates: list[GeoPoint]
    distance_km: float
    duration_minutes: float


def is_dc_fast_connector(connector_type: str) -> bool:
    lowered = connector_type.lower()
    return any(keyword in lowered for keyword in DC_FAST_KEYWORDS)


@dataclass(slots=True, frozen=True)
class Station:
    station_id: str
    name: str
    address: str
    city: str
    state: str
    point: GeoPoint
    connector_type: str

    @property
    def is_dc_fast(self) -> bool:
        return is_dc_fast_connector(self.connector_type)


@dataclass(slots=True, frozen=True)
class MatchedStation:
    station: Station
    lateral_distance_km: float
    along_route_distance_km: float


@dataclass(slots=True, frozen=True)
class ChargingStop:
    station: Station
    distance_from_start_km: float
    soc_on_arrival_percent: int
    charging_time_minutes: int
    soc_after_charging_percent: float
    wait_time_minutes: int = 0


@dataclass(slots=True, frozen=True)
class VehicleProfile:
    name: str
    max_range_km: float
    battery_capacity_kwh: float


@dataclass(slots=True, frozen=True)
class TripDestination:
    name: str
    point: GeoPoint


TripStatus = Literal[
    "no_charging_needed",
    "charging_planned",
    "charging_incomplete",
    "no_stations_available",
]


@dataclass(slots=True, frozen=True)
class TripPlan:
    destination: TripDestination
    total_distance_km: float
    route_duration_minutes: float
    total_duration_minutes: float
    can_complete_without_charging: bool
    reaches_destination: bool
    status: TripStatus
    charging_stops: list[ChargingStop] = field(default_factory=list)
    route_coordinates: list[GeoPoint] = field(default_factory=list)

    @property
    def total_charging_minutes(self) -> int:
        return sum(stop.charging_time_minutes for stop in self.charging_stops)

    @property
    def total_wait_minutes(self) -> int:
        return sum(stop.wait_time_minutes for stop in self.charging_stops)


class CrowdDensityLevel(str, Enum):
    LOW = "LOW"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass(slots=True, frozen=True)
class StationCrowdStatus:
    station_id: str
    density_level: CrowdDensityLevel
    user_count: int
    trend: Literal["STABLE", "INCREASING", "DECREASING"] = "STABLE"


@dataclass(slots=True, frozen=True)
class CrowdPoint:
    latitude: float
    longitude: float
    weight: float
