from __future__ import annotations

from trip_planner.models import ChargingStation
from trip_planner.services.geo import degree_margin
from trip_planner.services.types import GeoPoint, Station

STATION_FIELDS = (
    "id",
    "name",
    "address",
    "city",
    "state",
    "latitude",
    "longitude",
    "connector_type",
)


class StationDirectory:
    def all_stations(self) -> list[Station]:
        queryset = ChargingStation.objects.only(*STATION_FIELDS)
        return [station.to_station() for station in queryset.iterator(chunk_size=1000)]

    def stations_near_route(
        self, route_coordinates: list[GeoPoint], corridor_km: float
    ) -> list[Station]:
        """Stations inside the route's bounding box widened by the corridor.

        Only a coarse prefilter; the matcher measures the real deviation.
        """
        if not route_coordinates:
            return []

        lat_values = [point.latitude for point in route_coordinates]
        lon_values = [point.longitude for point in route_coordinates]
        widest_latitude = max(abs(value) for value in lat_values)
        lat_margin, lon_margin = degree_margin(corridor_km, widest_latitude)

        queryset = ChargingStation.objects.filter(
            latitude__gte=min(lat_values) - lat_margin,
            latitude__lte=max(lat_values) + lat_margin,
            longitude__gte=min(lon_values) - lon_margin,
            longitude__lte=max(lon_values) + lon_margin,
        ).only(*STATION_FIELDS)
        return [station.to_station() for station in queryset.iterator(chunk_size=1000)]
