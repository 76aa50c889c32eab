from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from trip_planner.services.geo import distance_km, nearest_point_on_segment, planar_distance_sq
from trip_planner.services.types import GeoPoint, MatchedStation, Station

MatchMode = Literal["segment", "vertex"]

DEFAULT_MAX_ROUTE_POINTS = 100


class RouteStationMatcher:
    def __init__(
        self, max_points: int = DEFAULT_MAX_ROUTE_POINTS, mode: MatchMode = "segment"
    ) -> None:
        self.max_points = max(2, max_points)
        self.mode = mode

    def match_stations(
        self,
        stations: Iterable[Station],
        route_coordinates: list[GeoPoint],
        corridor_km: float,
    ) -> list[MatchedStation]:
        if not route_coordinates:
            return []

        cumulative_km = self._build_cumulative_km(route_coordinates)
        sampled_points, sampled_km = self._sample_route(
            route_coordinates, cumulative_km, self.max_points
        )

        matched: list[MatchedStation] = []
        for station in stations:
            if len(sampled_points) == 1:
                lateral_km = distance_km(station.point, sampled_points[0])
                index = 0
            elif self.mode == "vertex":
                lateral_km, index = self._nearest_vertex(station.point, sampled_points)
            else:
                lateral_km, index = self._nearest_segment(station.point, sampled_points)

            if lateral_km > corridor_km:
                continue

            matched.append(
                MatchedStation(
                    station=station,
                    lateral_distance_km=lateral_km,
                    along_route_distance_km=sampled_km[index],
                )
            )

        return sorted(matched, key=lambda candidate: candidate.along_route_distance_km)

    @staticmethod
    def _build_cumulative_km(route_coordinates: list[GeoPoint]) -> list[float]:
        cumulative = [0.0]
        for index in range(1, len(route_coordinates)):
            cumulative.append(
                cumulative[-1] + distance_km(route_coordinates[index - 1], route_coordinates[index])
            )
        return cumulative

    @staticmethod
    def _sample_route(
        route_coordinates: list[GeoPoint], cumulative_km: list[float], max_points: int
    ) -> tuple[list[GeoPoint], list[float]]:
        if len(route_coordinates) <= max_points:
            return route_coordinates, cumulative_km

        step = max(1, len(route_coordinates) // max_points)
        indices = list(range(0, len(route_coordinates), step))
        if indices[-1] != len(route_coordinates) - 1:
            indices.append(len(route_coordinates) - 1)
        return [route_coordinates[i] for i in indices], [cumulative_km[i] for i in indices]

    @staticmethod
    def _nearest_vertex(point: GeoPoint, route_points: list[GeoPoint]) -> tuple[float, int]:
        best_distance = float("inf")
        best_index = 0
        for index, vertex in enumerate(route_points):
            distance = distance_km(point, vertex)
            if distance < best_distance:
                best_distance = distance
                best_index = index
        return best_distance, best_index

    @staticmethod
    def _nearest_segment(point: GeoPoint, route_points: list[GeoPoint]) -> tuple[float, int]:
        best_distance_sq = float("inf")
        best_index = 0
        best_point = route_points[0]

        for index in range(len(route_points) - 1):
            start, end = route_points[index], route_points[index + 1]
            projection = nearest_point_on_segment(point, start, end)
            distance_sq = planar_distance_sq(point, projection.point)
            if distance_sq < best_distance_sq:
                best_distance_sq = distance_sq
                best_index = index
                best_point = projection.point

        return distance_km(point, best_point), best_index


def match_stations(
    stations: Iterable[Station],
    route_coordinates: list[GeoPoint],
    corridor_km: float,
    *,
    max_points: int = DEFAULT_MAX_ROUTE_POINTS,
    mode: MatchMode = "segment",
) -> list[MatchedStation]:
    matcher = RouteStationMatcher(max_points=max_points, mode=mode)
    return matcher.match_stations(stations, route_coordinates, corridor_km)
