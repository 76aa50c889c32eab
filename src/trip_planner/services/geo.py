from __future__ import annotations

import math
from dataclasses import dataclass

from trip_planner.services.types import GeoPoint

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = 111.32


@dataclass(slots=True, frozen=True)
class SegmentProjection:
    point: GeoPoint
    t: float


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    lat1_rad = math.radians(a.latitude)
    lat2_rad = math.radians(b.latitude)

    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2.0) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def nearest_point_on_segment(p: GeoPoint, v: GeoPoint, w: GeoPoint) -> SegmentProjection:
    """Project ``p`` onto segment ``v``-``w`` in degree space.

    The projection is planar and only meant for ranking segments against each
    other; measure the real distance to the returned point with ``distance_km``.
    """
    vector_lat = w.latitude - v.latitude
    vector_lon = w.longitude - v.longitude
    length_sq = vector_lat * vector_lat + vector_lon * vector_lon
    if length_sq == 0:
        return SegmentProjection(point=v, t=0.0)

    t = (
        (p.latitude - v.latitude) * vector_lat + (p.longitude - v.longitude) * vector_lon
    ) / length_sq
    t = max(0.0, min(1.0, t))

    return SegmentProjection(
        point=GeoPoint(
            latitude=v.latitude + t * vector_lat,
            longitude=v.longitude + t * vector_lon,
        ),
        t=t,
    )


def planar_distance_sq(a: GeoPoint, b: GeoPoint) -> float:
    return (a.latitude - b.latitude) ** 2 + (a.longitude - b.longitude) ** 2


def degree_margin(corridor_km: float, latitude: float) -> tuple[float, float]:
    """Latitude and longitude margins in degrees covering ``corridor_km``."""
    lat_margin = corridor_km / KM_PER_DEGREE_LAT
    cos_lat = max(math.cos(math.radians(min(abs(latitude), 89.0))), 1e-6)
    return lat_margin, lat_margin / cos_lat
