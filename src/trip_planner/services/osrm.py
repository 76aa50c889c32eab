from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import httpx
from django.conf import settings
from django.core.cache import cache

from trip_planner.exceptions import ExternalServiceError, NoRouteFoundError
from trip_planner.services.types import GeoPoint, RouteData

logger = logging.getLogger(__name__)

METERS_PER_KM = 1000.0
SECONDS_PER_MINUTE = 60.0


class OsrmClient:
    def __init__(self, timeout: float | None = None) -> None:
        self.base_url = settings.OSRM_BASE_URL.rstrip("/")
        self.timeout = settings.OSRM_TIMEOUT_SECONDS if timeout is None else timeout
        self.retry_count = settings.OSRM_RETRY_COUNT

    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteData:
        cache_key = self._cache_key(origin, destination)
        cached = cache.get(cache_key)
        if cached:
            return RouteData(
                coordinates=[
                    GeoPoint(latitude=lat, longitude=lon) for lat, lon in cached["coordinates"]
                ],
                distance_km=cached["distance_km"],
                duration_minutes=cached["duration_minutes"],
            )

        coordinates = ";".join(
            f"{point.longitude:.6f},{point.latitude:.6f}" for point in (origin, destination)
        )
        endpoint = f"{self.base_url}/route/v1/driving/{coordinates}"
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
            "annotations": "false",
        }

        for attempt in range(self.retry_count + 1):
            try:
                response = httpx.get(endpoint, params=params, timeout=self.timeout)
                response.raise_for_status()
                route_data = self._parse_response(response.json())
                cache.set(
                    cache_key,
                    {
                        "coordinates": [
                            [point.latitude, point.longitude] for point in route_data.coordinates
                        ],
                        "distance_km": route_data.distance_km,
                        "duration_minutes": route_data.duration_minutes,
                    },
                    timeout=settings.ROUTE_CACHE_TTL_SECONDS,
                )
                return route_data
            except NoRouteFoundError:
                raise
            except httpx.HTTPError as exc:
                logger.warning("OSRM request failed (attempt %d): %s", attempt + 1, exc)
                if attempt >= self.retry_count:
                    raise ExternalServiceError("OSRM request failed") from exc
                time.sleep(0.3 * (attempt + 1))

        raise ExternalServiceError("OSRM request failed")

    @staticmethod
    def _cache_key(origin: GeoPoint, destination: GeoPoint) -> str:
        encoded = "|".join(
            f"{point.latitude:.5f}:{point.longitude:.5f}" for point in (origin, destination)
        ).encode()
        digest = hashlib.sha256(encoded).hexdigest()
        return f"route:{digest}"

    @staticmethod
    def _parse_response(payload: Any) -> RouteData:
        if not isinstance(payload, dict) or payload.get("code") != "Ok":
            raise NoRouteFoundError("Could not compute route")

        routes = payload.get("routes") or []
        if not routes:
            raise NoRouteFoundError("Could not compute route")

        first = routes[0]
        try:
            coordinates = [
                GeoPoint(latitude=float(lat), longitude=float(lon))
                for lon, lat, *_ in first.get("geometry", {}).get("coordinates", [])
            ]
        except (TypeError, ValueError) as exc:
            raise NoRouteFoundError("Route geometry unavailable") from exc
        if len(coordinates) < 2:
            raise NoRouteFoundError("Route geometry unavailable")

        return RouteData(
            coordinates=coordinates,
            distance_km=float(first.get("distance", 0.0)) / METERS_PER_KM,
            duration_minutes=float(first.get("duration", 0.0)) / SECONDS_PER_MINUTE,
        )
