from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import httpx
from django.conf import settings
from django.core.cache import cache

from trip_planner.exceptions import InvalidLocationError
from trip_planner.services.types import GeocodeResult, GeoPoint

logger = logging.getLogger(__name__)


class GeocodingClient:
    def __init__(self) -> None:
        self.base_url = settings.GEOCODING_BASE_URL.rstrip("/")
        self.timeout = settings.GEOCODING_TIMEOUT_SECONDS
        self.retry_count = settings.GEOCODING_RETRY_COUNT
        self.user_agent = settings.GEOCODING_USER_AGENT
        self.country_code = settings.GEOCODING_COUNTRY_CODE
        self.result_limit = settings.GEOCODING_RESULT_LIMIT

    def search(self, query: str, *, limit: int | None = None) -> list[GeocodeResult]:
        """Ranked matches for ``query``; any failure yields an empty list."""
        query = query.strip()
        if not query:
            return []

        limit = limit or self.result_limit
        cache_key = self._cache_key(query, self.country_code, limit)
        cached = cache.get(cache_key)
        if cached is not None:
            return [
                GeocodeResult(
                    display_name=item["display_name"],
                    point=GeoPoint(latitude=item["latitude"], longitude=item["longitude"]),
                    place_id=item["place_id"],
                )
                for item in cached
            ]

        params: dict[str, Any] = {
            "q": query,
            "format": "json",
            "limit": limit,
        }
        if self.country_code:
            params["countrycodes"] = self.country_code

        for attempt in range(self.retry_count + 1):
            try:
                response = httpx.get(
                    f"{self.base_url}/search",
                    params=params,
                    timeout=self.timeout,
                    headers={
                        "Accept": "application/json",
                        "User-Agent": self.user_agent,
                    },
                )
                response.raise_for_status()
                results = self._parse_results(response.json())
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Geocoding request failed (attempt %d): %s", attempt + 1, exc)
                if attempt >= self.retry_count:
                    return []
                time.sleep(0.3 * (attempt + 1))
                continue

            cache.set(
                cache_key,
                [
                    {
                        "display_name": result.display_name,
                        "latitude": result.point.latitude,
                        "longitude": result.point.longitude,
                        "place_id": result.place_id,
                    }
                    for result in results
                ],
                timeout=settings.GEOCODE_CACHE_TTL_SECONDS,
            )
            return results

        return []

    def geocode(self, query: str) -> GeocodeResult:
        results = self.search(query, limit=1)
        if not results:
            raise InvalidLocationError("Location could not be resolved")
        return results[0]

    @staticmethod
    def _cache_key(query: str, country_code: str, limit: int) -> str:
        digest = hashlib.sha256(f"{query.lower()}|{country_code}|{limit}".encode()).hexdigest()
        return f"geocode:{digest}"

    @staticmethod
    def _parse_results(payload: Any) -> list[GeocodeResult]:
        if not isinstance(payload, list):
            return []

        results: list[GeocodeResult] = []
        for item in payload:
            try:
                point = GeoPoint(latitude=float(item["lat"]), longitude=float(item["lon"]))
            except (KeyError, TypeError, ValueError):
                continue
            results.append(
                GeocodeResult(
                    display_name=str(item.get("display_name", "")),
                    point=point,
                    place_id=_parse_place_id(item.get("place_id")),
                )
            )
        return results


def _parse_place_id(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
