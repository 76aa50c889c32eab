"""Crowd density around charging stations.

Clients report their position with periodic heartbeats; a station is crowded
when enough recent heartbeats fall inside its radius. The monitor is an
explicit object with a lifecycle instead of module-level registries.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from django.conf import settings

from trip_planner.exceptions import CrowdMonitorDisposedError
from trip_planner.services.geo import distance_km
from trip_planner.services.types import (
    CrowdDensityLevel,
    CrowdPoint,
    GeoPoint,
    Station,
    StationCrowdStatus,
)

logger = logging.getLogger(__name__)

CROWD_RADIUS_KM = 0.5
USER_TIMEOUT_SECONDS = 60.0
HIGH_DENSITY_THRESHOLD = 2
CRITICAL_DENSITY_THRESHOLD = 5
WAIT_MINUTES_PER_USER = 10.0

Listener = Callable[[], None]


@dataclass(slots=True, frozen=True)
class ActiveUser:
    user_id: str
    point: GeoPoint
    last_seen: float


class CrowdMonitor:
    def __init__(
        self,
        stations: Iterable[Station] = (),
        *,
        radius_km: float = CROWD_RADIUS_KM,
        user_timeout_seconds: float = USER_TIMEOUT_SECONDS,
        high_threshold: int = HIGH_DENSITY_THRESHOLD,
        critical_threshold: int = CRITICAL_DENSITY_THRESHOLD,
        wait_minutes_per_user: float = WAIT_MINUTES_PER_USER,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.radius_km = radius_km
        self.user_timeout_seconds = user_timeout_seconds
        self.high_threshold = high_threshold
        self.critical_threshold = critical_threshold
        self.wait_minutes_per_user = wait_minutes_per_user
        self._clock = clock
        self._lock = threading.Lock()
        self._stations: list[Station] = list(stations)
        self._users: dict[str, ActiveUser] = {}
        self._listeners: list[Listener] = []
        self._disposed = False

    @classmethod
    def from_settings(cls, stations: Iterable[Station] = ()) -> CrowdMonitor:
        return cls(
            stations,
            radius_km=float(getattr(settings, "CROWD_RADIUS_KM", CROWD_RADIUS_KM)),
            user_timeout_seconds=float(
                getattr(settings, "CROWD_USER_TIMEOUT_SECONDS", USER_TIMEOUT_SECONDS)
            ),
            high_threshold=int(getattr(settings, "CROWD_HIGH_THRESHOLD", HIGH_DENSITY_THRESHOLD)),
            critical_threshold=int(
                getattr(settings, "CROWD_CRITICAL_THRESHOLD", CRITICAL_DENSITY_THRESHOLD)
            ),
            wait_minutes_per_user=float(
                getattr(settings, "CROWD_WAIT_MINUTES_PER_USER", WAIT_MINUTES_PER_USER)
            ),
        )

    @property
    def disposed(self) -> bool:
        return self._disposed

    def monitor(self, stations: Iterable[Station]) -> None:
        with self._lock:
            self._stations = list(stations)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._ensure_active()
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            self._listeners = [existing for existing in self._listeners if existing is not listener]

    def update_user_location(self, user_id: str, point: GeoPoint) -> None:
        if not user_id:
            return
        with self._lock:
            self._ensure_active()
            self._users[user_id] = ActiveUser(user_id=user_id, point=point, last_seen=self._clock())
        self._notify()

    def remove_user(self, user_id: str) -> None:
        with self._lock:
            removed = self._users.pop(user_id, None)
        if removed is not None:
            self._notify()

    def active_users(self) -> list[ActiveUser]:
        cutoff = self._clock() - self.user_timeout_seconds
        with self._lock:
            expired = [user_id for user_id, user in self._users.items() if user.last_seen <= cutoff]
            for user_id in expired:
                del self._users[user_id]
            return list(self._users.values())

    def station_statuses(
        self, stations: Iterable[Station] | None = None
    ) -> dict[str, StationCrowdStatus]:
        """Crowded stations keyed by id; uncrowded stations are left out."""
        if stations is None:
            with self._lock:
                stations = list(self._stations)
        users = self.active_users()

        statuses: dict[str, StationCrowdStatus] = {}
        for station in stations:
            count = sum(
                1 for user in users if distance_km(user.point, station.point) <= self.radius_km
            )
            level = self._density_level(count)
            if level is CrowdDensityLevel.LOW:
                continue
            statuses[station.station_id] = StationCrowdStatus(
                station_id=station.station_id,
                density_level=level,
                user_count=count,
            )
        return statuses

    def heatmap_points(self) -> list[CrowdPoint]:
        with self._lock:
            stations = list(self._stations)
        statuses = self.station_statuses(stations)
        return [
            CrowdPoint(
                latitude=station.point.latitude,
                longitude=station.point.longitude,
                weight=1.0,
            )
            for station in stations
            if station.station_id in statuses
        ]

    def estimate_wait_minutes(self, station: Station) -> float | None:
        status = self.station_statuses([station]).get(station.station_id)
        if status is None:
            return None
        return status.user_count * self.wait_minutes_per_user

    def dispose(self) -> None:
        with self._lock:
            self._disposed = True
            self._listeners.clear()
            self._users.clear()

    def _density_level(self, count: int) -> CrowdDensityLevel:
        if count >= self.critical_threshold:
            return CrowdDensityLevel.CRITICAL
        if count >= self.high_threshold:
            return CrowdDensityLevel.HIGH
        return CrowdDensityLevel.LOW

    def _ensure_active(self) -> None:
        if self._disposed:
            raise CrowdMonitorDisposedError("Crowd monitor has been disposed")

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        logger.debug("Notifying %d crowd listener(s)", len(listeners))
        for listener in listeners:
            listener()
