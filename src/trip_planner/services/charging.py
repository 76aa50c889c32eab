from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from django.conf import settings

from trip_planner.services.station_matching import RouteStationMatcher
from trip_planner.services.types import ChargingStop, GeoPoint, MatchedStation, Station

logger = logging.getLogger(__name__)

WaitTimeSource = Callable[[Station], float | None]

FEASIBILITY_SAFETY_FACTOR = 1.1
RESERVE_FACTOR = 0.85
TARGET_SOC_PERCENT = 80.0
MAX_ITERATIONS = 20
CORRIDOR_KM = 5.0
MIN_GAP_KM = 5.0
FALLBACK_MIN_GAP_KM = 1.0
DC_MINUTES_PER_PERCENT = 1.0
AC_MINUTES_PER_PERCENT = 4.0
CANDIDATE_WINDOW_FRACTION = 0.25
MIN_CANDIDATE_WINDOW = 3
MAX_ROUTE_POINTS = 100


@dataclass(slots=True, frozen=True)
class ChargingPolicy:
    corridor_km: float = CORRIDOR_KM
    min_gap_km: float = MIN_GAP_KM
    fallback_min_gap_km: float = FALLBACK_MIN_GAP_KM
    feasibility_safety_factor: float = FEASIBILITY_SAFETY_FACTOR
    reserve_factor: float = RESERVE_FACTOR
    target_soc_percent: float = TARGET_SOC_PERCENT
    max_iterations: int = MAX_ITERATIONS
    dc_minutes_per_percent: float = DC_MINUTES_PER_PERCENT
    ac_minutes_per_percent: float = AC_MINUTES_PER_PERCENT
    candidate_window_fraction: float = CANDIDATE_WINDOW_FRACTION
    min_candidate_window: int = MIN_CANDIDATE_WINDOW
    max_route_points: int = MAX_ROUTE_POINTS

    @classmethod
    def from_settings(cls, **overrides: float) -> ChargingPolicy:
        values = {
            "corridor_km": float(getattr(settings, "DEFAULT_CORRIDOR_KM", CORRIDOR_KM)),
            "min_gap_km": float(getattr(settings, "CHARGING_MIN_GAP_KM", MIN_GAP_KM)),
            "fallback_min_gap_km": float(
                getattr(settings, "CHARGING_FALLBACK_MIN_GAP_KM", FALLBACK_MIN_GAP_KM)
            ),
            "feasibility_safety_factor": float(
                getattr(settings, "FEASIBILITY_SAFETY_FACTOR", FEASIBILITY_SAFETY_FACTOR)
            ),
            "reserve_factor": float(getattr(settings, "CHARGING_RESERVE_FACTOR", RESERVE_FACTOR)),
            "target_soc_percent": float(
                getattr(settings, "CHARGING_TARGET_SOC_PERCENT", TARGET_SOC_PERCENT)
            ),
            "max_iterations": int(getattr(settings, "CHARGING_MAX_ITERATIONS", MAX_ITERATIONS)),
            "dc_minutes_per_percent": float(
                getattr(settings, "DC_MINUTES_PER_PERCENT", DC_MINUTES_PER_PERCENT)
            ),
            "ac_minutes_per_percent": float(
                getattr(settings, "AC_MINUTES_PER_PERCENT", AC_MINUTES_PER_PERCENT)
            ),
            "max_route_points": int(getattr(settings, "MAX_ROUTE_SAMPLE_POINTS", MAX_ROUTE_POINTS)),
        }
        values.update(overrides)
        return cls(**values)

    @property
    def departure_soc_percent(self) -> float:
        return max(0.0, min(100.0, self.target_soc_percent))


DEFAULT_POLICY = ChargingPolicy()


def remaining_range_km(current_soc_percent: float, vehicle_max_range_km: float) -> float:
    return (current_soc_percent / 100.0) * vehicle_max_range_km


def needs_charging(
    total_distance_km: float,
    current_soc_percent: float,
    vehicle_max_range_km: float,
    policy: ChargingPolicy = DEFAULT_POLICY,
) -> bool:
    remaining = remaining_range_km(current_soc_percent, vehicle_max_range_km)
    return remaining < total_distance_km * policy.feasibility_safety_factor


def charging_rate_minutes_per_percent(
    station: Station, policy: ChargingPolicy = DEFAULT_POLICY
) -> float:
    if station.is_dc_fast:
        return policy.dc_minutes_per_percent
    return policy.ac_minutes_per_percent


def estimate_charge_time(
    current_soc_percent: float,
    target_soc_percent: float = 100.0,
    is_dc_fast: bool = True,
    policy: ChargingPolicy = DEFAULT_POLICY,
) -> int:
    soc_to_charge = max(0.0, target_soc_percent - current_soc_percent)
    rate = policy.dc_minutes_per_percent if is_dc_fast else policy.ac_minutes_per_percent
    return math.ceil(soc_to_charge * rate)


def reaches_destination(
    stops: list[ChargingStop],
    total_distance_km: float,
    current_soc_percent: float,
    vehicle_max_range_km: float,
) -> bool:
    """Re-check that the last charge covers the rest of the trip.

    ``plan_charging_stops`` may return an incomplete list when it runs out of
    candidates or iterations, so callers use this instead of assuming success.
    """
    if not stops:
        covered = 0.0
        range_km = remaining_range_km(current_soc_percent, vehicle_max_range_km)
    else:
        last = stops[-1]
        covered = last.distance_from_start_km
        range_km = remaining_range_km(last.soc_after_charging_percent, vehicle_max_range_km)
    return covered + range_km >= total_distance_km


def plan_charging_stops(
    total_distance_km: float,
    current_soc_percent: float,
    vehicle_max_range_km: float,
    stations: Iterable[Station],
    route_coordinates: list[GeoPoint],
    *,
    policy: ChargingPolicy | None = None,
    wait_time_source: WaitTimeSource | None = None,
) -> list[ChargingStop]:
    policy = policy or DEFAULT_POLICY
    current_range_km = remaining_range_km(current_soc_percent, vehicle_max_range_km)
    if current_range_km >= total_distance_km * policy.feasibility_safety_factor:
        return []

    matcher = RouteStationMatcher(max_points=policy.max_route_points)
    matched = matcher.match_stations(stations, route_coordinates, policy.corridor_km)
    if not matched:
        logger.info("No charging stations within %.1f km of route", policy.corridor_km)
        return []

    stops: list[ChargingStop] = []
    distance_covered = 0.0
    soc_calc = float(current_soc_percent)
    iterations = 0

    while (
        distance_covered + current_range_km < total_distance_km
        and iterations < policy.max_iterations
    ):
        iterations += 1
        reachable = _reachable_candidates(matched, distance_covered, current_range_km, policy)
        if not reachable:
            logger.info(
                "No reachable charging station beyond %.1f km (range %.1f km)",
                distance_covered,
                current_range_km,
            )
            break

        best = _pick_candidate(reachable, policy)
        distance_to_station = best.along_route_distance_km - distance_covered
        soc_used = (distance_to_station / vehicle_max_range_km) * 100.0
        soc_on_arrival = max(0, math.floor(soc_calc - soc_used + 0.5))
        soc_after = policy.departure_soc_percent
        rate = charging_rate_minutes_per_percent(best.station, policy)
        charging_time = math.ceil(max(0.0, soc_after - soc_on_arrival) * rate)

        stops.append(
            ChargingStop(
                station=best.station,
                distance_from_start_km=best.along_route_distance_km,
                soc_on_arrival_percent=soc_on_arrival,
                charging_time_minutes=charging_time,
                soc_after_charging_percent=soc_after,
                wait_time_minutes=_wait_minutes(best.station, wait_time_source),
            )
        )
        logger.debug(
            "Stop %d at %.1f km (%s): arrive %d%%, charge %d min",
            len(stops),
            best.along_route_distance_km,
            best.station.name,
            soc_on_arrival,
            charging_time,
        )

        distance_covered = best.along_route_distance_km
        soc_calc = soc_after
        current_range_km = remaining_range_km(soc_calc, vehicle_max_range_km)

    return stops


def _reachable_candidates(
    matched: list[MatchedStation],
    distance_covered: float,
    current_range_km: float,
    policy: ChargingPolicy,
) -> list[MatchedStation]:
    safe_range_km = current_range_km * policy.reserve_factor
    reachable = [
        candidate
        for candidate in matched
        if distance_covered + policy.min_gap_km
        < candidate.along_route_distance_km
        <= distance_covered + safe_range_km
    ]
    if reachable:
        return reachable

    # Push to the full range when nothing fits inside the reserve.
    return [
        candidate
        for candidate in matched
        if distance_covered + policy.fallback_min_gap_km
        < candidate.along_route_distance_km
        <= distance_covered + current_range_km
    ]


def _pick_candidate(reachable: list[MatchedStation], policy: ChargingPolicy) -> MatchedStation:
    window = max(1, math.floor(len(reachable) * policy.candidate_window_fraction))
    furthest = reachable[-max(policy.min_candidate_window, window) :]
    # Reversed so equal deviations resolve to the station further along.
    return min(reversed(furthest), key=lambda candidate: candidate.lateral_distance_km)


def _wait_minutes(station: Station, wait_time_source: WaitTimeSource | None) -> int:
    if wait_time_source is None:
        return 0
    minutes = wait_time_source(station)
    if minutes is None:
        return 0
    return max(0, math.ceil(minutes))
