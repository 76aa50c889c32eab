from __future__ import annotations

import json
import logging
from typing import Any

from django.conf import settings
from django.db.models import Q
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST
from pydantic import ValidationError

from trip_planner.exceptions import (
    CrowdMonitorDisposedError,
    ExternalServiceError,
    InvalidLocationError,
    InvalidVehicleError,
    NoRouteFoundError,
)
from trip_planner.models import ChargingStation
from trip_planner.schemas import (
    CrowdPointResponse,
    GeocodeResultResponse,
    PresenceRequest,
    StationCrowdStatusResponse,
    TripPlanRequest,
    TripPlanResponse,
    VehicleModelResponse,
)
from trip_planner.services.crowd import CrowdMonitor
from trip_planner.services.geocoding import GeocodingClient
from trip_planner.services.planner import TripPlannerService
from trip_planner.services.stations import StationDirectory
from trip_planner.services.trips import TripRegistry
from trip_planner.services.types import DC_FAST_KEYWORDS, GeoPoint
from trip_planner.services.vehicles import EV_MODELS

logger = logging.getLogger(__name__)

_planner_service: TripPlannerService | None = None
_crowd_monitor: CrowdMonitor | None = None
_trip_registry: TripRegistry[TripPlanResponse] | None = None


def get_crowd_monitor() -> CrowdMonitor:
    global _crowd_monitor
    if _crowd_monitor is None or _crowd_monitor.disposed:
        _crowd_monitor = CrowdMonitor.from_settings()
    return _crowd_monitor


def get_trip_planner() -> TripPlannerService:
    global _planner_service
    monitor = get_crowd_monitor()
    if _planner_service is None or _planner_service.crowd_monitor is not monitor:
        _planner_service = TripPlannerService(crowd_monitor=monitor)
    return _planner_service


def get_trip_registry() -> TripRegistry[TripPlanResponse]:
    global _trip_registry
    if _trip_registry is None:
        _trip_registry = TripRegistry(max_clients=settings.TRIP_REGISTRY_MAX_CLIENTS)
    return _trip_registry


@require_GET
def health_view(_: HttpRequest) -> HttpResponse:
    dc_fast_filter = Q()
    for keyword in DC_FAST_KEYWORDS:
        dc_fast_filter |= Q(connector_type__icontains=keyword)

    total_stations = ChargingStation.objects.count()
    dc_fast_stations = ChargingStation.objects.filter(dc_fast_filter).count()
    return JsonResponse(
        {
            "status": "ok",
            "stations": {
                "total": total_stations,
                "dc_fast": dc_fast_stations,
            },
        }
    )


@csrf_exempt
@require_POST
def trip_plan_view(request: HttpRequest) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        plan_request = TripPlanRequest.model_validate(payload)
    except ValidationError as exc:
        return _validation_error_response(exc)

    registry = get_trip_registry()
    token = registry.begin(plan_request.client_id) if plan_request.client_id else None

    planner = get_trip_planner()
    try:
        response = planner.plan(plan_request)
    except InvalidLocationError as exc:
        return _error_response("invalid_location", str(exc), status=400)
    except InvalidVehicleError as exc:
        return _error_response("invalid_vehicle", str(exc), status=400)
    except NoRouteFoundError as exc:
        return _error_response("no_route", str(exc), status=502)
    except ExternalServiceError as exc:
        return _error_response("upstream_error", str(exc), status=502)

    if plan_request.client_id and token is not None:
        if not registry.publish(plan_request.client_id, token, response):
            return _error_response(
                "superseded", "A newer trip request replaced this one", status=409
            )

    return JsonResponse(response.model_dump(mode="json"), status=200)


@csrf_exempt
@require_http_methods(["GET", "DELETE"])
def trip_detail_view(request: HttpRequest, client_id: str) -> HttpResponse:
    registry = get_trip_registry()
    if request.method == "DELETE":
        registry.clear(client_id)
        return HttpResponse(status=204)

    plan = registry.current(client_id)
    if plan is None:
        return _error_response("not_found", "No active trip for this client", status=404)
    return JsonResponse(plan.model_dump(mode="json"), status=200)


@require_GET
def geocode_view(request: HttpRequest) -> HttpResponse:
    query = request.GET.get("q", "")
    results = GeocodingClient().search(query)
    return JsonResponse(
        {
            "results": [
                GeocodeResultResponse(
                    display_name=result.display_name,
                    latitude=result.point.latitude,
                    longitude=result.point.longitude,
                    place_id=result.place_id,
                ).model_dump(mode="json")
                for result in results
            ]
        }
    )


@require_GET
def vehicle_models_view(_: HttpRequest) -> HttpResponse:
    return JsonResponse(
        {
            "vehicles": [
                VehicleModelResponse(
                    name=model.name,
                    max_range_km=model.max_range_km,
                    battery_capacity_kwh=model.battery_capacity_kwh,
                ).model_dump(mode="json")
                for model in EV_MODELS
            ]
        }
    )


@csrf_exempt
@require_POST
def presence_view(request: HttpRequest) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        presence = PresenceRequest.model_validate(payload)
    except ValidationError as exc:
        return _validation_error_response(exc)

    try:
        get_crowd_monitor().update_user_location(
            presence.user_id,
            GeoPoint(latitude=presence.latitude, longitude=presence.longitude),
        )
    except CrowdMonitorDisposedError as exc:
        return _error_response("unavailable", str(exc), status=503)
    return HttpResponse(status=204)


@require_GET
def station_crowd_view(_: HttpRequest) -> HttpResponse:
    monitor = get_crowd_monitor()
    monitor.monitor(StationDirectory().all_stations())
    statuses = monitor.station_statuses()
    return JsonResponse(
        {
            "stations": [
                StationCrowdStatusResponse(
                    station_id=status.station_id,
                    density_level=status.density_level.value,
                    user_count=status.user_count,
                    trend=status.trend,
                ).model_dump(mode="json")
                for status in statuses.values()
            ],
            "heatmap": [
                CrowdPointResponse(
                    latitude=point.latitude,
                    longitude=point.longitude,
                    weight=point.weight,
                ).model_dump(mode="json")
                for point in monitor.heatmap_points()
            ],
        }
    )


def _parse_json_payload(request: HttpRequest) -> dict[str, Any] | JsonResponse:
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except json.JSONDecodeError:
        return _error_response("invalid_json", "Request body must be valid JSON", status=400)

    if not isinstance(payload, dict):
        return _error_response("invalid_json", "JSON body must be an object", status=400)

    return payload


def _validation_error_response(exc: ValidationError) -> JsonResponse:
    return JsonResponse(
        {
            "error": {
                "code": "validation_error",
                "message": "Invalid request payload",
                "details": exc.errors(include_url=False, include_context=False),
            }
        },
        status=400,
    )


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    logger.info("Request failed: %s (%s)", code, message)
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)
