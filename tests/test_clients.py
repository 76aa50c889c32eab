from __future__ import annotations

import httpx
import pytest

from trip_planner.exceptions import ExternalServiceError, InvalidLocationError, NoRouteFoundError
from trip_planner.services.geocoding import GeocodingClient
from trip_planner.services.osrm import OsrmClient
from trip_planner.services.types import GeoPoint

ORIGIN = GeoPoint(latitude=12.9716, longitude=77.5946)
DESTINATION = GeoPoint(latitude=13.0827, longitude=80.2707)

OSRM_PAYLOAD = {
    "code": "Ok",
    "routes": [
        {
            "distance": 346500.0,
            "duration": 20700.0,
            "geometry": {
                "type": "LineString",
                "coordinates": [[77.5946, 12.9716], [79.0, 13.0], [80.2707, 13.0827]],
            },
        }
    ],
}


@pytest.fixture(autouse=True)
def _no_retries(settings) -> None:
    settings.OSRM_RETRY_COUNT = 0
    settings.GEOCODING_RETRY_COUNT = 0


def _response(mocker, payload):
    response = mocker.Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def test_osrm_route_converts_units_and_coordinate_order(mocker) -> None:
    get = mocker.patch(
        "trip_planner.services.osrm.httpx.get", return_value=_response(mocker, OSRM_PAYLOAD)
    )

    route = OsrmClient().route(ORIGIN, DESTINATION)

    assert route.distance_km == pytest.approx(346.5)
    assert route.duration_minutes == pytest.approx(345.0)
    assert route.coordinates[0] == ORIGIN
    assert route.coordinates[1] == GeoPoint(latitude=13.0, longitude=79.0)
    endpoint = get.call_args.args[0]
    assert endpoint.endswith("/route/v1/driving/77.594600,12.971600;80.270700,13.082700")


def test_osrm_route_is_cached(mocker) -> None:
    get = mocker.patch(
        "trip_planner.services.osrm.httpx.get", return_value=_response(mocker, OSRM_PAYLOAD)
    )
    client = OsrmClient()

    first = client.route(ORIGIN, DESTINATION)
    second = client.route(ORIGIN, DESTINATION)

    assert get.call_count == 1
    assert second == first


@pytest.mark.parametrize(
    "payload",
    [
        {"code": "NoRoute", "routes": []},
        {"code": "Ok", "routes": []},
        {"code": "Ok", "routes": [{"geometry": {"coordinates": [[77.5, 12.9]]}}]},
    ],
)
def test_osrm_without_usable_route_raises(mocker, payload) -> None:
    mocker.patch("trip_planner.services.osrm.httpx.get", return_value=_response(mocker, payload))

    with pytest.raises(NoRouteFoundError):
        OsrmClient().route(ORIGIN, DESTINATION)


def test_osrm_transport_failure_raises_external_error(mocker) -> None:
    mocker.patch(
        "trip_planner.services.osrm.httpx.get", side_effect=httpx.ConnectError("unreachable")
    )

    with pytest.raises(ExternalServiceError):
        OsrmClient().route(ORIGIN, DESTINATION)


def test_osrm_retries_before_giving_up(mocker, settings) -> None:
    settings.OSRM_RETRY_COUNT = 1
    sleep = mocker.patch("trip_planner.services.osrm.time.sleep")
    get = mocker.patch(
        "trip_planner.services.osrm.httpx.get",
        side_effect=[httpx.ConnectError("flaky"), _response(mocker, OSRM_PAYLOAD)],
    )

    route = OsrmClient().route(ORIGIN, DESTINATION)

    assert get.call_count == 2
    sleep.assert_called_once()
    assert route.distance_km == pytest.approx(346.5)


def test_geocoding_search_parses_and_skips_bad_items(mocker) -> None:
    payload = [
        {"display_name": "Chennai, Tamil Nadu", "lat": "13.0827", "lon": "80.2707", "place_id": 7},
        {"display_name": "Broken", "lat": "not-a-number", "lon": "80.0"},
        {"display_name": "Chennai Central", "lat": "13.0823", "lon": "80.2755"},
    ]
    get = mocker.patch(
        "trip_planner.services.geocoding.httpx.get", return_value=_response(mocker, payload)
    )

    results = GeocodingClient().search("  Chennai ")

    assert [result.display_name for result in results] == ["Chennai, Tamil Nadu", "Chennai Central"]
    assert results[0].point == DESTINATION
    assert results[0].place_id == 7
    assert results[1].place_id is None
    params = get.call_args.kwargs["params"]
    assert params["q"] == "Chennai"
    assert params["countrycodes"] == "in"
    assert params["limit"] == 5


def test_geocoding_blank_query_skips_request(mocker) -> None:
    get = mocker.patch("trip_planner.services.geocoding.httpx.get")

    assert GeocodingClient().search("   ") == []
    get.assert_not_called()


def test_geocoding_failure_yields_empty_results(mocker) -> None:
    mocker.patch(
        "trip_planner.services.geocoding.httpx.get", side_effect=httpx.ReadTimeout("slow")
    )

    assert GeocodingClient().search("Chennai") == []


def test_geocode_raises_when_nothing_matches(mocker) -> None:
    mocker.patch("trip_planner.services.geocoding.httpx.get", return_value=_response(mocker, []))

    with pytest.raises(InvalidLocationError):
        GeocodingClient().geocode("Atlantis")
