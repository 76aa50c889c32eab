from __future__ import annotations

import pytest

from trip_planner.exceptions import CrowdMonitorDisposedError
from trip_planner.services.crowd import CrowdMonitor
from trip_planner.services.types import CrowdDensityLevel, GeoPoint


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _near(station, index: int) -> GeoPoint:
    return GeoPoint(
        latitude=station.point.latitude + 0.0005 * index,
        longitude=station.point.longitude,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def station(make_station):
    return make_station("hub", 0.0)


@pytest.fixture
def monitor(station, clock: FakeClock) -> CrowdMonitor:
    return CrowdMonitor([station], clock=clock)


def test_single_user_is_not_a_crowd(monitor: CrowdMonitor, station) -> None:
    monitor.update_user_location("u1", _near(station, 1))

    assert monitor.station_statuses() == {}
    assert monitor.heatmap_points() == []
    assert monitor.estimate_wait_minutes(station) is None


def test_two_nearby_users_mark_station_high(monitor: CrowdMonitor, station) -> None:
    monitor.update_user_location("u1", _near(station, 1))
    monitor.update_user_location("u2", _near(station, 2))

    status = monitor.station_statuses()["hub"]

    assert status.density_level is CrowdDensityLevel.HIGH
    assert status.user_count == 2
    assert status.trend == "STABLE"
    assert monitor.estimate_wait_minutes(station) == pytest.approx(20.0)
    [point] = monitor.heatmap_points()
    assert (point.latitude, point.longitude) == (station.point.latitude, station.point.longitude)
    assert point.weight == 1.0


def test_five_users_mark_station_critical(monitor: CrowdMonitor, station) -> None:
    for index in range(5):
        monitor.update_user_location(f"u{index}", _near(station, index))

    assert monitor.station_statuses()["hub"].density_level is CrowdDensityLevel.CRITICAL


def test_users_outside_radius_are_ignored(monitor: CrowdMonitor, station) -> None:
    monitor.update_user_location("u1", _near(station, 1))
    monitor.update_user_location("far", _near(station, 100))

    assert monitor.station_statuses() == {}


def test_repeated_heartbeat_updates_same_user(monitor: CrowdMonitor, station) -> None:
    monitor.update_user_location("u1", _near(station, 1))
    monitor.update_user_location("u1", _near(station, 2))

    assert len(monitor.active_users()) == 1
    assert monitor.station_statuses() == {}


def test_stale_users_expire(monitor: CrowdMonitor, station, clock: FakeClock) -> None:
    monitor.update_user_location("u1", _near(station, 1))
    clock.now += 30
    monitor.update_user_location("u2", _near(station, 2))
    assert "hub" in monitor.station_statuses()

    clock.now += 30

    assert [user.user_id for user in monitor.active_users()] == ["u2"]
    assert monitor.station_statuses() == {}


def test_listeners_are_notified_until_unsubscribed(monitor: CrowdMonitor, station) -> None:
    calls: list[str] = []
    unsubscribe = monitor.subscribe(lambda: calls.append("first"))
    monitor.subscribe(lambda: calls.append("second"))

    monitor.update_user_location("u1", _near(station, 1))
    unsubscribe()
    monitor.remove_user("u1")

    assert calls == ["first", "second", "second"]


def test_removing_unknown_user_does_not_notify(monitor: CrowdMonitor) -> None:
    calls: list[int] = []
    monitor.subscribe(lambda: calls.append(1))

    monitor.remove_user("missing")

    assert calls == []


def test_disposed_monitor_rejects_updates(monitor: CrowdMonitor, station) -> None:
    calls: list[int] = []
    monitor.subscribe(lambda: calls.append(1))
    monitor.update_user_location("u1", _near(station, 1))

    monitor.dispose()

    assert monitor.disposed
    assert monitor.active_users() == []
    with pytest.raises(CrowdMonitorDisposedError):
        monitor.update_user_location("u2", _near(station, 2))
    with pytest.raises(CrowdMonitorDisposedError):
        monitor.subscribe(lambda: None)
    assert calls == [1]


def test_explicit_station_list_overrides_monitored_set(clock: FakeClock, make_station) -> None:
    monitor = CrowdMonitor(clock=clock)
    station = make_station("late", 10.0)
    monitor.update_user_location("u1", _near(station, 0))
    monitor.update_user_location("u2", _near(station, 1))

    assert monitor.station_statuses() == {}
    assert "late" in monitor.station_statuses([station])

    monitor.monitor([station])

    assert len(monitor.heatmap_points()) == 1


def test_thresholds_come_from_settings(settings, station) -> None:
    settings.CROWD_HIGH_THRESHOLD = 1
    settings.CROWD_WAIT_MINUTES_PER_USER = 7

    monitor = CrowdMonitor.from_settings([station])
    monitor.update_user_location("u1", _near(station, 0))

    assert monitor.station_statuses()["hub"].density_level is CrowdDensityLevel.HIGH
    assert monitor.estimate_wait_minutes(station) == pytest.approx(7.0)
