from __future__ import annotations

from trip_planner.services.trips import TripRegistry


def test_latest_request_wins() -> None:
    registry: TripRegistry[str] = TripRegistry()
    first = registry.begin("client")
    second = registry.begin("client")

    assert registry.publish("client", second, "new plan")
    assert not registry.publish("client", first, "stale plan")
    assert registry.current("client") == "new plan"


def test_stale_result_does_not_overwrite_even_if_it_finishes_first() -> None:
    registry: TripRegistry[str] = TripRegistry()
    first = registry.begin("client")
    registry.begin("client")

    assert not registry.publish("client", first, "stale plan")
    assert registry.current("client") is None


def test_clients_are_independent() -> None:
    registry: TripRegistry[str] = TripRegistry()
    a_token = registry.begin("a")
    b_token = registry.begin("b")

    assert registry.publish("a", a_token, "plan a")
    assert registry.publish("b", b_token, "plan b")
    assert registry.current("a") == "plan a"
    assert registry.current("b") == "plan b"


def test_clear_drops_plan_and_pending_request() -> None:
    registry: TripRegistry[str] = TripRegistry()
    token = registry.begin("client")
    registry.publish("client", token, "plan")

    assert registry.clear("client")
    assert registry.current("client") is None
    assert not registry.publish("client", token, "late plan")
    assert not registry.clear("client")


def test_least_recently_active_client_is_evicted() -> None:
    registry: TripRegistry[str] = TripRegistry(max_clients=2)
    a_token = registry.begin("a")
    registry.publish("a", a_token, "plan a")
    b_token = registry.begin("b")
    registry.publish("b", b_token, "plan b")
    registry.begin("a")

    c_token = registry.begin("c")

    assert registry.current("b") is None
    assert not registry.publish("b", b_token, "late plan b")
    assert registry.current("a") == "plan a"
    assert registry.publish("c", c_token, "plan c")
