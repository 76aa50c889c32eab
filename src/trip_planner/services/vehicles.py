from __future__ import annotations

from trip_planner.exceptions import InvalidVehicleError
from trip_planner.services.types import VehicleProfile

CUSTOM_MODEL_NAME = "Custom / Other"

EV_MODELS: tuple[VehicleProfile, ...] = (
    VehicleProfile(name="Tata Nexon EV", max_range_km=312, battery_capacity_kwh=30.2),
    VehicleProfile(name="Tata Nexon EV Max", max_range_km=437, battery_capacity_kwh=40.5),
    VehicleProfile(name="Tata Tiago EV", max_range_km=315, battery_capacity_kwh=24),
    VehicleProfile(name="Tata Punch EV", max_range_km=421, battery_capacity_kwh=35),
    VehicleProfile(name="MG ZS EV", max_range_km=461, battery_capacity_kwh=50.3),
    VehicleProfile(name="MG Comet EV", max_range_km=230, battery_capacity_kwh=17.3),
    VehicleProfile(name="Mahindra XUV400", max_range_km=456, battery_capacity_kwh=39.4),
    VehicleProfile(name="Hyundai Ioniq 5", max_range_km=631, battery_capacity_kwh=72.6),
    VehicleProfile(name="Kia EV6", max_range_km=708, battery_capacity_kwh=77.4),
    VehicleProfile(name="BYD Atto 3", max_range_km=521, battery_capacity_kwh=60.48),
    VehicleProfile(name="BYD e6", max_range_km=415, battery_capacity_kwh=71.7),
    VehicleProfile(name="Mercedes EQS", max_range_km=857, battery_capacity_kwh=107.8),
    VehicleProfile(name="BMW iX", max_range_km=630, battery_capacity_kwh=76.6),
    VehicleProfile(name="Audi e-tron", max_range_km=484, battery_capacity_kwh=71),
    VehicleProfile(name="Volvo XC40 Recharge", max_range_km=418, battery_capacity_kwh=69),
    VehicleProfile(name=CUSTOM_MODEL_NAME, max_range_km=300, battery_capacity_kwh=40),
)

_MODELS_BY_NAME = {model.name.lower(): model for model in EV_MODELS}


def get_vehicle_model(name: str) -> VehicleProfile:
    try:
        return _MODELS_BY_NAME[name.strip().lower()]
    except KeyError as exc:
        raise InvalidVehicleError(f"Unknown vehicle model: {name}") from exc


def build_vehicle_profile(
    max_range_km: float, battery_capacity_kwh: float, name: str = CUSTOM_MODEL_NAME
) -> VehicleProfile:
    """Validate raw vehicle numbers; the planner divides by the range."""
    try:
        max_range = float(max_range_km)
        battery = float(battery_capacity_kwh)
    except (TypeError, ValueError) as exc:
        raise InvalidVehicleError("Vehicle range and battery capacity must be numeric") from exc

    # NaN fails both comparisons, so it is rejected here too.
    if not max_range > 0:
        raise InvalidVehicleError("Vehicle range must be greater than zero")
    if not battery > 0:
        raise InvalidVehicleError("Battery capacity must be greater than zero")

    return VehicleProfile(name=name, max_range_km=max_range, battery_capacity_kwh=battery)
