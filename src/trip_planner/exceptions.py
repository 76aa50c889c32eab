class TripPlannerError(Exception):
    """Base exception for trip planning errors."""


class ExternalServiceError(TripPlannerError):
    """Raised when an upstream API call fails."""


class InvalidLocationError(TripPlannerError):
    """Raised when an input location cannot be resolved."""


class NoRouteFoundError(TripPlannerError):
    """Raised when a drivable route cannot be generated."""


class InvalidVehicleError(TripPlannerError):
    """Raised when vehicle parameters are unknown or not strictly positive."""


class CrowdMonitorDisposedError(TripPlannerError):
    """Raised when a disposed crowd monitor receives updates."""
