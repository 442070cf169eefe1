"""Custom exception hierarchy for fleetcommand."""

from __future__ import annotations

from typing import Any


class FleetError(Exception):
    """Base exception for all fleetcommand errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class GpsIngestionError(FleetError):
    """A tracker payload could not be normalized into a reading.

    Carries the detected source tag and the raw offending payload so the
    caller can replay or inspect it offline.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str = "unknown",
        payload: Any = None,
    ) -> None:
        self.message = message
        self.source = source
        self.payload = payload
        super().__init__(message)


class UnknownFormatError(GpsIngestionError):
    """Payload is not an object, so no vendor shape can be matched."""

    def __init__(self, message: str, *, payload: Any = None) -> None:
        super().__init__(message, source="unknown", payload=payload)


class GpsValidationError(GpsIngestionError):
    """A vendor shape matched but a required field is missing or out of range."""


class RouteOptimizationError(FleetError):
    """Stop list rejected before optimization."""


class InvalidStopError(RouteOptimizationError):
    """A stop carries a coordinate that fails :func:`fleetcommand.geo.is_valid_point`."""

    def __init__(self, message: str, *, index: int) -> None:
        self.index = index
        super().__init__(message)


class TooManyStopsError(RouteOptimizationError):
    """Stop count exceeds ``FleetConfig.max_route_stops``.

    The 2-opt pass is cubic in the number of stops, so callers get a hard
    ceiling instead of an unbounded request.
    """

    def __init__(self, message: str, *, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(message)
