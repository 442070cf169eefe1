"""Geographic value types."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from fleetcommand.models._base import FleetBaseModel


class GeoPoint(FleetBaseModel):
    """A WGS84 coordinate.

    NaN and out-of-range values are rejected at construction, so any
    ``GeoPoint`` that exists is a valid input for distance and bearing
    calculations.
    """

    latitude: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"


class CompassPoint(StrEnum):
    """Eight-way compass direction, clockwise from north."""

    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"


class MovementStatus(StrEnum):
    """What a truck is doing, derived from speed and ignition."""

    OFF = "off"
    IDLE = "idle"
    MOVING = "moving"
