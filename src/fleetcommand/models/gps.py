"""Canonical GPS reading model."""

from __future__ import annotations

from pydantic import Field, StrictBool, field_validator

from fleetcommand.models._base import FleetBaseModel, UtcTimestamp
from fleetcommand.models.geo import CompassPoint, GeoPoint, MovementStatus


class GpsReading(FleetBaseModel):
    """One normalized location fix for a tracked vehicle.

    Every field is present and in range once the model exists; the
    normalizers in :mod:`fleetcommand.ingestion` build readings through
    this constructor so there are no partially valid readings downstream.

    Parameters
    ----------
    vehicle_id : str
        Identifier of the tracked asset, stripped and non-empty.
    position : GeoPoint
        Where the vehicle was.
    speed_kph : float
        Ground speed in km/h, never negative.
    heading_deg : float
        Compass heading in ``[0, 360)``.
    fuel_level_pct : float
        Fuel tank level in percent, ``[0, 100]``.
    ignition_on : bool
        Engine ignition state.
    observed_at : datetime
        UTC instant the tracker reported the fix.
    """

    vehicle_id: str
    position: GeoPoint
    speed_kph: float = Field(ge=0.0, allow_inf_nan=False)
    heading_deg: float = Field(ge=0.0, lt=360.0, allow_inf_nan=False)
    fuel_level_pct: float = Field(ge=0.0, le=100.0, allow_inf_nan=False)
    ignition_on: StrictBool
    observed_at: UtcTimestamp

    @field_validator("vehicle_id")
    @classmethod
    def _normalize_vehicle_id(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("vehicle_id must be non-empty")
        return vehicle_id

    @property
    def coordinates(self) -> str:
        """``"lat,lng"`` as used in ingestion log records."""
        return str(self.position)

    @property
    def movement_status(self) -> MovementStatus:
        # Imported lazily: fleetcommand.geo depends on this package for its enums.
        from fleetcommand.geo import movement_status

        return movement_status(self.speed_kph, self.ignition_on)

    @property
    def compass_direction(self) -> CompassPoint:
        from fleetcommand.geo import compass_direction

        return compass_direction(self.heading_deg)
