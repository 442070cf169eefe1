"""Trip stop and route models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from fleetcommand.models._base import FleetBaseModel
from fleetcommand.models.geo import GeoPoint


class StopRole(StrEnum):
    PICKUP = "PICKUP"
    DROPOFF = "DROPOFF"


class Stop(FleetBaseModel):
    """A pickup or dropoff location on a trip.

    ``address`` is an opaque label; the optimizer only looks at
    ``position``.
    """

    role: StopRole
    address: str
    position: GeoPoint
    notes: str | None = None


class OrderedStop(Stop):
    """A :class:`Stop` with its 1-based place in the visiting order."""

    sequence: int = Field(ge=1)

    @classmethod
    def from_stop(cls, stop: Stop, sequence: int) -> OrderedStop:
        return cls(
            role=stop.role,
            address=stop.address,
            position=stop.position,
            notes=stop.notes,
            sequence=sequence,
        )

    def to_stop(self) -> Stop:
        return Stop(role=self.role, address=self.address, position=self.position, notes=self.notes)


class RoutePlan(FleetBaseModel):
    """An optimized stop order with its open-path length and ETA."""

    stops: tuple[OrderedStop, ...]
    total_distance_km: float
    eta_minutes: int = Field(ge=0)
    refined: bool
