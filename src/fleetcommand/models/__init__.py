"""Data models for fleet telemetry and trip routing."""

from fleetcommand.models._base import FleetBaseModel, UtcTimestamp, ensure_utc, parse_timestamp
from fleetcommand.models.geo import CompassPoint, GeoPoint, MovementStatus
from fleetcommand.models.gps import GpsReading
from fleetcommand.models.route import OrderedStop, RoutePlan, Stop, StopRole

__all__ = [
    "CompassPoint",
    "FleetBaseModel",
    "GeoPoint",
    "GpsReading",
    "MovementStatus",
    "OrderedStop",
    "RoutePlan",
    "Stop",
    "StopRole",
    "UtcTimestamp",
    "ensure_utc",
    "parse_timestamp",
]
