"""Geospatial helpers: distance, bearing, headings, units and classification.

Everything here is pure and never raises.  Bad numbers degrade to a
default (``0``) or propagate as NaN instead of halting a larger pipeline
over one malformed coordinate; callers that need strict validation check
:func:`is_valid_point` themselves.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Iterable
from typing import Any, Protocol

from fleetcommand._constants import (
    DEFAULT_AVERAGE_SPEED_KMH,
    EARTH_RADIUS_KM,
    FUEL_MAX_PCT,
    FUEL_MIN_PCT,
    KMH_PER_MPH,
    METERS_PER_KM,
    MILES_PER_KM,
    MOVING_SPEED_THRESHOLD_KPH,
)
from fleetcommand.models.geo import CompassPoint, MovementStatus

_COMPASS_POINTS: tuple[CompassPoint, ...] = tuple(CompassPoint)


class _HasCoordinates(Protocol):
    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


def as_float(value: float) -> float:
    """``float(value)``, except that ints too large for a float become ``±inf``."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def real_number(value: Any) -> float | None:
    """Return *value* as a float when it is a real, non-NaN number.

    Booleans and numeric strings are **not** numbers here: tracker
    payloads that send ``"45"`` for a speed are treated as if the field
    were absent.  Integers beyond float range come back as ``±inf``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    result = as_float(value)
    if math.isnan(result):
        return None
    return result


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# ---------------------------------------------------------------------------
# Distance and bearing
# ---------------------------------------------------------------------------


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometers between two raw coordinates.

    Non-finite inputs return NaN.
    """
    lat1, lng1, lat2, lng2 = (as_float(v) for v in (lat1, lng1, lat2, lng2))
    if not all(math.isfinite(v) for v in (lat1, lng1, lat2, lng2)):
        return math.nan

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)

    a = math.sin(dphi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2.0) ** 2
    # Rounding can push ``a`` a hair outside [0, 1] for antipodal points.
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))


def distance_km(a: _HasCoordinates, b: _HasCoordinates) -> float:
    """Great-circle distance in kilometers (Haversine, R = 6371 km)."""
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def bearing_deg(a: _HasCoordinates, b: _HasCoordinates) -> float:
    """Initial compass bearing in ``[0, 360)`` when travelling from *a* to *b*."""
    lat1, lng1, lat2, lng2 = (as_float(v) for v in (a.latitude, a.longitude, b.latitude, b.longitude))
    if not all(math.isfinite(v) for v in (lat1, lng1, lat2, lng2)):
        return math.nan

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlambda = math.radians(lng2 - lng1)

    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlambda)
    return normalize_heading(math.degrees(math.atan2(y, x)))


def is_valid_point(lat: Any, lng: Any) -> bool:
    """Return ``True`` when *lat*/*lng* are real numbers within WGS84 range."""
    lat_value = real_number(lat)
    lng_value = real_number(lng)
    if lat_value is None or lng_value is None:
        return False
    return -90.0 <= lat_value <= 90.0 and -180.0 <= lng_value <= 180.0


def is_within_geofence(point: _HasCoordinates, center: _HasCoordinates, radius_km: float) -> bool:
    """Return ``True`` when *point* lies within *radius_km* of *center* (inclusive)."""
    return distance_km(point, center) <= radius_km


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------


def normalize_heading(heading: Any) -> float:
    """Reduce any real heading into ``[0, 360)``; anything else becomes ``0``."""
    value = real_number(heading)
    if value is None or not math.isfinite(value):
        return 0.0
    normalized = value % 360.0
    # Tiny negative values round up to exactly 360.0.
    if normalized >= 360.0:
        return 0.0
    return normalized


def compass_direction(heading: Any) -> CompassPoint:
    """Bucket a heading into one of eight compass points."""
    index = _round_half_up(normalize_heading(heading) / 45.0) % len(_COMPASS_POINTS)
    return _COMPASS_POINTS[index]


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


def mph_to_kmh(mph: float) -> float:
    return as_float(mph) * KMH_PER_MPH


def kmh_to_mph(kmh: float) -> float:
    return as_float(kmh) / KMH_PER_MPH


def meters_to_kilometers(meters: float) -> float:
    return as_float(meters) / METERS_PER_KM


def kilometers_to_miles(km: float) -> float:
    return as_float(km) * MILES_PER_KM


# ---------------------------------------------------------------------------
# Time and movement
# ---------------------------------------------------------------------------


def eta_minutes(distance_km: float, avg_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH) -> int:
    """Whole minutes to cover *distance_km* at *avg_speed_kmh*.

    A zero speed yields ``0`` rather than a division error, and so does a
    non-finite result.
    """
    if avg_speed_kmh == 0:
        return 0
    minutes = as_float(distance_km) / as_float(avg_speed_kmh) * 60.0
    if not math.isfinite(minutes):
        return 0
    return _round_half_up(minutes)


def format_eta(minutes: int) -> str:
    """Human readable ETA, e.g. ``"45 minutes"`` or ``"2h 5m"``."""
    if minutes < 1:
        return "Less than 1 minute"
    if minutes < 60:
        return f"{minutes} minutes"
    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours} {'hour' if hours == 1 else 'hours'}"
    return f"{hours}h {remaining}m"


def movement_status(speed_kph: float, ignition_on: bool) -> MovementStatus:
    """Classify a truck as off, idling or moving.

    Ignition off wins regardless of speed; otherwise anything above
    ``MOVING_SPEED_THRESHOLD_KPH`` counts as moving.
    """
    if not ignition_on:
        return MovementStatus.OFF
    if speed_kph > MOVING_SPEED_THRESHOLD_KPH:
        return MovementStatus.MOVING
    return MovementStatus.IDLE


def average_speed(speeds: Iterable[float]) -> float:
    values = [as_float(v) for v in speeds]
    if not values:
        return 0.0
    return sum(values) / len(values)


def format_coordinates(lat: float, lng: float) -> str:
    """Format a coordinate pair for display, e.g. ``40.712800° N, 74.006000° W``."""
    lat, lng = as_float(lat), as_float(lng)
    lat_dir = "N" if lat >= 0 else "S"
    lng_dir = "E" if lng >= 0 else "W"
    return f"{abs(lat):.6f}° {lat_dir}, {abs(lng):.6f}° {lng_dir}"


# ---------------------------------------------------------------------------
# Sanitizing partial fixes
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class SanitizedFix:
    """A fully populated, range-clamped GPS fix built from partial fields."""

    lat: float
    lng: float
    speed: float
    heading: float
    fuel_level: float


def clamp_fuel(value: float) -> float:
    return max(FUEL_MIN_PCT, min(FUEL_MAX_PCT, value))


def sanitize(
    *,
    lat: Any = None,
    lng: Any = None,
    speed: Any = None,
    heading: Any = None,
    fuel_level: Any = None,
) -> SanitizedFix:
    """Fill in and clamp a possibly malformed fix so it can still be rendered.

    Missing, NaN or non-numeric values become ``0``; negative or infinite
    speed becomes ``0``; fuel is clamped to ``[0, 100]``; heading goes
    through :func:`normalize_heading`.  Coordinates are *not* range checked.
    """
    speed_value = real_number(speed)
    fuel_value = real_number(fuel_level)
    return SanitizedFix(
        lat=real_number(lat) or 0.0,
        lng=real_number(lng) or 0.0,
        speed=speed_value if speed_value is not None and 0 <= speed_value < math.inf else 0.0,
        heading=normalize_heading(heading),
        fuel_level=clamp_fuel(fuel_value) if fuel_value is not None else 0.0,
    )
