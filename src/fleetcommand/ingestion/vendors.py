"""Per-vendor tracker payload parsers.

Each parser turns one known payload shape into a :class:`GpsReading`
or raises :class:`~fleetcommand.exceptions.GpsValidationError` tagged
with its source.  The field names, nesting and speed units below are a
compatibility contract with third-party hardware and must not drift.

Shapes, in dispatch order:

* ``vendorA``: ``vehicle.id``, ``location.lat/lng``, mph, ``timestamp``
* ``vendorB``: ``device.id``, ``latitude|lat``, ``longitude|lng|lon``, km/h, ``dateTime``
* ``vendorC``: ``asset_id``, ``gps.lat/lon``, mph, ``event_time``
* ``bus``: vehicle id from ``topic``, inner ``payload`` object, km/h
* ``native``: ``truckId``, ``lat``, ``lng``, km/h, ``timestamp``
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from fleetcommand._constants import BUS_TOPIC_SEPARATOR, BUS_TOPIC_VEHICLE_SEGMENT
from fleetcommand.exceptions import GpsValidationError
from fleetcommand.geo import is_valid_point, normalize_heading, real_number
from fleetcommand.ingestion.events import IngestionSource
from fleetcommand.ingestion.normalize import (
    as_mapping,
    coalesce,
    explicit_bool,
    fuel_or_zero,
    identifier,
    inferred_ignition,
    is_present,
    mph_speed_or_zero,
    non_negative_or_zero,
    timestamp_or_now,
)
from fleetcommand.models.geo import GeoPoint
from fleetcommand.models.gps import GpsReading

_LABELS: dict[IngestionSource, str] = {
    IngestionSource.VENDOR_A: "Vendor A",
    IngestionSource.VENDOR_B: "Vendor B",
    IngestionSource.VENDOR_C: "Vendor C",
    IngestionSource.BUS: "Bus envelope",
    IngestionSource.NATIVE: "Native format",
}


def _fail(source: IngestionSource, payload: Any, reason: str) -> GpsValidationError:
    return GpsValidationError(
        f"{_LABELS[source]} normalization failed: {reason}",
        source=source,
        payload=payload,
    )


def _require_object(source: IngestionSource, payload: Any) -> Mapping[str, Any]:
    mapping = as_mapping(payload)
    if mapping is None:
        raise _fail(source, payload, "payload is not an object")
    return mapping


def _require_id(source: IngestionSource, payload: Any, value: Any, field: str) -> str:
    vehicle_id = identifier(value)
    if vehicle_id is None:
        raise _fail(source, payload, f"Missing {field}")
    return vehicle_id


def _require_position(source: IngestionSource, payload: Any, lat: Any, lng: Any) -> GeoPoint:
    lat_value = real_number(lat)
    lng_value = real_number(lng)
    if lat_value is None or lng_value is None:
        raise _fail(source, payload, "Invalid location data")
    if not is_valid_point(lat_value, lng_value):
        raise _fail(source, payload, f"Invalid GPS coordinates ({lat_value:g}, {lng_value:g})")
    return GeoPoint(latitude=lat, longitude=lng)


def _build_reading(source: IngestionSource, payload: Any, **fields: Any) -> GpsReading:
    try:
        return GpsReading(**fields)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise _fail(source, payload, f"{location}: {first['msg']}") from exc


def normalize_vendor_a(payload: Any) -> GpsReading:
    """Vendor A: nested ``vehicle`` and ``location`` objects, speed in mph.

    Example::

        {
            "vehicle": {"id": "v123", "name": "Truck 01"},
            "location": {"lat": 40.7128, "lng": -74.0060},
            "speed": 45,
            "fuelLevel": 75,
        }
    """
    source = IngestionSource.VENDOR_A
    data = _require_object(source, payload)
    vehicle = as_mapping(data.get("vehicle")) or {}
    location = as_mapping(data.get("location")) or {}

    vehicle_id = _require_id(source, payload, vehicle.get("id"), "vehicle.id")
    position = _require_position(source, payload, location.get("lat"), location.get("lng"))

    speed = data.get("speed")
    ignition = explicit_bool(data.get("ignitionOn"))
    return _build_reading(
        source,
        payload,
        vehicle_id=vehicle_id,
        position=position,
        speed_kph=mph_speed_or_zero(speed),
        heading_deg=normalize_heading(data.get("heading")),
        fuel_level_pct=fuel_or_zero(data.get("fuelLevel")),
        ignition_on=ignition if ignition is not None else inferred_ignition(speed),
        observed_at=timestamp_or_now(data.get("timestamp")),
    )


def normalize_vendor_b(payload: Any) -> GpsReading:
    """Vendor B: ``device`` object with flat coordinates, speed already in km/h.

    Coordinates may be spelled ``latitude``/``lat`` and
    ``longitude``/``lng``/``lon``; the long spelling wins when both exist.
    """
    source = IngestionSource.VENDOR_B
    data = _require_object(source, payload)
    device = as_mapping(data.get("device")) or {}

    vehicle_id = _require_id(source, payload, device.get("id"), "device.id")
    position = _require_position(
        source,
        payload,
        coalesce(data, "latitude", "lat"),
        coalesce(data, "longitude", "lng", "lon"),
    )

    speed = data.get("speed")
    ignition = explicit_bool(data.get("ignition"))
    return _build_reading(
        source,
        payload,
        vehicle_id=vehicle_id,
        position=position,
        speed_kph=non_negative_or_zero(speed),
        heading_deg=normalize_heading(data.get("bearing")),
        fuel_level_pct=fuel_or_zero(data.get("fuel")),
        ignition_on=ignition if ignition is not None else inferred_ignition(speed),
        observed_at=timestamp_or_now(data.get("dateTime")),
    )


def normalize_vendor_c(payload: Any) -> GpsReading:
    """Vendor C: snake_case ``asset_id`` with a ``gps`` object, speed in mph.

    ``ignition_status`` is on for the literal ``"on"`` or ``True``;
    anything else falls back to ``speed > 0``.
    """
    source = IngestionSource.VENDOR_C
    data = _require_object(source, payload)
    gps = as_mapping(data.get("gps")) or {}

    vehicle_id = _require_id(source, payload, data.get("asset_id"), "asset_id")
    position = _require_position(source, payload, gps.get("lat"), gps.get("lon"))

    speed = data.get("speed")
    status = data.get("ignition_status")
    return _build_reading(
        source,
        payload,
        vehicle_id=vehicle_id,
        position=position,
        speed_kph=mph_speed_or_zero(speed),
        heading_deg=normalize_heading(data.get("heading")),
        fuel_level_pct=fuel_or_zero(data.get("fuel_percent")),
        ignition_on=status == "on" or status is True or inferred_ignition(speed),
        observed_at=timestamp_or_now(data.get("event_time")),
    )


def vehicle_id_from_topic(topic: Any) -> str | None:
    """Extract ``truck42`` from a ``fleet/truck42/gps`` topic."""
    if not isinstance(topic, str):
        return None
    parts = topic.split(BUS_TOPIC_SEPARATOR)
    if len(parts) <= BUS_TOPIC_VEHICLE_SEGMENT:
        return None
    return identifier(parts[BUS_TOPIC_VEHICLE_SEGMENT])


def normalize_bus(payload: Any) -> GpsReading:
    """Message-bus envelope: ``{"topic": "fleet/{id}/gps", "payload": {...}}``.

    The inner payload accepts ``lat``/``latitude``, ``lng``/``longitude``,
    ``fuel``/``fuelLevel`` and ``ignition``/``ignitionOn``.  The envelope
    ``timestamp`` wins over one inside the inner payload.
    """
    source = IngestionSource.BUS
    data = _require_object(source, payload)

    topic = data.get("topic")
    if not isinstance(topic, str) or not topic:
        raise _fail(source, payload, "Missing topic")
    inner = as_mapping(data.get("payload"))
    if inner is None:
        raise _fail(source, payload, "Invalid bus payload")

    vehicle_id = vehicle_id_from_topic(topic)
    if vehicle_id is None:
        raise _fail(source, payload, f"Cannot extract vehicle id from topic {topic!r}")
    position = _require_position(
        source,
        payload,
        coalesce(inner, "lat", "latitude"),
        coalesce(inner, "lng", "longitude"),
    )

    speed = inner.get("speed")
    ignition = explicit_bool(inner.get("ignition"), inner.get("ignitionOn"))
    timestamp = data.get("timestamp")
    if not is_present(timestamp):
        timestamp = inner.get("timestamp")
    return _build_reading(
        source,
        payload,
        vehicle_id=vehicle_id,
        position=position,
        speed_kph=non_negative_or_zero(speed),
        heading_deg=normalize_heading(inner.get("heading")),
        fuel_level_pct=fuel_or_zero(coalesce(inner, "fuel", "fuelLevel")),
        ignition_on=ignition if ignition is not None else inferred_ignition(speed),
        observed_at=timestamp_or_now(timestamp),
    )


def normalize_native(payload: Any) -> GpsReading:
    """The application's own flat shape.

    Example::

        {
            "truckId": "truck123",
            "lat": 40.7128,
            "lng": -74.0060,
            "speed": 72,
            "heading": 180,
            "fuelLevel": 75,
            "ignitionOn": True,
            "timestamp": "2026-02-26T12:30:00Z",
        }
    """
    source = IngestionSource.NATIVE
    data = _require_object(source, payload)

    vehicle_id = _require_id(source, payload, data.get("truckId"), "truckId")
    position = _require_position(source, payload, data.get("lat"), data.get("lng"))

    speed = data.get("speed")
    ignition = explicit_bool(data.get("ignitionOn"))
    return _build_reading(
        source,
        payload,
        vehicle_id=vehicle_id,
        position=position,
        speed_kph=non_negative_or_zero(speed),
        heading_deg=normalize_heading(data.get("heading")),
        fuel_level_pct=fuel_or_zero(data.get("fuelLevel")),
        ignition_on=ignition if ignition is not None else inferred_ignition(speed),
        observed_at=timestamp_or_now(data.get("timestamp")),
    )
