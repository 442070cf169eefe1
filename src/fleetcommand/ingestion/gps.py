"""GPS telemetry ingestion.

Detects which tracker shape an inbound payload has and turns it into
exactly one :class:`GpsReading`, or fails with a
:class:`~fleetcommand.exceptions.GpsIngestionError`.

Detection is structural: vendors do not share an envelope or a type
tag, so each shape is recognised by the keys it carries.  The order of
``_FORMATS`` matters because a malformed payload can look like more than
one shape; the first match wins.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from fleetcommand._redact import redact_for_log
from fleetcommand.config import FleetConfig
from fleetcommand.exceptions import GpsIngestionError, UnknownFormatError
from fleetcommand.geo import is_valid_point, real_number
from fleetcommand.ingestion.events import IngestionSink, IngestionSource, log_ingestion_event
from fleetcommand.ingestion.normalize import is_present
from fleetcommand.ingestion.vendors import (
    normalize_bus,
    normalize_native,
    normalize_vendor_a,
    normalize_vendor_b,
    normalize_vendor_c,
)
from fleetcommand.models.gps import GpsReading

_logger = logging.getLogger(__name__)


def _looks_like_vendor_a(payload: Mapping[str, Any]) -> bool:
    return is_present(payload.get("vehicle")) and is_present(payload.get("location"))


def _looks_like_vendor_b(payload: Mapping[str, Any]) -> bool:
    # Key presence, not value: ``{"device": ..., "lat": None}`` is still vendor B.
    return is_present(payload.get("device")) and ("latitude" in payload or "lat" in payload)


def _looks_like_vendor_c(payload: Mapping[str, Any]) -> bool:
    return is_present(payload.get("asset_id")) and is_present(payload.get("gps"))


def _looks_like_bus(payload: Mapping[str, Any]) -> bool:
    return is_present(payload.get("topic")) and is_present(payload.get("payload"))


_FORMATS: tuple[tuple[IngestionSource, Callable[[Mapping[str, Any]], bool], Callable[[Any], GpsReading]], ...] = (
    (IngestionSource.VENDOR_A, _looks_like_vendor_a, normalize_vendor_a),
    (IngestionSource.VENDOR_B, _looks_like_vendor_b, normalize_vendor_b),
    (IngestionSource.VENDOR_C, _looks_like_vendor_c, normalize_vendor_c),
    (IngestionSource.BUS, _looks_like_bus, normalize_bus),
)


def detect_source(payload: Any) -> IngestionSource:
    """Return the shape :func:`normalize` would parse *payload* as."""
    if not isinstance(payload, Mapping):
        return IngestionSource.UNKNOWN
    for source, matches, _parser in _FORMATS:
        if matches(payload):
            return source
    return IngestionSource.NATIVE


def normalize(payload: Any) -> GpsReading:
    """Normalize one raw tracker payload into a :class:`GpsReading`.

    Raises
    ------
    UnknownFormatError
        *payload* is not an object at all.
    GpsValidationError
        A shape matched but its identifier or coordinates are missing or
        invalid.  The error carries the source tag and the raw payload.
    """
    if not isinstance(payload, Mapping):
        raise UnknownFormatError("Invalid payload: not an object", payload=payload)

    for _source, matches, parser in _FORMATS:
        if matches(payload):
            return parser(payload)
    return normalize_native(payload)


normalize_telemetry = normalize


def is_valid_reading(reading: Any) -> bool:
    """Re-check every field of *reading* against its declared range.

    Meant as a second gate before persisting: readings built with
    ``model_construct`` or by hand skip pydantic validation.  Never raises.
    """
    vehicle_id = getattr(reading, "vehicle_id", None)
    if not isinstance(vehicle_id, str) or not vehicle_id.strip():
        return False

    position = getattr(reading, "position", None)
    if not is_valid_point(getattr(position, "latitude", None), getattr(position, "longitude", None)):
        return False

    speed = real_number(getattr(reading, "speed_kph", None))
    if speed is None or not math.isfinite(speed) or speed < 0:
        return False

    heading = real_number(getattr(reading, "heading_deg", None))
    if heading is None or not 0 <= heading < 360:
        return False

    fuel = real_number(getattr(reading, "fuel_level_pct", None))
    if fuel is None or not 0 <= fuel <= 100:
        return False

    if not isinstance(getattr(reading, "ignition_on", None), bool):
        return False

    return isinstance(getattr(reading, "observed_at", None), datetime)


@dataclasses.dataclass
class IngestionBatch:
    """Outcome of :meth:`GpsIngestor.ingest_many`."""

    readings: list[GpsReading] = dataclasses.field(default_factory=list)
    failures: list[tuple[int, GpsIngestionError]] = dataclasses.field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class GpsIngestor:
    """Normalize payloads and report every attempt to an ingestion sink.

    This is the piece an ingestion endpoint calls: it emits exactly one
    :class:`~fleetcommand.ingestion.events.IngestionRecord` per payload
    and re-raises normalization failures so the caller can decide to
    drop, queue or alert.  It never retries.

    Parameters
    ----------
    config : FleetConfig or None
        Library configuration; defaults to ``FleetConfig()``.
    sink : callable or None
        Receives each :class:`IngestionRecord`.  Defaults to the logging
        sink.
    """

    def __init__(self, config: FleetConfig | None = None, *, sink: IngestionSink | None = None) -> None:
        self._config = config or FleetConfig()
        self._sink = sink

    @property
    def config(self) -> FleetConfig:
        return self._config

    def ingest(self, payload: Any) -> GpsReading:
        """Normalize *payload*, record the outcome and return the reading."""
        source = detect_source(payload)
        if self._config.ingestion_trace_enabled:
            _logger.debug("GPS payload (%s): %s", source, redact_for_log(payload))

        try:
            reading = normalize(payload)
        except GpsIngestionError as exc:
            log_ingestion_event(None, exc.source, False, exc, sink=self._sink)
            raise

        log_ingestion_event(reading, source, True, sink=self._sink)
        return reading

    def ingest_many(self, payloads: Iterable[Any]) -> IngestionBatch:
        """Ingest every payload, collecting failures instead of stopping at the first."""
        batch = IngestionBatch()
        for index, payload in enumerate(payloads):
            try:
                batch.readings.append(self.ingest(payload))
            except GpsIngestionError as exc:
                batch.failures.append((index, exc))
        if batch.failures:
            _logger.debug("GPS batch: %d ok, %d failed", len(batch.readings), len(batch.failures))
        return batch
