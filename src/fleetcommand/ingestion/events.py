"""Ingestion observability records.

Every ingestion attempt, successful or not, is described by one
:class:`IngestionRecord`.  This module only decides *what* is recorded;
where records go is up to the caller-supplied sink.  The default sink
writes one line per record to the standard ``logging`` hierarchy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from enum import StrEnum

from pydantic import Field

from fleetcommand.models._base import FleetBaseModel, utcnow
from fleetcommand.models.gps import GpsReading

_logger = logging.getLogger(__name__)


class IngestionSource(StrEnum):
    """Payload shape a reading was (or was going to be) parsed from."""

    VENDOR_A = "vendorA"
    VENDOR_B = "vendorB"
    VENDOR_C = "vendorC"
    BUS = "bus"
    NATIVE = "native"
    UNKNOWN = "unknown"


class IngestionRecord(FleetBaseModel):
    """Structured outcome of one ingestion attempt."""

    logged_at: datetime = Field(default_factory=utcnow)
    vehicle_id: str = Field(..., description="Vehicle id, or 'unknown' when parsing failed")
    source: str
    success: bool
    coordinates: str = Field(..., description="'lat,lng' of the reading")
    speed_kph: float = 0.0
    error: str | None = None


IngestionSink = Callable[[IngestionRecord], None]


def logging_sink(record: IngestionRecord) -> None:
    """Write *record* as a JSON line: INFO for successes, WARNING for failures."""
    line = record.model_dump_json(by_alias=True)
    if record.success:
        _logger.info("GPS ingestion ok %s", line)
    else:
        _logger.warning("GPS ingestion failed %s", line)


def log_ingestion_event(
    reading: GpsReading | None,
    source: str,
    success: bool,
    error: BaseException | str | None = None,
    *,
    sink: IngestionSink | None = None,
) -> IngestionRecord:
    """Build the record for one ingestion attempt and hand it to *sink*.

    ``reading`` is ``None`` when normalization failed before a reading
    existed; the record then carries placeholder values.
    """

    record = IngestionRecord(
        vehicle_id=reading.vehicle_id if reading is not None else "unknown",
        source=str(source),
        success=success,
        coordinates=reading.coordinates if reading is not None else "0,0",
        speed_kph=reading.speed_kph if reading is not None else 0.0,
        error=str(error) if error is not None else None,
    )
    (sink or logging_sink)(record)
    return record
