"""Ingestion layer.

Adapters that take raw tracker payloads (vendor webhooks, message-bus
envelopes, the native format) and emit normalized :class:`GpsReading`
objects plus one observability record per attempt.
"""

from fleetcommand.ingestion.events import (
    IngestionRecord,
    IngestionSink,
    IngestionSource,
    log_ingestion_event,
    logging_sink,
)
from fleetcommand.ingestion.gps import (
    GpsIngestor,
    IngestionBatch,
    detect_source,
    is_valid_reading,
    normalize,
    normalize_telemetry,
)
from fleetcommand.ingestion.vendors import (
    normalize_bus,
    normalize_native,
    normalize_vendor_a,
    normalize_vendor_b,
    normalize_vendor_c,
)

__all__ = [
    "GpsIngestor",
    "IngestionBatch",
    "IngestionRecord",
    "IngestionSink",
    "IngestionSource",
    "detect_source",
    "is_valid_reading",
    "log_ingestion_event",
    "logging_sink",
    "normalize",
    "normalize_bus",
    "normalize_native",
    "normalize_telemetry",
    "normalize_vendor_a",
    "normalize_vendor_b",
    "normalize_vendor_c",
]
