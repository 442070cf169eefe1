"""Tests for ingestion records and the GpsIngestor."""

from __future__ import annotations

import json
import logging

import pytest

from fleetcommand.config import FleetConfig
from fleetcommand.exceptions import GpsValidationError, UnknownFormatError
from fleetcommand.ingestion import (
    GpsIngestor,
    IngestionRecord,
    IngestionSource,
    log_ingestion_event,
    normalize,
)

NATIVE = {"truckId": "t1", "lat": 40.7128, "lng": -74.006, "speed": 50, "ignitionOn": True}
BAD_NATIVE = {"truckId": "t1", "lat": 200, "lng": 0}


class _Collector:
    def __init__(self) -> None:
        self.records: list[IngestionRecord] = []

    def __call__(self, record: IngestionRecord) -> None:
        self.records.append(record)


# ------------------------------------------------------------------
# log_ingestion_event
# ------------------------------------------------------------------


class TestLogIngestionEvent:
    def test_success_record(self) -> None:
        sink = _Collector()
        reading = normalize(NATIVE)
        record = log_ingestion_event(reading, IngestionSource.NATIVE, True, sink=sink)
        assert sink.records == [record]
        assert record.vehicle_id == "t1"
        assert record.source == "native"
        assert record.success is True
        assert record.coordinates == "40.7128,-74.006"
        assert record.speed_kph == 50
        assert record.error is None
        assert record.logged_at.tzinfo is not None

    def test_failure_record_uses_placeholders(self) -> None:
        sink = _Collector()
        record = log_ingestion_event(None, "vendorB", False, ValueError("boom"), sink=sink)
        assert record.vehicle_id == "unknown"
        assert record.coordinates == "0,0"
        assert record.speed_kph == 0
        assert record.error == "boom"

    def test_default_sink_logs_json(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="fleetcommand")
        log_ingestion_event(normalize(NATIVE), "native", True)
        log_ingestion_event(None, "native", False, "Missing truckId")

        ok, failed = caplog.records
        assert ok.levelno == logging.INFO
        assert ok.name == "fleetcommand.ingestion.events"
        assert '"vehicleId":"t1"' in ok.getMessage()
        assert failed.levelno == logging.WARNING

        payload = json.loads(failed.getMessage().split(" ", 3)[3])
        assert payload["success"] is False
        assert payload["error"] == "Missing truckId"


# ------------------------------------------------------------------
# GpsIngestor
# ------------------------------------------------------------------


class TestGpsIngestor:
    def test_ingest_emits_one_success_record(self) -> None:
        sink = _Collector()
        reading = GpsIngestor(sink=sink).ingest(NATIVE)
        assert reading.vehicle_id == "t1"
        assert len(sink.records) == 1
        assert sink.records[0].success is True
        assert sink.records[0].source == "native"

    def test_ingest_records_and_reraises_failures(self) -> None:
        sink = _Collector()
        with pytest.raises(GpsValidationError):
            GpsIngestor(sink=sink).ingest(BAD_NATIVE)
        (record,) = sink.records
        assert record.success is False
        assert record.source == "native"
        assert record.vehicle_id == "unknown"
        assert "Invalid GPS coordinates" in (record.error or "")

    def test_unknown_format(self) -> None:
        sink = _Collector()
        with pytest.raises(UnknownFormatError):
            GpsIngestor(sink=sink).ingest("garbage")
        assert sink.records[0].source == "unknown"

    def test_ingest_many_collects_failures(self) -> None:
        sink = _Collector()
        bus = {"topic": "fleet/t2/gps", "payload": {"lat": 1, "lng": 2}}
        batch = GpsIngestor(sink=sink).ingest_many([NATIVE, BAD_NATIVE, bus])
        assert not batch.ok
        assert [r.vehicle_id for r in batch.readings] == ["t1", "t2"]
        assert len(batch.failures) == 1
        index, error = batch.failures[0]
        assert index == 1
        assert isinstance(error, GpsValidationError)
        assert [r.success for r in sink.records] == [True, False, True]

    def test_empty_batch_is_ok(self) -> None:
        assert GpsIngestor(sink=_Collector()).ingest_many([]).ok

    def test_trace_logs_redacted_payload(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="fleetcommand")
        ingestor = GpsIngestor(FleetConfig(ingestion_trace_enabled=True), sink=_Collector())
        ingestor.ingest({**NATIVE, "apiKey": "sk-live-123"})
        assert "GPS payload (native)" in caplog.text
        assert "<redacted>" in caplog.text
        assert "sk-live-123" not in caplog.text

    def test_trace_disabled_by_default(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="fleetcommand")
        GpsIngestor(sink=_Collector()).ingest(NATIVE)
        assert "GPS payload" not in caplog.text

    @pytest.mark.parametrize("epoch", [1e300, float("inf"), -1e20])
    def test_out_of_range_timestamp_still_records_one_failure(self, epoch: float) -> None:
        sink = _Collector()
        with pytest.raises(GpsValidationError):
            GpsIngestor(sink=sink).ingest({**NATIVE, "timestamp": epoch})
        (record,) = sink.records
        assert record.success is False
        assert record.source == "native"
        assert "epoch timestamp out of range" in (record.error or "")
