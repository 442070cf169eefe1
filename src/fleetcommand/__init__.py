"""fleetcommand - GPS telemetry normalization and trip route optimization."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetcommand")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetcommand.config import FleetConfig
from fleetcommand.exceptions import (
    FleetConfigError,
    FleetError,
    GpsIngestionError,
    GpsValidationError,
    InvalidStopError,
    RouteOptimizationError,
    TooManyStopsError,
    UnknownFormatError,
)
from fleetcommand.models import (
    CompassPoint,
    GeoPoint,
    GpsReading,
    MovementStatus,
    OrderedStop,
    RoutePlan,
    Stop,
    StopRole,
)
from fleetcommand.ingestion import (
    GpsIngestor,
    IngestionRecord,
    IngestionSource,
    detect_source,
    is_valid_reading,
    log_ingestion_event,
    normalize_telemetry,
)
from fleetcommand.routing import optimize_greedy, optimize_refined, optimize_stops, plan_route

__all__ = [
    "__version__",
    "CompassPoint",
    "FleetConfig",
    "FleetConfigError",
    "FleetError",
    "GeoPoint",
    "GpsIngestionError",
    "GpsIngestor",
    "GpsReading",
    "GpsValidationError",
    "IngestionRecord",
    "IngestionSource",
    "InvalidStopError",
    "MovementStatus",
    "OrderedStop",
    "RouteOptimizationError",
    "RoutePlan",
    "Stop",
    "StopRole",
    "TooManyStopsError",
    "UnknownFormatError",
    "detect_source",
    "is_valid_reading",
    "log_ingestion_event",
    "normalize_telemetry",
    "optimize_greedy",
    "optimize_refined",
    "optimize_stops",
    "plan_route",
]
