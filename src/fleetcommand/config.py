"""Library configuration for fleetcommand."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

from fleetcommand.exceptions import FleetConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(name: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        parsed = cast(value.strip())
    except ValueError as exc:
        raise FleetConfigError(f"{name} must be a number, got {value!r}") from exc
    if isinstance(parsed, float) and not math.isfinite(parsed):
        raise FleetConfigError(f"{name} must be finite, got {value!r}")
    if parsed < 0:
        raise FleetConfigError(f"{name} must not be negative, got {value!r}")
    return parsed


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Tuning knobs for ingestion and route optimization.

    Parameters
    ----------
    max_route_stops : int
        Largest stop list accepted by :func:`fleetcommand.routing.optimize_stops`.
        The 2-opt pass is O(N^3), so requests above this ceiling are
        rejected with :class:`~fleetcommand.exceptions.TooManyStopsError`.
        ``0`` disables the check.
    max_refine_passes : int
        Maximum number of accepted 2-opt improvements per run.  ``0``
        means refine until no improving reversal remains.
    refine_routes : bool
        Whether ``optimize_stops`` runs the 2-opt pass when the caller
        does not say.
    validate_stops : bool
        Reject stops with invalid coordinates before optimizing instead of
        letting NaN distances corrupt the tour.
    default_average_speed_kmh : float
        Speed used to turn a route distance into an ETA.
    ingestion_trace_enabled : bool
        Log every raw tracker payload (redacted) at DEBUG level.
    """

    max_route_stops: int = 50
    max_refine_passes: int = 0
    refine_routes: bool = True
    validate_stops: bool = True
    default_average_speed_kmh: float = 60.0
    ingestion_trace_enabled: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from ``FLEET_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        FleetConfigError
            A numeric variable is not a number or is negative.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "FLEET_MAX_ROUTE_STOPS": ("max_route_stops", int),
            "FLEET_MAX_REFINE_PASSES": ("max_refine_passes", int),
            "FLEET_DEFAULT_AVERAGE_SPEED_KMH": ("default_average_speed_kmh", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        _ENV_BOOL_MAP = {
            "FLEET_REFINE_ROUTES": ("refine_routes", True),
            "FLEET_VALIDATE_STOPS": ("validate_stops", True),
            "FLEET_INGESTION_TRACE_ENABLED": ("ingestion_trace_enabled", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
