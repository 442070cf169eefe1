"""Normalization helpers.

Centralizes defensive field extraction for tracker payloads so the
vendor parsers only describe *which* keys they read, not how missing
or malformed values are defaulted.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from fleetcommand.geo import clamp_fuel, mph_to_kmh, real_number
from fleetcommand.models._base import utcnow


def as_mapping(value: Any) -> Mapping[str, Any] | None:
    return value if isinstance(value, Mapping) else None


def is_present(value: Any) -> bool:
    """Return True if a detection key should count as set.

    Empty containers still count (``{"vehicle": {}}`` is a vendor A
    payload with a missing id, not a native one); ``None``, ``False``,
    ``""``, ``0`` and NaN do not.
    """

    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, float):
        return value != 0 and not math.isnan(value)
    if isinstance(value, int):
        return value != 0
    return True


def coalesce(mapping: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value among *keys* that is not ``None``.

    Falsy values such as ``0`` are kept: a latitude of zero is a real
    latitude.
    """

    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def identifier(value: Any) -> str | None:
    """Return a stripped, non-empty identifier or ``None``.

    Only strings and integers qualify; booleans and containers do not.
    """

    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    text = str(value).strip()
    return text or None


def finite_number(value: Any) -> float | None:
    """Like :func:`real_number`, but infinities count as missing too."""
    parsed = real_number(value)
    if parsed is None or not math.isfinite(parsed):
        return None
    return parsed


def number_or_zero(value: Any) -> float:
    parsed = finite_number(value)
    return 0.0 if parsed is None else parsed


def non_negative_or_zero(value: Any) -> float:
    return max(0.0, number_or_zero(value))


def mph_speed_or_zero(value: Any) -> float:
    """Convert a mph speed to km/h, floored at ``0``; unusable values become ``0``."""
    kmh = mph_to_kmh(number_or_zero(value))
    return max(0.0, kmh) if math.isfinite(kmh) else 0.0


def fuel_or_zero(value: Any) -> float:
    parsed = real_number(value)
    if parsed is None:
        return 0.0
    return clamp_fuel(parsed)


def explicit_bool(*values: Any) -> bool | None:
    """Return the first value that is an actual ``bool``."""

    for value in values:
        if isinstance(value, bool):
            return value
    return None


def inferred_ignition(raw_speed: Any) -> bool:
    """A moving vehicle must have its engine on."""
    return number_or_zero(raw_speed) > 0


def timestamp_or_now(value: Any) -> datetime | Any:
    """Return the payload timestamp untouched, or the current UTC time when absent.

    Absent follows :func:`is_present`: ``0`` and ``False`` mean "no
    timestamp", not the 1970 epoch.
    """
    if not is_present(value):
        return utcnow()
    return value
