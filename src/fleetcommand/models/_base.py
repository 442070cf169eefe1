"""Base model and timestamp handling shared by fleetcommand models.

Every public value type inherits from :class:`FleetBaseModel` which
provides:

* ``frozen=True``: readings and stops are never mutated once built, so
  construction is the only validation gate.
* ``alias_generator=to_camel`` so the camelCase wire shape
  (``speedKph``, ``observedAt``) maps onto snake_case fields, while
  ``populate_by_name`` keeps keyword construction working.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

# Threshold to distinguish epoch seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> Any:
    """Coerce epoch numbers (seconds **or** milliseconds) to UTC datetimes.

    ISO-8601 strings and ``datetime`` objects are passed through untouched
    for pydantic to parse; booleans are passed through so they fail
    validation instead of becoming 1970-01-01.

    Raises
    ------
    ValueError
        The epoch is NaN, infinite or outside the platform's datetime
        range, so pydantic reports it as a validation error.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    try:
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueError("epoch timestamp out of range") from exc


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp), AfterValidator(ensure_utc)]
"""A timezone-aware UTC instant, accepted as ISO-8601 text, epoch or datetime."""


def utcnow() -> datetime:
    return datetime.now(UTC)


class FleetBaseModel(BaseModel):
    """Base for fleetcommand value types."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
