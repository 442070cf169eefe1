"""Helpers for safe debug logging.

Tracker webhooks often arrive with vendor credentials embedded in the
payload (API keys, webhook secrets, bearer tokens) and sometimes with
driver contact data.  Raw payloads are run through :func:`redact_for_log`
before they reach a log line or an ingestion record.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

# Compared after lower-casing and dropping ``-``/``_`` so that ``api_key``,
# ``apiKey`` and ``X-Api-Key`` all match.
_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "secret",
        "apikey",
        "xapikey",
        "xgpssecret",
        "webhooksecret",
        "token",
        "accesstoken",
        "refreshtoken",
        "authorization",
        "cookie",
        "driverphone",
        "driveremail",
    }
)

_MAX_DEPTH = 20


def _canonical_key(key: Any) -> str:
    return str(key).lower().replace("-", "").replace("_", "")


def is_sensitive_key(key: Any) -> bool:
    """Return ``True`` when values stored under *key* must never be logged."""
    return _canonical_key(key) in _SENSITIVE_VALUE_KEYS


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a JSON-friendly, redacted copy of *value* for log output.

    Secret-bearing keys are replaced with ``"<redacted>"``, long strings
    are truncated, datetimes become ISO strings and NaN floats become
    ``"NaN"`` so the result always survives ``json.dumps``.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int)):
        return value

    if isinstance(value, float):
        return "NaN" if math.isnan(value) else value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, datetime):
        return value.isoformat()

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(k): "<redacted>" if is_sensitive_key(k) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
