"""Normalization helpers.

Centralizes lenient parsing of provider values. NexTrip sends coordinates as
numeric strings and occasionally sends empty strings for absent values.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def is_valid_coordinate(lat: float | None, lon: float | None) -> bool:
    """Return True when *lat*/*lon* are present and inside WGS84 bounds."""
    if lat is None or lon is None:
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def safe_id(value: Any) -> Any:
    """Coerce numeric identifiers to strings.

    NexTrip sends numeric ids for some endpoints and strings for others.
    Anything else is returned untouched for pydantic to reject.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value.strip()
    return value
