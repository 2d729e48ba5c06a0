"""Shared helpers for NexTrip endpoint modules.

This module centralizes the most repeated patterns:
- building endpoint paths from quoted segments
- checking the top-level payload shape
- validating list items into models, skipping malformed ones

It is internal to pynextrip and may change at any time.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from pynextrip.exceptions import NexTripTransportError

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def build_path(*segments: str) -> str:
    """Join quoted path segments under ``/NexTrip``."""
    return "/NexTrip/" + "/".join(quote(str(segment), safe="") for segment in segments)


def expect_list(endpoint: str, payload: Any) -> list[Any]:
    if not isinstance(payload, list):
        raise NexTripTransportError(
            f"Expected a JSON list from {endpoint}, got {type(payload).__name__}",
            endpoint=endpoint,
        )
    return payload


def expect_dict(endpoint: str, payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise NexTripTransportError(
            f"Expected a JSON object from {endpoint}, got {type(payload).__name__}",
            endpoint=endpoint,
        )
    return payload


def parse_items(
    endpoint: str,
    items: list[Any],
    model: type[M],
    *,
    extra: dict[str, Any] | None = None,
) -> list[M]:
    """Validate each dict in *items* as *model*; malformed items are skipped."""
    parsed: list[M] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        data = {**item, **extra} if extra else item
        try:
            parsed.append(model.model_validate(data))
        except ValidationError:
            _logger.debug("Skipping malformed %s item from %s: %s", model.__name__, endpoint, item)
    return parsed
