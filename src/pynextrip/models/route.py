"""Route and direction models."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from pynextrip._normalize import safe_id, safe_int
from pynextrip.models._base import NexTripBaseModel


class Route(NexTripBaseModel):
    """A transit route as listed by ``/NexTrip/Routes``."""

    route_id: str
    route_label: str = ""
    agency_id: int | None = None

    @field_validator("route_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return safe_id(value)

    @field_validator("agency_id", mode="before")
    @classmethod
    def _coerce_agency(cls, value: Any) -> int | None:
        return safe_int(value)


class Direction(NexTripBaseModel):
    """A travel direction of a route.

    ``route_id`` is not part of the provider payload; the client stamps it
    so a direction can be checked against the current selection.
    """

    direction_id: str
    direction_name: str = ""
    route_id: str

    @field_validator("direction_id", "route_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return safe_id(value)
