"""Stop, stop detail and departure models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pynextrip._constants import REALTIME_DEPARTURE_MARKER
from pynextrip._normalize import is_valid_coordinate, safe_float, safe_id, safe_int
from pynextrip.exceptions import IncompleteStopDataError
from pynextrip.models._base import NexTripBaseModel


class StopRef(NexTripBaseModel):
    """A stop as listed by ``/NexTrip/Stops/{route}/{direction}``."""

    place_code: str
    description: str | None = None

    @field_validator("place_code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> Any:
        return safe_id(value)


class StopInfo(NexTripBaseModel):
    """Stop location as embedded in a stop detail response.

    Coordinates are ``None`` when absent or unparseable.
    """

    stop_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    description: str = ""

    @field_validator("stop_id", mode="before")
    @classmethod
    def _coerce_stop_id(cls, value: Any) -> Any:
        return safe_id(value)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)


class Departure(NexTripBaseModel):
    """One upcoming departure from a stop."""

    departure_text: str = ""
    description: str = ""
    route_short_name: str | None = None
    departure_time: int | None = None
    actual: bool = False

    @field_validator("departure_time", mode="before")
    @classmethod
    def _coerce_time(cls, value: Any) -> int | None:
        return safe_int(value)

    @property
    def is_realtime(self) -> bool:
        """Whether the departure text is a live minute countdown."""
        return REALTIME_DEPARTURE_MARKER in self.departure_text


class Stop(BaseModel):
    """A renderable stop: a place code with coordinates and departures."""

    model_config = ConfigDict(frozen=True)

    place_code: str
    lat: float
    lon: float
    description: str = ""
    departures: tuple[Departure, ...] = Field(default_factory=tuple)


class StopDetail(NexTripBaseModel):
    """Response of ``/NexTrip/{route}/{direction}/{place_code}``."""

    stops: list[StopInfo] = Field(default_factory=list)
    departures: list[Departure] = Field(default_factory=list)

    @field_validator("stops", "departures", mode="before")
    @classmethod
    def _drop_non_dict_items(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict | BaseModel)]

    def to_stop(self, place_code: str) -> Stop:
        """Build a renderable :class:`Stop` for *place_code*.

        Raises
        ------
        IncompleteStopDataError
            When the response carries no stop or no valid coordinates.
        """
        if not self.stops:
            raise IncompleteStopDataError(f"Stop {place_code} detail has no stop entry", place_code=place_code)
        info = self.stops[0]
        if not is_valid_coordinate(info.latitude, info.longitude):
            raise IncompleteStopDataError(
                f"Stop {place_code} has no valid coordinates (lat={info.latitude}, lon={info.longitude})",
                place_code=place_code,
            )
        assert info.latitude is not None and info.longitude is not None  # noqa: S101
        return Stop(
            place_code=place_code,
            lat=info.latitude,
            lon=info.longitude,
            description=info.description,
            departures=tuple(self.departures),
        )
