"""Live vehicle position model."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from pynextrip._normalize import is_valid_coordinate, safe_float, safe_id, safe_int
from pynextrip.exceptions import MalformedVehicleCoordinateError
from pynextrip.models._base import NexTripBaseModel


class Vehicle(NexTripBaseModel):
    """A vehicle position from ``/NexTrip/Vehicles/{route}``.

    Parameters
    ----------
    trip_id : str
        Trip identifier; the key of the vehicle marker.
    route_id : str
        Route the vehicle is serving.
    direction_id : str
        Direction identifier, compared against the selected direction.
    direction : str or None
        Human-readable direction (e.g. ``"NB"``).
    latitude, longitude : float or None
        ``None`` when the provider value is missing or not numeric.
    bearing, speed : float or None
        Heading in degrees and speed, when reported.
    location_time : int or None
        Epoch seconds of the position fix.
    """

    trip_id: str
    route_id: str = ""
    direction_id: str = ""
    direction: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    bearing: float | None = None
    speed: float | None = None
    location_time: int | None = None

    @field_validator("trip_id", "route_id", "direction_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return safe_id(value)

    @field_validator("latitude", "longitude", "bearing", "speed", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("location_time", mode="before")
    @classmethod
    def _coerce_time(cls, value: Any) -> int | None:
        return safe_int(value)

    def position(self) -> tuple[float, float]:
        """Return ``(lat, lon)``.

        Raises
        ------
        MalformedVehicleCoordinateError
            When either coordinate is missing or out of range.
        """
        if not is_valid_coordinate(self.latitude, self.longitude):
            raise MalformedVehicleCoordinateError(
                f"Vehicle {self.trip_id} has malformed coordinates "
                f"(lat={self.raw.get('latitude')!r}, lon={self.raw.get('longitude')!r})",
                trip_id=self.trip_id,
            )
        assert self.latitude is not None and self.longitude is not None  # noqa: S101
        return self.latitude, self.longitude
