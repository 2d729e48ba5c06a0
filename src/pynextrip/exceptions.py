"""Custom exception hierarchy for pynextrip."""

from __future__ import annotations


class NexTripError(Exception):
    """Base exception for all pynextrip errors."""


class NexTripConfigError(NexTripError):
    """Invalid or missing configuration."""


class NexTripTransportError(NexTripError):
    """Fetch failure (network, timeout, non-200, invalid JSON, bad shape)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MissingGeometryError(NexTripError):
    """Route id has no entry in the static geometry dataset."""

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"No route geometry for route {route_id!r}")


class IncompleteStopDataError(NexTripError):
    """Stop detail response lacks usable coordinates.

    Some stops have incomplete data upstream; callers skip them.
    """

    def __init__(self, message: str, *, place_code: str = "") -> None:
        self.place_code = place_code
        super().__init__(message)


class MalformedVehicleCoordinateError(NexTripError):
    """Vehicle latitude/longitude are missing or not numeric."""

    def __init__(self, message: str, *, trip_id: str = "") -> None:
        self.trip_id = trip_id
        super().__init__(message)
