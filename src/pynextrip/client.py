"""High-level async client for the Metro Transit NexTrip API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pynextrip._api.routes import fetch_directions, fetch_routes
from pynextrip._api.stops import fetch_stop_detail, fetch_stops
from pynextrip._api.vehicles import fetch_vehicles
from pynextrip._transport import HttpTransport, Transport
from pynextrip.config import NexTripConfig
from pynextrip.exceptions import NexTripError
from pynextrip.models.route import Direction, Route
from pynextrip.models.stop import StopDetail, StopRef
from pynextrip.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


class NexTripClient:
    """Async client for the NexTrip API.

    Usage::

        async with NexTripClient(config) as client:
            routes = await client.get_routes()
            vehicles = await client.get_vehicles(routes[0].route_id)

    Every method raises :class:`~pynextrip.exceptions.NexTripTransportError`
    on fetch failure. The client never retries.
    """

    def __init__(
        self,
        config: NexTripConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = (config or NexTripConfig()).validate()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None

    @property
    def config(self) -> NexTripConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> NexTripClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise NexTripError("Client not initialized. Use 'async with NexTripClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_routes(self) -> list[Route]:
        routes = await fetch_routes(self._require_transport())
        _logger.debug("Fetched %d routes", len(routes))
        return routes

    async def get_directions(self, route_id: str) -> list[Direction]:
        return await fetch_directions(self._require_transport(), route_id)

    async def get_stops(self, route_id: str, direction_id: str) -> list[StopRef]:
        return await fetch_stops(self._require_transport(), route_id, direction_id)

    async def get_stop_detail(self, route_id: str, direction_id: str, place_code: str) -> StopDetail:
        return await fetch_stop_detail(self._require_transport(), route_id, direction_id, place_code)

    async def get_vehicles(self, route_id: str) -> list[Vehicle]:
        """Fetch every vehicle on *route_id*, all directions included."""
        vehicles = await fetch_vehicles(self._require_transport(), route_id)
        _logger.debug("Fetched %d vehicles for route %s", len(vehicles), route_id)
        return vehicles
