"""Transit data provider interface consumed by the map engine.

:class:`pynextrip.client.NexTripClient` satisfies it; tests pass fakes.
"""

from __future__ import annotations

from typing import Protocol

from pynextrip.models.route import Direction, Route
from pynextrip.models.stop import StopDetail, StopRef
from pynextrip.models.vehicle import Vehicle


class TransitDataProvider(Protocol):
    async def get_routes(self) -> list[Route]: ...

    async def get_directions(self, route_id: str) -> list[Direction]: ...

    async def get_stops(self, route_id: str, direction_id: str) -> list[StopRef]: ...

    async def get_stop_detail(self, route_id: str, direction_id: str, place_code: str) -> StopDetail: ...

    async def get_vehicles(self, route_id: str) -> list[Vehicle]: ...
