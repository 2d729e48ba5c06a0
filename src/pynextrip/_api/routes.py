"""Route and direction endpoints.

Endpoints:
  - /NexTrip/Routes
  - /NexTrip/Directions/{route_id}
"""

from __future__ import annotations

from pynextrip._api._common import build_path, expect_list, parse_items
from pynextrip._transport import Transport
from pynextrip.models.route import Direction, Route


async def fetch_routes(transport: Transport) -> list[Route]:
    """Fetch every route served by the provider."""
    endpoint = build_path("Routes")
    payload = expect_list(endpoint, await transport.get_json(endpoint))
    return parse_items(endpoint, payload, Route)


async def fetch_directions(transport: Transport, route_id: str) -> list[Direction]:
    """Fetch the travel directions of *route_id*, stamped with the route id."""
    endpoint = build_path("Directions", route_id)
    payload = expect_list(endpoint, await transport.get_json(endpoint))
    return parse_items(endpoint, payload, Direction, extra={"route_id": route_id})
