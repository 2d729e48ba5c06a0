"""Vehicle position endpoint.

Endpoint:
  - /NexTrip/Vehicles/{route_id}

The provider has no per-direction filter; callers filter client side.
"""

from __future__ import annotations

from pynextrip._api._common import build_path, expect_list, parse_items
from pynextrip._transport import Transport
from pynextrip.models.vehicle import Vehicle


async def fetch_vehicles(transport: Transport, route_id: str) -> list[Vehicle]:
    """Fetch a full snapshot of vehicles on *route_id*."""
    endpoint = build_path("Vehicles", route_id)
    payload = expect_list(endpoint, await transport.get_json(endpoint))
    return parse_items(endpoint, payload, Vehicle)
