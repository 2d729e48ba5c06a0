"""Stop list and stop detail endpoints.

Endpoints:
  - /NexTrip/Stops/{route_id}/{direction_id}
  - /NexTrip/{route_id}/{direction_id}/{place_code}
"""

from __future__ import annotations

from pydantic import ValidationError

from pynextrip._api._common import build_path, expect_dict, expect_list, parse_items
from pynextrip._transport import Transport
from pynextrip.exceptions import NexTripTransportError
from pynextrip.models.stop import StopDetail, StopRef


async def fetch_stops(transport: Transport, route_id: str, direction_id: str) -> list[StopRef]:
    """Fetch the ordered stop list of a route direction."""
    endpoint = build_path("Stops", route_id, direction_id)
    payload = expect_list(endpoint, await transport.get_json(endpoint))
    return parse_items(endpoint, payload, StopRef)


async def fetch_stop_detail(
    transport: Transport,
    route_id: str,
    direction_id: str,
    place_code: str,
) -> StopDetail:
    """Fetch location and next departures for a stop."""
    endpoint = build_path(route_id, direction_id, place_code)
    payload = expect_dict(endpoint, await transport.get_json(endpoint))
    try:
        return StopDetail.model_validate(payload)
    except ValidationError as exc:
        raise NexTripTransportError(
            f"Unexpected stop detail payload from {endpoint}: {exc.error_count()} errors",
            endpoint=endpoint,
        ) from exc
