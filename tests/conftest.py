from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from pynextrip.exceptions import NexTripTransportError
from pynextrip.geometry import RouteGeometryDataset
from pynextrip.map.memory import InMemoryMapRenderer
from pynextrip.map.renderer import LineStyle, MarkerKind, MarkerSpec
from pynextrip.models.geometry import Bounds, RouteGeometry
from pynextrip.models.route import Direction, Route
from pynextrip.models.stop import StopDetail, StopRef
from pynextrip.models.vehicle import Vehicle


def stop_detail_payload(
    place_code: str,
    *,
    lat: Any = 44.95,
    lon: Any = -93.27,
    departures: int = 2,
) -> dict[str, Any]:
    return {
        "stops": [{"stop_id": 1000, "latitude": lat, "longitude": lon, "description": f"Stop {place_code}"}],
        "departures": [
            {"departure_text": f"{i + 1} Min", "description": f"Dep {i}", "actual": True} for i in range(departures)
        ],
    }


@dataclass
class FakeProvider:
    """In-memory transit data provider.

    ``gates`` holds events keyed like ``"vehicles:5"``; a call waits on its
    gate before answering. ``failures`` holds keys that raise instead.
    """

    journal: list[str] = field(default_factory=list)
    routes: list[dict[str, Any]] = field(default_factory=list)
    directions: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    stops: dict[tuple[str, str], list[dict[str, Any]]] = field(default_factory=dict)
    stop_details: dict[str, dict[str, Any]] = field(default_factory=dict)
    vehicles: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    failures: set[str] = field(default_factory=set)

    async def _enter(self, key: str) -> None:
        self.journal.append(f"fetch {key}")
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if key in self.failures:
            raise NexTripTransportError(f"fake failure for {key}", endpoint=key)

    def calls(self, prefix: str) -> int:
        return sum(1 for entry in self.journal if entry.startswith(f"fetch {prefix}"))

    async def get_routes(self) -> list[Route]:
        await self._enter("routes")
        return [Route.model_validate(item) for item in self.routes]

    async def get_directions(self, route_id: str) -> list[Direction]:
        await self._enter(f"directions:{route_id}")
        return [Direction.model_validate({**item, "route_id": route_id}) for item in self.directions.get(route_id, [])]

    async def get_stops(self, route_id: str, direction_id: str) -> list[StopRef]:
        await self._enter(f"stops:{route_id}:{direction_id}")
        return [StopRef.model_validate(item) for item in self.stops.get((route_id, direction_id), [])]

    async def get_stop_detail(self, route_id: str, direction_id: str, place_code: str) -> StopDetail:
        await self._enter(f"detail:{place_code}")
        return StopDetail.model_validate(self.stop_details.get(place_code, {}))

    async def get_vehicles(self, route_id: str) -> list[Vehicle]:
        await self._enter(f"vehicles:{route_id}")
        return [Vehicle.model_validate(item) for item in self.vehicles.get(route_id, [])]


@dataclass
class RecordingRenderer(InMemoryMapRenderer):
    """In-memory renderer that also writes every call to a shared journal."""

    journal: list[str] = field(default_factory=list)

    def add_line_layer(self, layer_id: str, geometry: RouteGeometry, style: LineStyle) -> None:
        self.journal.append(f"add_line {layer_id}")
        super().add_line_layer(layer_id, geometry, style)

    def remove_line_layer(self, layer_id: str) -> None:
        self.journal.append(f"remove_line {layer_id}")
        super().remove_line_layer(layer_id)

    def add_marker(self, spec: MarkerSpec) -> int:
        self.journal.append(f"add_marker {spec.kind} {spec.key}")
        return super().add_marker(spec)

    def remove_marker(self, handle: int) -> None:
        spec = self.markers.get(handle)
        self.journal.append(f"remove_marker {spec.kind if spec else '?'} {spec.key if spec else handle}")
        super().remove_marker(handle)

    def fit_bounds(self, bounds: Bounds, *, padding: int) -> None:
        self.journal.append(f"fit_bounds {padding}")
        super().fit_bounds(bounds, padding=padding)

    def stop_keys(self) -> list[str]:
        return self.marker_keys(MarkerKind.STOP)

    def vehicle_keys(self) -> list[str]:
        return self.marker_keys(MarkerKind.VEHICLE)


@pytest.fixture
def journal() -> list[str]:
    return []


@pytest.fixture
def provider(journal: list[str]) -> FakeProvider:
    return FakeProvider(
        journal=journal,
        routes=[{"route_id": "5", "route_label": "METRO 5", "agency_id": 0}, {"route_id": "6", "route_label": "6"}],
        directions={
            "5": [{"direction_id": 1, "direction_name": "Northbound"}, {"direction_id": 2, "direction_name": "Southbound"}],
            "6": [{"direction_id": 0, "direction_name": "Eastbound"}],
        },
        stops={
            ("5", "1"): [{"place_code": "AAA"}, {"place_code": "BBB"}, {"place_code": "NOC"}],
            ("5", "2"): [{"place_code": "ZZZ"}],
        },
        stop_details={
            "AAA": stop_detail_payload("AAA", lat=44.97, lon=-93.27),
            "BBB": stop_detail_payload("BBB", lat=44.98, lon=-93.26, departures=0),
            "NOC": stop_detail_payload("NOC", lat="", lon=None),
            "ZZZ": stop_detail_payload("ZZZ", lat=44.90, lon=-93.28),
        },
        vehicles={
            "5": [
                {"trip_id": "A1", "route_id": "5", "direction_id": 1, "direction": "NB", "latitude": "44.9", "longitude": "-93.2"},
                {"trip_id": "A2", "route_id": "5", "direction_id": 2, "direction": "SB", "latitude": "44.8", "longitude": "-93.3"},
            ],
        },
    )


@pytest.fixture
def renderer(journal: list[str]) -> RecordingRenderer:
    return RecordingRenderer(journal=journal)


@pytest.fixture
def dataset() -> RouteGeometryDataset:
    return RouteGeometryDataset(
        [RouteGeometry(route_id="5", coordinates=((-93.28, 44.90), (-93.27, 44.95), (-93.26, 44.99)))]
    )
