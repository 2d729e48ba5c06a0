from __future__ import annotations

import asyncio

import pytest

from conftest import FakeProvider, RecordingRenderer
from pynextrip._constants import DEFAULT_CENTER, DEFAULT_ZOOM
from pynextrip.config import NexTripConfig
from pynextrip.exceptions import NexTripConfigError
from pynextrip.geometry import RouteGeometryDataset
from pynextrip.map.selection import Selection, SelectionState, SelectionStateMachine
from pynextrip.map.vehicles import VehicleBinding
from pynextrip.models.route import Direction


def _machine(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> SelectionStateMachine:
    return SelectionStateMachine(provider, renderer, dataset, config=NexTripConfig())


async def _expand(machine: SelectionStateMachine, route_id: str) -> list[Direction]:
    task = machine.select_route(route_id)
    assert task is not None
    await task
    return machine.directions


@pytest.mark.asyncio
async def test_direction_switch_clears_before_fetching(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset, journal: list[str]
) -> None:
    async with _machine(provider, renderer, dataset) as machine:
        north, south = await _expand(machine, "5")
        await machine.select_direction(north)
        assert machine.registry.vehicle_marker_keys == ("A1",)
        assert machine.registry.stop_marker_keys == ("AAA", "BBB")

        mark = len(journal)
        task = machine.select_direction(south)
        assert journal[mark:] == [
            "remove_marker vehicle A1",
            "remove_marker stop AAA",
            "remove_marker stop BBB",
            "remove_line route-line",
            "add_line route-line",
            "fit_bounds 50",
        ]

        await task
        after = journal[mark:]
        assert after.index("fit_bounds 50") < after.index("fetch stops:5:2") < after.index("fetch vehicles:5")
        assert machine.state is SelectionState.DIRECTION_ACTIVE
        assert renderer.stop_keys() == ["ZZZ"]
        assert renderer.vehicle_keys() == ["A2"]


@pytest.mark.asyncio
async def test_reselecting_route_collapses_and_clears(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    async with _machine(provider, renderer, dataset) as machine:
        north, _ = await _expand(machine, "5")
        await machine.select_direction(north)
        generation = machine.selection.generation

        assert machine.select_route("5") is None

        assert machine.state is SelectionState.IDLE
        assert machine.selection.generation == generation + 1
        assert machine.directions == []
        assert machine.registry.is_empty
        assert renderer.markers == {}
        assert renderer.layers == {}
        assert not machine.vehicle_loop.is_running


@pytest.mark.asyncio
async def test_late_directions_of_previous_route_are_dropped(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    provider.gates["directions:5"] = asyncio.Event()
    async with _machine(provider, renderer, dataset) as machine:
        first = machine.select_route("5")
        await asyncio.sleep(0)
        assert provider.calls("directions:5") == 1

        directions = await _expand(machine, "6")
        provider.gates["directions:5"].set()
        await asyncio.sleep(0)

        assert first is not None and first.cancelled()
        assert machine.selection.route_id == "6"
        assert [(d.route_id, d.direction_id) for d in machine.directions] == [("6", "0")]
        assert directions == machine.directions


@pytest.mark.asyncio
async def test_direction_of_other_route_is_ignored(
    provider: FakeProvider,
    renderer: RecordingRenderer,
    dataset: RouteGeometryDataset,
    caplog: pytest.LogCaptureFixture,
) -> None:
    stray = Direction(direction_id="1", direction_name="Northbound", route_id="5")
    async with _machine(provider, renderer, dataset) as machine:
        assert machine.select_direction(stray) is None
        assert machine.state is SelectionState.IDLE

        await _expand(machine, "6")
        assert machine.select_direction(stray) is None

        assert machine.state is SelectionState.ROUTE_EXPANDED
        assert machine.registry.is_empty
        assert provider.calls("stops:") == 0
        assert "Ignoring direction" in caplog.text


@pytest.mark.asyncio
async def test_single_vehicle_loop_follows_selection(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    async with _machine(provider, renderer, dataset) as machine:
        north, south = await _expand(machine, "5")
        machine.select_direction(north)
        first = machine.vehicle_loop.binding
        machine.select_direction(south)

        assert first == VehicleBinding("5", "1", machine.selection.generation - 1)
        assert machine.vehicle_loop.binding == VehicleBinding("5", "2", machine.selection.generation)

        await _expand(machine, "6")
        assert not machine.vehicle_loop.is_running
        assert machine.vehicle_loop.binding is None


@pytest.mark.asyncio
async def test_vehicle_snapshot_for_previous_direction_is_discarded(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset, journal: list[str]
) -> None:
    provider.gates["vehicles:5"] = asyncio.Event()
    async with _machine(provider, renderer, dataset) as machine:
        north, south = await _expand(machine, "5")
        await machine.select_direction(north)
        assert provider.calls("vehicles:5") == 1
        stale = VehicleBinding("5", "1", machine.selection.generation)

        await machine.select_direction(south)
        provider.gates["vehicles:5"].set()
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert await machine.vehicle_loop.run_cycle(stale) is None
        assert "add_marker vehicle A1" not in journal
        assert renderer.vehicle_keys() == ["A2"]


@pytest.mark.asyncio
async def test_route_change_stops_pending_stop_markers(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    gate = asyncio.Event()
    provider.gates["detail:AAA"] = gate
    provider.gates["detail:BBB"] = gate
    provider.gates["detail:NOC"] = gate
    async with _machine(provider, renderer, dataset) as machine:
        north, _ = await _expand(machine, "5")
        stops = machine.select_direction(north)
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert provider.calls("detail:") >= 1

        await _expand(machine, "6")
        gate.set()
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert stops is not None and stops.cancelled()
        assert renderer.stop_keys() == []
        assert machine.registry.stop_marker_keys == ()


@pytest.mark.asyncio
async def test_direction_without_geometry_still_loads_markers(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset, journal: list[str]
) -> None:
    provider.stops[("6", "0")] = [{"place_code": "ZZZ"}]
    async with _machine(provider, renderer, dataset) as machine:
        (east,) = await _expand(machine, "6")
        await machine.select_direction(east)

        assert machine.registry.route_line is None
        assert not any(entry.startswith(("add_line", "fit_bounds")) for entry in journal)
        assert renderer.stop_keys() == ["ZZZ"]


@pytest.mark.asyncio
async def test_reselecting_same_direction_rebuilds(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    async with _machine(provider, renderer, dataset) as machine:
        north, _ = await _expand(machine, "5")
        await machine.select_direction(north)
        await machine.select_direction(north)

        assert provider.calls("stops:5:1") == 2
        assert renderer.stop_keys() == ["AAA", "BBB"]
        assert renderer.vehicle_keys() == ["A1"]


@pytest.mark.asyncio
async def test_directions_failure_leaves_route_expanded(
    provider: FakeProvider,
    renderer: RecordingRenderer,
    dataset: RouteGeometryDataset,
    caplog: pytest.LogCaptureFixture,
) -> None:
    provider.failures.add("directions:5")
    async with _machine(provider, renderer, dataset) as machine:
        directions = await _expand(machine, "5")

        assert directions == []
        assert machine.state is SelectionState.ROUTE_EXPANDED
        assert "Directions fetch failed" in caplog.text


@pytest.mark.asyncio
async def test_load_routes_sets_view_and_loading_flag(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    provider.gates["routes"] = asyncio.Event()
    async with _machine(provider, renderer, dataset) as machine:
        task = asyncio.create_task(machine.load_routes())
        await asyncio.sleep(0)

        assert machine.routes_loading
        assert renderer.view.center == DEFAULT_CENTER
        assert renderer.view.zoom == DEFAULT_ZOOM

        provider.gates["routes"].set()
        routes = await task

        assert not machine.routes_loading
        assert [route.route_id for route in routes] == ["5", "6"]


@pytest.mark.asyncio
async def test_load_routes_failure_gives_empty_list(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    provider.failures.add("routes")
    async with _machine(provider, renderer, dataset) as machine:
        assert await machine.load_routes() == []
        assert not machine.routes_loading


@pytest.mark.asyncio
async def test_close_removes_everything(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    async with _machine(provider, renderer, dataset) as machine:
        north, _ = await _expand(machine, "5")
        await machine.select_direction(north)
        assert renderer.markers

    assert renderer.markers == {}
    assert renderer.layers == {}
    assert machine.state is SelectionState.IDLE
    assert not machine.vehicle_loop.is_running


def test_selection_rejects_direction_of_other_route() -> None:
    with pytest.raises(ValueError, match="belongs to route 5"):
        Selection(route_id="6", direction=Direction(direction_id="1", route_id="5"))


def test_invalid_config_is_rejected(
    provider: FakeProvider, renderer: RecordingRenderer, dataset: RouteGeometryDataset
) -> None:
    with pytest.raises(NexTripConfigError, match="vehicle_poll_interval"):
        SelectionStateMachine(provider, renderer, dataset, config=NexTripConfig(vehicle_poll_interval=0))
