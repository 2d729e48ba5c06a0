"""Selection state machine.

Drives the map from the rider's route → direction selection::

    IDLE ──select_route(a)──▶ ROUTE_EXPANDED(a) ──select_direction(d)──▶ DIRECTION_ACTIVE(a, d)
      ▲                          │   ▲                                      │
      └──select_route(a) (toggle)┘   └──────────select_route(b)─────────────┘

Every transition bumps the selection generation. Async work started for a
selection (directions, stop markers, vehicle snapshots) carries the
generation it was started under and applies its result only if that is
still the current one; transitions also cancel that work outright.
Overlays are cleared synchronously on every transition, so a fetch for the
new selection is never issued while the previous selection's overlays are
still on the map.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, replace
from typing import Any

from pynextrip.config import NexTripConfig
from pynextrip.exceptions import NexTripError
from pynextrip.geometry import RouteGeometryDataset
from pynextrip.map.overlays import OverlayRegistry
from pynextrip.map.provider import TransitDataProvider
from pynextrip.map.renderer import MapRenderer
from pynextrip.map.route_line import RouteLineRenderer
from pynextrip.map.stops import StopOverlayBuilder
from pynextrip.map.vehicles import VehicleBinding, VehicleRefreshLoop
from pynextrip.models.route import Direction, Route

_logger = logging.getLogger(__name__)


class SelectionState(enum.StrEnum):
    IDLE = "idle"
    ROUTE_EXPANDED = "route_expanded"
    DIRECTION_ACTIVE = "direction_active"


@dataclass(frozen=True, slots=True)
class Selection:
    """The current (route, direction) pair.

    ``direction`` may only be set together with the route it belongs to.
    """

    route_id: str | None = None
    direction: Direction | None = None
    generation: int = 0

    def __post_init__(self) -> None:
        if self.direction is not None and self.direction.route_id != self.route_id:
            raise ValueError(
                f"direction {self.direction.direction_id} belongs to route "
                f"{self.direction.route_id}, not {self.route_id}"
            )

    @property
    def state(self) -> SelectionState:
        if self.route_id is None:
            return SelectionState.IDLE
        if self.direction is None:
            return SelectionState.ROUTE_EXPANDED
        return SelectionState.DIRECTION_ACTIVE


class SelectionStateMachine:
    """Map overlay synchronization engine.

    Usage::

        async with NexTripClient(config) as client:
            async with SelectionStateMachine(client, renderer, dataset, config=config) as machine:
                await machine.load_routes()
                await machine.select_route("5")
                machine.select_direction(machine.directions[0])

    ``select_route`` and ``select_direction`` are synchronous: the transition
    and overlay teardown happen before they return. Each returns the task
    doing the follow-up fetch so callers may await it, or None when there is
    nothing to fetch.
    """

    def __init__(
        self,
        provider: TransitDataProvider,
        renderer: MapRenderer,
        dataset: RouteGeometryDataset | None = None,
        *,
        config: NexTripConfig | None = None,
    ) -> None:
        self._config = (config or NexTripConfig()).validate()
        self._provider = provider
        if dataset is None:
            if self._config.geometry_path:
                dataset = RouteGeometryDataset.from_file(self._config.geometry_path)
            else:
                dataset = RouteGeometryDataset()
        self._registry = OverlayRegistry(renderer, popup_offset=self._config.popup_offset)
        self._route_line = RouteLineRenderer(self._registry, dataset, padding=self._config.fit_padding)
        self._stop_builder = StopOverlayBuilder(
            self._registry,
            provider,
            max_departures=self._config.max_popup_departures,
            concurrency=self._config.stop_detail_concurrency,
        )
        self._vehicle_loop = VehicleRefreshLoop(
            self._registry,
            provider,
            self._is_binding_current,
            interval=self._config.vehicle_poll_interval,
        )

        self._selection = Selection()
        self._routes: list[Route] = []
        self._routes_loading = False
        self._route_generation = 0
        self._directions: list[Direction] = []
        self._directions_task: asyncio.Task[None] | None = None
        self._stops_task: asyncio.Task[int] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SelectionStateMachine:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop all background work and remove every overlay."""
        pending = [
            task
            for task in (self._directions_task, self._stops_task)
            if task is not None and not task.done()
        ]
        await self._vehicle_loop.aclose()
        self._cancel_selection_work()
        self._cancel_directions()
        for task in pending:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._selection = Selection(generation=self._selection.generation + 1)
        self._directions = []
        self._registry.clear_all()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def state(self) -> SelectionState:
        return self._selection.state

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    @property
    def routes_loading(self) -> bool:
        return self._routes_loading

    @property
    def directions(self) -> list[Direction]:
        return list(self._directions)

    @property
    def registry(self) -> OverlayRegistry:
        return self._registry

    @property
    def vehicle_loop(self) -> VehicleRefreshLoop:
        return self._vehicle_loop

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def load_routes(self) -> list[Route]:
        """Set the initial view and fetch the route list.

        A failed fetch is logged and leaves the route list empty.
        """
        view = self._config.view
        self._registry.renderer.set_view(view.center, view.zoom)
        self._routes_loading = True
        try:
            self._routes = await self._provider.get_routes()
        except NexTripError as exc:
            _logger.warning("Route list fetch failed: %s", exc)
            self._routes = []
        finally:
            self._routes_loading = False
        return self.routes

    def select_route(self, route_id: str) -> asyncio.Task[None] | None:
        """Expand *route_id*, or collapse it if it is already the selected route."""
        previous = self._selection
        self._cancel_selection_work()
        self._cancel_directions()
        self._registry.clear_all()
        self._directions = []

        if route_id == previous.route_id:
            self._selection = Selection(generation=previous.generation + 1)
            self._route_generation = self._selection.generation
            _logger.debug("Collapsed route %s", route_id)
            return None

        self._selection = Selection(route_id=route_id, generation=previous.generation + 1)
        self._route_generation = self._selection.generation
        _logger.debug("Expanded route %s", route_id)
        self._directions_task = self._spawn(
            self._load_directions(route_id, self._selection.generation),
            name=f"directions-{route_id}",
        )
        return self._directions_task

    def select_direction(self, direction: Direction) -> asyncio.Task[int] | None:
        """Activate *direction* of the expanded route.

        Ignored, with a warning, when no route is expanded or the direction
        belongs to another route.
        """
        current = self._selection
        if current.route_id is None or direction.route_id != current.route_id:
            _logger.warning(
                "Ignoring direction %s of route %s; selected route is %s",
                direction.direction_id,
                direction.route_id,
                current.route_id,
            )
            return None

        self._cancel_selection_work()
        self._registry.clear_all()
        self._selection = replace(current, direction=direction, generation=current.generation + 1)
        generation = self._selection.generation
        route_id = current.route_id
        _logger.debug("Activated route %s direction %s", route_id, direction.direction_id)

        self._route_line.draw(route_id)
        self._stops_task = self._spawn(
            self._stop_builder.build(route_id, direction, lambda: self._is_generation_current(generation)),
            name=f"stops-{route_id}-{direction.direction_id}",
        )
        self._vehicle_loop.start(VehicleBinding(route_id, direction.direction_id, generation))
        return self._stops_task

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _load_directions(self, route_id: str, generation: int) -> None:
        try:
            directions = await self._provider.get_directions(route_id)
        except NexTripError as exc:
            _logger.warning("Directions fetch failed for route %s: %s", route_id, exc)
            return
        if self._selection.route_id != route_id or self._route_generation != generation:
            _logger.debug("Discarding late directions for route %s", route_id)
            return
        self._directions = directions

    def _is_generation_current(self, generation: int) -> bool:
        return self._selection.generation == generation

    def _is_binding_current(self, binding: VehicleBinding) -> bool:
        selection = self._selection
        return (
            selection.generation == binding.generation
            and selection.route_id == binding.route_id
            and selection.direction is not None
            and selection.direction.direction_id == binding.direction_id
        )

    def _cancel_selection_work(self) -> None:
        self._vehicle_loop.stop()
        task = self._stops_task
        self._stops_task = None
        if task is not None and not task.done():
            task.cancel()

    def _cancel_directions(self) -> None:
        task = self._directions_task
        self._directions_task = None
        if task is not None and not task.done():
            task.cancel()

    def _spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        return asyncio.get_running_loop().create_task(coro, name=name)
