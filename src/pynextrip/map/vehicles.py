"""Vehicle refresh loop.

A cancellable recurring task bound to one (route, direction) selection. Each
cycle fetches every vehicle on the route, keeps those travelling in the bound
direction and swaps the registry's whole vehicle marker set for them. A
vehicle that stops reporting therefore disappears within one cycle.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass

from pynextrip._constants import VEHICLE_POLL_INTERVAL_S
from pynextrip.exceptions import MalformedVehicleCoordinateError, NexTripError
from pynextrip.map.overlays import OverlayRegistry
from pynextrip.map.popups import vehicle_popup_html
from pynextrip.map.provider import TransitDataProvider
from pynextrip.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VehicleBinding:
    """The selection a loop polls for.

    ``generation`` is the selection generation at start time; the loop's
    results are applied only while it is still the current generation.
    """

    route_id: str
    direction_id: str
    generation: int


class VehicleRefreshLoop:
    """At most one running poll task, always for a single binding."""

    def __init__(
        self,
        registry: OverlayRegistry,
        provider: TransitDataProvider,
        is_current: Callable[[VehicleBinding], bool],
        *,
        interval: float = VEHICLE_POLL_INTERVAL_S,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Vehicle poll interval must be positive, got {interval}")
        self._registry = registry
        self._provider = provider
        self._is_current = is_current
        self._interval = interval
        self._task: asyncio.Task[None] | None = None
        self._binding: VehicleBinding | None = None

    @property
    def binding(self) -> VehicleBinding | None:
        return self._binding if self.is_running else None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, binding: VehicleBinding) -> asyncio.Task[None]:
        """Cancel any running loop, then poll for *binding*.

        The first cycle runs as soon as the event loop schedules the task.
        """
        self.stop()
        self._binding = binding
        self._task = asyncio.get_running_loop().create_task(
            self._run(binding),
            name=f"vehicles-{binding.route_id}-{binding.direction_id}",
        )
        _logger.debug("Vehicle loop started for %s", binding)
        return self._task

    def stop(self) -> None:
        """Cancel the running loop. No further cycle fires after this returns."""
        task = self._task
        self._task = None
        self._binding = None
        if task is not None and not task.done():
            task.cancel()
            _logger.debug("Vehicle loop cancelled")

    async def aclose(self) -> None:
        """Cancel the loop and wait until its task has finished."""
        task = self._task
        self.stop()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self, binding: VehicleBinding) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while self._is_current(binding):
            try:
                await self.run_cycle(binding)
            except asyncio.CancelledError:
                raise
            except Exception:
                _logger.exception("Vehicle refresh cycle failed for %s", binding)
            next_at += self._interval
            # Fixed-rate schedule; a cycle that overran skips ahead instead of bursting.
            now = loop.time()
            if next_at < now:
                next_at = now
            await asyncio.sleep(next_at - now)

    async def run_cycle(self, binding: VehicleBinding) -> int | None:
        """Fetch, filter and reconcile once.

        Returns
        -------
        int or None
            Number of vehicle markers now displayed, or None when the fetch
            failed or the result arrived after *binding* stopped being the
            current selection.
        """
        try:
            vehicles = await self._provider.get_vehicles(binding.route_id)
        except NexTripError as exc:
            _logger.warning("Vehicle fetch failed for route %s: %s", binding.route_id, exc)
            return None

        if not self._is_current(binding):
            _logger.debug("Discarding late vehicle snapshot for %s", binding)
            return None

        items = [
            (vehicle, vehicle_popup_html(vehicle))
            for vehicle in _located(vehicles, binding.direction_id)
        ]
        shown = self._registry.replace_vehicle_markers(items)
        _logger.debug(
            "Vehicle snapshot for route %s direction %s: %d shown of %d reported",
            binding.route_id,
            binding.direction_id,
            shown,
            len(vehicles),
        )
        return shown


def _located(vehicles: list[Vehicle], direction_id: str) -> list[Vehicle]:
    """Vehicles in *direction_id* with a usable position."""
    kept: list[Vehicle] = []
    for vehicle in vehicles:
        if vehicle.direction_id != direction_id:
            continue
        try:
            vehicle.position()
        except MalformedVehicleCoordinateError as exc:
            _logger.debug("Skipping vehicle: %s", exc)
            continue
        kept.append(vehicle)
    return kept
