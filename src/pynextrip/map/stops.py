"""Stop overlay builder.

Resolves a (route, direction) selection into stop markers: one stop list
fetch, then one detail fetch per stop. Markers are added through the
overlay registry as each detail resolves, and only while the selection
that started the build is still current.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pynextrip._constants import MAX_POPUP_DEPARTURES, STOP_DETAIL_CONCURRENCY
from pynextrip.exceptions import IncompleteStopDataError, NexTripError
from pynextrip.map.overlays import OverlayRegistry
from pynextrip.map.popups import stop_popup_html
from pynextrip.map.provider import TransitDataProvider
from pynextrip.models.route import Direction
from pynextrip.models.stop import Stop, StopRef

_logger = logging.getLogger(__name__)


class StopOverlayBuilder:
    def __init__(
        self,
        registry: OverlayRegistry,
        provider: TransitDataProvider,
        *,
        max_departures: int = MAX_POPUP_DEPARTURES,
        concurrency: int = STOP_DETAIL_CONCURRENCY,
    ) -> None:
        self._registry = registry
        self._provider = provider
        self._max_departures = max_departures
        self._concurrency = max(1, concurrency)

    async def build(
        self,
        route_id: str,
        direction: Direction,
        is_current: Callable[[], bool] = lambda: True,
    ) -> int:
        """Fetch and render the stops of *direction*.

        Parameters
        ----------
        is_current : callable
            Returns False once the selection this build belongs to has been
            replaced; from then on nothing more is added to the map.

        Returns
        -------
        int
            Number of stop markers added.
        """
        direction_id = direction.direction_id
        try:
            stop_refs = await self._provider.get_stops(route_id, direction_id)
        except NexTripError as exc:
            _logger.warning("Stop list fetch failed for route %s direction %s: %s", route_id, direction_id, exc)
            return 0

        if not is_current():
            _logger.debug("Discarding stop list for route %s direction %s", route_id, direction_id)
            return 0

        semaphore = asyncio.Semaphore(self._concurrency)
        added = 0

        async def _one(ref: StopRef) -> None:
            nonlocal added
            try:
                async with semaphore:
                    if not is_current():
                        return
                    stop = await self._fetch_stop(route_id, direction_id, ref.place_code)
                if stop is None or not is_current():
                    return
                self._registry.add_stop_marker(stop, stop_popup_html(stop, self._max_departures))
            except Exception:
                _logger.exception("Stop marker for %s failed", ref.place_code)
                return
            added += 1

        await asyncio.gather(*(_one(ref) for ref in stop_refs))
        _logger.debug(
            "Rendered %d of %d stops for route %s direction %s",
            added,
            len(stop_refs),
            route_id,
            direction_id,
        )
        return added

    async def _fetch_stop(self, route_id: str, direction_id: str, place_code: str) -> Stop | None:
        try:
            detail = await self._provider.get_stop_detail(route_id, direction_id, place_code)
        except NexTripError as exc:
            _logger.warning("Stop detail fetch failed for %s: %s", place_code, exc)
            return None
        try:
            return detail.to_stop(place_code)
        except IncompleteStopDataError as exc:
            _logger.debug("Skipping stop: %s", exc)
            return None
