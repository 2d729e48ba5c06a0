"""Route line drawing and view framing."""

from __future__ import annotations

import logging

from pynextrip._constants import FIT_PADDING_PX
from pynextrip.exceptions import MissingGeometryError
from pynextrip.geometry import RouteGeometryDataset
from pynextrip.map.overlays import OverlayRegistry

_logger = logging.getLogger(__name__)


class RouteLineRenderer:
    """Draw a route's pre-baked line through the registry and frame the view on it."""

    def __init__(
        self,
        registry: OverlayRegistry,
        dataset: RouteGeometryDataset,
        *,
        padding: int = FIT_PADDING_PX,
    ) -> None:
        self._registry = registry
        self._dataset = dataset
        self._padding = padding

    def draw(self, route_id: str) -> bool:
        """Draw the line for *route_id*.

        Returns False, drawing nothing, when the dataset has no geometry for
        the route.
        """
        try:
            geometry = self._dataset.require(route_id)
        except MissingGeometryError:
            _logger.debug("No route line for route %s", route_id)
            return False
        self._registry.set_route_line(geometry)
        self._registry.renderer.fit_bounds(geometry.bounds, padding=self._padding)
        return True
