"""Overlay registry.

This is the only component allowed to add visuals to, or remove visuals
from, the map renderer. It owns the single overlay set (one route line,
stop markers keyed by place code, vehicle markers keyed by trip id) and
keeps it identical to what the renderer displays: an entry is dropped from
the set only after the renderer removed it, and added only after the
renderer accepted it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pynextrip._constants import POPUP_OFFSET_PX, ROUTE_LINE_LAYER_ID
from pynextrip.map.renderer import (
    ROUTE_LINE_STYLE,
    STOP_MARKER_STYLE,
    VEHICLE_MARKER_STYLE,
    MapRenderer,
    MarkerKind,
    MarkerSpec,
    MarkerStyle,
)
from pynextrip.models.geometry import RouteGeometry
from pynextrip.models.stop import Stop
from pynextrip.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Marker:
    """A marker currently on the map and the renderer handle that removes it."""

    spec: MarkerSpec
    handle: Any


@dataclass(frozen=True, slots=True)
class RouteLineOverlay:
    layer_id: str
    route_id: str


@dataclass(frozen=True, slots=True)
class OverlaySnapshot:
    """Read-only copy of the overlay set."""

    route_line: RouteLineOverlay | None
    stop_keys: tuple[str, ...]
    vehicle_keys: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return self.route_line is None and not self.stop_keys and not self.vehicle_keys


class OverlayRegistry:
    """Owner of every overlay the engine has put on the map."""

    def __init__(self, renderer: MapRenderer, *, popup_offset: int = POPUP_OFFSET_PX) -> None:
        self._renderer = renderer
        self._popup_offset = popup_offset
        self._route_line: RouteLineOverlay | None = None
        self._stop_markers: dict[str, Marker] = {}
        self._vehicle_markers: dict[str, Marker] = {}

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def renderer(self) -> MapRenderer:
        return self._renderer

    @property
    def route_line(self) -> RouteLineOverlay | None:
        return self._route_line

    @property
    def stop_marker_keys(self) -> tuple[str, ...]:
        return tuple(self._stop_markers)

    @property
    def vehicle_marker_keys(self) -> tuple[str, ...]:
        return tuple(self._vehicle_markers)

    @property
    def is_empty(self) -> bool:
        return self._route_line is None and not self._stop_markers and not self._vehicle_markers

    def snapshot(self) -> OverlaySnapshot:
        return OverlaySnapshot(
            route_line=self._route_line,
            stop_keys=self.stop_marker_keys,
            vehicle_keys=self.vehicle_marker_keys,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def clear_all(self) -> None:
        """Remove the route line and every marker. Idempotent."""
        if self.is_empty:
            return
        removed_stops = len(self._stop_markers)
        removed_vehicles = len(self._vehicle_markers)
        self._remove_markers(self._vehicle_markers)
        self._remove_markers(self._stop_markers)
        self._remove_route_line()
        _logger.debug("Cleared overlays: stops=%d vehicles=%d", removed_stops, removed_vehicles)

    def set_route_line(self, geometry: RouteGeometry) -> RouteLineOverlay:
        """Draw *geometry* as the single route line, removing any previous one."""
        self._remove_route_line()
        self._renderer.add_line_layer(ROUTE_LINE_LAYER_ID, geometry, ROUTE_LINE_STYLE)
        self._route_line = RouteLineOverlay(layer_id=ROUTE_LINE_LAYER_ID, route_id=geometry.route_id)
        return self._route_line

    def add_stop_marker(self, stop: Stop, popup_html: str) -> Marker:
        return self._put(
            self._stop_markers,
            kind=MarkerKind.STOP,
            key=stop.place_code,
            lat=stop.lat,
            lon=stop.lon,
            popup_html=popup_html,
            style=STOP_MARKER_STYLE,
        )

    def add_vehicle_marker(self, vehicle: Vehicle, popup_html: str) -> Marker:
        """Add a marker for *vehicle*.

        Raises
        ------
        MalformedVehicleCoordinateError
            When the vehicle has no usable position; nothing is added.
        """
        lat, lon = vehicle.position()
        return self._put(
            self._vehicle_markers,
            kind=MarkerKind.VEHICLE,
            key=vehicle.trip_id,
            lat=lat,
            lon=lon,
            popup_html=popup_html,
            style=VEHICLE_MARKER_STYLE,
        )

    def replace_vehicle_markers(self, items: Iterable[tuple[Vehicle, str]]) -> int:
        """Swap the whole vehicle marker set for *items*.

        Every vehicle must already have a valid position; check with
        :meth:`Vehicle.position` before calling.
        """
        pending = list(items)
        self._remove_markers(self._vehicle_markers)
        for vehicle, popup_html in pending:
            self.add_vehicle_marker(vehicle, popup_html)
        return len(self._vehicle_markers)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _put(
        self,
        markers: dict[str, Marker],
        *,
        kind: MarkerKind,
        key: str,
        lat: float,
        lon: float,
        popup_html: str,
        style: MarkerStyle,
    ) -> Marker:
        previous = markers.get(key)
        if previous is not None:
            self._renderer.remove_marker(previous.handle)
            del markers[key]
        spec = MarkerSpec(
            kind=kind,
            key=key,
            lat=lat,
            lon=lon,
            popup_html=popup_html,
            style=style,
            popup_offset=self._popup_offset,
        )
        marker = Marker(spec=spec, handle=self._renderer.add_marker(spec))
        markers[key] = marker
        return marker

    def _remove_markers(self, markers: dict[str, Marker]) -> None:
        for key in list(markers):
            self._renderer.remove_marker(markers[key].handle)
            del markers[key]

    def _remove_route_line(self) -> None:
        if self._route_line is None:
            return
        self._renderer.remove_line_layer(self._route_line.layer_id)
        self._route_line = None
