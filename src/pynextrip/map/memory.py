"""Headless in-memory :class:`~pynextrip.map.renderer.MapRenderer`.

Keeps what a real map would display in plain dicts. Used by the watcher
script and by tests to observe exactly what the engine put on the map.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from pynextrip.map.renderer import LineStyle, MarkerKind, MarkerSpec
from pynextrip.models.geometry import Bounds, RouteGeometry


@dataclass
class ViewState:
    center: tuple[float, float] | None = None
    zoom: float | None = None
    bounds: Bounds | None = None
    padding: int | None = None


@dataclass
class InMemoryMapRenderer:
    """Map renderer that records layers, markers and viewport in memory."""

    layers: dict[str, tuple[RouteGeometry, LineStyle]] = field(default_factory=dict)
    markers: dict[int, MarkerSpec] = field(default_factory=dict)
    view: ViewState = field(default_factory=ViewState)
    _handles: itertools.count = field(default_factory=itertools.count, repr=False)

    def add_line_layer(self, layer_id: str, geometry: RouteGeometry, style: LineStyle) -> None:
        if layer_id in self.layers:
            raise ValueError(f"Layer {layer_id!r} already exists")
        self.layers[layer_id] = (geometry, style)

    def remove_line_layer(self, layer_id: str) -> None:
        self.layers.pop(layer_id, None)

    def add_marker(self, spec: MarkerSpec) -> int:
        handle = next(self._handles)
        self.markers[handle] = spec
        return handle

    def remove_marker(self, handle: int) -> None:
        self.markers.pop(handle, None)

    def fit_bounds(self, bounds: Bounds, *, padding: int) -> None:
        self.view.bounds = bounds
        self.view.padding = padding

    def set_view(self, center: tuple[float, float], zoom: float) -> None:
        self.view.center = center
        self.view.zoom = zoom

    def marker_keys(self, kind: MarkerKind) -> list[str]:
        """Keys of displayed markers of *kind*, in insertion order."""
        return [spec.key for spec in self.markers.values() if spec.kind == kind]

    def summary(self) -> str:
        stops = len(self.marker_keys(MarkerKind.STOP))
        vehicles = len(self.marker_keys(MarkerKind.VEHICLE))
        return f"layers={sorted(self.layers)} stops={stops} vehicles={vehicles}"
