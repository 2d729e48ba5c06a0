"""Map renderer capability interface.

The synchronization engine never talks to a concrete map widget. It drives
anything that satisfies :class:`MapRenderer`, and describes what to draw with
the plain value types defined here.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Protocol

from pynextrip.models.geometry import Bounds, RouteGeometry


class MarkerKind(enum.StrEnum):
    STOP = "stop"
    VEHICLE = "vehicle"


@dataclasses.dataclass(frozen=True)
class MarkerStyle:
    """Visual style of a point marker."""

    css_class: str
    size_px: int
    color: str
    z_index: int
    label: str = ""


STOP_MARKER_STYLE = MarkerStyle(css_class="marker-stop", size_px=12, color="red", z_index=1)
VEHICLE_MARKER_STYLE = MarkerStyle(css_class="marker-bus", size_px=32, color="#007bff", z_index=2, label="\U0001f68c")


@dataclasses.dataclass(frozen=True)
class LineStyle:
    color: str = "red"
    width: float = 4.0
    opacity: float = 0.8
    line_join: str = "round"
    line_cap: str = "round"


ROUTE_LINE_STYLE = LineStyle()


@dataclasses.dataclass(frozen=True)
class MarkerSpec:
    """Everything a renderer needs to place one marker with its popup."""

    kind: MarkerKind
    key: str
    lat: float
    lon: float
    popup_html: str
    style: MarkerStyle
    popup_offset: int = 25


class MapRenderer(Protocol):
    """Capabilities the engine needs from a map component.

    ``add_marker`` returns an opaque handle that is later passed back to
    ``remove_marker``; the engine never inspects it.
    """

    def add_line_layer(self, layer_id: str, geometry: RouteGeometry, style: LineStyle) -> None:
        ...

    def remove_line_layer(self, layer_id: str) -> None:
        ...

    def add_marker(self, spec: MarkerSpec) -> Any:
        ...

    def remove_marker(self, handle: Any) -> None:
        ...

    def fit_bounds(self, bounds: Bounds, *, padding: int) -> None:
        ...

    def set_view(self, center: tuple[float, float], zoom: float) -> None:
        ...
