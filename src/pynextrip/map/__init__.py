"""Map overlay synchronization engine.

Keeps a map renderer's route line, stop markers and vehicle markers in step
with the rider's route/direction selection and with live vehicle positions.
"""

from pynextrip.map.memory import InMemoryMapRenderer
from pynextrip.map.overlays import Marker, OverlayRegistry, OverlaySnapshot, RouteLineOverlay
from pynextrip.map.provider import TransitDataProvider
from pynextrip.map.renderer import LineStyle, MapRenderer, MarkerKind, MarkerSpec, MarkerStyle
from pynextrip.map.route_line import RouteLineRenderer
from pynextrip.map.selection import Selection, SelectionState, SelectionStateMachine
from pynextrip.map.stops import StopOverlayBuilder
from pynextrip.map.vehicles import VehicleBinding, VehicleRefreshLoop

__all__ = [
    "InMemoryMapRenderer",
    "LineStyle",
    "MapRenderer",
    "Marker",
    "MarkerKind",
    "MarkerSpec",
    "MarkerStyle",
    "OverlayRegistry",
    "OverlaySnapshot",
    "RouteLineOverlay",
    "RouteLineRenderer",
    "Selection",
    "SelectionState",
    "SelectionStateMachine",
    "StopOverlayBuilder",
    "TransitDataProvider",
    "VehicleBinding",
    "VehicleRefreshLoop",
]
