"""pynextrip - Async live transit map engine for the Metro Transit NexTrip API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pynextrip")
except PackageNotFoundError:
    __version__ = "0+local"
from pynextrip.client import NexTripClient
from pynextrip.config import MapViewConfig, NexTripConfig
from pynextrip.exceptions import (
    IncompleteStopDataError,
    MalformedVehicleCoordinateError,
    MissingGeometryError,
    NexTripConfigError,
    NexTripError,
    NexTripTransportError,
)
from pynextrip.geometry import RouteGeometryDataset
from pynextrip.map import (
    InMemoryMapRenderer,
    MapRenderer,
    OverlayRegistry,
    SelectionState,
    SelectionStateMachine,
)
from pynextrip.models import (
    Bounds,
    Departure,
    Direction,
    Route,
    RouteGeometry,
    Stop,
    StopDetail,
    StopRef,
    Vehicle,
)

__all__ = [
    "__version__",
    "Bounds",
    "Departure",
    "Direction",
    "IncompleteStopDataError",
    "InMemoryMapRenderer",
    "MalformedVehicleCoordinateError",
    "MapRenderer",
    "MapViewConfig",
    "MissingGeometryError",
    "NexTripClient",
    "NexTripConfig",
    "NexTripConfigError",
    "NexTripError",
    "NexTripTransportError",
    "OverlayRegistry",
    "Route",
    "RouteGeometry",
    "RouteGeometryDataset",
    "SelectionState",
    "SelectionStateMachine",
    "Stop",
    "StopDetail",
    "StopRef",
    "Vehicle",
]
