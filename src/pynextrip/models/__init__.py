"""Data models for NexTrip API responses."""

from pynextrip.models._base import NexTripBaseModel
from pynextrip.models.geometry import Bounds, RouteGeometry
from pynextrip.models.route import Direction, Route
from pynextrip.models.stop import Departure, Stop, StopDetail, StopInfo, StopRef
from pynextrip.models.vehicle import Vehicle

__all__ = [
    "Bounds",
    "Departure",
    "Direction",
    "NexTripBaseModel",
    "Route",
    "RouteGeometry",
    "Stop",
    "StopDetail",
    "StopInfo",
    "StopRef",
    "Vehicle",
]
