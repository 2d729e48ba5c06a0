"""Route line geometry models."""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator


class Bounds(NamedTuple):
    """Bounding region in degrees."""

    west: float
    south: float
    east: float
    north: float


class RouteGeometry(BaseModel):
    """Polyline of a route, as ``(lon, lat)`` pairs in drawing order."""

    model_config = ConfigDict(frozen=True)

    route_id: str
    coordinates: tuple[tuple[float, float], ...]

    @field_validator("coordinates")
    @classmethod
    def _require_points(cls, value: tuple[tuple[float, float], ...]) -> tuple[tuple[float, float], ...]:
        if not value:
            raise ValueError("route geometry needs at least one coordinate")
        return value

    @property
    def bounds(self) -> Bounds:
        lons = [lon for lon, _ in self.coordinates]
        lats = [lat for _, lat in self.coordinates]
        return Bounds(west=min(lons), south=min(lats), east=max(lons), north=max(lats))

    def to_geojson(self) -> dict[str, object]:
        """Return the line as a GeoJSON Feature."""
        return {
            "type": "Feature",
            "properties": {"route_id": self.route_id},
            "geometry": {"type": "LineString", "coordinates": [list(c) for c in self.coordinates]},
        }
