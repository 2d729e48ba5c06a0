"""Static route geometry dataset.

Route lines come from a pre-baked GeoJSON FeatureCollection where every
feature carries ``properties.route_id`` and a ``LineString`` (or
``MultiLineString``) geometry.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pynextrip._normalize import safe_float, safe_id
from pynextrip.exceptions import MissingGeometryError, NexTripConfigError
from pynextrip.models.geometry import RouteGeometry

_logger = logging.getLogger(__name__)


def _line_coordinates(geometry: Mapping[str, Any]) -> list[tuple[float, float]]:
    geom_type = geometry.get("type")
    raw_coords = geometry.get("coordinates")
    if not isinstance(raw_coords, list):
        return []
    if geom_type == "LineString":
        lines = [raw_coords]
    elif geom_type == "MultiLineString":
        lines = [line for line in raw_coords if isinstance(line, list)]
    else:
        return []

    points: list[tuple[float, float]] = []
    for line in lines:
        for pair in line:
            if not isinstance(pair, list | tuple) or len(pair) < 2:
                continue
            lon, lat = safe_float(pair[0]), safe_float(pair[1])
            if lon is None or lat is None:
                continue
            points.append((lon, lat))
    return points


class RouteGeometryDataset:
    """Lookup of route line geometry by route id."""

    def __init__(self, geometries: Iterable[RouteGeometry] = ()) -> None:
        self._by_route: dict[str, RouteGeometry] = {}
        for geometry in geometries:
            self._by_route[geometry.route_id] = geometry

    @classmethod
    def from_geojson(cls, collection: Mapping[str, Any]) -> RouteGeometryDataset:
        """Build a dataset from a GeoJSON FeatureCollection dict.

        Features without a route id or without a usable line are skipped.
        """
        features = collection.get("features")
        if not isinstance(features, list):
            raise NexTripConfigError("Route geometry must be a GeoJSON FeatureCollection")

        geometries: list[RouteGeometry] = []
        for feature in features:
            if not isinstance(feature, dict):
                continue
            properties = feature.get("properties") or {}
            geometry = feature.get("geometry") or {}
            route_id = safe_id(properties.get("route_id")) if isinstance(properties, dict) else None
            if not isinstance(route_id, str) or not route_id or not isinstance(geometry, dict):
                _logger.debug("Skipping geometry feature without route id or geometry")
                continue
            try:
                geometries.append(RouteGeometry(route_id=route_id, coordinates=_line_coordinates(geometry)))
            except ValidationError:
                _logger.debug("Skipping route %s geometry with no usable coordinates", route_id)
        _logger.debug("Loaded %d route geometries", len(geometries))
        return cls(geometries)

    @classmethod
    def from_file(cls, path: str | Path) -> RouteGeometryDataset:
        """Load a dataset from a GeoJSON file."""
        try:
            with Path(path).open(encoding="utf-8") as fh:
                collection = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise NexTripConfigError(f"Cannot load route geometry from {path}: {exc}") from exc
        if not isinstance(collection, dict):
            raise NexTripConfigError(f"Route geometry file {path} is not a GeoJSON object")
        return cls.from_geojson(collection)

    def get(self, route_id: str) -> RouteGeometry | None:
        return self._by_route.get(route_id)

    def require(self, route_id: str) -> RouteGeometry:
        """Return the geometry for *route_id* or raise :class:`MissingGeometryError`."""
        geometry = self._by_route.get(route_id)
        if geometry is None:
            raise MissingGeometryError(route_id)
        return geometry

    def __contains__(self, route_id: object) -> bool:
        return route_id in self._by_route

    def __iter__(self) -> Iterator[RouteGeometry]:
        return iter(self._by_route.values())

    def __len__(self) -> int:
        return len(self._by_route)
