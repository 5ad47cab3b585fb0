"""A feature held by the drawing tool.

Either an in-progress shape owned by a draw mode, or a stored feature loaded
into the edit overlay. Geometry is kept in GeoJSON shape; in-progress
polygon rings are open and get closed by ``to_geojson``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from shapely.errors import ShapelyError
from shapely.geometry import Polygon


@dataclass
class DrawFeature:
    """A feature with a drawing-tool identifier.

    Attributes:
        feature_id: Ephemeral identifier assigned by the drawing tool.
        geometry: GeoJSON geometry dict (may be None for loaded features).
        properties: Mutable property bag.
    """

    feature_id: str
    geometry: dict | None
    properties: dict = field(default_factory=dict)

    @property
    def geometry_type(self) -> str | None:
        return self.geometry.get("type") if self.geometry else None

    @property
    def coordinates(self):
        return self.geometry.get("coordinates") if self.geometry else None

    def is_valid(self) -> bool:
        """Whether the geometry is a complete, non-degenerate shape."""
        kind = self.geometry_type
        coordinates = self.coordinates
        if kind == "Point":
            return isinstance(coordinates, list) and len(coordinates) >= 2
        if kind == "LineString":
            return _distinct(coordinates) >= 2
        if kind == "Polygon":
            if not coordinates or _distinct(coordinates[0]) < 3:
                return False
            try:
                return Polygon(coordinates[0]).area > 0
            except (ShapelyError, ValueError, TypeError):
                return False
        return self.geometry is not None

    def to_geojson(self) -> dict:
        geometry = copy.deepcopy(self.geometry)
        if geometry and geometry.get("type") == "Polygon":
            geometry["coordinates"] = [_closed(ring) for ring in geometry["coordinates"]]
        return {
            "type": "Feature",
            "id": self.feature_id,
            "properties": copy.deepcopy(self.properties),
            "geometry": geometry,
        }

    @classmethod
    def from_geojson(cls, feature: dict, feature_id: str) -> DrawFeature:
        properties = feature.get("properties")
        return cls(
            feature_id=feature_id,
            geometry=copy.deepcopy(feature.get("geometry")),
            properties=copy.deepcopy(properties) if isinstance(properties, dict) else {},
        )


def _distinct(positions) -> int:
    if not isinstance(positions, list):
        return 0
    return len({tuple(p) for p in positions if isinstance(p, list)})


def _closed(ring: list) -> list:
    if ring and ring[0] != ring[-1]:
        return ring + [list(ring[0])]
    return ring
