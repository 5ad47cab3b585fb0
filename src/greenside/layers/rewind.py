"""Winding-order normalization (right-hand rule).

Exterior rings are made counter-clockwise and holes clockwise, as RFC 7946
recommends. Ring orientation and geometry validity come from shapely; the
coordinate lists themselves are kept as-is (a ring is either returned
untouched or reversed), so rewinding a correctly wound collection is a
structural no-op.
"""

from __future__ import annotations

from shapely.errors import ShapelyError
from shapely.geometry import LinearRing, Polygon, shape

from greenside.errors import MalformedGeometryError

_SHAPE_ERRORS = (ShapelyError, ValueError, TypeError, KeyError, IndexError)


def rewind(geojson: dict) -> dict:
    """Rewind every Polygon/MultiPolygon ring in ``geojson``, in place.

    Accepts a FeatureCollection, Feature, or geometry dict. Features with a
    null geometry are left alone.

    Returns:
        The same object, normalized.

    Raises:
        MalformedGeometryError: A geometry is missing, unknown, or has
            coordinates shapely cannot build.
    """
    kind = geojson.get("type") if isinstance(geojson, dict) else None
    if kind == "FeatureCollection":
        for index, feature in enumerate(geojson.get("features") or []):
            try:
                _rewind_feature(feature)
            except MalformedGeometryError as e:
                e.index = index
                raise
    elif kind == "Feature":
        _rewind_feature(geojson)
    else:
        _rewind_geometry(geojson)
    return geojson


def _rewind_feature(feature: dict) -> None:
    if not isinstance(feature, dict) or feature.get("type") != "Feature":
        raise MalformedGeometryError("Not a GeoJSON Feature")
    if "geometry" not in feature:
        raise MalformedGeometryError("Feature has no geometry member")
    if feature["geometry"] is None:
        return
    _rewind_geometry(feature["geometry"])


def _rewind_geometry(geometry: dict) -> None:
    if not isinstance(geometry, dict):
        raise MalformedGeometryError(f"Geometry must be an object, got {type(geometry).__name__}")

    kind = geometry.get("type")
    if kind == "GeometryCollection":
        for child in geometry.get("geometries") or []:
            _rewind_geometry(child)
        return

    coordinates = geometry.get("coordinates")
    if kind == "Polygon":
        geometry["coordinates"] = _rewind_rings(coordinates)
    elif kind == "MultiPolygon":
        if not isinstance(coordinates, list):
            raise MalformedGeometryError("MultiPolygon coordinates must be a list")
        geometry["coordinates"] = [_rewind_rings(polygon) for polygon in coordinates]
    else:
        _validate(geometry)


def _rewind_rings(rings) -> list:
    if not isinstance(rings, list) or not rings:
        raise MalformedGeometryError("Polygon needs at least one ring")
    return [
        _wind(ring, clockwise=(position > 0))
        for position, ring in enumerate(rings)
    ]


def _wind(ring, clockwise: bool) -> list:
    if not isinstance(ring, list) or not ring:
        raise MalformedGeometryError("Polygon ring must be a non-empty list of positions")
    try:
        linear_ring = LinearRing(ring)
        area = Polygon(linear_ring).area
    except _SHAPE_ERRORS as e:
        raise MalformedGeometryError(f"Invalid polygon ring: {e}") from e
    # Zero-area rings have no orientation to fix.
    if area == 0 or linear_ring.is_ccw != clockwise:
        return ring
    return list(reversed(ring))


def _validate(geometry: dict) -> None:
    try:
        parsed = shape(geometry)
    except _SHAPE_ERRORS as e:
        raise MalformedGeometryError(f"Invalid {geometry.get('type')} geometry: {e}") from e
    if parsed.is_empty:
        raise MalformedGeometryError(f"Empty {geometry.get('type')} geometry")
