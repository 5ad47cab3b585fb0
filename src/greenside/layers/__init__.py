"""GeoJSON feature collections: helpers, winding normalization, and the store."""

from greenside.layers.geojson import (
    ensure_properties,
    feature_collection,
    parse_geojson,
    strip_ids,
)
from greenside.layers.rewind import rewind
from greenside.layers.store import FeatureStore

__all__ = [
    "FeatureStore",
    "ensure_properties",
    "feature_collection",
    "parse_geojson",
    "rewind",
    "strip_ids",
]
