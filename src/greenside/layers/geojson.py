"""GeoJSON (RFC 7946) helpers for the stored feature collection.

Features are plain dicts in GeoJSON shape. Coordinates are [lng, lat]
or [lng, lat, alt].
"""

from __future__ import annotations

import json

from loguru import logger


def feature_collection(features: list[dict] | None = None) -> dict:
    """Build a FeatureCollection dict around ``features``."""
    return {
        "type": "FeatureCollection",
        "features": list(features) if features else [],
    }


def ensure_properties(feature: dict) -> dict:
    """Guarantee ``feature["properties"]`` is a dict and return it."""
    properties = feature.get("properties")
    if not isinstance(properties, dict):
        properties = {}
        feature["properties"] = properties
    return properties


def strip_ids(features: list[dict]) -> list[dict]:
    """Drop the drawing tool's ephemeral ``id`` from each feature, in place."""
    for feature in features:
        feature.pop("id", None)
    return features


def parse_geojson(geojson_string: str) -> dict:
    """Parse a GeoJSON string into a FeatureCollection dict.

    Accepts a FeatureCollection, a single Feature, or a bare geometry.
    Features keep their properties (``{}`` when absent) and lose any id.

    Returns:
        FeatureCollection dict. Empty collection on parse errors.
    """
    try:
        data = json.loads(geojson_string)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Ignoring unparseable GeoJSON: {e}")
        return feature_collection()

    if not isinstance(data, dict):
        return feature_collection()

    kind = data.get("type")
    if kind == "FeatureCollection":
        raw_features = data.get("features") or []
    elif kind == "Feature":
        raw_features = [data]
    elif isinstance(kind, str) and ("coordinates" in data or "geometries" in data):
        raw_features = [{"type": "Feature", "geometry": data, "properties": {}}]
    else:
        raw_features = []

    features = []
    for raw in raw_features:
        if not isinstance(raw, dict):
            continue
        feature = {
            "type": "Feature",
            "geometry": raw.get("geometry"),
            "properties": raw.get("properties"),
        }
        ensure_properties(feature)
        features.append(feature)
    return feature_collection(features)
