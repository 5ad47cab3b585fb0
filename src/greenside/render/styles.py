"""Basemap catalogue and static layer specs.

Only what the static layers need: which feature color suits a basemap,
and paint expressions that honour per-feature ``fill``/``stroke`` props.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_DARK_FEATURE_COLOR = "#555555"
DEFAULT_LIGHT_FEATURE_COLOR = "#e8e8e8"
DEFAULT_SATELLITE_FEATURE_COLOR = "#00f900"

SOURCE_ID = "map-data"
FILL_LAYER = "map-data-fill"
FILL_OUTLINE_LAYER = "map-data-fill-outline"
LINE_LAYER = "map-data-line"
STATIC_LAYER_IDS = (FILL_LAYER, FILL_OUTLINE_LAYER, LINE_LAYER)


@dataclass(frozen=True)
class Basemap:
    title: str
    theme: str | None = None
    light_preset: str | None = None
    satellite: bool = False


BASEMAPS = {
    b.title: b
    for b in (
        Basemap("Standard"),
        Basemap("Standard Dark", theme="monochrome", light_preset="night"),
        Basemap("Standard Satellite", satellite=True),
        Basemap("Streets"),
        Basemap("Outdoors"),
    )
}


def get_basemap(title: str | None) -> Basemap:
    return BASEMAPS.get(title or "", BASEMAPS["Standard"])


def feature_color(basemap: Basemap) -> str:
    """Dark features on light basemaps, light ones on night/satellite."""
    if basemap.satellite:
        return DEFAULT_SATELLITE_FEATURE_COLOR
    if basemap.theme == "monochrome" and basemap.light_preset == "night":
        return DEFAULT_LIGHT_FEATURE_COLOR
    return DEFAULT_DARK_FEATURE_COLOR


def static_layers(color: str) -> list[dict]:
    line_paint = {
        "line-color": ["coalesce", ["get", "stroke"], color],
        "line-width": ["coalesce", ["get", "stroke-width"], 2],
        "line-opacity": ["coalesce", ["get", "stroke-opacity"], 1],
    }
    return [
        {
            "id": FILL_LAYER,
            "type": "fill",
            "source": SOURCE_ID,
            "paint": {
                "fill-color": ["coalesce", ["get", "fill"], color],
                "fill-opacity": ["coalesce", ["get", "fill-opacity"], 0.3],
            },
            "filter": ["==", ["geometry-type"], "Polygon"],
        },
        {
            "id": FILL_OUTLINE_LAYER,
            "type": "line",
            "source": SOURCE_ID,
            "paint": dict(line_paint),
            "filter": ["==", ["geometry-type"], "Polygon"],
        },
        {
            "id": LINE_LAYER,
            "type": "line",
            "source": SOURCE_ID,
            "paint": dict(line_paint),
            "filter": ["==", ["geometry-type"], "LineString"],
        },
    ]
