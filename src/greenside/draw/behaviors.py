"""Base draw behaviors: the geometric interaction of each draw mode.

A behavior creates its in-progress feature on setup and grows it from
pointer clicks. It knows nothing about feature defaults or creation events;
those belong to the mode that wraps it (see ``greenside.draw.modes``).

Point:      one click, done.
LineString: click per vertex, finish explicitly.
Polygon:    click per vertex, finish explicitly.
Rectangle:  two clicks (opposite corners), finishes itself.
Circle:     two clicks (center, edge), finishes itself.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from greenside.draw.feature import DrawFeature

if TYPE_CHECKING:
    from greenside.draw.tool import DrawTool

SIMPLE_SELECT = "simple_select"

CIRCLE_STEPS = 64


class DrawBehavior(ABC):
    """Pointer-to-geometry interaction for one geometry kind."""

    geometry_type = "Point"

    def on_setup(self, tool: DrawTool, opts: dict) -> dict:
        feature = DrawFeature(
            feature_id=tool.new_id(),
            geometry={"type": self.geometry_type, "coordinates": self._empty_coordinates()},
        )
        tool.add_feature(feature)
        tool.clear_selected()
        tool.update_ui_classes(mouse="add")
        return {"feature_id": feature.feature_id, "clicks": 0}

    def feature_id(self, state: dict) -> str | None:
        return state.get("feature_id") if state else None

    @abstractmethod
    def on_click(self, tool: DrawTool, state: dict, lng: float, lat: float) -> None:
        """Extend the in-progress feature with a clicked position."""

    def on_finish(self, tool: DrawTool, state: dict) -> None:
        """Complete the drawing; stopping the mode decides whether it is kept."""
        tool.change_mode(SIMPLE_SELECT, {"featureIds": [self.feature_id(state)]})

    def cleanup(self, tool: DrawTool, state: dict) -> None:
        tool.update_ui_classes(mouse="none")

    def to_display_features(
        self, tool: DrawTool, state: dict, geojson: dict, display: Callable[[dict], None]
    ) -> None:
        active = geojson.get("id") == self.feature_id(state)
        geojson["properties"]["active"] = "true" if active else "false"
        display(geojson)

    def _empty_coordinates(self) -> list:
        return []

    def _feature(self, tool: DrawTool, state: dict) -> DrawFeature | None:
        return tool.get_feature(self.feature_id(state))


class PointBehavior(DrawBehavior):
    geometry_type = "Point"

    def on_click(self, tool, state, lng, lat):
        feature = self._feature(tool, state)
        if feature is None:
            return
        feature.geometry["coordinates"] = [lng, lat]
        state["clicks"] += 1
        self.on_finish(tool, state)


class LineStringBehavior(DrawBehavior):
    geometry_type = "LineString"

    def on_click(self, tool, state, lng, lat):
        feature = self._feature(tool, state)
        if feature is None:
            return
        feature.geometry["coordinates"].append([lng, lat])
        state["clicks"] += 1


class PolygonBehavior(DrawBehavior):
    geometry_type = "Polygon"

    def _empty_coordinates(self):
        return [[]]

    def on_click(self, tool, state, lng, lat):
        feature = self._feature(tool, state)
        if feature is None:
            return
        feature.geometry["coordinates"][0].append([lng, lat])
        state["clicks"] += 1


class RectangleBehavior(DrawBehavior):
    """Axis-aligned rectangle from two opposite corners."""

    geometry_type = "Polygon"

    def _empty_coordinates(self):
        return [[]]

    def on_click(self, tool, state, lng, lat):
        feature = self._feature(tool, state)
        if feature is None:
            return
        state["clicks"] += 1
        if state["clicks"] == 1:
            state["start"] = [lng, lat]
            feature.geometry["coordinates"] = [[[lng, lat]]]
            return
        x0, y0 = state["start"]
        feature.geometry["coordinates"] = [[[x0, y0], [lng, y0], [lng, lat], [x0, lat]]]
        self.on_finish(tool, state)


class CircleBehavior(DrawBehavior):
    """Circular polygon from a center click and an edge click.

    Uses an equirectangular approximation, adequate at course scale.
    """

    geometry_type = "Polygon"

    def _empty_coordinates(self):
        return [[]]

    def on_click(self, tool, state, lng, lat):
        feature = self._feature(tool, state)
        if feature is None:
            return
        state["clicks"] += 1
        if state["clicks"] == 1:
            state["center"] = [lng, lat]
            feature.geometry["coordinates"] = [[[lng, lat]]]
            return
        feature.geometry["coordinates"] = [circle_ring(state["center"], [lng, lat])]
        self.on_finish(tool, state)


def circle_ring(center: list, edge: list, steps: int = CIRCLE_STEPS) -> list:
    """Open ring of ``steps`` vertices around ``center`` passing through ``edge``."""
    c_lng, c_lat = center
    scale = math.cos(math.radians(c_lat)) or 1e-12
    radius = math.hypot((edge[0] - c_lng) * scale, edge[1] - c_lat)
    if radius == 0:
        return [[c_lng, c_lat]]
    ring = []
    for i in range(steps):
        theta = 2 * math.pi * i / steps
        ring.append([
            c_lng + radius * math.cos(theta) / scale,
            c_lat + radius * math.sin(theta),
        ])
    return ring
