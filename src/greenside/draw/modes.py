"""Drawing-tool modes.

``DefaultedMode`` composes a base behavior with the default properties of a
mode id: the base does the geometry, the mode injects defaults at setup and
decides at stop whether the feature is emitted (``draw.create``) or dropped.

``SimpleSelectMode`` is the tool's default mode: it holds a selection and
trashes it on request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from loguru import logger

from greenside.draw.behaviors import (
    SIMPLE_SELECT,
    CircleBehavior,
    DrawBehavior,
    LineStringBehavior,
    PointBehavior,
    PolygonBehavior,
    RectangleBehavior,
)
from greenside.draw.defaults import defaults_for

if TYPE_CHECKING:
    from greenside.draw.tool import DrawTool


class DefaultedMode:
    """A draw mode: base behavior plus per-mode default properties.

    State machine per drawing: setup -> (valid) emitted -> idle, or
    setup -> (invalid | trashed) -> idle.
    """

    def __init__(self, mode_id: str, base: DrawBehavior) -> None:
        self.mode_id = mode_id
        self.base = base

    def on_setup(self, tool: DrawTool, opts: dict) -> dict:
        state = self.base.on_setup(tool, opts)
        feature = tool.get_feature(self.base.feature_id(state))
        if feature is not None:
            feature.properties.update(defaults_for(self.mode_id))
        return state

    def on_click(self, tool: DrawTool, state: dict, lng: float, lat: float) -> None:
        self.base.on_click(tool, state, lng, lat)

    def on_finish(self, tool: DrawTool, state: dict) -> None:
        self.base.on_finish(tool, state)

    def on_stop(self, tool: DrawTool, state: dict) -> None:
        self.base.cleanup(tool, state)

        feature_id = self.base.feature_id(state)
        feature = tool.get_feature(feature_id)
        if feature is None:
            return

        if feature.is_valid():
            tool.fire("draw.create", {"features": [feature.to_geojson()]})
        else:
            logger.debug(f"{self.mode_id}: discarding incomplete {feature.geometry_type}")
            tool.delete_feature([feature_id], silent=True)
            tool.change_mode(SIMPLE_SELECT, silent=True)

    def to_display_features(
        self, tool: DrawTool, state: dict, geojson: dict, display: Callable[[dict], None]
    ) -> None:
        self.base.to_display_features(tool, state, geojson, display)

    def on_trash(self, tool: DrawTool, state: dict) -> None:
        tool.delete_feature([self.base.feature_id(state)], silent=True)
        tool.change_mode(SIMPLE_SELECT)


class SimpleSelectMode:
    """Selection over an explicit set of feature ids."""

    mode_id = SIMPLE_SELECT

    def on_setup(self, tool: DrawTool, opts: dict) -> dict:
        wanted = opts.get("featureIds") or []
        selected = [fid for fid in wanted if tool.get_feature(fid) is not None]
        tool.set_selected(selected)
        tool.update_ui_classes(mouse="none")
        return {}

    def on_stop(self, tool: DrawTool, state: dict) -> None:
        tool.clear_selected()

    def to_display_features(self, tool, state, geojson, display) -> None:
        active = geojson.get("id") in tool.selected_ids
        geojson["properties"]["active"] = "true" if active else "false"
        display(geojson)

    def on_trash(self, tool: DrawTool, state: dict) -> None:
        selected = list(tool.selected_ids)
        if selected:
            tool.delete_feature(selected)
        tool.clear_selected()


# Mode id -> base behavior factory. Domain modes reuse the generic shapes.
_DRAW_MODES: dict[str, type[DrawBehavior]] = {
    "draw_point": PointBehavior,
    "draw_line_string": LineStringBehavior,
    "draw_polygon": PolygonBehavior,
    "draw_rectangle": RectangleBehavior,
    "draw_circle": CircleBehavior,
    "draw_green": PolygonBehavior,
    "draw_bunker": PolygonBehavior,
    "draw_fairway": PolygonBehavior,
    "draw_tee": PolygonBehavior,
    "draw_drainage": LineStringBehavior,
}

DRAW_MODE_IDS = tuple(_DRAW_MODES)


def build_modes() -> dict:
    """The full mode registry for a DrawTool."""
    modes: dict = {SIMPLE_SELECT: SimpleSelectMode()}
    for mode_id, behavior in _DRAW_MODES.items():
        modes[mode_id] = DefaultedMode(mode_id, behavior())
    return modes


def is_draw_mode(mode_id: str | None) -> bool:
    return bool(mode_id) and mode_id.startswith("draw_")
