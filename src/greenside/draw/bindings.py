"""Keyboard shortcuts and toolbar buttons.

Bindings carry no state of their own: a key or button resolves to a mode
trigger (with optional pending properties) or to the edit-session trash.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from greenside.draw.defaults import IRRIGATION_MAIN_LAYER

KEY_MODES = {
    "m": "draw_point",
    "l": "draw_line_string",
    "p": "draw_polygon",
    "r": "draw_rectangle",
    "c": "draw_circle",
}

TRASH_KEYS = frozenset({"⌫", "Backspace", "Delete"})

ADD_HEAD_ACTION = "add_head_at_gps"


@dataclass(frozen=True)
class ToolbarButton:
    """A toolbar entry: either a draw trigger or a named action."""
    title: str
    classes: tuple[str, ...]
    mode: str | None = None
    properties: dict = field(default_factory=dict, hash=False)
    action: str | None = None


DRAW_BUTTONS = (
    ToolbarButton("Draw Point (m)", ("mapbox-gl-draw_ctrl-draw-btn", "mapbox-gl-draw_point"), mode="draw_point"),
    ToolbarButton("Draw LineString (l)", ("mapbox-gl-draw_ctrl-draw-btn", "mapbox-gl-draw_line"), mode="draw_line_string"),
    ToolbarButton("Draw Polygon (p)", ("mapbox-gl-draw_ctrl-draw-btn", "mapbox-gl-draw_polygon"), mode="draw_polygon"),
    ToolbarButton("Draw Rectangular Polygon (r)", ("mapbox-gl-draw_ctrl-draw-btn", "mapbox-gl-draw_rectangle"), mode="draw_rectangle"),
    ToolbarButton("Draw Circular Polygon (c)", ("mapbox-gl-draw_ctrl-draw-btn", "mapbox-gl-draw_circle"), mode="draw_circle"),
    ToolbarButton("Draw Green", ("mapbox-gl-draw_ctrl-draw-btn", "mapbox-gl-draw_green"), mode="draw_green"),
)

IRRIGATION_BUTTONS = (
    ToolbarButton(
        "Draw Irrigation Main",
        ("mapbox-gl-draw_ctrl-draw-btn", "mapbox-gl-draw-irrigation-main"),
        mode="draw_line_string",
        properties={"layer": IRRIGATION_MAIN_LAYER},
    ),
    ToolbarButton(
        "Add Sprinkler @ My Location",
        ("mapbox-gl-draw_ctrl-draw-btn", "draw-irrigation-head-gps"),
        action=ADD_HEAD_ACTION,
    ),
)

TOOLBAR = {button.title: button for button in DRAW_BUTTONS + IRRIGATION_BUTTONS}


def find_button(title: str) -> ToolbarButton | None:
    return TOOLBAR.get(title)
