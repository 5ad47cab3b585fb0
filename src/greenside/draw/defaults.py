"""Default feature properties per draw mode.

``defaults_for`` is pure and total over mode identifiers: known modes map to
their layer tag and styling hints, anything else maps to ``{}``. Mode ids are
accepted with or without the ``draw_`` prefix ("green" == "draw_green").
"""

from __future__ import annotations

# Presentation sub-tag every categorized feature carries (hole number).
SUBTAG_PROPERTY = "hole"

# Layers whose features get the sub-tag on commit.
CATEGORIZED_LAYERS = frozenset({
    "greens",
    "bunkers",
    "fairways",
    "tees",
    "drainage",
    "irrigation.main",
})

IRRIGATION_MAIN_LAYER = "irrigation.main"
IRRIGATION_HEAD_LAYER = "irrigation.head"

_MODE_DEFAULTS: dict[str, dict[str, str]] = {
    "green": {"layer": "greens", "hole": "", "fill": "#00aa00"},
    "bunker": {"layer": "bunkers", "hole": "", "fill": "#e8d8a0"},
    "fairway": {"layer": "fairways", "hole": "", "fill": "#66cc66"},
    "tee": {"layer": "tees", "hole": "", "fill": "#338833"},
    "drainage": {"layer": "drainage", "hole": "", "stroke": "#3366ff"},
}


def mode_key(mode_id: str) -> str:
    """Normalize ``draw_green`` / ``green`` to ``green``."""
    return mode_id[len("draw_"):] if mode_id.startswith("draw_") else mode_id


def mode_id_for(key: str) -> str:
    """Normalize ``green`` / ``draw_green`` to the mode id ``draw_green``."""
    return f"draw_{mode_key(key)}"


def defaults_for(mode_id: str) -> dict[str, str]:
    """Default properties for features drawn in ``mode_id`` (a fresh dict)."""
    return dict(_MODE_DEFAULTS.get(mode_key(mode_id), {}))


def is_categorized(layer) -> bool:
    return isinstance(layer, str) and layer in CATEGORIZED_LAYERS
