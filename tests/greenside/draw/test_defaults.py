"""Tests for per-mode default properties."""
from __future__ import annotations

import pytest

from greenside.draw.defaults import (
    CATEGORIZED_LAYERS,
    defaults_for,
    is_categorized,
    mode_id_for,
    mode_key,
)


@pytest.mark.unit
class TestDefaultsFor:

    def test_green_defaults(self):
        assert defaults_for("draw_green") == {"layer": "greens", "hole": "", "fill": "#00aa00"}

    def test_prefix_optional(self):
        assert defaults_for("green") == defaults_for("draw_green")

    @pytest.mark.parametrize("mode_id", [
        "draw_point", "draw_line_string", "draw_polygon", "draw_rectangle", "draw_circle",
    ])
    def test_generic_modes_have_no_defaults(self, mode_id):
        assert defaults_for(mode_id) == {}

    def test_unknown_mode_gives_empty(self):
        assert defaults_for("draw_moat") == {}
        assert defaults_for("") == {}

    def test_returns_fresh_dict(self):
        first = defaults_for("draw_green")
        first["fill"] = "#000000"
        assert defaults_for("draw_green")["fill"] == "#00aa00"

    @pytest.mark.parametrize("mode_id,layer", [
        ("draw_bunker", "bunkers"),
        ("draw_fairway", "fairways"),
        ("draw_tee", "tees"),
        ("draw_drainage", "drainage"),
    ])
    def test_course_layers(self, mode_id, layer):
        defaults = defaults_for(mode_id)
        assert defaults["layer"] == layer
        assert defaults["hole"] == ""
        assert is_categorized(defaults["layer"])

    def test_mode_key(self):
        assert mode_key("draw_green") == "green"
        assert mode_key("simple_select") == "simple_select"

    def test_mode_id_for(self):
        assert mode_id_for("green") == "draw_green"
        assert mode_id_for("draw_green") == "draw_green"


@pytest.mark.unit
class TestCategorizedLayers:

    def test_membership(self):
        assert "greens" in CATEGORIZED_LAYERS
        assert "irrigation.main" in CATEGORIZED_LAYERS
        assert is_categorized("irrigation.head") is False

    def test_non_string_layer(self):
        assert is_categorized(None) is False
        assert is_categorized(["greens"]) is False
