"""FeatureCommitPipeline tests: property preparation, merge, rewind."""
from __future__ import annotations

import pytest
from shapely.geometry import LinearRing

from greenside.layers.geojson import feature_collection
from tests.lib.geojson_fixtures import SQUARE, draw_triangle, point_feature, polygon_feature


def _stored(editor):
    return editor.store.get("map")["features"]


@pytest.mark.unit
class TestPrepare:

    def test_adds_properties_and_strips_id(self, editor):
        raw = {"type": "Feature", "id": "tool-id", "geometry": {"type": "Point", "coordinates": [0, 0]}, "properties": None}
        prepared = editor.pipeline.prepare(raw)
        assert prepared == {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}, "properties": {}}
        assert raw["id"] == "tool-id"

    def test_categorized_layer_gets_empty_hole(self, editor):
        prepared = editor.pipeline.prepare(point_feature(0, 0, layer="bunkers"))
        assert prepared["properties"] == {"layer": "bunkers", "hole": ""}

    def test_existing_hole_kept(self, editor):
        prepared = editor.pipeline.prepare(point_feature(0, 0, layer="greens", hole="12"))
        assert prepared["properties"]["hole"] == "12"

    def test_uncategorized_layer_untouched(self, editor):
        prepared = editor.pipeline.prepare(point_feature(0, 0, layer="irrigation.head"))
        assert prepared["properties"] == {"layer": "irrigation.head"}

    def test_pending_applied_before_categorizing(self, editor):
        prepared = editor.pipeline.prepare(point_feature(0, 0), {"layer": "irrigation.main"})
        assert prepared["properties"] == {"layer": "irrigation.main", "hole": ""}


@pytest.mark.unit
class TestMerge:

    def test_appends_in_order(self, editor):
        editor.store.set({"map": feature_collection([point_feature(0, 0, name="X")])})
        result = editor.pipeline.merge_features([
            polygon_feature(list(reversed(SQUARE)), name="A"),
            point_feature(1, 1, name="B"),
        ])
        assert result.ok is True
        assert [f["properties"]["name"] for f in _stored(editor)] == ["X", "A", "B"]

    def test_rewinds_whole_collection(self, editor):
        clockwise = list(reversed(SQUARE))
        editor.store.set({"map": feature_collection([polygon_feature(clockwise, name="old")])})
        editor.pipeline.merge_features([point_feature(1, 1)])
        ring = _stored(editor)[0]["geometry"]["coordinates"][0]
        assert LinearRing(ring).is_ccw

    def test_malformed_merge_leaves_store_untouched(self, editor):
        editor.store.set({"map": feature_collection([point_feature(0, 0, name="X")])})
        before = editor.store.get("map")
        changes = []
        editor.store.on("change.map", changes.append)

        result = editor.pipeline.merge_features([polygon_feature([[0, 0], [1, 1]])])

        assert result.ok is False
        assert result.error
        assert editor.store.get("map") == before
        assert changes == []

    def test_one_store_write_per_commit(self, editor):
        changes = []
        editor.store.on("change.map", changes.append)
        editor.trigger("draw_green")
        draw_triangle(editor)
        assert len(changes) == 1
        assert changes[0]["source"] == "map"


@pytest.mark.unit
class TestOnCreate:

    def test_clears_working_set(self, editor):
        editor.trigger("draw_polygon")
        draw_triangle(editor)
        assert len(editor.tool) == 0
        assert editor.pipeline.last_result.ok is True

    def test_malformed_create_still_settles(self, editor, scheduler):
        editor.store.set({"map": feature_collection([point_feature(0, 0)])})
        before = editor.store.get("map")
        editor.trigger("draw_polygon", {"layer": "tees"})

        result = editor.pipeline.on_create({"features": [polygon_feature([[0, 0], [1, 1]])]})

        assert result.ok is False
        assert editor.pipeline.last_result is result
        assert editor.store.get("map") == before
        scheduler.advance(0.5)
        assert editor.controller.drawing is False
        assert editor.controller.pending_properties is None

    def test_empty_event(self, editor):
        result = editor.pipeline.on_create({})
        assert result.ok is True
        assert _stored(editor) == []
