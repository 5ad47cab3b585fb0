"""EditSessionManager tests: load, edit, save/cancel as one unit."""
from __future__ import annotations

import pytest

from greenside.layers.geojson import feature_collection
from greenside.render.styles import FILL_LAYER, SOURCE_ID, STATIC_LAYER_IDS
from tests.lib.geojson_fixtures import draw_triangle, point_feature, polygon_feature


@pytest.fixture
def seeded(editor):
    """Editor whose store holds X (point) and Y (polygon)."""
    editor.store.set({"map": feature_collection([
        point_feature(0, 0, name="X"),
        polygon_feature(name="Y"),
    ])})
    return editor


def _overlay_ids(editor):
    return [f["id"] for f in editor.tool.get_all()["features"]]


def _names(features):
    return [f["properties"]["name"] for f in features]


@pytest.mark.unit
class TestEnter:

    def test_loads_collection_into_overlay(self, seeded):
        assert seeded.enter_edit() is True
        overlay = seeded.tool.get_all()["features"]
        assert _names(overlay) == ["X", "Y"]
        assert seeded.tool.selected_ids == _overlay_ids(seeded)
        assert seeded.controller.editing is True

    def test_hides_static_layers(self, seeded):
        seeded.enter_edit()
        for layer_id in STATIC_LAYER_IDS:
            assert seeded.map.get_layer(layer_id)["layout"]["visibility"] == "none"
        assert seeded.render.markers_visible is False

    def test_enter_twice_is_rejected(self, seeded):
        assert seeded.enter_edit() is True
        assert seeded.enter_edit() is False
        assert len(seeded.tool) == 2

    def test_read_only_cannot_edit(self, scheduler):
        from greenside.editor import MapEditor
        editor = MapEditor(readonly=True, scheduler=scheduler)
        assert editor.enter_edit() is False

    def test_in_progress_drawing_commits_before_loading(self, editor):
        editor.trigger("draw_polygon", {"layer": "tees"})
        editor.click(0, 0)
        editor.click(1, 0)
        editor.click(0, 1)
        assert editor.enter_edit() is True

        assert len(editor.store.get("map")["features"]) == 1
        assert len(editor.tool) == 1
        assert editor.tool.get_all()["features"][0]["properties"]["layer"] == "tees"
        assert editor.controller.drawing is False


@pytest.mark.unit
class TestDuringSession:

    def test_store_and_render_unchanged_until_save(self, seeded):
        before = seeded.store.get("map")
        seeded.enter_edit()
        x_id, y_id = _overlay_ids(seeded)
        seeded.session.select([y_id])
        seeded.session.trash()
        seeded.session.update_feature(x_id, properties={"hole": "9"})

        assert seeded.store.get("map") == before
        assert seeded.map.get_source(SOURCE_ID)["data"] == before

    def test_trash_deletes_selection_only(self, seeded):
        seeded.enter_edit()
        x_id, y_id = _overlay_ids(seeded)
        assert seeded.session.select([y_id]) == [y_id]
        assert seeded.session.trash() is True
        assert _overlay_ids(seeded) == [x_id]

    def test_overlay_helpers_inactive_outside_session(self, seeded):
        assert seeded.session.select(["a"]) == []
        assert seeded.session.update_feature("a", properties={}) is None
        assert seeded.session.add_feature(point_feature(0, 0)) is None
        assert seeded.session.trash() is False

    def test_update_unknown_feature_raises(self, seeded):
        seeded.enter_edit()
        with pytest.raises(KeyError):
            seeded.session.update_feature("ghost", properties={"a": 1})


@pytest.mark.unit
class TestSave:

    def test_save_replaces_collection(self, seeded):
        seeded.enter_edit()
        _, y_id = _overlay_ids(seeded)
        seeded.session.select([y_id])
        seeded.session.trash()
        seeded.session.add_feature(point_feature(9, 9, name="Z"))

        assert seeded.save_edit() is True

        stored = seeded.store.get("map")["features"]
        assert _names(stored) == ["X", "Z"]
        assert all("id" not in f for f in stored)
        assert seeded.controller.editing is False
        assert len(seeded.tool) == 0

    def test_save_restores_static_layers(self, seeded):
        seeded.enter_edit()
        seeded.save_edit()
        assert seeded.map.get_layer(FILL_LAYER)["layout"]["visibility"] == "visible"
        assert seeded.render.markers_visible is True
        assert seeded.map.get_source(SOURCE_ID)["data"] == seeded.store.get("map")

    def test_save_empty_hides_edit_control(self, seeded):
        assert seeded.render.edit_control_visible is True
        seeded.enter_edit()
        seeded.session.select(_overlay_ids(seeded))
        seeded.session.trash()
        seeded.save_edit()
        assert seeded.store.get("map")["features"] == []
        assert seeded.render.edit_control_visible is False

    def test_save_with_malformed_geometry_keeps_session(self, seeded):
        before = seeded.store.get("map")
        seeded.enter_edit()
        _, y_id = _overlay_ids(seeded)
        seeded.session.update_feature(y_id, geometry={"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]})

        assert seeded.save_edit() is False
        assert seeded.controller.editing is True
        assert seeded.store.get("map") == before

    def test_save_outside_session(self, seeded):
        assert seeded.save_edit() is False

    def test_drawing_allowed_after_save(self, seeded):
        seeded.enter_edit()
        seeded.save_edit()
        assert seeded.trigger("draw_green") is True
        draw_triangle(seeded)
        assert len(seeded.store.get("map")["features"]) == 3


@pytest.mark.unit
class TestCancel:

    def test_cancel_discards_edits(self, seeded):
        before = seeded.store.get("map")
        seeded.enter_edit()
        seeded.session.select(_overlay_ids(seeded))
        seeded.session.trash()
        seeded.session.add_feature(point_feature(5, 5, name="Z"))

        assert seeded.cancel_edit() is True
        assert seeded.store.get("map") == before
        assert seeded.controller.editing is False
        assert len(seeded.tool) == 0
        assert seeded.map.get_layer(FILL_LAYER)["layout"]["visibility"] == "visible"

    def test_cancel_outside_session(self, seeded):
        assert seeded.cancel_edit() is False
