"""RenderSync tests: static layers follow the store."""
from __future__ import annotations

import pytest

from greenside.layers.geojson import feature_collection
from greenside.layers.store import FeatureStore
from greenside.render.engine import InMemoryMapEngine
from greenside.render.styles import (
    DEFAULT_DARK_FEATURE_COLOR,
    DEFAULT_LIGHT_FEATURE_COLOR,
    DEFAULT_SATELLITE_FEATURE_COLOR,
    FILL_LAYER,
    LINE_LAYER,
    SOURCE_ID,
    STATIC_LAYER_IDS,
    feature_color,
    get_basemap,
)
from greenside.render.sync import RenderSync
from tests.lib.geojson_fixtures import point_feature, polygon_feature


@pytest.fixture
def store():
    return FeatureStore()


@pytest.fixture
def engine():
    return InMemoryMapEngine()


@pytest.fixture
def render(engine, store):
    sync = RenderSync(engine, store)
    sync.attach()
    return sync


@pytest.mark.unit
class TestStyleLoad:

    def test_idle_before_style_load_does_nothing(self, render, engine):
        assert render.on_idle() is False
        assert engine.get_source(SOURCE_ID) is None

    def test_idle_after_style_load_installs_once(self, render, engine, store):
        render.on_style_load()
        assert store.get("mapStyleLoaded") is True

        assert render.on_idle() is True
        assert engine.get_source(SOURCE_ID)["data"] == feature_collection()
        assert set(engine.layers) == set(STATIC_LAYER_IDS)
        assert store.get("mapStyleLoaded") is False

        assert render.on_idle() is False
        assert render.sync_count == 1


@pytest.mark.unit
class TestSync:

    def test_map_change_replaces_source_data(self, render, engine, store):
        collection = feature_collection([polygon_feature(name="A"), point_feature(1, 1)])
        store.set({"map": collection})
        assert engine.get_source(SOURCE_ID)["data"] == collection

        store.set({"map": feature_collection()})
        assert engine.get_source(SOURCE_ID)["data"] == feature_collection()
        assert render.sync_count == 2

    def test_other_keys_do_not_sync(self, render, store):
        store.set({"mapStyleLoaded": True})
        assert render.sync_count == 0

    def test_layer_filters_and_paint(self, render, engine, store):
        store.set({"map": feature_collection()})
        fill = engine.get_layer(FILL_LAYER)
        line = engine.get_layer(LINE_LAYER)
        assert fill["filter"] == ["==", ["geometry-type"], "Polygon"]
        assert line["filter"] == ["==", ["geometry-type"], "LineString"]
        assert fill["paint"]["fill-color"] == ["coalesce", ["get", "fill"], DEFAULT_DARK_FEATURE_COLOR]

    def test_edit_control_follows_features(self, render, store):
        assert render.edit_control_visible is False
        store.set({"map": feature_collection([point_feature(0, 0)])})
        assert render.edit_control_visible is True
        store.set({"map": feature_collection()})
        assert render.edit_control_visible is False


@pytest.mark.unit
class TestVisibility:

    def test_hide_and_show(self, render, engine, store):
        store.set({"map": feature_collection()})
        render.set_static_visible(False)
        assert all(engine.get_layer(i)["layout"]["visibility"] == "none" for i in STATIC_LAYER_IDS)
        assert render.markers_visible is False

        render.set_static_visible(True)
        assert all(engine.get_layer(i)["layout"]["visibility"] == "visible" for i in STATIC_LAYER_IDS)

    def test_hidden_before_install_stays_hidden(self, render, engine, store):
        render.set_static_visible(False)
        store.set({"map": feature_collection()})
        assert engine.get_layer(FILL_LAYER)["layout"]["visibility"] == "none"


@pytest.mark.unit
class TestBasemapColors:

    def test_colors(self):
        assert feature_color(get_basemap("Standard")) == DEFAULT_DARK_FEATURE_COLOR
        assert feature_color(get_basemap("Standard Dark")) == DEFAULT_LIGHT_FEATURE_COLOR
        assert feature_color(get_basemap("Standard Satellite")) == DEFAULT_SATELLITE_FEATURE_COLOR

    def test_unknown_title_falls_back_to_standard(self):
        assert get_basemap("Watercolor").title == "Standard"
        assert get_basemap(None).title == "Standard"

    def test_satellite_layers_use_satellite_color(self, engine, store):
        render = RenderSync(engine, store, basemap="Standard Satellite")
        render.sync()
        paint = engine.get_layer(FILL_LAYER)["paint"]
        assert paint["fill-color"][-1] == DEFAULT_SATELLITE_FEATURE_COLOR


@pytest.mark.unit
class TestInMemoryMapEngine:

    def test_duplicate_source_rejected(self, engine):
        engine.add_source("s", {"type": "geojson"})
        with pytest.raises(ValueError):
            engine.add_source("s", {"type": "geojson"})

    def test_layer_needs_source(self, engine):
        with pytest.raises(ValueError):
            engine.add_layer({"id": "l", "source": "missing"})

    def test_unknown_ids(self, engine):
        with pytest.raises(KeyError):
            engine.set_source_data("missing", {})
        with pytest.raises(KeyError):
            engine.set_layout_property("missing", "visibility", "none")

    def test_ease_to(self, engine):
        engine.ease_to((1.5, 2.5), 18.0)
        assert engine.get_center() == (1.5, 2.5)
        assert engine.get_zoom() == 18.0
