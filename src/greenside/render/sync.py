"""Keeps the static feature layers equal to the store.

Full replace on every ``change.map``: the collection is editor-sized, so
the whole source is reset rather than diffed. The source and layers are
installed lazily, on the first sync or on the first idle after the style
loaded.
"""

from __future__ import annotations

from loguru import logger

from greenside.layers.geojson import feature_collection
from greenside.layers.store import MAP_KEY, FeatureStore
from greenside.render.engine import MapEngine
from greenside.render.styles import (
    SOURCE_ID,
    STATIC_LAYER_IDS,
    Basemap,
    feature_color,
    get_basemap,
    static_layers,
)

STYLE_LOADED_KEY = "mapStyleLoaded"


class RenderSync:
    """Store consumer that drives the map engine's static layers."""

    def __init__(
        self,
        engine: MapEngine,
        store: FeatureStore,
        basemap: Basemap | str | None = None,
        store_key: str = MAP_KEY,
    ) -> None:
        self.engine = engine
        self.store = store
        self.basemap = basemap if isinstance(basemap, Basemap) else get_basemap(basemap)
        self.store_key = store_key
        self.static_visible = True
        self.markers_visible = True
        self.edit_control_visible = store.has_features()
        self.sync_count = 0

    def attach(self) -> None:
        self.store.on("change", self._on_change)

    def _on_change(self, event: dict) -> None:
        self.refresh_affordances()
        if self.store_key in (event.get("obj") or {}):
            self.sync()

    def refresh_affordances(self) -> None:
        self.edit_control_visible = self.store.has_features()

    def on_style_load(self) -> None:
        self.store.set({STYLE_LOADED_KEY: True})

    def on_idle(self) -> bool:
        """Install and fill the layers once the style has loaded."""
        if not self.store.get(STYLE_LOADED_KEY) or self.engine.get_source(SOURCE_ID) is not None:
            return False
        self.sync()
        self.store.set({STYLE_LOADED_KEY: False})
        return True

    def installed(self) -> bool:
        return self.engine.get_source(SOURCE_ID) is not None

    def install(self) -> None:
        if not self.installed():
            self.engine.add_source(SOURCE_ID, {"type": "geojson", "data": feature_collection()})
        color = feature_color(self.basemap)
        visibility = "visible" if self.static_visible else "none"
        for spec in static_layers(color):
            if self.engine.get_layer(spec["id"]) is None:
                spec["layout"] = {"visibility": visibility}
                self.engine.add_layer(spec)
        logger.info(f"Installed static layers ({self.basemap.title}, {color})")

    def sync(self) -> None:
        if not self.installed() or any(self.engine.get_layer(i) is None for i in STATIC_LAYER_IDS):
            self.install()
        collection = self.store.get(self.store_key) or feature_collection()
        self.engine.set_source_data(SOURCE_ID, collection)
        self.sync_count += 1
        logger.debug(f"Rendered {len(collection.get('features') or [])} features")

    def set_static_visible(self, visible: bool) -> None:
        """Show or hide the static layers and point markers."""
        self.static_visible = visible
        self.markers_visible = visible
        value = "visible" if visible else "none"
        for layer_id in STATIC_LAYER_IDS:
            if self.engine.get_layer(layer_id) is not None:
                self.engine.set_layout_property(layer_id, "visibility", value)
