"""Edit Session Manager — bulk, transactional editing of the collection.

Browsing -> EditSession -> Browsing, entered and left only by explicit
calls. On enter, the whole stored collection is copied into the drawing
tool's working set and the static layers are hidden. During the session
nothing is written to the store. Save replaces the stored collection with
whatever the working set holds; cancel discards it.
"""

from __future__ import annotations

from loguru import logger

from greenside.draw.behaviors import SIMPLE_SELECT
from greenside.draw.controller import ModeController
from greenside.draw.tool import DrawTool
from greenside.errors import MalformedGeometryError
from greenside.layers.geojson import feature_collection, strip_ids
from greenside.layers.rewind import rewind
from greenside.layers.store import MAP_KEY, FeatureStore
from greenside.render.sync import RenderSync


class EditSessionManager:
    """Loads, edits and commits the collection as one unit."""

    def __init__(
        self,
        store: FeatureStore,
        tool: DrawTool,
        controller: ModeController,
        render: RenderSync,
        store_key: str = MAP_KEY,
    ) -> None:
        self.store = store
        self.tool = tool
        self.controller = controller
        self.render = render
        self.store_key = store_key

    @property
    def active(self) -> bool:
        return self.controller.editing

    def enter(self) -> bool:
        """Start a session. Returns False when read-only or already editing."""
        if not self.controller.writable or self.controller.editing:
            return False

        # Leaving a draw mode may still commit its feature; that must land
        # before the collection is loaded.
        self.tool.change_mode(SIMPLE_SELECT)
        self.tool.delete_all()
        self.controller.begin_edit()

        self.render.set_static_visible(False)
        collection = self.store.get(self.store_key) or feature_collection()
        feature_ids = self.tool.add(collection)
        self.tool.change_mode(SIMPLE_SELECT, {"featureIds": feature_ids})

        logger.info(f"Edit session started with {len(feature_ids)} features")
        return True

    def save(self) -> bool:
        """Replace the stored collection with the working set and end the session.

        A working set that fails winding normalization is not saved; the
        session stays open.
        """
        if not self.controller.editing:
            return False

        collection = self.tool.get_all()
        collection["features"] = strip_ids(collection["features"])
        try:
            collection = rewind(collection)
        except MalformedGeometryError as e:
            logger.warning(f"Edit session not saved: {e} (feature {e.index})")
            return False

        self.store.set({self.store_key: collection}, source=self.store_key)
        logger.info(f"Edit session saved ({len(collection['features'])} features)")
        self._exit()
        return True

    def cancel(self) -> bool:
        """Discard the working set and end the session."""
        if not self.controller.editing:
            return False
        logger.info("Edit session cancelled")
        self._exit()
        return True

    def trash(self) -> bool:
        """Delete the selected working-set features. Nothing is saved."""
        if not self.controller.editing:
            return False
        self.tool.trash()
        return True

    def select(self, feature_ids: list[str]) -> list[str]:
        if not self.controller.editing:
            return []
        self.tool.change_mode(SIMPLE_SELECT, {"featureIds": feature_ids})
        return self.tool.selected_ids

    def update_feature(self, feature_id: str, geometry: dict | None = None, properties: dict | None = None) -> dict | None:
        if not self.controller.editing:
            return None
        return self.tool.update_feature(feature_id, geometry=geometry, properties=properties)

    def add_feature(self, feature: dict) -> str | None:
        if not self.controller.editing:
            return None
        return self.tool.add(feature)[0]

    def _exit(self) -> None:
        self.controller.end_edit()
        self.tool.change_mode(SIMPLE_SELECT)
        self.tool.delete_all()
        self.render.set_static_visible(True)
        self.render.refresh_affordances()
