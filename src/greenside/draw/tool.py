"""DrawTool — in-memory vector drawing tool.

Hosts the mode registry and the working set of features (in-progress
shapes, or the whole collection during an edit session). Emits
``draw.create``, ``draw.delete`` and ``draw.modechange`` on its event bus.

Identifiers are ephemeral uuid4 hex strings; ``add`` always assigns fresh
ones.
"""

from __future__ import annotations

import copy
import uuid
from typing import Any

from loguru import logger

from greenside.comms.event_bus import EventBus
from greenside.draw.behaviors import SIMPLE_SELECT
from greenside.draw.feature import DrawFeature
from greenside.errors import UnknownModeError
from greenside.layers.geojson import feature_collection


class DrawTool:
    """Mode host and feature working set."""

    def __init__(
        self,
        modes: dict[str, Any],
        bus: EventBus | None = None,
        default_mode: str = SIMPLE_SELECT,
    ) -> None:
        self.bus = bus or EventBus()
        self._modes = dict(modes)
        self._features: dict[str, DrawFeature] = {}
        self._selected: list[str] = []
        self._mode_id: str | None = None
        self._mode: Any = None
        self._state: dict | None = None
        self._changing = False
        self.ui_classes: dict[str, str] = {}
        self.default_mode = default_mode
        self.change_mode(default_mode, silent=True)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def has_mode(self, mode_id: str) -> bool:
        return mode_id in self._modes

    def get_mode(self) -> str | None:
        return self._mode_id

    def change_mode(self, mode_id: str, opts: dict | None = None, silent: bool = False) -> None:
        """Stop the current mode and set up ``mode_id``.

        A change requested while another change is stopping the previous
        mode is ignored; the outer change decides the final mode.

        Raises:
            UnknownModeError: ``mode_id`` is not registered.
        """
        if mode_id not in self._modes:
            raise UnknownModeError(f"Unknown draw mode: {mode_id}")
        if self._changing:
            logger.debug(f"Nested change to {mode_id} ignored")
            return

        previous = self._mode_id
        self._changing = True
        try:
            if self._mode is not None:
                self._mode.on_stop(self, self._state)
            self._mode_id = mode_id
            self._mode = self._modes[mode_id]
            self._state = self._mode.on_setup(self, opts or {})
        finally:
            self._changing = False

        logger.debug(f"Draw mode {previous} -> {mode_id}")
        if not silent:
            self.fire("draw.modechange", {"mode": mode_id, "previous": previous})

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def click(self, lng: float, lat: float) -> None:
        handler = getattr(self._mode, "on_click", None)
        if handler is not None:
            handler(self, self._state, lng, lat)

    def finish(self) -> None:
        handler = getattr(self._mode, "on_finish", None)
        if handler is not None:
            handler(self, self._state)

    def trash(self) -> None:
        self._mode.on_trash(self, self._state)

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def add(self, geojson: dict) -> list[str]:
        """Load a Feature or FeatureCollection; returns the assigned ids in order."""
        if geojson.get("type") == "FeatureCollection":
            raw_features = geojson.get("features") or []
        else:
            raw_features = [geojson]

        ids = []
        for raw in raw_features:
            feature = DrawFeature.from_geojson(raw, self.new_id())
            self._features[feature.feature_id] = feature
            ids.append(feature.feature_id)
        return ids

    def add_feature(self, feature: DrawFeature) -> None:
        self._features[feature.feature_id] = feature

    def get_feature(self, feature_id: str | None) -> DrawFeature | None:
        if feature_id is None:
            return None
        return self._features.get(feature_id)

    def get(self, feature_id: str) -> dict | None:
        feature = self._features.get(feature_id)
        return feature.to_geojson() if feature else None

    def get_all(self) -> dict:
        return feature_collection([f.to_geojson() for f in self._features.values()])

    def update_feature(
        self,
        feature_id: str,
        geometry: dict | None = None,
        properties: dict | None = None,
    ) -> dict:
        """Replace a feature's geometry and/or merge into its properties.

        Raises:
            KeyError: ``feature_id`` is not in the working set.
        """
        feature = self._features.get(feature_id)
        if feature is None:
            raise KeyError(f"Feature not found: {feature_id}")
        if geometry is not None:
            feature.geometry = copy.deepcopy(geometry)
        if properties is not None:
            feature.properties.update(copy.deepcopy(properties))
        return feature.to_geojson()

    def delete_feature(self, feature_ids: list[str], silent: bool = False) -> None:
        deleted = []
        for feature_id in feature_ids:
            feature = self._features.pop(feature_id, None)
            if feature is not None:
                deleted.append(feature.to_geojson())
        self._selected = [fid for fid in self._selected if fid not in feature_ids]
        if deleted and not silent:
            self.fire("draw.delete", {"features": deleted})

    def delete_all(self) -> None:
        self._features.clear()
        self._selected = []

    def __len__(self) -> int:
        return len(self._features)

    # ------------------------------------------------------------------
    # Selection / display
    # ------------------------------------------------------------------

    @property
    def selected_ids(self) -> list[str]:
        return list(self._selected)

    def set_selected(self, feature_ids: list[str]) -> None:
        self._selected = [fid for fid in feature_ids if fid in self._features]

    def clear_selected(self) -> None:
        self._selected = []

    def update_ui_classes(self, **classes: str) -> None:
        self.ui_classes.update(classes)

    def display_features(self) -> list[dict]:
        """Features as the current mode wants them drawn."""
        shown: list[dict] = []
        for feature in self._features.values():
            self._mode.to_display_features(self, self._state, feature.to_geojson(), shown.append)
        return shown

    def fire(self, event_type: str, data: dict) -> None:
        self.bus.publish(event_type, data)
