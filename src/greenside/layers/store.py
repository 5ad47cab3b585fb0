"""FeatureStore — the editor's key/value data model.

The authoritative FeatureCollection lives under the ``"map"`` key. Every
``set`` publishes ``change`` plus ``change.<key>`` for each key written, with
payload ``{"obj": <written mapping>, "source": <tag>}``.

Reads return deep copies so no caller can mutate stored state without
going through ``set``.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from loguru import logger

from greenside.comms.event_bus import EventBus, Handler
from greenside.layers.geojson import feature_collection, parse_geojson

MAP_KEY = "map"


class FeatureStore:
    """Dict-backed store with change notification and optional file persistence."""

    def __init__(
        self,
        bus: EventBus | None = None,
        path: str | Path | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            bus: Event bus for change notifications (a private one if omitted).
            path: Optional GeoJSON file. Loaded now if it exists, and
                rewritten whenever ``"map"`` changes.
        """
        self.bus = bus or EventBus()
        self._data: dict[str, Any] = {MAP_KEY: feature_collection()}
        self._path = Path(path).expanduser() if path else None
        if self._path is not None and self._path.exists():
            self.load_file(self._path)

    def get(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self._data.get(key, default))

    def set(self, partial: dict[str, Any], source: str | None = None) -> None:
        """Shallow-merge ``partial`` into the store and notify subscribers."""
        written = copy.deepcopy(partial)
        self._data.update(written)

        if self._path is not None and MAP_KEY in written:
            self.save_file(self._path)

        payload = {"obj": written, "source": source}
        self.bus.publish("change", payload)
        for key in written:
            self.bus.publish(f"change.{key}", payload)

    def has_features(self) -> bool:
        collection = self._data.get(MAP_KEY) or {}
        return bool(collection.get("features"))

    def on(self, event_type: str, handler: Handler) -> None:
        self.bus.on(event_type, handler)

    def off(self, event_type: str, handler: Handler | None = None) -> None:
        self.bus.off(event_type, handler)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load_file(self, path: str | Path) -> int:
        """Replace ``"map"`` with the collection read from ``path``.

        Returns:
            Number of features loaded.
        """
        with open(path, "r", encoding="utf-8") as f:
            collection = parse_geojson(f.read())
        self._data[MAP_KEY] = collection
        count = len(collection["features"])
        logger.info(f"Loaded {count} features from {path}")
        return count

    def save_file(self, path: str | Path | None = None) -> None:
        target = Path(path) if path else self._path
        if target is None:
            raise ValueError("No path configured for FeatureStore.save_file")
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(self._data.get(MAP_KEY) or feature_collection(), f, indent=2)
        logger.debug(f"Saved map to {target}")
