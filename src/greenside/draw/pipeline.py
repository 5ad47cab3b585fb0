"""Feature Commit Pipeline — merges drawn features into the store.

For each ``draw.create`` event:

  1. ensure every feature has a properties dict
  2. apply the pending properties (they override mode defaults)
  3. give categorized layers their ``hole`` sub-tag ("" when absent)
  4. strip the drawing tool's ids
  5. clear the drawing tool's working set
  6. append to the stored collection and rewind the whole collection
  7. write the collection back under ``"map"``
  8. arm the settle timer, even if an earlier step failed

The store is written once, at step 7, or not at all.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from loguru import logger

from greenside.draw.controller import ModeController
from greenside.draw.defaults import SUBTAG_PROPERTY, is_categorized
from greenside.draw.tool import DrawTool
from greenside.errors import MalformedGeometryError
from greenside.layers.geojson import ensure_properties, feature_collection, strip_ids
from greenside.layers.rewind import rewind
from greenside.layers.store import MAP_KEY, FeatureStore


@dataclass
class CommitResult:
    """Outcome of one commit."""
    ok: bool
    features: list[dict] = field(default_factory=list)
    error: str | None = None


class FeatureCommitPipeline:
    """Turns creation events into store writes."""

    def __init__(
        self,
        store: FeatureStore,
        tool: DrawTool,
        controller: ModeController,
        store_key: str = MAP_KEY,
    ) -> None:
        self.store = store
        self.tool = tool
        self.controller = controller
        self.store_key = store_key
        self.last_result: CommitResult | None = None

    def attach(self) -> None:
        self.tool.bus.on("draw.create", self.on_create)

    def on_create(self, event: dict) -> CommitResult:
        try:
            pending = self.controller.pending_properties
            features = [self.prepare(f, pending) for f in event.get("features") or []]
            self.tool.delete_all()
            result = self.merge_features(features)
        finally:
            self.controller.schedule_settle()
        self.last_result = result
        return result

    def prepare(self, feature: dict, pending: dict | None = None) -> dict:
        """Steps 1-4 on a copy of ``feature``."""
        feature = copy.deepcopy(feature)
        properties = ensure_properties(feature)
        if pending:
            properties.update(pending)
        if is_categorized(properties.get("layer")) and properties.get(SUBTAG_PROPERTY) is None:
            properties[SUBTAG_PROPERTY] = ""
        strip_ids([feature])
        return feature

    def merge_features(self, features: list[dict]) -> CommitResult:
        """Append ``features`` to the stored collection, rewind, and write it.

        On malformed geometry the store is left untouched.
        """
        collection = self.store.get(self.store_key) or feature_collection()
        collection["features"] = list(collection.get("features") or []) + features

        try:
            collection = rewind(collection)
        except MalformedGeometryError as e:
            logger.warning(f"Rejected merge of {len(features)} feature(s): {e} (feature {e.index})")
            return CommitResult(ok=False, error=str(e))

        self.store.set({self.store_key: collection}, source=self.store_key)
        logger.info(
            f"Committed {len(features)} feature(s); "
            f"collection now {len(collection['features'])}"
        )
        return CommitResult(ok=True, features=features)
