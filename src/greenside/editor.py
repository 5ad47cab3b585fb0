"""MapEditor — wires the store, drawing tool, controller, pipeline, edit
session and render sync into one editor instance.

Data flow:
  input -> ModeController -> DrawTool (mode) -> draw.create
        -> FeatureCommitPipeline -> FeatureStore -> RenderSync -> MapEngine

The edit session bypasses the pipeline and writes the store once, on save.
"""

from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger

from greenside.comms.event_bus import EventBus
from greenside.draw.bindings import ADD_HEAD_ACTION, KEY_MODES, TRASH_KEYS, find_button
from greenside.draw.controller import SETTLE_DELAY, ModeController
from greenside.draw.defaults import IRRIGATION_HEAD_LAYER
from greenside.draw.modes import build_modes
from greenside.draw.pipeline import CommitResult, FeatureCommitPipeline
from greenside.draw.scheduler import LoopScheduler, Scheduler
from greenside.draw.session import EditSessionManager
from greenside.draw.tool import DrawTool
from greenside.geo.geolocation import (
    GEOLOCATION_TIMEOUT,
    NullPositionSource,
    Position,
    PositionSource,
    acquire_position,
)
from greenside.layers.store import MAP_KEY, FeatureStore
from greenside.render.engine import InMemoryMapEngine, MapEngine
from greenside.render.sync import RenderSync

HEAD_ZOOM = 18.0


def head_feature(position: Position, from_device: bool, now: datetime | None = None) -> dict:
    """Point feature for a sprinkler head placed at ``position``."""
    now = now or datetime.now(timezone.utc)
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [position.lng, position.lat]},
        "properties": {
            "layer": IRRIGATION_HEAD_LAYER,
            "source": "gps" if from_device else "manual_fallback",
            "accuracy_m": round(position.accuracy or 0) if from_device else None,
            "createdUtc": now.isoformat(),
        },
    }


class MapEditor:
    """One editable (or read-only) map."""

    def __init__(
        self,
        readonly: bool = False,
        store: FeatureStore | None = None,
        map_engine: MapEngine | None = None,
        scheduler: Scheduler | None = None,
        position_source: PositionSource | None = None,
        settle_delay: float = SETTLE_DELAY,
        basemap: str | None = None,
        geolocation_timeout: float = GEOLOCATION_TIMEOUT,
        geolocation_high_accuracy: bool = True,
        geolocation_maximum_age: float = 0.0,
    ) -> None:
        self.store = store or FeatureStore(EventBus())
        self.bus = self.store.bus
        self.map = map_engine or InMemoryMapEngine()
        self.tool = DrawTool(build_modes(), bus=self.bus)
        self.controller = ModeController(
            self.tool,
            scheduler or LoopScheduler(),
            writable=not readonly,
            settle_delay=settle_delay,
        )
        self.pipeline = FeatureCommitPipeline(self.store, self.tool, self.controller)
        self.render = RenderSync(self.map, self.store, basemap=basemap)
        self.session = EditSessionManager(self.store, self.tool, self.controller, self.render)
        self.position_source = position_source or NullPositionSource()
        self.geolocation_timeout = geolocation_timeout
        self.geolocation_high_accuracy = geolocation_high_accuracy
        self.geolocation_maximum_age = geolocation_maximum_age

        self.pipeline.attach()
        self.render.attach()
        logger.info(f"Map editor ready ({'read-only' if readonly else 'writable'})")

    # ------------------------------------------------------------------
    # Input routing
    # ------------------------------------------------------------------

    def trigger(self, mode_id: str, properties: dict | None = None) -> bool:
        return self.controller.trigger(mode_id, properties)

    def press_key(self, key: str) -> bool:
        """Route a keyboard shortcut. Returns whether it did anything."""
        if key in TRASH_KEYS:
            return self.session.trash()
        mode_id = KEY_MODES.get(key.lower()) if len(key) == 1 else None
        if mode_id is None:
            return False
        return self.controller.trigger(mode_id)

    def click_button(self, title: str) -> bool:
        """Route a toolbar button by title. The GPS action is async; see ``add_head_at_gps``.

        Raises:
            KeyError: No button has that title.
        """
        button = find_button(title)
        if button is None:
            raise KeyError(f"No toolbar button titled {title!r}")
        if button.action == ADD_HEAD_ACTION:
            raise ValueError(f"{title!r} is asynchronous; await add_head_at_gps()")
        return self.controller.trigger(button.mode, button.properties or None)

    def click(self, lng: float, lat: float) -> None:
        self.tool.click(lng, lat)

    def finish(self) -> None:
        self.tool.finish()

    def trash(self) -> None:
        """Trash in the current mode: abandon a drawing or delete the selection."""
        self.tool.trash()

    # ------------------------------------------------------------------
    # Edit session
    # ------------------------------------------------------------------

    def enter_edit(self) -> bool:
        return self.session.enter()

    def save_edit(self) -> bool:
        return self.session.save()

    def cancel_edit(self) -> bool:
        return self.session.cancel()

    # ------------------------------------------------------------------
    # Map lifecycle
    # ------------------------------------------------------------------

    def on_style_load(self) -> None:
        self.render.on_style_load()

    def on_idle(self) -> bool:
        return self.render.on_idle()

    def feature_clicked(self, from_canvas: bool = True) -> bool:
        return self.controller.handle_feature_click(from_canvas)

    # ------------------------------------------------------------------
    # Irrigation heads
    # ------------------------------------------------------------------

    async def add_head_at_gps(self) -> CommitResult | None:
        """Drop a sprinkler head at the device position (or the viewport center).

        Returns None without acquiring a position when read-only or editing,
        and None without writing when an edit session began during the wait.
        """
        if not self.controller.writable or self.controller.editing:
            return None

        position, from_device = await acquire_position(
            self.position_source,
            fallback=self.map.get_center(),
            enable_high_accuracy=self.geolocation_high_accuracy,
            timeout=self.geolocation_timeout,
            maximum_age=self.geolocation_maximum_age,
        )
        # An edit session may have started while the position was pending.
        if not self.controller.writable or self.controller.editing:
            logger.warning("Sprinkler head dropped: edit session started during geolocation")
            return None
        result = self.pipeline.merge_features([head_feature(position, from_device)])
        if result.ok:
            self.map.ease_to((position.lng, position.lat), max(self.map.get_zoom(), HEAD_ZOOM))
        return result

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def snapshot(self) -> dict:
        collection = self.store.get(MAP_KEY) or {}
        return {
            "mode": self.controller.mode.value,
            "draw_mode": self.tool.get_mode(),
            "writable": self.controller.writable,
            "drawing": self.controller.drawing,
            "editing": self.controller.editing,
            "pending_properties": self.controller.pending_properties,
            "feature_count": len(collection.get("features") or []),
            "overlay_count": len(self.tool),
            "selected_ids": self.tool.selected_ids,
            "edit_control_visible": self.render.edit_control_visible,
        }
