"""Mode Controller — the editor's global draw state.

States:
  BROWSING      -> no draw mode active, no edit session
  DRAWING       -> a draw mode was triggered; cleared after the settle delay
  EDIT_SESSION  -> the whole collection is loaded into the drawing tool

Flags:
  writable   fixed at construction
  drawing    set by ``trigger``, cleared by the settle timer
  editing    set/cleared by the edit session manager

While ``editing`` is set, ``trigger`` is a no-op: a draw can never start
inside an edit session.

The settle timer is a cancellable handle. Each new trigger cancels it, and
each commit (or abandoned draw) re-arms it, so a second draw started inside
the window is never reset by the first draw's timer.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger

from greenside.draw.defaults import mode_id_for
from greenside.draw.modes import is_draw_mode
from greenside.draw.scheduler import Cancellable, Scheduler
from greenside.draw.tool import DrawTool
from greenside.errors import UnknownModeError

SETTLE_DELAY = 0.5  # seconds


class EditorMode(str, Enum):
    BROWSING = "browsing"
    DRAWING = "drawing"
    EDIT_SESSION = "edit_session"


class ModeController:
    """Owns ``writable``/``drawing``/``editing`` and the pending-properties buffer."""

    def __init__(
        self,
        tool: DrawTool,
        scheduler: Scheduler,
        writable: bool = True,
        settle_delay: float = SETTLE_DELAY,
    ) -> None:
        self.tool = tool
        self.scheduler = scheduler
        self.settle_delay = settle_delay
        self._writable = bool(writable)
        self._drawing = False
        self._editing = False
        self._pending: dict | None = None
        self._settle_handle: Cancellable | None = None

        tool.bus.on("draw.modechange", self._on_mode_change)

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    @property
    def writable(self) -> bool:
        return self._writable

    @property
    def drawing(self) -> bool:
        return self._drawing

    @property
    def editing(self) -> bool:
        return self._editing

    @property
    def pending_properties(self) -> dict | None:
        return dict(self._pending) if self._pending is not None else None

    @property
    def mode(self) -> EditorMode:
        if self._editing:
            return EditorMode.EDIT_SESSION
        if self._drawing:
            return EditorMode.DRAWING
        return EditorMode.BROWSING

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def trigger(self, mode_id: str, extra_props: dict | None = None) -> bool:
        """Switch the drawing tool to ``mode_id``.

        Short ids are accepted (``green`` for ``draw_green``). For draw modes,
        ``extra_props`` become the pending properties applied to the next
        created feature(s) and ``drawing`` is set. Any other mode only
        switches the tool; leaving a draw mode that way arms the settle
        timer as usual. Returns False, changing nothing, when the editor is
        read-only or in an edit session.

        Raises:
            UnknownModeError: ``mode_id`` is not a registered mode.
        """
        if not self.tool.has_mode(mode_id) and self.tool.has_mode(mode_id_for(mode_id)):
            mode_id = mode_id_for(mode_id)
        if not self.tool.has_mode(mode_id):
            raise UnknownModeError(f"Unknown draw mode: {mode_id}")
        if not self._writable:
            logger.debug(f"Ignoring {mode_id}: editor is read-only")
            return False
        if self._editing:
            logger.debug(f"Ignoring {mode_id}: edit session active")
            return False

        # Stopping the previous mode may commit its feature with the old
        # pending properties, so the buffer is replaced only afterwards.
        self.tool.change_mode(mode_id)
        if not is_draw_mode(mode_id):
            return True
        self._cancel_settle()
        self._drawing = True
        self._pending = dict(extra_props) if extra_props else None
        return True

    def begin_edit(self) -> bool:
        if not self._writable or self._editing:
            return False
        self._cancel_settle()
        self._drawing = False
        self._pending = None
        self._editing = True
        return True

    def end_edit(self) -> bool:
        if not self._editing:
            return False
        self._editing = False
        return True

    def schedule_settle(self) -> None:
        """(Re)arm the timer that clears ``drawing`` and the pending properties."""
        self._cancel_settle()
        self._settle_handle = self.scheduler.call_later(self.settle_delay, self._settle)

    def handle_feature_click(self, from_canvas: bool = True) -> bool:
        """Whether a click on a stored feature should open its popup."""
        if not from_canvas:
            return False
        return not self._drawing

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _settle(self) -> None:
        self._settle_handle = None
        self._drawing = False
        self._pending = None
        logger.debug("Draw settled")

    def _cancel_settle(self) -> None:
        if self._settle_handle is not None:
            self._settle_handle.cancel()
            self._settle_handle = None

    def _on_mode_change(self, event: dict) -> None:
        # Leaving a draw mode without starting another ends the drawing,
        # whether or not a feature came out of it.
        if self._drawing and is_draw_mode(event.get("previous")) and not is_draw_mode(event.get("mode")):
            self.schedule_settle()
