"""Synchronous pub/sub for editor events.

Carries store change notifications (``change``, ``change.<key>``) and the
drawing tool's events (``draw.create``, ``draw.delete``, ``draw.modechange``).
Handlers run on the caller's thread, in registration order, before
``publish`` returns.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

Handler = Callable[[dict], Any]


class EventBus:
    """Named-event dispatcher with synchronous delivery."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[str, list[Handler]] = {}

    def on(self, event_type: str, handler: Handler) -> None:
        """Register ``handler`` for ``event_type``. Duplicate registrations are ignored."""
        with self._lock:
            handlers = self._handlers.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)

    def off(self, event_type: str, handler: Handler | None = None) -> None:
        """Remove one handler, or every handler of ``event_type`` when none is given."""
        with self._lock:
            if handler is None:
                self._handlers.pop(event_type, None)
                return
            try:
                self._handlers.get(event_type, []).remove(handler)
            except ValueError:
                pass

    def publish(self, event_type: str, data: dict | None = None) -> int:
        """Deliver ``data`` to every handler of ``event_type``.

        Returns:
            Number of handlers called.
        """
        with self._lock:
            handlers = list(self._handlers.get(event_type, ()))
        payload = data if data is not None else {}
        for handler in handlers:
            handler(payload)
        return len(handlers)

    def handler_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, ()))
