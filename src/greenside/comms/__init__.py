"""In-process event dispatch shared by the store and the drawing tool."""

from greenside.comms.event_bus import EventBus

__all__ = ["EventBus"]
