"""Static feature layer rendering: map engine interface and store sync."""

from greenside.render.engine import InMemoryMapEngine, MapEngine
from greenside.render.sync import RenderSync

__all__ = ["InMemoryMapEngine", "MapEngine", "RenderSync"]
