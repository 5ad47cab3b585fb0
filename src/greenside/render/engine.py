"""Map engine interface and an in-memory implementation.

The real map renderer lives in the browser. ``InMemoryMapEngine`` records
sources, layers, layout properties and the viewport so the service can
report them and tests can assert on them.
"""

from __future__ import annotations

import copy
from typing import Protocol


class MapEngine(Protocol):
    def get_source(self, source_id: str) -> dict | None: ...
    def add_source(self, source_id: str, spec: dict) -> None: ...
    def get_layer(self, layer_id: str) -> dict | None: ...
    def add_layer(self, spec: dict) -> None: ...
    def set_source_data(self, source_id: str, data: dict) -> None: ...
    def set_layout_property(self, layer_id: str, name: str, value) -> None: ...
    def get_center(self) -> tuple[float, float]: ...
    def get_zoom(self) -> float: ...
    def ease_to(self, center: tuple[float, float], zoom: float) -> None: ...


class InMemoryMapEngine:
    """Records map state instead of drawing it."""

    def __init__(self, center: tuple[float, float] = (20.0, 0.0), zoom: float = 2.0) -> None:
        self.sources: dict[str, dict] = {}
        self.layers: dict[str, dict] = {}
        self.center = center
        self.zoom = zoom

    def get_source(self, source_id: str) -> dict | None:
        return self.sources.get(source_id)

    def add_source(self, source_id: str, spec: dict) -> None:
        if source_id in self.sources:
            raise ValueError(f"Source already exists: {source_id}")
        self.sources[source_id] = copy.deepcopy(spec)

    def get_layer(self, layer_id: str) -> dict | None:
        return self.layers.get(layer_id)

    def add_layer(self, spec: dict) -> None:
        layer_id = spec["id"]
        if layer_id in self.layers:
            raise ValueError(f"Layer already exists: {layer_id}")
        if spec.get("source") not in self.sources:
            raise ValueError(f"Layer {layer_id} references missing source {spec.get('source')}")
        layer = copy.deepcopy(spec)
        layer.setdefault("layout", {})
        self.layers[layer_id] = layer

    def set_source_data(self, source_id: str, data: dict) -> None:
        source = self.sources.get(source_id)
        if source is None:
            raise KeyError(f"Source not found: {source_id}")
        source["data"] = copy.deepcopy(data)

    def set_layout_property(self, layer_id: str, name: str, value) -> None:
        layer = self.layers.get(layer_id)
        if layer is None:
            raise KeyError(f"Layer not found: {layer_id}")
        layer["layout"][name] = value

    def get_center(self) -> tuple[float, float]:
        return self.center

    def get_zoom(self) -> float:
        return self.zoom

    def ease_to(self, center: tuple[float, float], zoom: float) -> None:
        self.center = (center[0], center[1])
        self.zoom = zoom
