"""Map surface abstraction.

The map surface is an externally owned resource. ``SurfaceRef`` models its
lifetime: acquired when the map reports ready, released on teardown, and
never dereferenced in between.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from route_atlas.errors import LayerRegistrationError, SurfaceReleasedError
from route_atlas.models.geometry import BoundingBox

logger = logging.getLogger(__name__)

EventHandler = Callable[[str], None]
Unsubscribe = Callable[[], None]


class MapSurface(Protocol):
    """Primitives a map rendering surface must provide."""

    def add_source(self, source_id: str, data: dict[str, Any]) -> None: ...

    def remove_source(self, source_id: str) -> None: ...

    def add_layer(self, layer: dict[str, Any]) -> None: ...

    def remove_layer(self, layer_id: str) -> None: ...

    def has_layer(self, layer_id: str) -> bool: ...

    def set_layout_property(self, layer_id: str, name: str, value: Any) -> None: ...

    def set_paint_property(self, layer_id: str, name: str, value: Any) -> None: ...

    def on(self, event: str, layer_id: str, handler: EventHandler) -> Unsubscribe: ...

    def set_cursor(self, cursor: str) -> None: ...

    def fit_bounds(self, bounds: BoundingBox, padding: int) -> None: ...

    def jump_to(self, center: tuple[float, float], zoom: float) -> None: ...


class SurfaceRef:
    """Owned handle on the current map surface."""

    def __init__(self) -> None:
        self._surface: MapSurface | None = None

    @property
    def ready(self) -> bool:
        return self._surface is not None

    def acquire(self, surface: MapSurface) -> None:
        if self._surface is not None and self._surface is not surface:
            raise SurfaceReleasedError("A map surface is already acquired; release it first")
        self._surface = surface
        logger.debug("Map surface acquired")

    def release(self) -> None:
        self._surface = None
        logger.debug("Map surface released")

    def get(self) -> MapSurface:
        if self._surface is None:
            raise SurfaceReleasedError("Map surface is not available")
        return self._surface


@dataclass
class Viewport:
    """Last viewport command applied to a RecordingSurface."""

    center: tuple[float, float] | None = None
    zoom: float | None = None
    bounds: BoundingBox | None = None
    padding: int = 0


@dataclass
class RecordingSurface:
    """In-process map surface that keeps its state and a command log.

    Used for server-side rendering of a selection and in tests. Events can be
    dispatched with ``fire``.
    """

    sources: dict[str, dict[str, Any]] = field(default_factory=dict)
    layers: dict[str, dict[str, Any]] = field(default_factory=dict)
    viewport: Viewport = field(default_factory=Viewport)
    cursor: str = ""
    commands: list[tuple[Any, ...]] = field(default_factory=list)
    _handlers: dict[tuple[str, str], list[EventHandler]] = field(default_factory=dict)

    def add_source(self, source_id: str, data: dict[str, Any]) -> None:
        if source_id in self.sources:
            raise LayerRegistrationError(f"Source '{source_id}' already exists")
        self.sources[source_id] = data
        self.commands.append(("add_source", source_id))

    def remove_source(self, source_id: str) -> None:
        if any(layer["source"] == source_id for layer in self.layers.values()):
            raise LayerRegistrationError(f"Source '{source_id}' is still in use")
        self.sources.pop(source_id, None)
        self.commands.append(("remove_source", source_id))

    def add_layer(self, layer: dict[str, Any]) -> None:
        layer_id = layer["id"]
        if layer_id in self.layers:
            raise LayerRegistrationError(f"Layer '{layer_id}' already exists")
        if layer["source"] not in self.sources:
            raise LayerRegistrationError(f"Layer '{layer_id}' references missing source")
        self.layers[layer_id] = {
            "id": layer_id,
            "type": layer.get("type", "line"),
            "source": layer["source"],
            "paint": dict(layer.get("paint", {})),
            "layout": dict(layer.get("layout", {})),
        }
        self.commands.append(("add_layer", layer_id))

    def remove_layer(self, layer_id: str) -> None:
        self.layers.pop(layer_id, None)
        self.commands.append(("remove_layer", layer_id))

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self.layers

    def set_layout_property(self, layer_id: str, name: str, value: Any) -> None:
        self.layers[layer_id]["layout"][name] = value
        self.commands.append(("set_layout_property", layer_id, name, value))

    def set_paint_property(self, layer_id: str, name: str, value: Any) -> None:
        self.layers[layer_id]["paint"][name] = value
        self.commands.append(("set_paint_property", layer_id, name, value))

    def on(self, event: str, layer_id: str, handler: EventHandler) -> Unsubscribe:
        key = (event, layer_id)
        self._handlers.setdefault(key, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(key, [])
            if handler in handlers:
                handlers.remove(handler)
            if not handlers:
                self._handlers.pop(key, None)

        return unsubscribe

    def set_cursor(self, cursor: str) -> None:
        self.cursor = cursor

    def fit_bounds(self, bounds: BoundingBox, padding: int) -> None:
        self.viewport = Viewport(bounds=bounds, padding=padding)
        self.commands.append(("fit_bounds", bounds, padding))

    def jump_to(self, center: tuple[float, float], zoom: float) -> None:
        self.viewport = Viewport(center=center, zoom=zoom)
        self.commands.append(("jump_to", center, zoom))

    def fire(self, event: str, layer_id: str) -> None:
        """Dispatch a pointer event to handlers bound on a layer."""
        for handler in list(self._handlers.get((event, layer_id), [])):
            handler(layer_id)

    def handler_count(self) -> int:
        return sum(len(handlers) for handlers in self._handlers.values())

    def is_visible(self, layer_id: str) -> bool:
        return self.layers[layer_id]["layout"].get("visibility", "visible") == "visible"
