"""Map layer management.

Registers one geometry source, one visible stroke layer and one wider,
transparent hit-target layer per catalog route, and binds hover and click
handlers on the hit-target layer as explicit subscriptions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from route_atlas.config import MapConfig
from route_atlas.errors import LayerRegistrationError
from route_atlas.models.catalog import Catalog, RouteRecord
from route_atlas.views.surface import MapSurface, SurfaceRef, Unsubscribe

logger = logging.getLogger(__name__)

SOURCE_PREFIX = "route-"


@dataclass
class LayerPair:
    """Stroke and hit-target layers of one route."""

    source_id: str
    stroke_layer_id: str
    fill_layer_id: str
    visible: bool = True

    @classmethod
    def for_slug(cls, slug: str) -> LayerPair:
        source_id = f"{SOURCE_PREFIX}{slug}"
        return cls(
            source_id=source_id,
            stroke_layer_id=f"{source_id}-line",
            fill_layer_id=f"{source_id}-hit",
        )


class LayerManager:
    """Bridges catalog entries to map surface sources and layers."""

    def __init__(
        self,
        surface_ref: SurfaceRef,
        catalog: Catalog,
        on_select: Callable[[str], None],
        map_config: MapConfig | None = None,
    ) -> None:
        self._surface_ref = surface_ref
        self._catalog = catalog
        self._on_select = on_select
        self._config = map_config or MapConfig()
        self._pairs: dict[str, LayerPair] = {}
        self._subscriptions: list[Unsubscribe] = []

    @property
    def pairs(self) -> dict[str, LayerPair]:
        return dict(self._pairs)

    def register(self) -> list[LayerPair]:
        """Register layers for every catalog route not yet registered.

        Returns:
            Newly registered pairs.

        Raises:
            LayerRegistrationError: If a layer id already exists on the surface
                without being tracked by this manager.
        """
        surface = self._surface_ref.get()
        added: list[LayerPair] = []
        for slug, record in self._catalog.items():
            if slug in self._pairs:
                continue
            pair = LayerPair.for_slug(slug)
            self._add_layers(surface, pair, record)
            self._bind(surface, slug, pair)
            self._pairs[slug] = pair
            added.append(pair)

        logger.debug("Registered %d route layer pairs", len(added))
        return added

    def _add_layers(self, surface: MapSurface, pair: LayerPair, record: RouteRecord) -> None:
        for layer_id in (pair.stroke_layer_id, pair.fill_layer_id):
            if surface.has_layer(layer_id):
                raise LayerRegistrationError(f"Layer '{layer_id}' is already registered")

        surface.add_source(pair.source_id, record.geometry.to_geojson({"slug": record.slug}))
        surface.add_layer({
            "id": pair.stroke_layer_id,
            "type": "line",
            "source": pair.source_id,
            "layout": {"visibility": "visible", "line-join": "round", "line-cap": "round"},
            "paint": {"line-color": record.metadata.color, "line-width": self._config.line_width},
        })
        surface.add_layer({
            "id": pair.fill_layer_id,
            "type": "line",
            "source": pair.source_id,
            "layout": {"visibility": "visible"},
            "paint": {
                "line-color": record.metadata.color,
                "line-opacity": 0,
                "line-width": self._config.hit_width,
            },
        })

    def _bind(self, surface: MapSurface, slug: str, pair: LayerPair) -> None:
        def on_enter(_layer_id: str) -> None:
            surface.set_cursor("pointer")
            surface.set_paint_property(pair.stroke_layer_id, "line-width", self._config.hover_width)

        def on_leave(_layer_id: str) -> None:
            surface.set_cursor("")
            surface.set_paint_property(pair.stroke_layer_id, "line-width", self._config.line_width)

        def on_click(_layer_id: str) -> None:
            self._on_select(slug)

        self._subscriptions.extend([
            surface.on("mouseenter", pair.fill_layer_id, on_enter),
            surface.on("mouseleave", pair.fill_layer_id, on_leave),
            surface.on("click", pair.fill_layer_id, on_click),
        ])

    def set_visible(self, slug: str, visible: bool) -> None:
        """Show or hide both layers of a route."""
        pair = self._pairs[slug]
        surface = self._surface_ref.get()
        value = "visible" if visible else "none"
        surface.set_layout_property(pair.stroke_layer_id, "visibility", value)
        surface.set_layout_property(pair.fill_layer_id, "visibility", value)
        pair.visible = visible

    def visibility(self) -> dict[str, bool]:
        return {slug: pair.visible for slug, pair in self._pairs.items()}

    def teardown(self) -> None:
        """Unsubscribe handlers and remove every layer and source.

        Must run while the surface is still acquired.
        """
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()

        if self._surface_ref.ready:
            surface = self._surface_ref.get()
            for pair in self._pairs.values():
                surface.remove_layer(pair.fill_layer_id)
                surface.remove_layer(pair.stroke_layer_id)
                surface.remove_source(pair.source_id)

        logger.debug("Tore down %d route layer pairs", len(self._pairs))
        self._pairs.clear()
