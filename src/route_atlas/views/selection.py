"""Route selection state machine.

The selection is derived from a single external value (the ``route`` query
parameter) on every change. Unknown values resolve to ``Unselected``; they
are never an error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Union

from route_atlas.config import MapConfig
from route_atlas.models.catalog import Catalog
from route_atlas.models.geometry import BoundingBox
from route_atlas.views.layers import LayerManager
from route_atlas.views.surface import MapSurface, SurfaceRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unselected:
    """No route selected; every route is shown."""


@dataclass(frozen=True)
class Selected:
    """A single catalog route is focused."""

    slug: str


SelectionState = Union[Unselected, Selected]


def resolve_selection(value: str | None, catalog: Mapping[str, object]) -> SelectionState:
    """Derive the selection state from the external value.

    Args:
        value: Raw external value; None or empty means absent.
        catalog: Catalog used to validate the slug.

    Returns:
        ``Selected(value)`` if the value names a catalog route, else
        ``Unselected()``.
    """
    if not value:
        return Unselected()
    if value in catalog:
        return Selected(value)
    logger.debug("Ignoring unknown route selection %r", value)
    return Unselected()


@dataclass(frozen=True)
class SelectionView:
    """Visibility and viewport outcome of a selection state."""

    visibility: dict[str, bool] = field(default_factory=dict)
    # None means the initial center/zoom
    bounds: BoundingBox | None = None


def selection_view(state: SelectionState, catalog: Catalog) -> SelectionView:
    """Compute what the map should show for a state. Pure."""
    if isinstance(state, Selected):
        return SelectionView(
            visibility={slug: slug == state.slug for slug in catalog},
            bounds=catalog[state.slug].geometry.bounds(),
        )
    return SelectionView(visibility={slug: True for slug in catalog})


class SelectionController:
    """Applies selection changes to the registered map layers.

    Selection requests that arrive before the map is ready are kept as the
    pending value and applied once ``on_map_ready`` has registered the
    layers.
    """

    def __init__(
        self,
        surface_ref: SurfaceRef,
        catalog: Catalog,
        map_config: MapConfig | None = None,
        navigate: Callable[[str | None], None] | None = None,
    ) -> None:
        self._surface_ref = surface_ref
        self._catalog = catalog
        self._config = map_config or MapConfig()
        # Clicks update the external value; by default feed it straight back
        self._navigate = navigate or self.on_external_change
        self.layers = LayerManager(surface_ref, catalog, self.request, self._config)
        self._value: str | None = None
        self._ready = False
        self._applied: SelectionState | None = None

    @property
    def state(self) -> SelectionState:
        return resolve_selection(self._value, self._catalog)

    @property
    def ready(self) -> bool:
        return self._ready

    def request(self, slug: str | None) -> None:
        """Ask for a selection change (e.g. from a click on a route)."""
        self._navigate(slug)

    def on_external_change(self, value: str | None) -> None:
        """React to a change of the external selection value."""
        self._value = value
        if not self._ready:
            logger.debug("Map not ready; deferring selection %r", value)
            return
        self._apply(resolve_selection(value, self._catalog))

    def on_map_ready(self, surface: MapSurface) -> None:
        """Acquire the surface, register layers, and apply the pending value."""
        self._surface_ref.acquire(surface)
        self.layers.register()
        self._ready = True
        self._applied = None
        self._apply(resolve_selection(self._value, self._catalog))

    def on_map_teardown(self) -> None:
        """Tear down layers and handlers, then release the surface."""
        if not self._surface_ref.ready:
            return
        self.layers.teardown()
        self._surface_ref.release()
        self._ready = False
        self._applied = None

    def _apply(self, state: SelectionState) -> None:
        if state == self._applied:
            return

        surface = self._surface_ref.get()
        view = selection_view(state, self._catalog)
        for slug, visible in view.visibility.items():
            self.layers.set_visible(slug, visible)

        if isinstance(state, Selected):
            if view.bounds is not None:
                surface.fit_bounds(view.bounds, self._config.fit_padding)
            else:
                logger.warning("Route '%s' has no points; keeping current viewport", state.slug)
        else:
            surface.jump_to(self._config.center, self._config.zoom)

        logger.debug("Applied selection %r", state)
        self._applied = state
