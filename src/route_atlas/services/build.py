"""Build orchestration for route-atlas.

Runs ingestion, enrichment and catalog assembly once, then writes the
static site.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from route_atlas.config import Config, ensure_output_dir
from route_atlas.models.catalog import (
    Catalog,
    build_catalog,
    load_geometries,
    metadata_from_config,
)
from route_atlas.views.map import build_site

logger = logging.getLogger("route_atlas.build")


@dataclass
class BuildResult:
    """Catalog plus the original file behind each route."""

    catalog: Catalog
    sources: dict[str, Path] = field(default_factory=dict)


class BuildService:
    """Service for building the route catalog and site."""

    def __init__(self, config: Config) -> None:
        """Initialize the build service.

        Args:
            config: Application configuration.
        """
        self.config = config

    def load_catalog(self, workers: int | None = None) -> BuildResult:
        """Run the track pipeline and assemble the catalog.

        Args:
            workers: Thread count for parsing; defaults to the configured value.

        Returns:
            BuildResult with the catalog and source paths.
        """
        tracks_dir = self.config.data.tracks_dir
        logger.info("Loading tracks from %s", tracks_dir)

        loaded = load_geometries(tracks_dir, workers or self.config.data.workers)
        catalog = build_catalog(
            ((slug, geometry) for slug, geometry, _path in loaded),
            metadata_from_config(self.config.routes),
        )
        sources = {slug: path for slug, _geometry, path in loaded if slug in catalog}
        return BuildResult(catalog=catalog, sources=sources)

    def build(self, output_dir: Path | None = None, workers: int | None = None) -> dict[str, Any]:
        """Build the static site.

        Args:
            output_dir: Destination; defaults to the configured output directory.
            workers: Thread count for parsing.

        Returns:
            Summary dictionary from ``build_site``.
        """
        if output_dir is not None:
            self.config.data.output_dir = output_dir
        destination = ensure_output_dir(self.config)

        result = self.load_catalog(workers)
        return build_site(result.catalog, result.sources, destination, self.config.map)
