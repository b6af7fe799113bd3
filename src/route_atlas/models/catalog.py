"""Route catalog assembly.

Joins enriched geometry with authored metadata into an immutable,
slug-ordered catalog. Routes missing either half are dropped with a
warning; duplicate slugs abort the build.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from route_atlas.config import DEFAULT_ROUTE_COLOR
from route_atlas.errors import DuplicateSlugError, MissingCounterpartWarning
from route_atlas.lib.paths import iter_track_files
from route_atlas.models.geometry import RouteGeometry, enrich
from route_atlas.models.track import load_track

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteMetadata:
    """Authored description of a route."""

    slug: str
    description: str = ""
    rating: int = 0
    location: str = ""
    color: str = DEFAULT_ROUTE_COLOR
    name: str = ""

    @property
    def title(self) -> str:
        return self.name or self.slug.replace("-", " ").replace("_", " ").title()

    @classmethod
    def from_dict(cls, slug: str, data: dict[str, Any]) -> RouteMetadata:
        """Create metadata from a ``[routes.<slug>]`` table.

        Args:
            slug: Route slug (table key).
            data: Table contents.

        Returns:
            RouteMetadata instance.
        """
        return cls(
            slug=slug.lower(),
            description=str(data.get("description", "")),
            rating=int(data.get("rating", 0)),
            location=str(data.get("location", "")),
            color=str(data.get("color", DEFAULT_ROUTE_COLOR)),
            name=str(data.get("name", "")),
        )


@dataclass(frozen=True)
class RouteRecord:
    """One displayable route: geometry plus metadata."""

    slug: str
    geometry: RouteGeometry
    metadata: RouteMetadata

    def summary(self) -> dict[str, Any]:
        """Return a JSON-serializable summary (without geometry)."""
        return {
            "slug": self.slug,
            "name": self.metadata.title,
            "description": self.metadata.description,
            "rating": self.metadata.rating,
            "location": self.metadata.location,
            "color": self.metadata.color,
            "distance_km": round(self.geometry.distance_km, 2),
            "elevation_gain_m": round(self.geometry.elevation_gain_m),
            "points": len(self.geometry.points),
        }


class Catalog(Mapping[str, RouteRecord]):
    """Read-only, ordered mapping of slug to RouteRecord."""

    def __init__(self, records: Iterable[RouteRecord] = ()) -> None:
        entries: dict[str, RouteRecord] = {}
        for record in records:
            if record.slug in entries:
                raise DuplicateSlugError(record.slug)
            entries[record.slug] = record
        self._entries = MappingProxyType(entries)

    def __getitem__(self, slug: str) -> RouteRecord:
        return self._entries[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Catalog({list(self._entries)!r})"


def metadata_from_config(routes: Mapping[str, Mapping[str, Any]]) -> list[RouteMetadata]:
    """Convert configured ``[routes.<slug>]`` tables to RouteMetadata."""
    return [RouteMetadata.from_dict(slug, dict(data)) for slug, data in routes.items()]


def build_catalog(
    geometries: Iterable[tuple[str, RouteGeometry]],
    metadata: Iterable[RouteMetadata],
) -> Catalog:
    """Join geometry and metadata into a catalog.

    Args:
        geometries: (slug, geometry) pairs from enrichment.
        metadata: Authored metadata entries.

    Returns:
        Catalog ordered by slug.

    Raises:
        DuplicateSlugError: If a slug appears twice on either side.
    """
    geometry_by_slug: dict[str, RouteGeometry] = {}
    for slug, geometry in geometries:
        if slug in geometry_by_slug:
            raise DuplicateSlugError(slug)
        geometry_by_slug[slug] = geometry

    metadata_by_slug: dict[str, RouteMetadata] = {}
    for entry in metadata:
        if entry.slug in metadata_by_slug:
            raise DuplicateSlugError(entry.slug)
        metadata_by_slug[entry.slug] = entry

    for slug in sorted(geometry_by_slug.keys() - metadata_by_slug.keys()):
        warnings.warn(
            f"Route '{slug}' has a track but no metadata; skipping",
            MissingCounterpartWarning,
            stacklevel=2,
        )
    for slug in sorted(metadata_by_slug.keys() - geometry_by_slug.keys()):
        warnings.warn(
            f"Route '{slug}' has metadata but no track; skipping",
            MissingCounterpartWarning,
            stacklevel=2,
        )

    records = [
        RouteRecord(slug=slug, geometry=geometry_by_slug[slug], metadata=metadata_by_slug[slug])
        for slug in sorted(geometry_by_slug.keys() & metadata_by_slug.keys())
    ]
    logger.info("Catalog built with %d routes", len(records))
    return Catalog(records)


def _load_one(path: Path) -> tuple[str, RouteGeometry, Path]:
    slug, track = load_track(path)
    return slug, enrich(track), path


def load_geometries(
    tracks_dir: Path,
    workers: int = 1,
) -> list[tuple[str, RouteGeometry, Path]]:
    """Parse and enrich every track file in a directory.

    Args:
        tracks_dir: Directory holding one GPX file per route.
        workers: Number of threads; 1 processes files sequentially.

    Returns:
        (slug, geometry, source path) tuples sorted by slug.

    Raises:
        ParseError: If any file is malformed.
        DuplicateSlugError: If two files normalize to the same slug.
    """
    paths = list(iter_track_files(tracks_dir))
    logger.debug("Found %d track files in %s", len(paths), tracks_dir)

    if workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(_load_one, paths))
    else:
        results = [_load_one(path) for path in paths]

    seen: dict[str, Path] = {}
    for slug, _geometry, path in results:
        if slug in seen:
            raise DuplicateSlugError(slug, [seen[slug].name, path.name])
        seen[slug] = path

    results.sort(key=lambda r: r[0])
    return results
