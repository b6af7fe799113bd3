"""Path helpers for track inputs and the generated site layout."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path, PurePath

TRACK_SUFFIX = ".gpx"
TRACKS_SUBDIR = "tracks"
INDEX_NAME = "index.html"
ROUTES_JSON_NAME = "routes.json"


def slug_from_filename(filename: str | PurePath) -> str:
    """Derive a route slug from a track filename.

    The slug is the base name with its extension stripped, lowercased.

    Args:
        filename: File name or path.

    Returns:
        Route slug.
    """
    return PurePath(filename).stem.lower()


def iter_track_files(tracks_dir: Path) -> Iterator[Path]:
    """Iterate over track files in a directory, in file name order.

    Args:
        tracks_dir: Directory holding one track file per route.

    Yields:
        Paths of ``*.gpx`` files (case-insensitive suffix).
    """
    if not tracks_dir.exists():
        return

    for path in sorted(tracks_dir.iterdir()):
        if path.is_file() and path.suffix.lower() == TRACK_SUFFIX:
            yield path


def get_download_path(output_dir: Path, slug: str) -> Path:
    """Get path of the downloadable raw track for a route."""
    return output_dir / TRACKS_SUBDIR / f"{slug}{TRACK_SUFFIX}"


def get_download_url(slug: str) -> str:
    """Get site-relative URL of the downloadable raw track for a route."""
    return f"{TRACKS_SUBDIR}/{slug}{TRACK_SUFFIX}"


def get_index_path(output_dir: Path) -> Path:
    """Get path to the generated map page."""
    return output_dir / INDEX_NAME


def get_routes_json_path(output_dir: Path) -> Path:
    """Get path to the generated catalog data file."""
    return output_dir / ROUTES_JSON_NAME
