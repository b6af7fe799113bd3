"""Track ingestion.

Parses raw GPX content into an ordered, immutable sequence of points.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import gpxpy
import gpxpy.gpx

from route_atlas.errors import ParseError
from route_atlas.lib.paths import slug_from_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackPoint:
    """A single recorded position."""

    longitude: float
    latitude: float
    elevation: float | None
    index: int

    def to_coord(self) -> list[float]:
        """Return a GeoJSON position (longitude, latitude[, elevation])."""
        if self.elevation is None:
            return [self.longitude, self.latitude]
        return [self.longitude, self.latitude, self.elevation]


# Points in file order
Track = tuple[TrackPoint, ...]


def _iter_gpx_points(gpx: gpxpy.gpx.GPX) -> list[Any]:
    """Collect raw points from a parsed GPX document.

    Track points win; route points are used when a file has no tracks and
    waypoints only as a last resort.
    """
    points = [
        point
        for track in gpx.tracks
        for segment in track.segments
        for point in segment.points
    ]
    if points:
        return points

    points = [point for route in gpx.routes for point in route.points]
    if points:
        return points

    return list(gpx.waypoints)


def parse_track(content: bytes, filename: str | Path) -> tuple[str, Track]:
    """Parse raw track file content.

    Args:
        content: Raw file bytes.
        filename: Name of the file, used for the slug and error messages.

    Returns:
        Tuple of (slug, track).

    Raises:
        ParseError: If the content cannot be decoded as coordinate data.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(filename, f"not valid UTF-8 ({e.reason})") from e

    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        raise ParseError(filename, f"not well-formed XML ({e})") from e

    # gpxpy accepts any root element; KML or HTML would parse as an empty GPX
    root_name = root.tag.rsplit("}", 1)[-1]
    if root_name != "gpx":
        raise ParseError(filename, f"root element is <{root_name}>, expected <gpx>")

    try:
        gpx = gpxpy.parse(text)
    except (gpxpy.gpx.GPXException, ValueError) as e:
        raise ParseError(filename, str(e) or type(e).__name__) from e

    track: list[TrackPoint] = []
    for index, point in enumerate(_iter_gpx_points(gpx)):
        if point.longitude is None or point.latitude is None:
            raise ParseError(filename, f"point {index} has no coordinates")
        elevation = float(point.elevation) if point.elevation is not None else None
        track.append(
            TrackPoint(
                longitude=float(point.longitude),
                latitude=float(point.latitude),
                elevation=elevation,
                index=index,
            )
        )

    slug = slug_from_filename(filename)
    logger.debug("Parsed %d points from %s (slug %s)", len(track), filename, slug)
    return slug, tuple(track)


def load_track(path: Path) -> tuple[str, Track]:
    """Read a track file from disk and parse it.

    Args:
        path: Path to a GPX file.

    Returns:
        Tuple of (slug, track).
    """
    return parse_track(path.read_bytes(), path.name)
