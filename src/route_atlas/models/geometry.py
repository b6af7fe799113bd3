"""Geometry enrichment.

Derives distance and elevation gain from a track and keeps the point
sequence for bounding-box and map-source computations.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import gpxpy.geo

from route_atlas.models.track import Track, TrackPoint


def haversine_km(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Great-circle distance between two positions in kilometers."""
    return gpxpy.geo.haversine_distance(lat1, lon1, lat2, lon2) / 1000.0


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in longitude/latitude."""

    west: float
    south: float
    east: float
    north: float

    @classmethod
    def from_points(cls, points: Iterable[TrackPoint]) -> BoundingBox | None:
        """Build the box seeded by the first point and extended by the rest.

        Returns:
            BoundingBox, or None for an empty sequence.
        """
        iterator = iter(points)
        first = next(iterator, None)
        if first is None:
            return None

        west = east = first.longitude
        south = north = first.latitude
        for point in iterator:
            west = min(west, point.longitude)
            east = max(east, point.longitude)
            south = min(south, point.latitude)
            north = max(north, point.latitude)

        return cls(west=west, south=south, east=east, north=north)

    def to_list(self) -> list[list[float]]:
        """Return ``[[west, south], [east, north]]``."""
        return [[self.west, self.south], [self.east, self.north]]


@dataclass(frozen=True)
class RouteGeometry:
    """Derived statistics plus the retained point sequence."""

    distance_km: float
    elevation_gain_m: float
    points: Track

    def bounds(self) -> BoundingBox | None:
        return BoundingBox.from_points(self.points)

    def to_geojson(self, properties: dict[str, Any] | None = None) -> dict[str, Any]:
        """Return a GeoJSON LineString feature for the map source."""
        return {
            "type": "Feature",
            "properties": properties or {},
            "geometry": {
                "type": "LineString",
                "coordinates": [p.to_coord() for p in self.points],
            },
        }


def _check_track(track: Track) -> None:
    if not isinstance(track, (tuple, list)):
        raise TypeError(f"Expected a sequence of TrackPoint, got {type(track).__name__}")
    for point in track:
        if not isinstance(point, TrackPoint):
            raise TypeError(f"Expected TrackPoint, got {type(point).__name__}")


def total_distance_km(track: Track) -> float:
    """Sum of great-circle distances between consecutive points."""
    return sum(
        haversine_km(a.longitude, a.latitude, b.longitude, b.latitude)
        for a, b in zip(track, track[1:])
    )


def elevation_gain_m(track: Track) -> float:
    """Sum of positive elevation deltas between adjacent points.

    Points without elevation count as 0 m.
    """
    gain = 0.0
    for a, b in zip(track, track[1:]):
        delta = (b.elevation or 0.0) - (a.elevation or 0.0)
        if delta > 0:
            gain += delta
    return gain


def enrich(track: Track) -> RouteGeometry:
    """Compute route geometry from a track.

    Args:
        track: Ordered track points. Empty and single-point tracks are valid.

    Returns:
        RouteGeometry with distance in km and elevation gain in meters.

    Raises:
        TypeError: If the input is not a sequence of TrackPoint.
    """
    _check_track(track)
    points = tuple(track)
    return RouteGeometry(
        distance_km=total_distance_km(points),
        elevation_gain_m=elevation_gain_m(points),
        points=points,
    )
