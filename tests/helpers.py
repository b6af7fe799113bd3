"""Builders for test tracks and catalogs."""

from __future__ import annotations

from collections.abc import Sequence

from route_atlas.models.catalog import RouteMetadata, RouteRecord
from route_atlas.models.geometry import enrich
from route_atlas.models.track import TrackPoint

# (lon, lat, ele) triples
Coord = tuple[float, float, float | None]

RIDGE: list[Coord] = [
    (7.000, 46.000, 1200.0),
    (7.010, 46.005, 1350.0),
    (7.020, 46.012, 1300.0),
    (7.030, 46.020, 1500.0),
]
LAKE: list[Coord] = [
    (8.500, 47.300, 410.0),
    (8.520, 47.310, 405.0),
    (8.540, 47.305, 412.0),
]


def make_gpx(coords: Sequence[Coord], name: str = "Track") -> str:
    """Render a minimal GPX 1.1 document with one track segment."""
    points = []
    for lon, lat, ele in coords:
        ele_tag = f"<ele>{ele}</ele>" if ele is not None else ""
        points.append(f'<trkpt lat="{lat}" lon="{lon}">{ele_tag}</trkpt>')
    return (
        '<gpx version="1.1" creator="route-atlas-tests" '
        'xmlns="http://www.topografix.com/GPX/1/1">'
        f"<trk><name>{name}</name><trkseg>{''.join(points)}</trkseg></trk>"
        "</gpx>"
    )


def make_points(coords: Sequence[Coord]) -> tuple[TrackPoint, ...]:
    return tuple(
        TrackPoint(longitude=lon, latitude=lat, elevation=ele, index=i)
        for i, (lon, lat, ele) in enumerate(coords)
    )


def make_record(slug: str, coords: Sequence[Coord], color: str = "#FF5722") -> RouteRecord:
    return RouteRecord(
        slug=slug,
        geometry=enrich(make_points(coords)),
        metadata=RouteMetadata(slug=slug, description=f"{slug} route", rating=4, color=color),
    )
