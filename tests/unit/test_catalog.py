"""Unit tests for catalog assembly."""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest

from route_atlas.errors import DuplicateSlugError, MissingCounterpartWarning, ParseError
from route_atlas.models.catalog import (
    Catalog,
    RouteMetadata,
    build_catalog,
    load_geometries,
    metadata_from_config,
)
from route_atlas.models.geometry import enrich
from tests.helpers import LAKE, RIDGE, make_gpx, make_points


@pytest.mark.ai_generated
class TestBuildCatalog:
    """Tests for build_catalog."""

    def test_joins_and_orders_by_slug(self) -> None:
        """Test that records are joined on slug and sorted."""
        catalog = build_catalog(
            [("ridge", enrich(make_points(RIDGE))), ("lake", enrich(make_points(LAKE)))],
            [RouteMetadata(slug="ridge", rating=5), RouteMetadata(slug="lake", rating=2)],
        )

        assert list(catalog) == ["lake", "ridge"]
        assert catalog["ridge"].metadata.rating == 5
        assert catalog["lake"].geometry.points[0].longitude == 8.5

    def test_drops_missing_counterparts_with_warning(self) -> None:
        """Test that one-sided slugs are excluded and warned about."""
        with pytest.warns(MissingCounterpartWarning) as record:
            catalog = build_catalog(
                [("ridge", enrich(make_points(RIDGE))), ("trackonly", enrich(()))],
                [RouteMetadata(slug="ridge"), RouteMetadata(slug="metaonly")],
            )

        assert list(catalog) == ["ridge"]
        messages = " ".join(str(w.message) for w in record)
        assert "trackonly" in messages
        assert "metaonly" in messages

    def test_duplicate_geometry_slug_fails(self) -> None:
        """Test that duplicate slugs abort the build."""
        geometry = enrich(make_points(RIDGE))

        with pytest.raises(DuplicateSlugError):
            build_catalog([("ridge", geometry), ("ridge", geometry)], [RouteMetadata(slug="ridge")])

    def test_catalog_is_read_only(self) -> None:
        """Test that the catalog cannot be mutated."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            catalog = build_catalog([("ridge", enrich(make_points(RIDGE)))], [RouteMetadata(slug="ridge")])

        with pytest.raises(TypeError):
            catalog["other"] = catalog["ridge"]  # type: ignore[index]
        assert not hasattr(catalog, "pop")

    def test_metadata_from_config(self) -> None:
        """Test conversion of [routes.<slug>] tables."""
        metadata = metadata_from_config({"Ridge": {"name": "Ridge", "rating": "4"}})

        assert metadata == [RouteMetadata(slug="ridge", rating=4, name="Ridge")]
        assert RouteMetadata(slug="lake-loop").title == "Lake Loop"


@pytest.mark.ai_generated
class TestLoadGeometries:
    """Tests for load_geometries."""

    def test_loads_sorted_by_slug(self, tracks_dir: Path) -> None:
        loaded = load_geometries(tracks_dir)

        assert [slug for slug, _geometry, _path in loaded] == ["lake-loop", "ridge"]
        assert loaded[1][2].name == "Ridge.gpx"

    def test_parallel_matches_sequential(self, tracks_dir: Path) -> None:
        """Test that threaded loading is deterministic."""
        for i in range(6):
            (tracks_dir / f"extra{i}.gpx").write_text(make_gpx(RIDGE[: i % 4 + 1]))

        assert load_geometries(tracks_dir, workers=4) == load_geometries(tracks_dir, workers=1)

    def test_duplicate_slug_across_files(self, tracks_dir: Path) -> None:
        """Test that two files normalizing to one slug fail the build."""
        (tracks_dir / "ridge.GPX").write_text(make_gpx(LAKE))

        with pytest.raises(DuplicateSlugError) as excinfo:
            load_geometries(tracks_dir)

        assert excinfo.value.slug == "ridge"
        assert sorted(excinfo.value.sources) == ["Ridge.gpx", "ridge.GPX"]

    def test_parse_error_aborts(self, tracks_dir: Path) -> None:
        (tracks_dir / "broken.gpx").write_text("<gpx><trk>")

        with pytest.raises(ParseError, match="broken.gpx"):
            load_geometries(tracks_dir)

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert load_geometries(tmp_path / "nope") == []

    def test_empty_catalog(self) -> None:
        assert len(Catalog()) == 0
