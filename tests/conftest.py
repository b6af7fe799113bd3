"""Shared fixtures for route-atlas tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from route_atlas.models.catalog import Catalog
from tests.helpers import LAKE, RIDGE, make_gpx, make_record


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers that setup_logging attached during a test."""
    yield
    logging.getLogger("route_atlas").handlers.clear()
    logging.getLogger("py.warnings").handlers.clear()
    logging.captureWarnings(False)


@pytest.fixture
def catalog() -> Catalog:
    """Catalog with two routes."""
    return Catalog([make_record("lake-loop", LAKE), make_record("ridge", RIDGE, "#4CAF50")])


@pytest.fixture
def tracks_dir(tmp_path: Path) -> Path:
    """Directory with two GPX tracks."""
    directory = tmp_path / "tracks"
    directory.mkdir()
    (directory / "Ridge.gpx").write_text(make_gpx(RIDGE, "Ridge"))
    (directory / "lake-loop.gpx").write_text(make_gpx(LAKE, "Lake"))
    return directory


@pytest.fixture
def config_file(tmp_path: Path, tracks_dir: Path) -> Path:
    """Configuration file with metadata for both tracks plus an orphan."""
    path = tmp_path / "route-atlas.toml"
    path.write_text(f"""
[data]
tracks_dir = "{tracks_dir.as_posix()}"
output_dir = "site"

[map]
center = [7.5, 46.5]
zoom = 8
fit_padding = 25

[routes.ridge]
name = "Ridge Traverse"
description = "Exposed ridge walk."
rating = 5
location = "Valais"
color = "#4CAF50"

[routes.lake-loop]
name = "Lake Loop"
description = "Flat loop along the shore."
rating = 3
location = "Zurich"

[routes.orphan]
name = "No Track"
""")
    return path


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli_env(config_file: Path) -> dict[str, str]:
    """Environment pointing the CLI at the test configuration."""
    return {"ROUTE_ATLAS_CONFIG": str(config_file)}
