"""Unit tests for configuration management."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest

from route_atlas.config import Config, load_config


@pytest.mark.ai_generated
class TestConfig:
    """Tests for configuration management."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.data.tracks_dir == Path("./tracks")
        assert config.data.workers == 1
        assert config.map.fit_padding == 40
        assert config.map.hit_width > config.map.line_width
        assert config.routes == {}

    def test_load_config_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading configuration from environment variables."""
        monkeypatch.setenv("ROUTE_ATLAS_TRACKS_DIR", "/env/tracks")
        monkeypatch.setenv("ROUTE_ATLAS_OUTPUT_DIR", "/env/site")

        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.toml"
            config = load_config(config_path)

            assert config.data.tracks_dir == Path("/env/tracks")
            assert config.data.output_dir == Path("/env/site")

    def test_load_config_from_file(self, tmp_path: Path) -> None:
        """Test loading configuration from TOML file."""
        config_path = tmp_path / "config.toml"
        config_path.write_text("""
[data]
tracks_dir = "gpx"
workers = 4

[map]
center = [6.86, 45.83]
zoom = 11
title = "Alps"

[routes.mont-blanc]
name = "Mont Blanc"
rating = 5
color = "#E91E63"
        """)

        config = load_config(config_path)

        assert config.data.tracks_dir == tmp_path / "gpx"
        assert config.data.workers == 4
        assert config.map.center == (6.86, 45.83)
        assert config.map.zoom == 11
        assert config.map.title == "Alps"
        assert config.routes["mont-blanc"]["rating"] == 5

    def test_env_overrides_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test that environment variables win over the file."""
        config_path = tmp_path / "config.toml"
        config_path.write_text('[data]\ntracks_dir = "gpx"\n')
        monkeypatch.setenv("ROUTE_ATLAS_TRACKS_DIR", "/override")

        config = load_config(config_path)

        assert config.data.tracks_dir == Path("/override")

    def test_load_config_from_local_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test loading configuration from local route-atlas.toml file."""
        local_config = tmp_path / "route-atlas.toml"
        local_config.write_text("""
[routes.local]
description = "From the working directory"
        """)
        monkeypatch.delenv("ROUTE_ATLAS_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.routes["local"]["description"] == "From the working directory"
        assert config.config_path is not None
        assert config.config_path.name == "route-atlas.toml"

    def test_non_table_route_entry_warns(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a mistyped [routes] entry is skipped with a warning naming it."""
        config_path = tmp_path / "config.toml"
        config_path.write_text("""
[routes]
ridge = "Ridge Traverse"

[routes.lake-loop]
name = "Lake Loop"
        """)

        with caplog.at_level(logging.WARNING, logger="route_atlas.config"):
            config = load_config(config_path)

        assert list(config.routes) == ["lake-loop"]
        assert "'ridge'" in caplog.text
        assert "expected a table" in caplog.text
