"""CLI integration tests for the build and routes commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from route_atlas.cli import main
from tests.helpers import make_gpx


class TestBuild:
    """Tests for route-atlas build."""

    @pytest.mark.ai_generated
    def test_build_writes_site(self, cli_runner, config_file: Path, cli_env: dict[str, str]) -> None:
        """Verify build writes the page, data file, and raw tracks."""
        result = cli_runner.invoke(main, ["build"], env=cli_env)

        assert result.exit_code == 0, f"Command failed: {result.output}"
        site = config_file.parent / "site"
        assert (site / "index.html").exists()
        assert (site / "routes.json").exists()
        assert (site / "tracks" / "ridge.gpx").read_bytes() == (
            config_file.parent / "tracks" / "Ridge.gpx"
        ).read_bytes()
        assert "Built 2 routes" in result.output

    @pytest.mark.ai_generated
    def test_build_json_output(self, cli_runner, tmp_path: Path, cli_env: dict[str, str]) -> None:
        """Verify --json reports a summary and honors --output-dir."""
        out = tmp_path / "custom"
        result = cli_runner.invoke(main, ["--json", "build", "-o", str(out)], env=cli_env)

        assert result.exit_code == 0, f"Command failed: {result.output}"
        data = json.loads(result.stdout)
        assert data["status"] == "success"
        assert data["routes"] == 2
        assert (out / "index.html").exists()

    @pytest.mark.ai_generated
    def test_build_fails_on_malformed_track(
        self, cli_runner, tracks_dir: Path, cli_env: dict[str, str]
    ) -> None:
        (tracks_dir / "broken.gpx").write_text("not xml at all")

        result = cli_runner.invoke(main, ["build"], env=cli_env)

        assert result.exit_code == 1
        assert "broken.gpx" in result.output

    @pytest.mark.ai_generated
    def test_build_fails_on_duplicate_slug(
        self, cli_runner, tracks_dir: Path, cli_env: dict[str, str]
    ) -> None:
        (tracks_dir / "RIDGE.gpx").write_text(make_gpx([(1.0, 1.0, None)]))

        result = cli_runner.invoke(main, ["build"], env=cli_env)

        assert result.exit_code == 1
        assert "Duplicate route slug 'ridge'" in result.output


class TestRoutes:
    """Tests for route-atlas routes."""

    @pytest.mark.ai_generated
    def test_routes_json(self, cli_runner, cli_env: dict[str, str]) -> None:
        """Verify the orphan metadata entry is excluded."""
        result = cli_runner.invoke(main, ["--json", "routes"], env=cli_env)

        assert result.exit_code == 0, f"Command failed: {result.output}"
        data = json.loads(result.stdout)
        assert [r["slug"] for r in data["routes"]] == ["lake-loop", "ridge"]
        assert data["routes"][1]["name"] == "Ridge Traverse"

    @pytest.mark.ai_generated
    def test_routes_table(self, cli_runner, cli_env: dict[str, str]) -> None:
        result = cli_runner.invoke(main, ["routes"], env=cli_env)

        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert "lake-loop" in result.stdout
        assert "Valais" in result.stdout
