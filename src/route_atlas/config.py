"""Configuration management for route-atlas.

Handles loading configuration from TOML files, environment variables,
and command-line options with proper precedence. Route metadata is authored
in the same file as ``[routes.<slug>]`` tables.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "route-atlas" / "config.toml"
LOCAL_CONFIG_NAME = "route-atlas.toml"
DEFAULT_TRACKS_DIR = Path("./tracks")
DEFAULT_OUTPUT_DIR = Path("./site")
DEFAULT_ROUTE_COLOR = "#2196F3"


@dataclass
class DataConfig:
    """Input and output locations."""

    tracks_dir: Path = field(default_factory=lambda: DEFAULT_TRACKS_DIR)
    output_dir: Path = field(default_factory=lambda: DEFAULT_OUTPUT_DIR)
    workers: int = 1


@dataclass
class MapConfig:
    """Map surface configuration."""

    # (longitude, latitude)
    center: tuple[float, float] = (0.0, 0.0)
    zoom: float = 2.0
    fit_padding: int = 40
    line_width: float = 3.0
    hover_width: float = 6.0
    hit_width: float = 16.0
    title: str = "Routes"
    tile_url: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    attribution: str = "&copy; OpenStreetMap contributors"


@dataclass
class Config:
    """Main configuration container."""

    data: DataConfig = field(default_factory=DataConfig)
    map: MapConfig = field(default_factory=MapConfig)
    # Raw [routes.<slug>] tables, converted to RouteMetadata by the catalog
    routes: dict[str, dict[str, Any]] = field(default_factory=dict)
    config_path: Path | None = None


def _get_env_value(key: str, default: str = "") -> str:
    """Get environment variable value."""
    return os.environ.get(key, default)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. Environment variables
    2. Configuration file
    3. Default values

    Args:
        config_path: Path to configuration file. If None, uses
            ``ROUTE_ATLAS_CONFIG``, then ``./route-atlas.toml``, then the
            default location.

    Returns:
        Populated Config object.
    """
    config = Config()

    if config_path is None:
        env_config = _get_env_value("ROUTE_ATLAS_CONFIG")
        if env_config:
            config_path = Path(env_config)
        elif Path(LOCAL_CONFIG_NAME).exists():
            config_path = Path(LOCAL_CONFIG_NAME)
        else:
            config_path = DEFAULT_CONFIG_PATH

    config.config_path = config_path

    if config_path.exists():
        config = _load_from_file(config_path, config)

    config = _apply_env_overrides(config)

    return config


def _load_from_file(path: Path, config: Config) -> Config:
    """Load configuration from TOML file.

    Args:
        path: Path to TOML file.
        config: Existing config to update.

    Returns:
        Updated Config object.
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Relative directories are resolved against the config file location
    base_dir = path.parent

    if "data" in data:
        data_section = data["data"]
        if "tracks_dir" in data_section:
            config.data.tracks_dir = base_dir / data_section["tracks_dir"]
        if "output_dir" in data_section:
            config.data.output_dir = base_dir / data_section["output_dir"]
        config.data.workers = int(data_section.get("workers", config.data.workers))

    if "map" in data:
        m = data["map"]
        if "center" in m:
            lon, lat = m["center"]
            config.map.center = (float(lon), float(lat))
        config.map.zoom = float(m.get("zoom", config.map.zoom))
        config.map.fit_padding = int(m.get("fit_padding", config.map.fit_padding))
        config.map.line_width = float(m.get("line_width", config.map.line_width))
        config.map.hover_width = float(m.get("hover_width", config.map.hover_width))
        config.map.hit_width = float(m.get("hit_width", config.map.hit_width))
        config.map.title = m.get("title", config.map.title)
        config.map.tile_url = m.get("tile_url", config.map.tile_url)
        config.map.attribution = m.get("attribution", config.map.attribution)

    if "routes" in data:
        config.routes = {}
        for slug, values in data["routes"].items():
            if not isinstance(values, dict):
                logger.warning(
                    "Ignoring [routes] entry %r in %s: expected a table, got %s",
                    slug,
                    path,
                    type(values).__name__,
                )
                continue
            config.routes[str(slug)] = dict(values)

    return config


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to configuration.

    Args:
        config: Config to update.

    Returns:
        Updated Config object.
    """
    if tracks_dir := _get_env_value("ROUTE_ATLAS_TRACKS_DIR"):
        config.data.tracks_dir = Path(tracks_dir)
    if output_dir := _get_env_value("ROUTE_ATLAS_OUTPUT_DIR"):
        config.data.output_dir = Path(output_dir)

    return config


def ensure_output_dir(config: Config) -> Path:
    """Ensure output directory exists and return its path.

    Args:
        config: Configuration with output directory setting.

    Returns:
        Path to output directory.
    """
    output_dir = config.data.output_dir.resolve()
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
