"""Command-line interface for route-atlas.

Provides CLI commands for building the route map site, listing and
inspecting routes, and serving the built site locally.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from route_atlas import __version__
from route_atlas.config import DEFAULT_CONFIG_PATH, load_config
from route_atlas.errors import RouteAtlasError

if TYPE_CHECKING:
    from route_atlas.config import Config


class JSONOutput:
    """Helper for JSON output formatting."""

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self._data: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        """Set a value in the output."""
        self._data[key] = value

    def update(self, data: dict[str, Any]) -> None:
        """Update with multiple values."""
        self._data.update(data)

    def output(self) -> None:
        """Print JSON output if enabled."""
        if self.enabled:
            click.echo(json.dumps(self._data, indent=2, default=str))


class Context:
    """CLI context holding shared configuration and state."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: int = 0
        self.quiet: bool = False
        self.json_output: bool = False
        self.output: JSONOutput = JSONOutput()

    def log(self, message: str, level: int = 0) -> None:
        """Log a message if verbosity allows.

        Args:
            message: Message to log.
            level: Required verbosity level (0=normal, 1=-v, 2=-vv).
        """
        if self.json_output:
            return
        if self.quiet and level == 0:
            return
        if level <= self.verbose or level == 0:
            click.echo(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        if self.json_output:
            self.output.set("error", message)
            self.output.set("status", "error")
        else:
            click.echo(f"Error: {message}", err=True)

    def fail(self, message: str, code: int = 1) -> None:
        """Report an error and exit."""
        self.error(message)
        if self.json_output:
            self.output.output()
        sys.exit(code)

    def require_config(self) -> Config:
        if self.config is None:
            self.fail("Configuration not loaded")
        assert self.config is not None
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help=f"Configuration file path (default: ./route-atlas.toml or {DEFAULT_CONFIG_PATH})",
)
@click.option(
    "--tracks-dir",
    "-t",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Directory of GPX track files (default: ./tracks)",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-error output",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format",
)
@click.version_option(version=__version__, prog_name="route-atlas")
@pass_context
def main(
    ctx: Context,
    config_path: Path | None,
    tracks_dir: Path | None,
    verbose: int,
    quiet: bool,
    json_output: bool,
) -> None:
    """Curated route map builder.

    Turn a directory of GPX tracks and authored route metadata into a
    static, interactive map.
    """
    ctx.verbose = verbose
    ctx.quiet = quiet
    ctx.json_output = json_output
    ctx.output = JSONOutput(json_output)

    ctx.config = load_config(config_path)

    if tracks_dir is not None:
        ctx.config.data.tracks_dir = tracks_dir


@main.command()
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output directory for the site (default: ./site)",
)
@click.option(
    "--workers",
    "-j",
    type=int,
    default=None,
    help="Parse track files on this many threads",
)
@pass_context
def build(ctx: Context, output_dir: Path | None, workers: int | None) -> None:
    """Build the static route map site."""
    from route_atlas.lib.logging import setup_logging
    from route_atlas.services.build import BuildService

    config = ctx.require_config()
    if output_dir is not None:
        config.data.output_dir = output_dir

    setup_logging(
        config,
        console_level=logging.DEBUG if ctx.verbose else logging.INFO,
        quiet=ctx.quiet or ctx.json_output,
    )

    try:
        result = BuildService(config).build(workers=workers)
    except RouteAtlasError as e:
        ctx.fail(f"Build failed: {e}")
        return

    if ctx.json_output:
        ctx.output.update({"status": "success", **result})
        ctx.output.output()
    else:
        ctx.log(f"Built {result['routes']} routes into {result['output_dir']}")


@main.command()
@pass_context
def routes(ctx: Context) -> None:
    """List catalog routes with their statistics."""
    from route_atlas.services.build import BuildService
    from route_atlas.views.map import format_routes

    config = ctx.require_config()
    try:
        result = BuildService(config).load_catalog()
    except RouteAtlasError as e:
        ctx.fail(str(e))
        return

    summaries = [record.summary() for record in result.catalog.values()]
    if ctx.json_output:
        ctx.output.update({"status": "success", "routes": summaries})
        ctx.output.output()
    else:
        ctx.log(format_routes(summaries))


@main.command()
@click.argument("value", required=False)
@pass_context
def show(ctx: Context, value: str | None) -> None:
    """Show what the map displays for a ``route`` value.

    Unknown or missing values show every route at the initial view.
    """
    from route_atlas.services.build import BuildService
    from route_atlas.views.selection import Selected, SelectionController
    from route_atlas.views.surface import RecordingSurface, SurfaceRef

    config = ctx.require_config()
    try:
        result = BuildService(config).load_catalog()
    except RouteAtlasError as e:
        ctx.fail(str(e))
        return

    controller = SelectionController(SurfaceRef(), result.catalog, config.map)
    surface = RecordingSurface()
    controller.on_external_change(value)
    controller.on_map_ready(surface)

    state = controller.state
    visible = [slug for slug, shown in controller.layers.visibility().items() if shown]
    viewport = surface.viewport
    controller.on_map_teardown()

    selected = state.slug if isinstance(state, Selected) else None
    if ctx.json_output:
        ctx.output.update({
            "status": "success",
            "selected": selected,
            "visible": visible,
            "route": result.catalog[selected].summary() if selected else None,
            "bounds": viewport.bounds.to_list() if viewport.bounds else None,
            "center": list(viewport.center) if viewport.center else None,
            "zoom": viewport.zoom,
        })
        ctx.output.output()
        return

    if selected is None:
        ctx.log(f"No route selected; showing {len(visible)} routes")
        return

    record = result.catalog[selected]
    ctx.log(f"{record.metadata.title} ({selected})")
    if record.metadata.location:
        ctx.log(f"Location: {record.metadata.location}")
    ctx.log(f"Rating: {record.metadata.rating}/5")
    ctx.log(f"Distance: {record.geometry.distance_km:.2f} km")
    ctx.log(f"Elevation gain: {record.geometry.elevation_gain_m:.0f} m")
    if record.metadata.description:
        ctx.log(record.metadata.description)
    if viewport.bounds is not None:
        ctx.log(f"Bounds: {viewport.bounds.to_list()}", level=1)


@main.command()
@click.option(
    "--port",
    default=8080,
    help="Server port (default: 8080)",
)
@click.option(
    "--host",
    default="127.0.0.1",
    help="Server host (default: 127.0.0.1)",
)
@pass_context
def serve(ctx: Context, port: int, host: str) -> None:
    """Serve the built site locally."""
    from route_atlas.lib.logging import setup_logging
    from route_atlas.lib.paths import get_index_path
    from route_atlas.views.map import serve_site

    config = ctx.require_config()
    output_dir = config.data.output_dir
    if not get_index_path(output_dir).exists():
        ctx.fail(f"No site found in {output_dir}; run 'route-atlas build' first")
        return

    setup_logging(config, quiet=ctx.quiet)
    ctx.log(f"Starting server at http://{host}:{port}")
    serve_site(output_dir, port=port, host=host)


if __name__ == "__main__":
    main()
