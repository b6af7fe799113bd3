"""Static site generation for route-atlas.

Generates an interactive HTML map using Leaflet.js, a ``routes.json`` data
file, and byte-identical copies of every original track for download.
"""

from __future__ import annotations

import html
import http.server
import json
import logging
import shutil
import socketserver
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from route_atlas.config import MapConfig
from route_atlas.lib.paths import (
    get_download_path,
    get_download_url,
    get_index_path,
    get_routes_json_path,
)
from route_atlas.models.catalog import Catalog

logger = logging.getLogger(__name__)


def catalog_to_json(catalog: Catalog) -> list[dict[str, Any]]:
    """Serialize the catalog for the browser.

    Args:
        catalog: Route catalog.

    Returns:
        List of route summaries with GeoJSON geometry and download URL.
    """
    routes: list[dict[str, Any]] = []
    for slug, record in catalog.items():
        bounds = record.geometry.bounds()
        routes.append(
            {
                **record.summary(),
                "download": get_download_url(slug),
                "bounds": bounds.to_list() if bounds else None,
                "feature": record.geometry.to_geojson({"slug": slug}),
            }
        )
    return routes


def _script_json(data: Any) -> str:
    """Dump JSON safe for inline <script> embedding."""
    return json.dumps(data).replace("</", "<\\/")


def generate_map_html(catalog: Catalog, map_config: MapConfig | None = None) -> str:
    """Generate the HTML page for the route map.

    The page reads the ``route`` query parameter on load and on history
    navigation, and applies the same rules as ``SelectionController``:
    a known slug hides every other route and fits the map to it, anything
    else shows all routes at the initial view.

    Args:
        catalog: Route catalog.
        map_config: Map configuration.

    Returns:
        HTML content as string.
    """
    if map_config is None:
        map_config = MapConfig()

    routes_json = _script_json(catalog_to_json(catalog))
    settings_json = _script_json(
        {
            # Leaflet wants (lat, lng)
            "center": [map_config.center[1], map_config.center[0]],
            "zoom": map_config.zoom,
            "padding": map_config.fit_padding,
            "lineWidth": map_config.line_width,
            "hoverWidth": map_config.hover_width,
            "hitWidth": map_config.hit_width,
            "tileUrl": map_config.tile_url,
            "attribution": map_config.attribution,
        }
    )
    title = html.escape(map_config.title)

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css">
    <style>
        body {{ margin: 0; padding: 0; font: 14px/18px Arial, Helvetica, sans-serif; }}
        #map {{ position: absolute; top: 0; bottom: 0; width: 100%; }}
        .panel {{
            position: absolute;
            top: 10px;
            right: 10px;
            z-index: 1000;
            width: 280px;
            max-height: calc(100% - 40px);
            overflow-y: auto;
            padding: 10px 12px;
            background: rgba(255,255,255,0.95);
            box-shadow: 0 0 15px rgba(0,0,0,0.2);
            border-radius: 5px;
        }}
        .panel h2 {{ margin: 0 0 8px 0; font-size: 16px; }}
        .route-item {{ cursor: pointer; padding: 4px 0; display: flex; gap: 8px; align-items: center; }}
        .route-item i {{ width: 14px; height: 4px; display: inline-block; }}
        .route-meta {{ color: #666; font-size: 12px; }}
        .rating {{ color: #FF9800; }}
        .back {{ cursor: pointer; color: #2196F3; margin-bottom: 8px; display: inline-block; }}
    </style>
</head>
<body>
    <div id="map"></div>
    <div id="panel" class="panel"></div>
    <script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
    <script>
        const ROUTES = {routes_json};
        const SETTINGS = {settings_json};

        const map = L.map('map').setView(SETTINGS.center, SETTINGS.zoom);
        L.tileLayer(SETTINGS.tileUrl, {{ attribution: SETTINGS.attribution }}).addTo(map);

        const bySlug = {{}};
        const layers = {{}};
        let applied = undefined;

        function latLngs(route) {{
            return route.feature.geometry.coordinates.map(c => [c[1], c[0]]);
        }}

        function escapeHtml(text) {{
            const div = document.createElement('div');
            div.textContent = text;
            return div.innerHTML;
        }}

        function stars(rating) {{
            return '\\u2605'.repeat(rating) + '\\u2606'.repeat(Math.max(0, 5 - rating));
        }}

        function currentValue() {{
            return new URLSearchParams(window.location.search).get('route');
        }}

        function resolve(value) {{
            return value && Object.prototype.hasOwnProperty.call(bySlug, value) ? value : null;
        }}

        function navigate(slug) {{
            const url = new URL(window.location.href);
            if (slug) {{
                url.searchParams.set('route', slug);
            }} else {{
                url.searchParams.delete('route');
            }}
            window.history.pushState({{}}, '', url);
            apply();
        }}

        function registerLayers() {{
            ROUTES.forEach(route => {{
                if (layers[route.slug]) return;
                bySlug[route.slug] = route;
                const coords = latLngs(route);
                const stroke = L.polyline(coords, {{
                    color: route.color, weight: SETTINGS.lineWidth, lineJoin: 'round', lineCap: 'round'
                }});
                const hit = L.polyline(coords, {{
                    color: route.color, weight: SETTINGS.hitWidth, opacity: 0
                }});
                hit.on('mouseover', () => {{
                    map.getContainer().style.cursor = 'pointer';
                    stroke.setStyle({{ weight: SETTINGS.hoverWidth }});
                }});
                hit.on('mouseout', () => {{
                    map.getContainer().style.cursor = '';
                    stroke.setStyle({{ weight: SETTINGS.lineWidth }});
                }});
                hit.on('click', () => navigate(route.slug));
                stroke.addTo(map);
                hit.addTo(map);
                layers[route.slug] = {{ stroke: stroke, hit: hit, visible: true }};
            }});
        }}

        function setVisible(slug, visible) {{
            const pair = layers[slug];
            if (pair.visible === visible) return;
            if (visible) {{
                pair.stroke.addTo(map);
                pair.hit.addTo(map);
            }} else {{
                map.removeLayer(pair.stroke);
                map.removeLayer(pair.hit);
            }}
            pair.visible = visible;
        }}

        function renderList() {{
            const items = ROUTES.map(route => `
                <div class="route-item" data-slug="${{route.slug}}">
                    <i style="background:${{route.color}}"></i>
                    <div>
                        <div>${{escapeHtml(route.name)}}</div>
                        <div class="route-meta">${{escapeHtml(route.location)}} &middot; ${{route.distance_km}} km &middot; ${{route.elevation_gain_m}} m</div>
                    </div>
                </div>`).join('');
            return `<h2>${{ROUTES.length}} routes</h2>${{items}}`;
        }}

        function renderDetail(route) {{
            return `
                <span class="back" data-slug="">&larr; All routes</span>
                <h2>${{escapeHtml(route.name)}}</h2>
                <div class="route-meta">${{escapeHtml(route.location)}}</div>
                <div class="rating">${{stars(route.rating)}}</div>
                <p>${{route.distance_km}} km &middot; ${{route.elevation_gain_m}} m elevation gain</p>
                <p>${{escapeHtml(route.description)}}</p>
                <a href="${{route.download}}" download>Download GPX</a>`;
        }}

        function renderPanel(slug) {{
            const panel = document.getElementById('panel');
            panel.innerHTML = slug ? renderDetail(bySlug[slug]) : renderList();
            panel.querySelectorAll('[data-slug]').forEach(el => {{
                el.addEventListener('click', () => navigate(el.dataset.slug || null));
            }});
        }}

        function apply() {{
            const slug = resolve(currentValue());
            if (slug === applied) return;
            ROUTES.forEach(route => setVisible(route.slug, slug === null || route.slug === slug));
            if (slug !== null) {{
                const bounds = bySlug[slug].bounds;
                if (bounds) {{
                    map.fitBounds(
                        [[bounds[0][1], bounds[0][0]], [bounds[1][1], bounds[1][0]]],
                        {{ padding: [SETTINGS.padding, SETTINGS.padding] }}
                    );
                }}
            }} else {{
                map.setView(SETTINGS.center, SETTINGS.zoom);
            }}
            renderPanel(slug);
            applied = slug;
        }}

        map.whenReady(() => {{
            registerLayers();
            apply();
            window.addEventListener('popstate', apply);
        }});
    </script>
</body>
</html>"""


def build_site(
    catalog: Catalog,
    sources: dict[str, Path],
    output_dir: Path,
    map_config: MapConfig | None = None,
) -> dict[str, Any]:
    """Write the static site.

    Args:
        catalog: Route catalog.
        sources: Original track file per slug.
        output_dir: Destination directory.
        map_config: Map configuration.

    Returns:
        Summary dictionary with output paths and route count.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    for slug in catalog:
        download_path = get_download_path(output_dir, slug)
        download_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(sources[slug], download_path)
        logger.debug("Copied %s to %s", sources[slug], download_path)

    routes_path = get_routes_json_path(output_dir)
    with open(routes_path, "w", encoding="utf-8") as f:
        json.dump(catalog_to_json(catalog), f, indent=2)

    index_path = get_index_path(output_dir)
    index_path.write_text(generate_map_html(catalog, map_config), encoding="utf-8")

    logger.info("Wrote %d routes to %s", len(catalog), output_dir)
    return {
        "routes": len(catalog),
        "index": str(index_path),
        "data": str(routes_path),
        "output_dir": str(output_dir),
    }


def format_routes(summaries: Iterable[dict[str, Any]]) -> str:
    """Format route summaries as a plain text table."""
    lines = [f"{'SLUG':<24} {'KM':>8} {'GAIN M':>8} {'RATING':>6}  LOCATION"]
    for route in summaries:
        lines.append(
            f"{route['slug']:<24} {route['distance_km']:>8.2f} "
            f"{route['elevation_gain_m']:>8} {route['rating']:>6}  {route['location']}"
        )
    return "\n".join(lines)


def serve_site(
    output_dir: Path,
    port: int = 8080,
    host: str = "127.0.0.1",
) -> None:
    """Start a local HTTP server to serve the built site.

    Args:
        output_dir: Directory containing the built site.
        port: Server port.
        host: Server host.
    """
    directory = output_dir

    class Handler(http.server.SimpleHTTPRequestHandler):
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            super().__init__(*args, directory=str(directory), **kwargs)

        def log_message(self, format: str, *args: object) -> None:
            logger.debug("%s - %s", self.address_string(), format % args)

    # Allow port reuse to avoid "Address already in use" errors
    socketserver.TCPServer.allow_reuse_address = True

    with socketserver.TCPServer((host, port), Handler) as httpd:
        logger.info("Serving at http://%s:%s/", host, port)
        logger.info("Press Ctrl+C to stop")

        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Server stopped")
