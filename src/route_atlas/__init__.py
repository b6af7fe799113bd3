"""Curated Outdoor Route Map Builder.

Turns a directory of GPX tracks plus authored route metadata into a static,
interactive Leaflet map where each route can be selected, inspected, and
downloaded as its original track file.
"""

__version__ = "0.1.0"

__author__ = "route_atlas contributors"
__license__ = "Apache-2.0"

__all__ = ["__version__"]
