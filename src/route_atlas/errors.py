"""Error taxonomy for route-atlas.

Build-time failures (``ParseError``, ``DuplicateSlugError``) abort the build.
``MissingCounterpartWarning`` is only ever issued as a warning. Layer and
surface errors signal programming mistakes rather than runtime conditions.
"""

from __future__ import annotations

from pathlib import Path


class RouteAtlasError(Exception):
    """Base class for route-atlas errors."""


class ParseError(RouteAtlasError):
    """A track file could not be decoded as coordinate data."""

    def __init__(self, filename: str | Path, reason: str) -> None:
        self.filename = str(filename)
        self.reason = reason
        super().__init__(f"Cannot parse track file {self.filename}: {reason}")


class DuplicateSlugError(RouteAtlasError):
    """Two inputs normalize to the same route slug."""

    def __init__(self, slug: str, sources: list[str] | None = None) -> None:
        self.slug = slug
        self.sources = sources or []
        detail = f" ({', '.join(self.sources)})" if self.sources else ""
        super().__init__(f"Duplicate route slug '{slug}'{detail}")


class MissingCounterpartWarning(UserWarning):
    """A route has geometry without metadata, or metadata without geometry."""


class LayerRegistrationError(AssertionError):
    """A source or layer id was registered twice on the same map surface."""


class SurfaceReleasedError(RuntimeError):
    """The map surface was accessed outside its ready/teardown lifetime."""
