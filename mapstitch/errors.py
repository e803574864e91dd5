"""Exceptions raised while planning and stitching a map image."""

from typing import Optional


class MapStitchError(Exception):
    """Base class for all stitching failures."""


class ConfigurationError(MapStitchError, ValueError):
    """Request options are missing or contradictory."""


class InvalidExtent(MapStitchError, ValueError):
    """Bounding box projects to an empty or inverted pixel rectangle."""


class TooLarge(MapStitchError, ValueError):
    """Output dimensions meet or exceed the configured size limit."""


class EmptyGrid(MapStitchError, ValueError):
    """Tile enumeration produced no grid cells."""


class NoTiles(MapStitchError, RuntimeError):
    """The fetch phase returned nothing to stitch."""


class TileFetchError(MapStitchError, RuntimeError):
    """A bundled tile source could not produce a tile."""

    def __init__(
        self,
        message: str,
        z: Optional[int] = None,
        x: Optional[int] = None,
        y: Optional[int] = None,
    ):
        super().__init__(message)
        self.z = z
        self.x = x
        self.y = y


class CompositionError(MapStitchError, RuntimeError):
    """The compositor could not decode a tile or encode the output."""
