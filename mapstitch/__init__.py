"""Static map images stitched from XYZ tiles."""

from .errors import (
    CompositionError,
    ConfigurationError,
    EmptyGrid,
    InvalidExtent,
    MapStitchError,
    NoTiles,
    TileFetchError,
    TooLarge,
)
from .models.request import StitchOptions
from .services.map_service import plan_map, render_map, render_map_sync

__version__ = "0.1.0"

__all__ = [
    "StitchOptions",
    "plan_map",
    "render_map",
    "render_map_sync",
    "MapStitchError",
    "ConfigurationError",
    "InvalidExtent",
    "TooLarge",
    "EmptyGrid",
    "NoTiles",
    "TileFetchError",
    "CompositionError",
]
