"""Map stitching services."""

from .base import CallableTileSource, Compositor, TileSource, as_tile_source
from .compositor_service import PillowCompositor
from .header_service import merge_headers
from .map_service import plan_map, render_map, render_map_sync
from .stitch_service import StitchService, calculate_stats
from .tile_grid_service import TileGridService, TilePlan
from .tile_source_service import DirectoryTileSource, HttpTileSource

__all__ = [
    "TileSource",
    "Compositor",
    "CallableTileSource",
    "as_tile_source",
    "PillowCompositor",
    "merge_headers",
    "plan_map",
    "render_map",
    "render_map_sync",
    "StitchService",
    "calculate_stats",
    "TileGridService",
    "TilePlan",
    "DirectoryTileSource",
    "HttpTileSource",
]
