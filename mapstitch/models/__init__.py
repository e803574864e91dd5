"""Data models for map stitching."""

from .geometry import (
    Dimensions,
    GridCell,
    PixelPoint,
    RowPolicy,
    TileAddress,
    TileOffset,
)
from .tile import (
    CompositeOptions,
    FetchedTile,
    PositionedTile,
    StitchResult,
    StitchStats,
)
from .request import CenterPoint, OutputSize, StitchOptions

__all__ = [
    "Dimensions",
    "GridCell",
    "PixelPoint",
    "RowPolicy",
    "TileAddress",
    "TileOffset",
    "CompositeOptions",
    "FetchedTile",
    "PositionedTile",
    "StitchResult",
    "StitchStats",
    "CenterPoint",
    "OutputSize",
    "StitchOptions",
]
