"""Pixel-space and tile-grid value types."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class PixelPoint:
    """A location in world pixel space for one zoom/scale/tile size."""

    x: float
    y: float


@dataclass(frozen=True)
class Dimensions:
    """Output canvas size in pixels, already scaled and limit-checked."""

    width: int
    height: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class TileAddress:
    """A slippy-map tile identifier."""

    z: int
    x: int
    y: int

    def __str__(self) -> str:
        return f"{self.z}/{self.x}/{self.y}"


@dataclass(frozen=True)
class TileOffset:
    """Canvas position of a tile's top-left corner. May lie off-canvas."""

    x: int
    y: int


@dataclass(frozen=True)
class GridCell:
    """Raw (unwrapped, unclamped) tile-grid column and row."""

    column: int
    row: int


class RowPolicy(str, Enum):
    """How grid rows above or below the world are handled."""

    CLAMP = "clamp"  # Repeat the edge row; the grid stays rectangular
    SKIP = "skip"  # Leave out-of-world rows out of the plan
