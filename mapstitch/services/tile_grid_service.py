"""Tile grid planning: which tiles cover a canvas and where each one goes."""

import logging
import math
from dataclasses import dataclass

from ..errors import EmptyGrid
from ..models.geometry import Dimensions, GridCell, PixelPoint, RowPolicy, TileAddress, TileOffset
from ..utils.geo_utils import DEFAULT_TILE_SIZE, round_half_away

logger = logging.getLogger(__name__)


@dataclass
class TilePlan:
    """Index-aligned tile addresses and canvas offsets for one request."""

    tiles: list[TileAddress]
    offsets: list[TileOffset]
    dimensions: Dimensions

    def __len__(self) -> int:
        return len(self.tiles)

    def pairs(self) -> list[tuple[TileAddress, TileOffset]]:
        return list(zip(self.tiles, self.offsets))


class TileGridService:
    """Enumerates covering tiles and their pixel offsets on the output canvas."""

    def __init__(
        self,
        zoom: int,
        scale: float = 1,
        tile_size: int = DEFAULT_TILE_SIZE,
        row_policy: RowPolicy = RowPolicy.CLAMP,
    ):
        """
        Initialize the planner.

        Args:
            zoom: Zoom level of the requested tiles
            scale: Output pixel density multiplier
            tile_size: Unscaled tile size in pixels
            row_policy: Clamp or skip rows outside the world
        """
        self.zoom = zoom
        self.scale = scale
        self.tile_size = tile_size
        self.row_policy = RowPolicy(row_policy)

    @property
    def footprint(self) -> int:
        """Scaled tile size as drawn on the canvas."""
        return math.floor(self.tile_size * self.scale)

    @property
    def tiles_per_row(self) -> int:
        return 2 ** self.zoom

    def _center_cell(self, center: PixelPoint) -> tuple[float, float]:
        # Grid units use the unscaled tile size; offsets use the footprint
        return (center.x / self.tile_size, center.y / self.tile_size)

    def _corner_cell(
        self,
        center: PixelPoint,
        dimensions: Dimensions,
        point_x: float,
        point_y: float,
    ) -> GridCell:
        center_column, center_row = self._center_cell(center)
        size = self.footprint
        return GridCell(
            column=math.floor(center_column + (point_x - dimensions.width / 2) / size),
            row=math.floor(center_row + (point_y - dimensions.height / 2) / size),
        )

    def cells(self, center: PixelPoint, dimensions: Dimensions) -> list[GridCell]:
        """
        Raw grid cells covering the canvas, column-major then row-ascending.

        Raises:
            EmptyGrid: nothing to enumerate
        """
        top_left = self._corner_cell(center, dimensions, 0, 0)
        bottom_right = self._corner_cell(center, dimensions, dimensions.width, dimensions.height)

        first_row, last_row = top_left.row, bottom_right.row
        if self.row_policy is RowPolicy.SKIP:
            first_row = max(first_row, 0)
            last_row = min(last_row, self.tiles_per_row - 1)

        cells = [
            GridCell(column=column, row=row)
            for column in range(top_left.column, bottom_right.column + 1)
            for row in range(first_row, last_row + 1)
        ]

        if not cells:
            raise EmptyGrid("No coords object")

        return cells

    def address(self, cell: GridCell) -> TileAddress:
        """Wrap the column around the antimeridian and clamp the row to the world."""
        count = self.tiles_per_row
        row = min(max(cell.row, 0), count - 1)
        return TileAddress(z=self.zoom, x=cell.column % count, y=row)

    def offset(self, cell: GridCell, center: PixelPoint, dimensions: Dimensions) -> TileOffset:
        """Canvas position of a raw cell. Never wrapped or clamped."""
        center_column, center_row = self._center_cell(center)
        size = self.footprint
        return TileOffset(
            x=round_half_away(dimensions.width / 2 + size * (cell.column - center_column)),
            y=round_half_away(dimensions.height / 2 + size * (cell.row - center_row)),
        )

    def tile_list(self, center: PixelPoint, dimensions: Dimensions) -> list[TileAddress]:
        return [self.address(cell) for cell in self.cells(center, dimensions)]

    def offset_list(self, center: PixelPoint, dimensions: Dimensions) -> list[TileOffset]:
        return [self.offset(cell, center, dimensions) for cell in self.cells(center, dimensions)]

    def plan(self, center: PixelPoint, dimensions: Dimensions) -> TilePlan:
        """Tile addresses and offsets computed in a single pass."""
        cells = self.cells(center, dimensions)
        plan = TilePlan(
            tiles=[self.address(cell) for cell in cells],
            offsets=[self.offset(cell, center, dimensions) for cell in cells],
            dimensions=dimensions,
        )
        logger.info(
            "Planned %d tiles at z%d for %dx%d canvas",
            len(plan), self.zoom, dimensions.width, dimensions.height,
        )
        return plan


def tile_list(
    zoom: int,
    scale: float,
    center: PixelPoint,
    dimensions: Dimensions,
    tile_size: int = DEFAULT_TILE_SIZE,
    row_policy: RowPolicy = RowPolicy.CLAMP,
) -> list[TileAddress]:
    """Covering tile addresses for a pixel center and canvas size."""
    return TileGridService(zoom, scale, tile_size, row_policy).tile_list(center, dimensions)


def offset_list(
    zoom: int,
    scale: float,
    center: PixelPoint,
    dimensions: Dimensions,
    tile_size: int = DEFAULT_TILE_SIZE,
    row_policy: RowPolicy = RowPolicy.CLAMP,
) -> list[TileOffset]:
    """Canvas offsets, index-aligned with :func:`tile_list`."""
    return TileGridService(zoom, scale, tile_size, row_policy).offset_list(center, dimensions)
