"""Concurrent tile fetching and stitching."""

import asyncio
import logging
from typing import Any, Optional, Sequence

from ..errors import NoTiles
from ..models.geometry import Dimensions, TileAddress, TileOffset
from ..models.tile import CompositeOptions, FetchedTile, PositionedTile, StitchResult, StitchStats
from ..utils.geo_utils import round_half_away
from .base import Compositor, as_tile_source
from .compositor_service import PillowCompositor
from .header_service import merge_headers

logger = logging.getLogger(__name__)


def calculate_stats(tiles: Sequence[FetchedTile]) -> StitchStats:
    """Tile count and mean render time, counting a missing render time as 0."""
    count = len(tiles)
    if not count:
        raise NoTiles("No tiles to stitch")
    total = sum(tile.render_time for tile in tiles)
    return StitchStats(tiles=count, render_avg=round_half_away(total / count))


class StitchService:
    """Fetches planned tiles from a tile source and composites them into one image."""

    def __init__(
        self,
        tile_source: Any,
        compositor: Optional[Compositor] = None,
        max_concurrency: Optional[int] = None,
    ):
        """
        Initialize stitch service.

        Args:
            tile_source: A TileSource or a ``(z, x, y)`` tile function
            compositor: Compositor to use (Pillow by default)
            max_concurrency: Cap on in-flight fetches, ``None`` for unbounded
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.tile_source = as_tile_source(tile_source)
        self.compositor = compositor or PillowCompositor()
        self.max_concurrency = max_concurrency

    async def fetch_tiles(self, tiles: Sequence[TileAddress]) -> list[FetchedTile]:
        """
        Fetch every tile concurrently, returning results in request order.

        All fetches run to completion before this returns. If any failed, the
        first failure in request order is raised and all results are dropped.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def fetch_one(tile: TileAddress) -> FetchedTile:
            if semaphore is None:
                return await self._fetch(tile)
            async with semaphore:
                return await self._fetch(tile)

        results = await asyncio.gather(*(fetch_one(tile) for tile in tiles), return_exceptions=True)

        for tile, result in zip(tiles, results):
            if isinstance(result, BaseException):
                logger.info("Fetch of tile %s failed: %s", tile, result)
                raise result

        return results

    async def _fetch(self, tile: TileAddress) -> FetchedTile:
        logger.debug("Fetching tile %s", tile)
        return await self.tile_source.fetch(tile.z, tile.x, tile.y)

    async def stitch(
        self,
        tiles: Sequence[TileAddress],
        offsets: Sequence[TileOffset],
        dimensions: Dimensions,
        format: str = "png",
        quality: Optional[int] = None,
    ) -> StitchResult:
        """
        Fetch tiles and composite them at their offsets.

        Args:
            tiles: Tile addresses, index-aligned with ``offsets``
            offsets: Canvas offset of each tile
            dimensions: Output canvas size
            format: Output encoding
            quality: Encoder quality, if any

        Returns:
            StitchResult with the encoded image, stats and merged cache headers

        Raises:
            NoTiles: nothing was planned or every fetched tile was empty
        """
        if not tiles:
            raise NoTiles("No tiles to stitch")
        if offsets is None or len(offsets) != len(tiles):
            raise ValueError("Tile and offset lists must have the same length")

        fetched = await self.fetch_tiles(tiles)
        if not any(tile.buffer for tile in fetched):
            raise NoTiles("No tiles to stitch")

        stats = calculate_stats(fetched)
        headers = merge_headers([tile.headers for tile in fetched], format)

        positioned = [
            PositionedTile(buffer=tile.buffer, x=offset.x, y=offset.y)
            for tile, offset in zip(fetched, offsets)
            if tile.buffer
        ]
        options = CompositeOptions(
            width=dimensions.width,
            height=dimensions.height,
            format=format,
            quality=quality,
        )
        image = await self.compositor.composite(positioned, options)

        logger.info("Stitched %d tiles (avg render %d ms)", stats.tiles, stats.render_avg)
        return StitchResult(image=image, stats=stats, headers=headers)
