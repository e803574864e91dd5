"""Pillow-backed compositor for stitched tiles."""

import asyncio
import logging
from typing import Sequence

from PIL import Image

from ..models.tile import CompositeOptions, PositionedTile
from ..utils.image_utils import composite_at, decode_image, encode_image, pil_format

logger = logging.getLogger(__name__)


class PillowCompositor:
    """Decodes positioned tiles, composites them on one canvas and encodes once."""

    def __init__(self, background: tuple[int, int, int, int] = (0, 0, 0, 0)):
        """
        Initialize compositor.

        Args:
            background: RGBA fill for canvas areas no tile covers
        """
        self.background = background

    def composite_sync(self, tiles: Sequence[PositionedTile], options: CompositeOptions) -> bytes:
        """
        Composite tiles in order onto a ``width x height`` canvas.

        Later tiles are drawn over earlier ones. Tiles partly or fully outside
        the canvas are cropped.

        Raises:
            CompositionError: a tile cannot be decoded or the format is unsupported
        """
        # Fail on the format before decoding anything
        pil_format(options.format)

        canvas = Image.new("RGBA", (options.width, options.height), self.background)
        for tile in tiles:
            composite_at(canvas, decode_image(tile.buffer), (tile.x, tile.y))

        logger.debug(
            "Composited %d tiles onto %dx%d canvas", len(tiles), options.width, options.height
        )
        return encode_image(canvas, options.format, options.quality)

    async def composite(self, tiles: Sequence[PositionedTile], options: CompositeOptions) -> bytes:
        return await asyncio.to_thread(self.composite_sync, tiles, options)
