"""Tests for PillowCompositor."""

import asyncio
from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from mapstitch.errors import CompositionError
from mapstitch.models.tile import CompositeOptions, PositionedTile
from mapstitch.services.compositor_service import PillowCompositor

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)


def _decode(buffer):
    return np.array(Image.open(BytesIO(buffer)).convert("RGBA"))


class TestPillowCompositor:
    """Test tile compositing."""

    def test_places_tiles_at_offsets(self, png_tile):
        tiles = [
            PositionedTile(png_tile(RED, 32), 0, 0),
            PositionedTile(png_tile(GREEN, 32), 32, 0),
            PositionedTile(png_tile(BLUE, 32), 0, 32),
            PositionedTile(png_tile(WHITE, 32), 32, 32),
        ]
        image = asyncio.run(PillowCompositor().composite(tiles, CompositeOptions(width=64, height=64)))
        arr = _decode(image)

        assert arr.shape == (64, 64, 4)
        assert tuple(arr[10, 10]) == RED
        assert tuple(arr[10, 50]) == GREEN
        assert tuple(arr[50, 10]) == BLUE
        assert tuple(arr[50, 50]) == WHITE

    def test_crops_offcanvas_tiles(self, png_tile):
        tiles = [PositionedTile(png_tile(RED, 32), -16, -16)]
        arr = _decode(PillowCompositor().composite_sync(tiles, CompositeOptions(width=40, height=40)))
        assert tuple(arr[15, 15]) == RED
        assert arr[20, 20, 3] == 0

    def test_later_tiles_draw_over_earlier(self, png_tile):
        tiles = [PositionedTile(png_tile(RED, 16), 0, 0), PositionedTile(png_tile(BLUE, 16), 8, 0)]
        arr = _decode(PillowCompositor().composite_sync(tiles, CompositeOptions(width=24, height=16)))
        assert tuple(arr[4, 4]) == RED
        assert tuple(arr[4, 12]) == BLUE

    def test_background_fill(self):
        compositor = PillowCompositor(background=(10, 20, 30, 255))
        arr = _decode(compositor.composite_sync([], CompositeOptions(width=8, height=8)))
        assert tuple(arr[0, 0]) == (10, 20, 30, 255)

    def test_jpeg_output(self, png_tile):
        tiles = [PositionedTile(png_tile(RED, 16), 0, 0)]
        image = PillowCompositor().composite_sync(tiles, CompositeOptions(width=16, height=16, format="jpeg", quality=95))
        assert Image.open(BytesIO(image)).format == "JPEG"

    def test_unsupported_format(self, png_tile):
        tiles = [PositionedTile(png_tile(RED, 16), 0, 0)]
        with pytest.raises(CompositionError):
            PillowCompositor().composite_sync(tiles, CompositeOptions(width=16, height=16, format="vector.pbf"))

    def test_undecodable_tile(self):
        tiles = [PositionedTile(b"garbage", 0, 0)]
        with pytest.raises(CompositionError):
            asyncio.run(PillowCompositor().composite(tiles, CompositeOptions(width=16, height=16)))
