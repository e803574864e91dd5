"""Shared test fixtures."""

from io import BytesIO

import pytest
from PIL import Image

from mapstitch.config import reset_config
from mapstitch.models.geometry import Dimensions, PixelPoint

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from MAPSTITCH_* environment settings."""
    for name in (
        "MAPSTITCH_SIZE_LIMIT",
        "MAPSTITCH_MAX_CONCURRENCY",
        "MAPSTITCH_TIMEOUT",
        "MAPSTITCH_TILE_URL",
        "MAPSTITCH_ROW_POLICY",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def png_tile():
    """Factory for solid-color encoded PNG tiles."""

    def make(color=RED, size=256):
        image = Image.new("RGBA", (size, size), color)
        buffer = BytesIO()
        image.save(buffer, "PNG")
        return buffer.getvalue()

    return make


@pytest.fixture
def world_tiles(png_tile):
    """The four zoom-1 tiles, each a different solid color."""
    return {
        (1, 0, 0): png_tile(RED),
        (1, 1, 0): png_tile(GREEN),
        (1, 0, 1): png_tile(BLUE),
        (1, 1, 1): png_tile(WHITE),
    }


@pytest.fixture
def world_tile_source(world_tiles):
    """Async tile function serving ``world_tiles`` with headers, like a tile server."""
    calls = []

    async def get_tile(z, x, y):
        calls.append((z, x, y))
        key = (z, x, y)
        if key not in world_tiles:
            raise LookupError("Tile does not exist")
        headers = {
            "Last-Modified": "Mon, 01 Jan 2018 00:00:00 GMT",
            "ETag": "73f12a518adef759138c142865287a18",
            "Content-Type": "image/png",
        }
        return world_tiles[key], headers, {"render": 10}

    get_tile.calls = calls
    return get_tile


@pytest.fixture
def sample_center():
    """Pixel center used by the zoom 5 @4x grid scenario."""
    return PixelPoint(x=4096, y=4096)


@pytest.fixture
def sample_dimensions():
    return Dimensions(width=1824, height=1832)
