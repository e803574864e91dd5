"""Capabilities the stitcher depends on: a tile source and a compositor."""

import asyncio
import inspect
from typing import Any, Callable, Protocol, Sequence, runtime_checkable

from ..models.tile import CompositeOptions, FetchedTile, PositionedTile


@runtime_checkable
class TileSource(Protocol):
    """Anything that can fetch one tile's encoded bytes by z/x/y.

    Must tolerate the same tile being requested more than once per stitch.
    """

    async def fetch(self, z: int, x: int, y: int) -> FetchedTile: ...


@runtime_checkable
class Compositor(Protocol):
    """Anything that can turn positioned tiles into one encoded image."""

    async def composite(self, tiles: Sequence[PositionedTile], options: CompositeOptions) -> bytes: ...


def to_fetched_tile(result: Any) -> FetchedTile:
    """
    Normalize a tile function's return value.

    Accepts a FetchedTile, raw bytes, ``(bytes, headers)`` or
    ``(bytes, headers, stats)``.
    """
    if isinstance(result, FetchedTile):
        return result
    if isinstance(result, (bytes, bytearray, memoryview)):
        return FetchedTile(buffer=bytes(result))
    if isinstance(result, tuple) and 1 <= len(result) <= 3:
        buffer, headers, stats = (tuple(result) + (None, None))[:3]
        return FetchedTile(buffer=buffer, headers=headers, stats=stats or {})
    raise TypeError(f"Unsupported tile result type: {type(result).__name__}")


class CallableTileSource:
    """Adapts a plain ``(z, x, y)`` function, sync or async, to TileSource."""

    def __init__(self, func: Callable[[int, int, int], Any]):
        self.func = func

    async def fetch(self, z: int, x: int, y: int) -> FetchedTile:
        if inspect.iscoroutinefunction(self.func):
            result = await self.func(z, x, y)
        else:
            # Blocking functions run in a worker thread
            result = await asyncio.to_thread(self.func, z, x, y)
        if inspect.isawaitable(result):
            result = await result
        return to_fetched_tile(result)


def as_tile_source(source: Any) -> TileSource:
    """Return ``source`` as a TileSource, wrapping bare callables."""
    if isinstance(source, TileSource):
        return source
    if callable(source):
        return CallableTileSource(source)
    raise TypeError("Invalid function for getting tiles")
