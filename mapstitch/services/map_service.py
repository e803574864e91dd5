"""End-to-end static map rendering: resolve extent, plan tiles, stitch."""

import asyncio
import logging
from typing import Any, Optional, Union

from ..models.request import StitchOptions
from ..models.tile import StitchResult
from ..utils.geo_utils import resolve_center, resolve_dimensions
from .base import Compositor
from .stitch_service import StitchService
from .tile_grid_service import TileGridService, TilePlan

logger = logging.getLogger(__name__)


def plan_map(options: StitchOptions) -> TilePlan:
    """Resolve center and dimensions for a request and plan its tile grid."""
    center = resolve_center(
        options.zoom,
        options.scale,
        options.tile_size,
        bbox=options.bbox,
        center=options.lnglat,
    )
    dimensions = resolve_dimensions(
        options.zoom,
        options.scale,
        options.tile_size,
        options.limit,
        bbox=options.bbox,
        size=options.output_size,
    )

    grid = TileGridService(options.zoom, options.scale, options.tile_size, options.row_policy)
    return grid.plan(center, dimensions)


async def render_map(
    options: Union[StitchOptions, dict],
    compositor: Optional[Compositor] = None,
    **overrides: Any,
) -> StitchResult:
    """
    Render one static map image.

    Args:
        options: StitchOptions, or a raw options dict to resolve
        compositor: Compositor override (Pillow by default)
        **overrides: Extra raw options merged into a dict ``options``

    Returns:
        StitchResult with ``image``, ``stats`` and ``headers``
    """
    if not isinstance(options, StitchOptions):
        options = StitchOptions.resolve(options, **overrides)

    plan = plan_map(options)

    service = StitchService(
        options.get_tile,
        compositor=compositor,
        max_concurrency=options.max_concurrency,
    )
    return await service.stitch(
        plan.tiles,
        plan.offsets,
        plan.dimensions,
        format=options.format,
        quality=options.quality,
    )


def render_map_sync(
    options: Union[StitchOptions, dict],
    compositor: Optional[Compositor] = None,
    **overrides: Any,
) -> StitchResult:
    """Blocking wrapper around :func:`render_map`."""
    return asyncio.run(render_map(options, compositor=compositor, **overrides))
