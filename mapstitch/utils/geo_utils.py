"""Spherical Mercator pixel math and extent resolution."""

import math
from typing import Optional, Sequence

from ..errors import InvalidExtent, TooLarge
from ..models.geometry import Dimensions, PixelPoint

# Sine of latitude is limited so the poles project to a finite y
MAX_SINE = 0.9999

DEFAULT_TILE_SIZE = 256
DEFAULT_SIZE_LIMIT = 19008


def round_half_up(value: float) -> int:
    """Round with .5 going towards +infinity, as tile-pixel libraries do."""
    return math.floor(value + 0.5)


def round_half_away(value: float) -> int:
    """Round with .5 going away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def world_size(zoom: int, scale: float = 1, tile_size: int = DEFAULT_TILE_SIZE) -> float:
    """Width (and height) of the whole world in pixels."""
    return tile_size * scale * 2 ** zoom


def pixel_from_lnglat(
    lng: float,
    lat: float,
    zoom: int,
    scale: float = 1,
    tile_size: int = DEFAULT_TILE_SIZE,
) -> PixelPoint:
    """
    Project a geographic point into world pixel space.

    The world spans ``tile_size * scale * 2**zoom`` pixels with the origin at
    (-180, max latitude), x growing east and y growing south.

    Args:
        lng: Longitude in degrees
        lat: Latitude in degrees
        zoom: Zoom level
        scale: Pixel density multiplier
        tile_size: Unscaled tile size in pixels

    Returns:
        PixelPoint with integer-rounded coordinates
    """
    size = world_size(zoom, scale, tile_size)
    half = size / 2
    sine = min(max(math.sin(math.radians(lat)), -MAX_SINE), MAX_SINE)

    x = round_half_up(half + lng * size / 360)
    y = round_half_up(half - 0.5 * math.log((1 + sine) / (1 - sine)) * size / (2 * math.pi))

    return PixelPoint(x=min(x, size), y=min(y, size))


def _bbox_corners(
    bbox: Sequence[float],
    zoom: int,
    scale: float,
    tile_size: int,
) -> tuple[PixelPoint, PixelPoint]:
    west, south, east, north = bbox
    bottom_left = pixel_from_lnglat(west, south, zoom, scale, tile_size)
    top_right = pixel_from_lnglat(east, north, zoom, scale, tile_size)
    return bottom_left, top_right


def _bbox_extent(
    bbox: Sequence[float],
    zoom: int,
    scale: float,
    tile_size: int,
) -> tuple[PixelPoint, float, float]:
    """Return the top-right corner and the raw pixel width/height of a bbox."""
    if len(bbox) != 4:
        raise InvalidExtent("Incorrect coordinates")

    bottom_left, top_right = _bbox_corners(bbox, zoom, scale, tile_size)
    width = top_right.x - bottom_left.x
    height = bottom_left.y - top_right.y

    if width <= 0 or height <= 0:
        raise InvalidExtent("Incorrect coordinates")

    return top_right, width, height


def center_from_bbox(
    bbox: Sequence[float],
    zoom: int,
    scale: float = 1,
    tile_size: int = DEFAULT_TILE_SIZE,
) -> PixelPoint:
    """Pixel center of a [west, south, east, north] bounding box."""
    top_right, width, height = _bbox_extent(bbox, zoom, scale, tile_size)
    return PixelPoint(x=top_right.x - width / 2, y=top_right.y + height / 2)


def center_from_lnglat(
    lng: float,
    lat: float,
    zoom: int,
    scale: float = 1,
    tile_size: int = DEFAULT_TILE_SIZE,
) -> PixelPoint:
    """Pixel center of a longitude/latitude point."""
    return pixel_from_lnglat(lng, lat, zoom, scale, tile_size)


def _check_limit(width: int, height: int, limit: int) -> None:
    if width >= limit or height >= limit:
        raise TooLarge("Desired image is too large.")


def dimensions_from_bbox(
    bbox: Sequence[float],
    zoom: int,
    scale: float = 1,
    tile_size: int = DEFAULT_TILE_SIZE,
    limit: int = DEFAULT_SIZE_LIMIT,
) -> Dimensions:
    """
    Output size for a bounding box.

    The projected extent is multiplied by ``scale`` once more before rounding,
    on top of the scaled projection itself.

    Raises:
        InvalidExtent: the bbox is degenerate or inverted
        TooLarge: either side reaches ``limit``
    """
    _, width, height = _bbox_extent(bbox, zoom, scale, tile_size)

    width = round_half_away(width * scale)
    height = round_half_away(height * scale)
    _check_limit(width, height, limit)

    return Dimensions(width=width, height=height)


def scale_dimensions(
    width: float,
    height: float,
    scale: float = 1,
    limit: int = DEFAULT_SIZE_LIMIT,
) -> Dimensions:
    """
    Scale caller-supplied pixel dimensions.

    Raises:
        InvalidExtent: a scaled side rounds to zero or below
        TooLarge: either side reaches ``limit``
    """
    scaled_width = round_half_away(width * scale)
    scaled_height = round_half_away(height * scale)

    if scaled_width <= 0 or scaled_height <= 0:
        raise InvalidExtent("Desired image has no area.")
    _check_limit(scaled_width, scaled_height, limit)

    return Dimensions(width=scaled_width, height=scaled_height)


def resolve_center(
    zoom: int,
    scale: float,
    tile_size: int,
    bbox: Optional[Sequence[float]] = None,
    center: Optional[tuple[float, float]] = None,
) -> PixelPoint:
    """Pixel center from exactly one of ``bbox`` or ``center`` (lng, lat)."""
    if bbox is not None:
        return center_from_bbox(bbox, zoom, scale, tile_size)
    lng, lat = center
    return center_from_lnglat(lng, lat, zoom, scale, tile_size)


def resolve_dimensions(
    zoom: int,
    scale: float,
    tile_size: int,
    limit: int,
    bbox: Optional[Sequence[float]] = None,
    size: Optional[tuple[float, float]] = None,
) -> Dimensions:
    """Output size from either ``bbox`` or an unscaled (width, height)."""
    if bbox is not None:
        return dimensions_from_bbox(bbox, zoom, scale, tile_size, limit)
    width, height = size
    return scale_dimensions(width, height, scale, limit)
