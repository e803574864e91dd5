"""Utility functions for map stitching."""

from .image_utils import (
    composite_at,
    decode_image,
    encode_image,
    flatten_alpha,
)
from .geo_utils import (
    center_from_bbox,
    center_from_lnglat,
    dimensions_from_bbox,
    pixel_from_lnglat,
    scale_dimensions,
)

__all__ = [
    "composite_at",
    "decode_image",
    "encode_image",
    "flatten_alpha",
    "center_from_bbox",
    "center_from_lnglat",
    "dimensions_from_bbox",
    "pixel_from_lnglat",
    "scale_dimensions",
]
