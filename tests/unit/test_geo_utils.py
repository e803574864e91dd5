"""Tests for pixel projection and extent resolution."""

import pytest

from mapstitch.errors import InvalidExtent, TooLarge
from mapstitch.models.geometry import Dimensions, PixelPoint
from mapstitch.utils.geo_utils import (
    center_from_bbox,
    center_from_lnglat,
    dimensions_from_bbox,
    pixel_from_lnglat,
    resolve_center,
    resolve_dimensions,
    round_half_away,
    round_half_up,
    scale_dimensions,
    world_size,
)


class TestRounding:
    """Test rounding helpers."""

    def test_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2

    def test_half_away(self):
        assert round_half_away(2.5) == 3
        assert round_half_away(-2.5) == -3
        assert round_half_away(-2.4) == -2

    def test_not_bankers_rounding(self):
        assert round_half_away(0.5) == 1
        assert round_half_away(4.5) == 5


class TestPixelFromLngLat:
    """Test spherical Mercator projection into world pixels."""

    def test_world_size(self):
        assert world_size(0) == 256
        assert world_size(5, 1, 256) == 8192
        assert world_size(2, 2, 512) == 4096

    def test_origin_maps_to_world_center(self):
        point = pixel_from_lnglat(0, 0, 5)
        assert point == PixelPoint(x=4096, y=4096)

    def test_northern_point(self):
        point = pixel_from_lnglat(0, 20, 5)
        assert point.x == 4096
        assert point.y == 3631

    def test_southern_point(self):
        point = pixel_from_lnglat(39, -14, 2)
        assert point.x == 623
        assert point.y == 552

    def test_top_left_of_world(self):
        point = pixel_from_lnglat(-180, 85.0511287798, 0)
        assert point.x == 0
        assert point.y == 0

    def test_scale_enlarges_world(self):
        point = pixel_from_lnglat(0, 0, 1, scale=2)
        assert point == PixelPoint(x=512, y=512)

    def test_poles_stay_finite(self):
        north = pixel_from_lnglat(0, 90, 1)
        south = pixel_from_lnglat(0, -90, 1)
        assert north.y < 0
        assert south.y <= world_size(1)

    def test_x_limited_to_world_size(self):
        point = pixel_from_lnglat(200, 0, 0)
        assert point.x == 256


class TestCenterResolution:
    """Test pixel center resolution for both request modes."""

    def test_center_from_bbox(self):
        center = center_from_bbox([-60, -60, 60, 60], 5, 1, 256)
        assert center.x == 4096
        assert center.y == 4096

    def test_center_from_lnglat(self):
        assert center_from_lnglat(0, 20, 5) == PixelPoint(x=4096, y=3631)

    def test_degenerate_bbox_fails(self):
        with pytest.raises(InvalidExtent, match="Incorrect coordinates"):
            center_from_bbox([0, 0, 0, 0], 5, 4, 256)

    def test_inverted_bbox_fails(self):
        with pytest.raises(InvalidExtent):
            center_from_bbox([60, -60, -60, 60], 5, 1, 256)

    def test_resolve_center_prefers_bbox(self):
        center = resolve_center(5, 1, 256, bbox=[-60, -60, 60, 60])
        assert center == PixelPoint(x=4096, y=4096)

    def test_resolve_center_from_point(self):
        center = resolve_center(2, 1, 256, center=(39, -14))
        assert center == PixelPoint(x=623, y=552)


class TestDimensionsFromBbox:
    """Test output size derived from a bounding box."""

    def test_correct_dimensions(self):
        dims = dimensions_from_bbox([-60, -60, 60, 60], 5, 1, 256, 19008)
        assert dims == Dimensions(width=2730, height=3434)

    def test_degenerate_bbox_fails(self):
        with pytest.raises(InvalidExtent, match="Incorrect coordinates"):
            dimensions_from_bbox([0, 0, 0, 0], 5, 4, 256, 19008)

    def test_inverted_latitudes_fail(self):
        with pytest.raises(InvalidExtent):
            dimensions_from_bbox([-60, 60, 60, -60], 5, 1, 256, 19008)

    def test_too_large(self):
        with pytest.raises(TooLarge, match="Desired image is too large."):
            dimensions_from_bbox([-60, -60, 60, 60], 7, 2, 256, 19008)

    def test_wrong_length_fails(self):
        with pytest.raises(InvalidExtent):
            dimensions_from_bbox([0, 0, 1], 5, 1, 256, 19008)

    @pytest.mark.parametrize("bbox", [[-10, -10, 10, 10], [100, 20, 120, 45], [-179, -80, 179, 80]])
    def test_valid_boxes_have_positive_size(self, bbox):
        dims = dimensions_from_bbox(bbox, 3, 1, 256, 19008)
        assert dims.width > 0
        assert dims.height > 0


class TestScaleDimensions:
    """Test scaling of caller-supplied dimensions."""

    def test_scales_and_rounds(self):
        assert scale_dimensions(200, 150, 1.5) == Dimensions(width=300, height=225)

    def test_too_large(self):
        with pytest.raises(TooLarge, match="Desired image is too large."):
            scale_dimensions(4752, 4752, 4, 19008)

    def test_equal_to_limit_is_too_large(self):
        with pytest.raises(TooLarge):
            scale_dimensions(1000, 10, 1, 1000)

    def test_one_below_limit_is_allowed(self):
        dims = scale_dimensions(999, 999, 1, 1000)
        assert dims == Dimensions(width=999, height=999)

    def test_height_alone_can_be_too_large(self):
        with pytest.raises(TooLarge):
            scale_dimensions(10, 19008, 1, 19008)

    def test_zero_area_fails(self):
        with pytest.raises(InvalidExtent):
            scale_dimensions(0.2, 100, 1)

    def test_resolve_dimensions_from_size(self):
        dims = resolve_dimensions(1, 2, 256, 19008, size=(100, 50))
        assert dims == Dimensions(width=200, height=100)

    def test_resolve_dimensions_from_bbox(self):
        dims = resolve_dimensions(5, 1, 256, 19008, bbox=[-60, -60, 60, 60])
        assert dims == Dimensions(width=2730, height=3434)
