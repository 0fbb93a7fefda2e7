"""Tests for the pixel grid and downscaling."""

import numpy as np
import pytest
from PIL import Image

from ascii_photo.core.errors import InvalidDimensionError, UnsupportedPixelFormatError
from ascii_photo.core.grid import PixelGrid, downscale, output_size


class TestPixelGrid:
    def test_rgb_gets_opaque_alpha(self):
        grid = PixelGrid.from_array(np.zeros((2, 3, 3), dtype=np.uint8))
        assert grid.width == 3
        assert grid.height == 2
        assert grid.pixels.shape == (2, 3, 4)
        assert (grid.alpha == 255).all()

    def test_rgba_kept(self):
        data = np.full((2, 2, 4), 7, dtype=np.uint8)
        grid = PixelGrid.from_array(data)
        assert grid.pixel(1, 1) == (7, 7, 7, 7)

    def test_int_array_in_range(self):
        grid = PixelGrid.from_array(np.full((1, 1, 3), 200, dtype=np.int64))
        assert grid.pixels.dtype == np.uint8
        assert grid.pixel(0, 0) == (200, 200, 200, 255)

    def test_out_of_range_raises(self):
        with pytest.raises(UnsupportedPixelFormatError):
            PixelGrid.from_array(np.full((1, 1, 3), 256, dtype=np.int32))
        with pytest.raises(UnsupportedPixelFormatError):
            PixelGrid.from_array(np.full((1, 1, 3), -1, dtype=np.int32))

    def test_float_samples_raise(self):
        with pytest.raises(UnsupportedPixelFormatError):
            PixelGrid.from_array(np.zeros((1, 1, 3), dtype=np.float64))

    def test_bad_shape_raises(self):
        with pytest.raises(UnsupportedPixelFormatError):
            PixelGrid.from_array(np.zeros((4, 4), dtype=np.uint8))
        with pytest.raises(UnsupportedPixelFormatError):
            PixelGrid.from_array(np.zeros((4, 4, 2), dtype=np.uint8))

    def test_constructor_validates(self):
        with pytest.raises(UnsupportedPixelFormatError):
            PixelGrid(np.full((2, 2, 4), 300, dtype=np.int64))
        with pytest.raises(UnsupportedPixelFormatError):
            PixelGrid(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_constructor_narrows_in_range_ints(self):
        grid = PixelGrid(np.full((1, 2, 4), 17, dtype=np.int64))
        assert grid.pixels.dtype == np.uint8
        assert grid.pixel(1, 0) == (17, 17, 17, 17)

    def test_constructor_shares_uint8_buffer(self):
        data = np.zeros((2, 2, 4), dtype=np.uint8)
        assert PixelGrid(data).pixels is data

    def test_pixel_is_x_y(self):
        data = np.zeros((2, 3, 3), dtype=np.uint8)
        data[1, 2] = (10, 20, 30)
        grid = PixelGrid.from_array(data)
        assert grid.pixel(2, 1) == (10, 20, 30, 255)

    def test_copy_is_independent(self):
        grid = PixelGrid.from_array(np.zeros((2, 2, 3), dtype=np.uint8))
        copy = grid.copy()
        copy.pixels[0, 0, 0] = 99
        assert grid.pixels[0, 0, 0] == 0

    def test_image_round_trip(self):
        img = Image.new("RGB", (5, 4), (12, 34, 56))
        grid = PixelGrid.from_image(img)
        assert grid.pixel(4, 3) == (12, 34, 56, 255)
        back = grid.to_image()
        assert back.mode == "RGBA"
        assert back.size == (5, 4)


class TestDownscale:
    def test_output_size(self):
        assert output_size(100, 80, 4) == (25, 10)

    def test_dimensions(self):
        grid = PixelGrid.from_image(Image.new("RGB", (40, 40), (255, 0, 0)))
        small = downscale(grid, 4)
        assert (small.width, small.height) == (10, 5)

    def test_returns_new_grid(self):
        grid = PixelGrid.from_image(Image.new("RGB", (8, 8), (0, 0, 0)))
        small = downscale(grid, 1)
        assert small is not grid
        small.pixels[:] = 255
        assert (grid.rgb == 0).all()

    def test_solid_color_preserved(self):
        grid = PixelGrid.from_image(Image.new("RGB", (32, 32), (50, 100, 150)))
        small = downscale(grid, 4)
        diff = small.rgb.astype(int) - np.array([50, 100, 150])
        assert np.abs(diff).max() <= 1

    def test_zero_scale_raises(self):
        grid = PixelGrid.from_image(Image.new("RGB", (8, 8)))
        with pytest.raises(InvalidDimensionError):
            downscale(grid, 0)

    def test_scale_too_large_raises(self):
        grid = PixelGrid.from_image(Image.new("RGB", (8, 8)))
        with pytest.raises(InvalidDimensionError, match="reduces"):
            downscale(grid, 5)
