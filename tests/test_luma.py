"""Tests for luma computation and palette indexing."""

import numpy as np
import pytest

from ascii_photo.core.luma import luma, luma_array, palette_index, palette_indices


class TestLuma:
    def test_black(self):
        assert luma(0, 0, 0) == 0

    def test_white(self):
        assert luma(255, 255, 255) == 255

    def test_primaries(self):
        assert luma(255, 0, 0) == 76
        assert luma(0, 255, 0) == 150
        assert luma(0, 0, 255) == 29

    def test_gray_is_identity(self):
        for v in (0, 1, 64, 100, 127, 128, 200, 254, 255):
            assert luma(v, v, v) == v

    @pytest.mark.parametrize("channel", [0, 1, 2])
    def test_monotonic_in_each_channel(self, channel):
        base = [40, 90, 160]
        previous = -1
        for v in range(256):
            rgb = list(base)
            rgb[channel] = v
            current = luma(*rgb)
            assert current >= previous
            previous = current

    def test_array_matches_scalar(self):
        rng = np.random.default_rng(0)
        rgb = rng.integers(0, 256, size=(20, 30, 3), dtype=np.uint8)
        values = luma_array(rgb)
        assert values.shape == (20, 30)
        for y in range(20):
            for x in range(30):
                r, g, b = (int(c) for c in rgb[y, x])
                assert values[y, x] == luma(r, g, b)


class TestPaletteIndex:
    @pytest.mark.parametrize("length", [1, 2, 3, 10, 17, 70])
    def test_always_in_range(self, length):
        for value in range(256):
            idx = palette_index(value, length)
            assert 0 <= idx <= length - 1

    def test_extremes(self):
        assert palette_index(0, 10) == 0
        assert palette_index(255, 10) == 9

    def test_floor(self):
        # 128 / 255 * 9 = 4.517...
        assert palette_index(128, 10) == 4

    def test_array_matches_scalar(self):
        values = np.arange(256)
        indices = palette_indices(values, 10)
        assert list(indices) == [palette_index(v, 10) for v in range(256)]
