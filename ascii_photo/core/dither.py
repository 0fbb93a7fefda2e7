"""Floyd-Steinberg error diffusion and Bayer ordered dithering."""

from __future__ import annotations

import numpy as np

from ascii_photo.core.grid import PixelGrid
from ascii_photo.core.luma import luma

# Luma below this quantizes to black
FS_THRESHOLD = 128

# (dx, dy, weight / 16), in the order errors are pushed
FS_NEIGHBOURS = [
    (1, 0, 7),
    (-1, 1, 3),
    (0, 1, 5),
    (1, 1, 1),
]

BAYER_SIZE = 4
BAYER_MATRIX = np.array(
    [
        [0, 8, 2, 10],
        [12, 4, 14, 6],
        [3, 11, 1, 9],
        [15, 7, 13, 5],
    ]
)


def floyd_steinberg(grid: PixelGrid) -> PixelGrid:
    """Quantize a grid to black and white with Floyd-Steinberg dithering.

    Works on a private copy; the input grid is left untouched. Pixels are
    visited in raster order, so this cannot be split across rows.

    Returns:
        New grid whose RGB samples are all 0 or 255 gray. Alpha is kept.
    """
    img = grid.rgb.astype(np.int32)
    h, w = img.shape[:2]

    for y in range(h):
        for x in range(w):
            r, g, b = img[y, x]
            old = luma(r, g, b)
            new = 0 if old < FS_THRESHOLD else 255
            img[y, x] = new
            err = old - new
            if err == 0:
                continue

            for dx, dy, weight in FS_NEIGHBOURS:
                nx, ny = x + dx, y + dy
                if 0 <= nx < w and ny < h:
                    # Shares truncate toward zero
                    share = int(err * weight / 16)
                    img[ny, nx] = np.clip(img[ny, nx] + share, 0, 255)

    result = grid.copy()
    result.pixels[:, :, :3] = img.astype(np.uint8)
    return result


def bayer_threshold(x: int, y: int) -> float:
    """Ordered-dither threshold in (0, 1] for pixel (x, y)."""
    return (BAYER_MATRIX[x % BAYER_SIZE, y % BAYER_SIZE] + 1) / (BAYER_SIZE * BAYER_SIZE)


def bayer_threshold_map(width: int, height: int) -> np.ndarray:
    """Thresholds for a whole image, shape (height, width)."""
    ys, xs = np.mgrid[0:height, 0:width]
    return (BAYER_MATRIX[xs % BAYER_SIZE, ys % BAYER_SIZE] + 1) / (BAYER_SIZE * BAYER_SIZE)


def bayer_dark_mask(luma_values: np.ndarray) -> np.ndarray:
    """True where a pixel falls below its tiled Bayer threshold.

    Dark pixels take the first palette glyph. The test is `luma < threshold`,
    not `luma > threshold`: the latter would send black pixels to the
    lightest glyph. Thresholds lie in [1/16, 1], so black is always dark and
    white never is.

    Args:
        luma_values: 2D array of luma (0-255).
    """
    h, w = luma_values.shape
    return luma_values / 255.0 < bayer_threshold_map(w, h)
