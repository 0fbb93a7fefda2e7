"""Pre-processing applied to the grid before glyph selection.

Sharpen → invert → brightness/contrast, each over R, G, B only.
Every transform reads the full previous state before writing.
"""

from __future__ import annotations

import numpy as np

from ascii_photo.core.grid import PixelGrid

SHARPEN_KERNEL = np.array(
    [
        [0, -1, 0],
        [-1, 5, -1],
        [0, -1, 0],
    ]
)


def sharpen(grid: PixelGrid) -> None:
    """Apply the 3x3 sharpening kernel to interior pixels.

    Border rows and columns keep their original values.
    """
    h, w = grid.height, grid.width
    if h < 3 or w < 3:
        return

    src = grid.rgb.astype(np.int32)
    acc = np.zeros((h - 2, w - 2, 3), dtype=np.int32)
    for ky in range(3):
        for kx in range(3):
            weight = SHARPEN_KERNEL[ky, kx]
            if weight:
                acc += weight * src[ky : ky + h - 2, kx : kx + w - 2]

    grid.pixels[1:-1, 1:-1, :3] = np.clip(acc, 0, 255).astype(np.uint8)


def invert(grid: PixelGrid) -> None:
    grid.pixels[:, :, :3] = 255 - grid.pixels[:, :, :3]


def adjust_brightness_contrast(grid: PixelGrid, brightness: int, contrast: int) -> None:
    """Apply brightness and contrast adjustments.

    brightness: -100 to 100 (offset, in hundredths of full scale)
    contrast: -100 to 100 (gain of 1 + contrast/100)
    """
    b = brightness / 100.0
    factor = 1.0 + contrast / 100.0

    rgb = grid.rgb.astype(np.float64)
    result = np.floor((rgb / 255.0 * factor + b) * 255.0 + 0.5)
    grid.pixels[:, :, :3] = np.clip(result, 0, 255).astype(np.uint8)


def apply_adjustments(
    grid: PixelGrid,
    brightness: int = 0,
    contrast: int = 0,
    invert_colors: bool = False,
    sharpen_image: bool = False,
) -> None:
    """Run the enabled adjustments over the grid, in place."""
    if sharpen_image:
        sharpen(grid)
    if invert_colors:
        invert(grid)
    if brightness != 0 or contrast != 0:
        adjust_brightness_contrast(grid, brightness, contrast)
