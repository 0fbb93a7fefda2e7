"""Owned RGBA pixel buffer shared by every conversion stage.

Pixels live in one contiguous ``(height, width, 4)`` uint8 array indexed
``[y, x]``. Decoding is done by Pillow; everything after that works on the
array directly.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

from ascii_photo.core.errors import InvalidDimensionError, UnsupportedPixelFormatError

# Glyph cells are roughly twice as tall as they are wide.
CHAR_ASPECT = 2


def _check_samples(arr: np.ndarray, channels: tuple[int, ...]) -> None:
    if arr.ndim != 3 or arr.shape[2] not in channels:
        expected = "|".join(str(c) for c in channels)
        raise UnsupportedPixelFormatError(
            f"Expected (height, width, {expected}) samples, got shape {arr.shape}"
        )
    if arr.dtype != np.uint8:
        if not np.issubdtype(arr.dtype, np.integer):
            raise UnsupportedPixelFormatError(
                f"Expected integer samples, got {arr.dtype}"
            )
        if arr.size and (arr.min() < 0 or arr.max() > 255):
            raise UnsupportedPixelFormatError(
                f"Samples out of range 0-255: min={arr.min()}, max={arr.max()}"
            )


@dataclass
class PixelGrid:
    """A 2-D array of (R, G, B, A) samples.

    Raises:
        UnsupportedPixelFormatError: ``pixels`` is not an (h, w, 4) array of
            integers in 0-255.
    """

    pixels: np.ndarray  # (height, width, 4) uint8

    def __post_init__(self) -> None:
        arr = np.asarray(self.pixels)
        _check_samples(arr, (4,))
        if arr.dtype != np.uint8 or not arr.flags.c_contiguous:
            arr = np.ascontiguousarray(arr, dtype=np.uint8)
        self.pixels = arr

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def rgb(self) -> np.ndarray:
        """View of the color channels, shape (height, width, 3)."""
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def copy(self) -> PixelGrid:
        return PixelGrid(self.pixels.copy())

    @classmethod
    def from_array(cls, data) -> PixelGrid:
        """Build a grid from an (h, w, 3) or (h, w, 4) integer array.

        RGB input gets an opaque alpha channel.

        Raises:
            UnsupportedPixelFormatError: wrong shape, non-integer samples,
                or samples outside 0-255.
        """
        arr = np.asarray(data)
        _check_samples(arr, (3, 4))
        arr = arr.astype(np.uint8)
        if arr.shape[2] == 3:
            opaque = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, opaque], axis=2)
        return cls(np.ascontiguousarray(arr))

    @classmethod
    def from_image(cls, img: Image.Image) -> PixelGrid:
        """Decode a PIL image of any mode into RGBA samples."""
        return cls(np.array(img.convert("RGBA"), dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels, mode="RGBA")


def output_size(width: int, height: int, scale: int) -> tuple[int, int]:
    """Glyph grid dimensions for an image of the given size."""
    return width // scale, height // (scale * CHAR_ASPECT)


def downscale(grid: PixelGrid, scale: int) -> PixelGrid:
    """Shrink a grid to one sample per glyph cell.

    Width is divided by ``scale`` and height by ``2 * scale`` to compensate
    for tall glyph cells. Always returns a new grid.

    Raises:
        InvalidDimensionError: scale is not positive or leaves a zero-sized grid.
    """
    if scale < 1:
        raise InvalidDimensionError(f"Scale factor must be positive, got {scale}")
    new_w, new_h = output_size(grid.width, grid.height, scale)
    if new_w == 0 or new_h == 0:
        raise InvalidDimensionError(
            f"Scale factor {scale} reduces {grid.width}x{grid.height} "
            f"image to {new_w}x{new_h}"
        )
    resized = grid.to_image().resize((new_w, new_h), Image.Resampling.BICUBIC)
    return PixelGrid.from_image(resized)
