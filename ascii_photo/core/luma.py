"""Pixel brightness and palette indexing.

Luma uses fixed BT.601 weights rounded half-up to an integer in [0, 255].
The scalar and array forms perform the same float operations so they agree
bit for bit.
"""

from __future__ import annotations

import numpy as np

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def luma(r: int, g: int, b: int) -> int:
    """Brightness of one pixel."""
    value = int(0.299 * r + 0.587 * g + 0.114 * b + 0.5)
    return min(255, max(0, value))


def luma_array(rgb: np.ndarray) -> np.ndarray:
    """Brightness of every pixel in an (..., 3) array, as int64."""
    rgb = rgb.astype(np.float64)
    value = np.floor(
        0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2] + 0.5
    )
    return np.clip(value, 0, 255).astype(np.int64)


def palette_index(value: int, length: int) -> int:
    """Map a luma value to an index into a palette of ``length`` glyphs."""
    idx = int(value / 255.0 * (length - 1))
    return max(0, min(idx, length - 1))


def palette_indices(values: np.ndarray, length: int) -> np.ndarray:
    indices = (values / 255.0 * (length - 1)).astype(np.int64)
    return np.clip(indices, 0, length - 1)
