"""Terminal size detection utilities."""

from __future__ import annotations

import shutil

from ascii_photo.core.grid import output_size


def get_terminal_size(
    fallback_width: int = 80,
    fallback_height: int = 24,
) -> tuple[int, int]:
    """Get current terminal size in columns and rows.

    Returns (width, height). Falls back to provided defaults
    if terminal size cannot be determined.
    """
    try:
        size = shutil.get_terminal_size(fallback=(fallback_width, fallback_height))
        return size.columns, size.lines
    except (ValueError, OSError):
        return fallback_width, fallback_height


def fit_scale(
    img_width: int,
    img_height: int,
    max_width: int | None = None,
    max_height: int | None = None,
) -> int:
    """Smallest scale factor whose glyph grid fits in the given area.

    Args:
        img_width: original image width in pixels.
        img_height: original image height in pixels.
        max_width: maximum glyph columns (defaults to terminal width).
        max_height: maximum glyph rows (defaults to terminal height - 4 for UI).
    """
    if max_width is None or max_height is None:
        tw, th = get_terminal_size()
        if max_width is None:
            max_width = tw
        if max_height is None:
            max_height = max(th - 4, 10)

    max_width = max(1, max_width)
    max_height = max(1, max_height)

    scale = 1
    while True:
        cols, rows = output_size(img_width, img_height, scale)
        if cols <= max_width and rows <= max_height:
            return scale
        scale += 1
