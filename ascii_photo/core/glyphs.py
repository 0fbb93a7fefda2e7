"""Glyph rasterization and pattern matching.

Each palette glyph is rendered once onto a small canvas to get a brightness
template. Image blocks of the same size are then matched to the template
with the smallest Euclidean distance.
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from ascii_photo.core.charsets import Palette
from ascii_photo.core.grid import PixelGrid
from ascii_photo.core.luma import luma_array, palette_indices

BLOCK_SIZE = 8

# Pixel size of the font used for 8x8 templates
TEMPLATE_FONT_SIZE = 8

_FONT_CANDIDATES = [
    "DejaVuSansMono.ttf",
    "cour.ttf",
    "Menlo.ttc",
    "Consolas.ttf",
    "CourierNew.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/System/Library/Fonts/Menlo.ttc",
]


@lru_cache(maxsize=None)
def get_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Get a monospace font for rendering glyphs."""
    for name in _FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except (IOError, OSError):
            continue
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=None)
def glyph_template(glyph: str) -> np.ndarray:
    """Brightness pattern of a glyph drawn white on black.

    Returns:
        Read-only float64 array of shape (BLOCK_SIZE, BLOCK_SIZE), values 0-1.
    """
    img = Image.new("L", (BLOCK_SIZE, BLOCK_SIZE), 0)
    draw = ImageDraw.Draw(img)
    # One bit per pixel, no anti-aliasing
    draw.fontmode = "1"
    draw.text((0, 0), glyph, fill=255, font=get_font(TEMPLATE_FONT_SIZE))
    template = np.asarray(img, dtype=np.float64) / 255.0
    template.setflags(write=False)
    return template


def build_templates(palette: Palette) -> np.ndarray:
    """Stack templates for every palette glyph, shape (n, 8, 8)."""
    return np.stack([glyph_template(g) for g in palette.glyphs])


def block_luma(grid: PixelGrid) -> np.ndarray:
    """Normalized luma of every full 8x8 block.

    Partial blocks at the right and bottom edges are dropped.

    Returns:
        Array of shape (rows, cols, BLOCK_SIZE, BLOCK_SIZE), values 0-1.
    """
    values = luma_array(grid.rgb) / 255.0
    rows = grid.height // BLOCK_SIZE
    cols = grid.width // BLOCK_SIZE
    trimmed = values[: rows * BLOCK_SIZE, : cols * BLOCK_SIZE]
    return trimmed.reshape(rows, BLOCK_SIZE, cols, BLOCK_SIZE).transpose(0, 2, 1, 3)


def block_colors(grid: PixelGrid) -> np.ndarray:
    """Mean RGB of every full 8x8 block, shape (rows, cols, 3) uint8."""
    rows = grid.height // BLOCK_SIZE
    cols = grid.width // BLOCK_SIZE
    rgb = grid.rgb.astype(np.float64)
    trimmed = rgb[: rows * BLOCK_SIZE, : cols * BLOCK_SIZE]
    cells = trimmed.reshape(rows, BLOCK_SIZE, cols, BLOCK_SIZE, 3).transpose(0, 2, 1, 3, 4)
    return np.clip(np.round(cells.mean(axis=(2, 3))), 0, 255).astype(np.uint8)


def match_blocks(blocks: np.ndarray, templates: np.ndarray) -> np.ndarray:
    """Index of the nearest template for every block.

    Args:
        blocks: (rows, cols, 8, 8) block brightness.
        templates: (n, 8, 8) glyph templates in palette order.

    Returns:
        (rows, cols) int array. Ties go to the lowest index.
    """
    diff = blocks[:, :, None, :, :] - templates[None, None, :, :, :]
    distance = np.sqrt((diff**2).sum(axis=(3, 4)))
    return distance.argmin(axis=2)


def pattern_match(
    grid: PixelGrid,
    palette: Palette,
    templates: np.ndarray | None = None,
) -> list[list[str]]:
    """Pick the best-matching glyph for every 8x8 block of the grid."""
    if templates is None:
        templates = build_templates(palette)
    indices = match_blocks(block_luma(grid), templates)
    return [[palette.glyphs[i] for i in row] for row in indices]


# Pixel size of the font used for full-color glyph images
GLYPH_IMAGE_FONT_SIZE = 12


def glyph_cell(font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> tuple[int, int, int, int]:
    """Cell size and draw offset for a font, from the bounding box of "W".

    Returns:
        (cell_width, cell_height, x_offset, y_offset)
    """
    left, top, right, bottom = font.getbbox("W")
    return max(1, int(right - left)), max(1, int(bottom - top)), -int(left), -int(top)


def render_glyph_image(
    grid: PixelGrid,
    palette: Palette,
    font_size: int = GLYPH_IMAGE_FONT_SIZE,
) -> Image.Image:
    """Draw one colored glyph per pixel onto a transparent canvas.

    Each glyph is picked from ``palette`` by luma and filled with the
    pixel's own RGBA color. Fully transparent pixels are skipped.
    """
    font = get_font(font_size)
    cell_w, cell_h, x_off, y_off = glyph_cell(font)

    img = Image.new("RGBA", (grid.width * cell_w, grid.height * cell_h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    indices = palette_indices(luma_array(grid.rgb), len(palette))

    for y in range(grid.height):
        for x in range(grid.width):
            r, g, b, a = grid.pixel(x, y)
            if a == 0:
                continue
            glyph = palette.glyphs[indices[y, x]]
            draw.text(
                (x * cell_w + x_off, y * cell_h + y_off),
                glyph,
                fill=(r, g, b, a),
                font=font,
            )

    return img
