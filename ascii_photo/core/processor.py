"""Image conversion pipeline.

Downscale → sharpen/invert/brightness/contrast → glyph selection → render.
"""

from __future__ import annotations

import dataclasses
import hashlib
from dataclasses import dataclass
from enum import Enum

import numpy as np
from PIL import Image

from ascii_photo.core.adjust import apply_adjustments
from ascii_photo.core.charsets import DEFAULT_PALETTE, EXTENDED_PALETTE, Palette
from ascii_photo.core.color import colorize_line, wrap_html
from ascii_photo.core.dither import bayer_dark_mask, floyd_steinberg
from ascii_photo.core.glyphs import block_colors, pattern_match, render_glyph_image
from ascii_photo.core.grid import PixelGrid, downscale
from ascii_photo.core.luma import luma_array


class DitherMode(str, Enum):
    NONE = "none"
    FLOYD_STEINBERG = "floyd-steinberg"
    BAYER = "bayer"
    PATTERN_MATCH = "advanced"
    EXTENDED_PALETTE = "super"


class OutputMode(str, Enum):
    TEXT = "text"
    HTML = "html"
    UNIVERSAL = "universal"


def clamp_delta(value: int) -> int:
    return max(-100, min(100, int(value)))


@dataclass(frozen=True)
class Settings:
    """Conversion settings that affect output."""

    scale: int = 4
    palette: Palette = DEFAULT_PALETTE
    color: bool = False
    dither: DitherMode = DitherMode.NONE
    brightness: int = 0  # -100 to 100
    contrast: int = 0  # -100 to 100
    invert: bool = False
    sharpen: bool = False
    output: OutputMode = OutputMode.TEXT

    def __post_init__(self) -> None:
        if isinstance(self.palette, str):
            object.__setattr__(self, "palette", Palette.from_string(self.palette))
        object.__setattr__(self, "dither", DitherMode(self.dither))
        object.__setattr__(self, "output", OutputMode(self.output))
        object.__setattr__(self, "brightness", clamp_delta(self.brightness))
        object.__setattr__(self, "contrast", clamp_delta(self.contrast))

    def replace(self, **changes) -> Settings:
        return dataclasses.replace(self, **changes)

    def hash(self) -> str:
        """Deterministic hash for cache keying."""
        data = (
            f"{self.scale}:{self.palette.glyphs!r}:{self.color}:"
            f"{self.dither.value}:{self.brightness}:{self.contrast}:"
            f"{self.invert}:{self.sharpen}:{self.output.value}"
        )
        return hashlib.md5(data.encode()).hexdigest()[:12]


@dataclass
class GlyphFrame:
    """Glyphs chosen for a grid, with the color each one stands for."""

    rows: list[list[str]]
    colors: np.ndarray  # (rows, cols, 3) uint8
    color_aware: bool = True

    @property
    def lines(self) -> list[str]:
        return ["".join(row) for row in self.rows]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0


@dataclass
class ConversionResult:
    """Text (plain or markup) or a rendered image, depending on output mode."""

    output: OutputMode
    text: str | None = None
    image: Image.Image | None = None


def select_glyphs(grid: PixelGrid, settings: Settings) -> GlyphFrame:
    """Run the configured dither/match strategy over an adjusted grid."""
    palette = settings.palette
    mode = settings.dither

    if mode == DitherMode.FLOYD_STEINBERG:
        dithered = floyd_steinberg(grid)
        rows = palette.map_array(luma_array(dithered.rgb))
        return GlyphFrame(rows, grid.rgb.copy())

    if mode == DitherMode.BAYER:
        dark = bayer_dark_mask(luma_array(grid.rgb))
        rows = [[palette.darkest if d else palette.lightest for d in row] for row in dark]
        return GlyphFrame(rows, grid.rgb.copy())

    if mode == DitherMode.PATTERN_MATCH:
        return GlyphFrame(pattern_match(grid, palette), block_colors(grid))

    if mode == DitherMode.EXTENDED_PALETTE:
        rows = EXTENDED_PALETTE.map_array(luma_array(grid.rgb))
        return GlyphFrame(rows, grid.rgb.copy(), color_aware=False)

    rows = palette.map_array(luma_array(grid.rgb))
    return GlyphFrame(rows, grid.rgb.copy())


def _colored_rows(frame: GlyphFrame) -> list[str]:
    return [colorize_line(row, frame.colors[y]) for y, row in enumerate(frame.rows)]


def render_text(frame: GlyphFrame, color: bool = False) -> str:
    """One line per glyph row, each ending in a newline.

    With ``color`` set, glyphs from color-aware strategies are wrapped in
    colored spans.
    """
    if color and frame.color_aware:
        lines = _colored_rows(frame)
    else:
        lines = frame.lines
    return "".join(f"{line}\n" for line in lines)


def render_html(frame: GlyphFrame) -> str:
    """A standalone HTML page with every glyph in its own color."""
    body = "".join(f"{line}\n" for line in _colored_rows(frame))
    return wrap_html(body)


def adjust_grid(grid: PixelGrid, settings: Settings) -> None:
    apply_adjustments(
        grid,
        brightness=settings.brightness,
        contrast=settings.contrast,
        invert_colors=settings.invert,
        sharpen_image=settings.sharpen,
    )


def process_grid(grid: PixelGrid, settings: Settings) -> ConversionResult:
    """Convert a grid that is already at output resolution.

    The grid is adjusted in place.
    """
    adjust_grid(grid, settings)

    if settings.output == OutputMode.UNIVERSAL:
        return ConversionResult(settings.output, image=render_glyph_image(grid, EXTENDED_PALETTE))

    frame = select_glyphs(grid, settings)
    if settings.output == OutputMode.HTML:
        return ConversionResult(settings.output, text=render_html(frame))
    return ConversionResult(settings.output, text=render_text(frame, settings.color))


def process_image(image: PixelGrid | Image.Image, settings: Settings) -> ConversionResult:
    """Process a full-size image through the whole pipeline.

    The caller's grid is never modified.

    Raises:
        InvalidDimensionError: the scale factor leaves nothing to convert.
    """
    if isinstance(image, Image.Image):
        image = PixelGrid.from_image(image)
    grid = downscale(image, settings.scale)
    return process_grid(grid, settings)


def preview_frame(image: PixelGrid, settings: Settings) -> GlyphFrame:
    """Glyphs for a full-size image without rendering, for live previews."""
    grid = downscale(image, settings.scale)
    adjust_grid(grid, settings)
    return select_glyphs(grid, settings)
