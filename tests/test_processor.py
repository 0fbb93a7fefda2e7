"""End-to-end tests for the conversion pipeline."""

import numpy as np
import pytest
from PIL import Image

from ascii_photo.core.charsets import DEFAULT_PALETTE, EXTENDED_PALETTE, Palette
from ascii_photo.core.color import html_body, strip_markup
from ascii_photo.core.errors import (
    EmptyPaletteError,
    InvalidDimensionError,
    UnsupportedPixelFormatError,
)
from ascii_photo.core.glyphs import get_font, glyph_cell
from ascii_photo.core.grid import PixelGrid
from ascii_photo.core.processor import (
    DitherMode,
    GlyphFrame,
    OutputMode,
    Settings,
    preview_frame,
    process_grid,
    process_image,
    render_text,
    select_glyphs,
)


def _solid(value, width, height, alpha=255):
    data = np.zeros((height, width, 4), dtype=np.uint8)
    data[:, :, :3] = value
    data[:, :, 3] = alpha
    return PixelGrid.from_array(data)


def _random(width, height, seed=0):
    rng = np.random.default_rng(seed)
    return PixelGrid.from_array(rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.scale == 4
        assert s.palette == DEFAULT_PALETTE
        assert s.dither == DitherMode.NONE
        assert s.output == OutputMode.TEXT
        assert not s.color

    def test_deltas_clamped(self):
        s = Settings(brightness=250, contrast=-300)
        assert s.brightness == 100
        assert s.contrast == -100

    def test_string_values_coerced(self):
        s = Settings(palette="#. ", dither="bayer", output="html")
        assert s.palette.glyphs == ("#", ".", " ")
        assert s.dither == DitherMode.BAYER
        assert s.output == OutputMode.HTML

    def test_empty_palette_raises(self):
        with pytest.raises(EmptyPaletteError):
            Settings(palette="")

    def test_hash(self):
        assert Settings().hash() == Settings().hash()
        assert Settings().hash() != Settings(invert=True).hash()
        assert Settings().hash() != Settings(dither=DitherMode.BAYER).hash()

    def test_replace(self):
        s = Settings().replace(brightness=500)
        assert s.brightness == 100

    def test_hash_multi_character_palettes_distinct(self):
        first = Settings(palette=Palette(("a|", "b")))
        second = Settings(palette=Palette(("a", "|b")))
        assert first.hash() != second.hash()

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Settings().scale = 2


class TestTextOutput:
    def test_all_black(self):
        result = process_grid(_solid(0, 4, 2), Settings())
        assert result.output == OutputMode.TEXT
        assert result.text == "####\n####\n"
        assert result.image is None

    def test_all_white(self):
        result = process_grid(_solid(255, 3, 1), Settings())
        assert result.text == "   \n"

    def test_custom_palette(self):
        settings = Settings(palette=Palette.from_user_string(" .o#"))
        result = process_grid(_solid(0, 2, 1), settings)
        assert result.text == "##\n"

    def test_brightness_on_mid_gray(self):
        result = process_grid(_solid(128, 1, 1), Settings(brightness=50))
        assert result.text == " \n"

    def test_invert(self):
        result = process_grid(_solid(0, 2, 1), Settings(invert=True))
        assert result.text == "  \n"

    def test_bayer_extremes(self):
        grid = _solid(0, 2, 2)
        grid.pixels[0, 1, :3] = 255
        grid.pixels[1, 0, :3] = 255
        result = process_grid(grid, Settings(dither=DitherMode.BAYER))
        assert result.text == "# \n #\n"

    def test_bayer_mid_gray(self):
        result = process_grid(_solid(100, 2, 2), Settings(dither=DitherMode.BAYER))
        assert result.text == " #\n# \n"

    def test_bayer_uses_only_extremes(self):
        result = process_grid(_random(9, 7, seed=2), Settings(dither=DitherMode.BAYER))
        assert set(result.text) <= {"#", " ", "\n"}

    def test_floyd_steinberg_uses_only_extremes(self):
        settings = Settings(dither=DitherMode.FLOYD_STEINBERG)
        result = process_grid(_random(9, 7, seed=3), settings)
        assert set(result.text) <= {"#", " ", "\n"}
        assert len(result.text.splitlines()) == 7

    def test_extended_palette_ignores_given_palette(self):
        settings = Settings(palette="☺☻", dither=DitherMode.EXTENDED_PALETTE)
        result = process_grid(_random(5, 4, seed=4), settings)
        glyphs = set(result.text) - {"\n"}
        assert glyphs <= set(EXTENDED_PALETTE.glyphs)
        assert glyphs.isdisjoint({"☺", "☻"})

    def test_extended_palette_black_is_blank(self):
        settings = Settings(dither=DitherMode.EXTENDED_PALETTE)
        assert process_grid(_solid(0, 2, 1), settings).text == "  \n"

    def test_pattern_match_block_grid(self):
        settings = Settings(dither=DitherMode.PATTERN_MATCH)
        result = process_grid(_random(20, 17, seed=5), settings)
        lines = result.text.splitlines()
        assert len(lines) == 2
        assert all(len(line) == 2 for line in lines)


class TestColorOutput:
    def test_spans(self):
        result = process_grid(_solid((255, 0, 0), 2, 1), Settings(color=True))
        span = '<span style="color:#FF0000;">'
        assert result.text.count(span) == 2
        assert result.text.endswith("</span>\n")

    def test_strip_matches_plain(self):
        grid = _random(6, 5, seed=6)
        plain = process_grid(grid.copy(), Settings()).text
        colored = process_grid(grid.copy(), Settings(color=True)).text
        assert strip_markup(colored) == plain

    def test_extended_palette_ignores_color(self):
        grid = _random(6, 5, seed=7)
        settings = Settings(dither=DitherMode.EXTENDED_PALETTE)
        plain = process_grid(grid.copy(), settings).text
        colored = process_grid(grid.copy(), settings.replace(color=True)).text
        assert colored == plain
        assert "<span" not in colored

    def test_pattern_match_color_is_block_mean(self):
        grid = _solid((40, 80, 120), 8, 8)
        settings = Settings(dither=DitherMode.PATTERN_MATCH, color=True)
        result = process_grid(grid, settings)
        assert '<span style="color:#285078;">' in result.text


class TestHtmlOutput:
    def test_page(self):
        result = process_grid(_solid(0, 2, 1), Settings(output=OutputMode.HTML))
        assert result.text.startswith("<!DOCTYPE html>")
        assert html_body(result.text) == (
            '<span style="color:#000000;">#</span>' * 2 + "\n"
        )

    @pytest.mark.parametrize("mode", list(DitherMode))
    def test_same_glyphs_as_text(self, mode):
        grid = _random(16, 16, seed=8)
        text = process_grid(grid.copy(), Settings(dither=mode)).text
        page = process_grid(grid.copy(), Settings(dither=mode, output=OutputMode.HTML)).text
        assert strip_markup(html_body(page)) == text


class TestUniversalOutput:
    def test_image(self):
        cell_w, cell_h, _, _ = glyph_cell(get_font(12))
        result = process_grid(_solid(255, 3, 2), Settings(output=OutputMode.UNIVERSAL))
        assert result.text is None
        assert result.image.mode == "RGBA"
        assert result.image.size == (3 * cell_w, 2 * cell_h)

    def test_transparent_source(self):
        result = process_grid(_solid(255, 3, 2, alpha=0), Settings(output=OutputMode.UNIVERSAL))
        assert result.image.getbbox() is None


class TestProcessImage:
    def test_scaling(self):
        result = process_image(_solid(0, 16, 16), Settings())
        assert result.text == "####\n####\n"

    def test_accepts_pil_image(self):
        img = Image.new("RGB", (16, 16), (255, 255, 255))
        result = process_image(img, Settings(scale=8))
        assert result.text == "  \n"

    def test_caller_grid_unchanged(self):
        grid = _random(16, 16, seed=9)
        before = grid.pixels.copy()
        process_image(grid, Settings(invert=True, sharpen=True, brightness=30))
        assert np.array_equal(grid.pixels, before)

    def test_scale_too_large(self):
        with pytest.raises(InvalidDimensionError):
            process_image(_solid(0, 8, 8), Settings(scale=5))

    def test_out_of_range_grid_rejected(self):
        with pytest.raises(UnsupportedPixelFormatError):
            process_grid(PixelGrid(np.full((2, 2, 4), 300, dtype=np.int64)), Settings())

    def test_float_grid_rejected(self):
        with pytest.raises(UnsupportedPixelFormatError):
            process_image(PixelGrid(np.zeros((16, 16, 4), dtype=np.float32)), Settings())


class TestPreview:
    def test_frame(self):
        frame = preview_frame(_solid(0, 16, 16), Settings())
        assert isinstance(frame, GlyphFrame)
        assert frame.lines == ["####", "####"]
        assert (frame.width, frame.height) == (4, 2)

    def test_select_glyphs_matches_render(self):
        grid = _random(8, 6, seed=10)
        frame = select_glyphs(grid, Settings())
        assert render_text(frame) == process_grid(grid.copy(), Settings()).text

    def test_render_text_color_flag(self):
        frame = select_glyphs(_solid(0, 1, 1), Settings())
        assert render_text(frame) == "#\n"
        assert render_text(frame, color=True) == '<span style="color:#000000;">#</span>\n'
