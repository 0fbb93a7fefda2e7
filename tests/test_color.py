"""Tests for HTML color markup."""

import numpy as np

from ascii_photo.core.color import (
    HTML_FOOTER,
    HTML_HEADER,
    colorize_glyph,
    colorize_line,
    hex_color,
    html_body,
    strip_markup,
    wrap_html,
)


class TestHexColor:
    def test_uppercase_padded(self):
        assert hex_color(255, 10, 0) == "#FF0A00"
        assert hex_color(0, 0, 0) == "#000000"


class TestColorize:
    def test_span(self):
        assert colorize_glyph("#", 255, 0, 0) == '<span style="color:#FF0000;">#</span>'

    def test_escapes_markup(self):
        assert colorize_glyph("<", 0, 0, 0) == '<span style="color:#000000;">&lt;</span>'
        assert colorize_glyph("&", 0, 0, 0).endswith(">&amp;</span>")

    def test_line(self):
        colors = np.array([[255, 0, 0], [0, 255, 0]], dtype=np.uint8)
        line = colorize_line(["a", "b"], colors)
        assert line == (
            '<span style="color:#FF0000;">a</span>'
            '<span style="color:#00FF00;">b</span>'
        )


class TestStripMarkup:
    def test_strips_spans(self):
        colors = np.zeros((3, 3), dtype=np.uint8)
        assert strip_markup(colorize_line(["<", "&", " "], colors)) == "<& "

    def test_plain_text_unchanged(self):
        assert strip_markup("##@\n  .\n") == "##@\n  .\n"


class TestPage:
    def test_wrap(self):
        page = wrap_html("x\n")
        assert page.startswith("<!DOCTYPE html>")
        assert page.endswith(HTML_FOOTER)
        assert "<title>ASCII Art</title>" in page
        assert HTML_HEADER.endswith("<pre>\n")

    def test_body_round_trip(self):
        body = '<span style="color:#FFFFFF;">#</span>\n'
        assert html_body(wrap_html(body)) == body
