"""HTML color markup for glyph output."""

from __future__ import annotations

import html
import re
from typing import Sequence

import numpy as np

HTML_HEADER = (
    "<!DOCTYPE html>\n<html>\n<head>\n"
    "<title>ASCII Art</title>\n"
    "<style>\n"
    "body { background-color: #000; font-family: 'Courier New', monospace; "
    "font-size: 1px; line-height: 1; }\n"
    ".pixel { display: inline-block; width: 10px; height: 10px; }\n"
    "pre { margin: 0; line-height: 1; }\n"
    "</style>\n</head>\n<body>\n<pre>\n"
)

HTML_FOOTER = "</pre>\n</body>\n</html>"

_TAG_RE = re.compile(r"<[^>]*>")


def hex_color(r: int, g: int, b: int) -> str:
    """Format an RGB color as ``#RRGGBB`` (uppercase)."""
    return f"#{r:02X}{g:02X}{b:02X}"


def colorize_glyph(glyph: str, r: int, g: int, b: int) -> str:
    """Wrap a glyph in a colored span."""
    return f'<span style="color:{hex_color(r, g, b)};">{html.escape(glyph, quote=False)}</span>'


def colorize_line(glyphs: Sequence[str], colors: np.ndarray) -> str:
    """Colorize a line of glyphs using per-glyph RGB values.

    Args:
        glyphs: glyphs for this line.
        colors: array of shape (len(glyphs), 3) with RGB values (uint8).
    """
    parts: list[str] = []
    for i, ch in enumerate(glyphs):
        r, g, b = int(colors[i, 0]), int(colors[i, 1]), int(colors[i, 2])
        parts.append(colorize_glyph(ch, r, g, b))
    return "".join(parts)


def wrap_html(body: str) -> str:
    """Embed colored rows in a minimal HTML page."""
    return f"{HTML_HEADER}{body}{HTML_FOOTER}"


def strip_markup(text: str) -> str:
    """Remove tags and decode entities, leaving only the glyphs."""
    return html.unescape(_TAG_RE.sub("", text))


def html_body(document: str) -> str:
    """The content of the ``<pre>`` block of a page built by wrap_html."""
    start = document.index(HTML_HEADER) + len(HTML_HEADER)
    end = document.rindex(HTML_FOOTER)
    return document[start:end]
