"""ASCII preview widget for the TUI."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from ascii_photo.core.color import hex_color
from ascii_photo.core.processor import GlyphFrame

PLACEHOLDER = "No image loaded. Press 'o' to open a file."


def frame_to_rich_text(frame: GlyphFrame, color: bool) -> Text:
    """Convert a glyph frame to a Rich Text object.

    Glyphs are styled with their source color when ``color`` is set and the
    frame came from a color-aware strategy.
    """
    if not (color and frame.color_aware):
        return Text("\n".join(frame.lines))

    text = Text()
    for y, row in enumerate(frame.rows):
        if y > 0:
            text.append("\n")
        for x, glyph in enumerate(row):
            r, g, b = (int(c) for c in frame.colors[y, x])
            text.append(glyph, style=hex_color(r, g, b))
    return text


class AsciiPreview(Widget):
    """Widget that displays converted ASCII art."""

    DEFAULT_CSS = """
    AsciiPreview {
        width: 1fr;
        height: 1fr;
        overflow: auto;
        background: $surface;
    }

    AsciiPreview #preview-content {
        width: auto;
        height: auto;
    }
    """

    class FrameUpdated(Message):
        """Posted when a new frame is displayed."""

        def __init__(self, width: int, height: int) -> None:
            super().__init__()
            self.width = width
            self.height = height

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._current_frame: GlyphFrame | None = None

    def compose(self) -> ComposeResult:
        yield Static(PLACEHOLDER, id="preview-content")

    def update_frame(self, frame: GlyphFrame, color: bool = False) -> None:
        """Update the preview with a new glyph frame."""
        self._current_frame = frame
        content = self.query_one("#preview-content", Static)
        content.update(frame_to_rich_text(frame, color))
        self.post_message(self.FrameUpdated(frame.width, frame.height))

    def clear(self) -> None:
        self._current_frame = None
        content = self.query_one("#preview-content", Static)
        content.update(PLACEHOLDER)

    @property
    def current_frame(self) -> GlyphFrame | None:
        return self._current_frame
