"""Glyph palettes for ASCII art conversion.

A palette is ordered by the brightness of the pixels it stands for:
index 0 is used for the darkest pixels, the last index for the lightest.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from ascii_photo.core.errors import EmptyPaletteError
from ascii_photo.core.luma import palette_index, palette_indices


class CharsetName(str, Enum):
    DEFAULT = "default"
    SIMPLE = "simple"
    DETAILED = "detailed"
    BLOCKS = "blocks"


# Ink-heavy glyphs for dark pixels, blank for light ones
DEFAULT_CHARS = "#@%=+;:-. "

SIMPLE_CHARS = "@%#*+=-:. "

DETAILED_CHARS = (
    "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft"
    "/\\|()1{}[]?-_+~<>i!lI;:,\"^`'. "
)

# Full block down to blank
BLOCK_CHARS = "█▓▒░ "


@dataclass(frozen=True)
class Palette:
    glyphs: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.glyphs:
            raise EmptyPaletteError("Palette must contain at least one glyph")

    @classmethod
    def from_string(cls, chars: str) -> Palette:
        """Palette with the first character used for the darkest pixels."""
        return cls(tuple(chars))

    @classmethod
    def from_user_string(cls, chars: str) -> Palette:
        """Palette from a user-supplied string, first character lightest.

        Custom palettes are written light-to-dark on the command line, so
        the string is reversed.
        """
        return cls(tuple(reversed(chars)))

    def __len__(self) -> int:
        return len(self.glyphs)

    @property
    def darkest(self) -> str:
        return self.glyphs[0]

    @property
    def lightest(self) -> str:
        return self.glyphs[-1]

    def glyph_for_luma(self, value: int) -> str:
        """Map a luma value (0-255) to a glyph."""
        return self.glyphs[palette_index(value, len(self.glyphs))]

    def map_array(self, luma: np.ndarray) -> list[list[str]]:
        """Map a 2D luma array (0-255) to rows of glyphs."""
        indices = palette_indices(luma, len(self.glyphs))
        return [[self.glyphs[i] for i in row] for row in indices]


def _extended_chars() -> str:
    chars: list[str] = []
    chars += [" ", ".", ",", "'", "`", ":", ";", "!", "i", "t", "l", "j"]
    chars += ["-", "_", "^", "/", "\\", "(", ")", "[", "]", "{", "}", "<", ">", "~", '"']
    chars += ["+", "=", "s", "r", "n", "u", "v", "c", "o", "x", "z", "a", "e", "E", "F", "P", "p"]
    chars += ["b", "d", "q", "g", "h", "k", "y", "B", "D", "O", "Q", "G", "H", "K", "S", "M", "W"]
    chars += ["N", "M", "W", "V", "Z", "X", "C", "L", "#", "@", "%", "&"]
    chars += ["█", "▓", "▒", "░"]
    # Shades, block elements, box drawing
    chars += [chr(i) for i in range(0x2591, 0x2594)]
    chars += [chr(i) for i in range(0x2580, 0x25A0)]
    chars += [chr(i) for i in range(0x2500, 0x2580)]
    # Deduplicated, order-preserving
    return "".join(dict.fromkeys(chars))


# Sparse to dense; used by the "super" strategy and the glyph image renderer
EXTENDED_CHARS = _extended_chars()

DEFAULT_PALETTE = Palette.from_string(DEFAULT_CHARS)
EXTENDED_PALETTE = Palette.from_string(EXTENDED_CHARS)

CHARSETS: dict[CharsetName, Palette] = {
    CharsetName.DEFAULT: DEFAULT_PALETTE,
    CharsetName.SIMPLE: Palette.from_string(SIMPLE_CHARS),
    CharsetName.DETAILED: Palette.from_string(DETAILED_CHARS),
    CharsetName.BLOCKS: Palette.from_string(BLOCK_CHARS),
}
