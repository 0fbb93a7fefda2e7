"""Errors raised by the conversion core."""

from __future__ import annotations


class ConversionError(ValueError):
    """Base class for conditions that abort a single conversion."""


class EmptyPaletteError(ConversionError):
    """A palette was built with zero glyphs."""


class InvalidDimensionError(ConversionError):
    """The scale factor leaves nothing to convert."""


class UnsupportedPixelFormatError(ConversionError):
    """Pixel samples are not 8-bit RGB(A)."""
