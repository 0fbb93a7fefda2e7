"""Save conversion results as text, HTML or PNG files."""

from __future__ import annotations

from pathlib import Path

from ascii_photo.core.processor import ConversionResult, OutputMode

OUTPUT_NAMES = {
    OutputMode.TEXT: ("ascii_", ".txt"),
    OutputMode.HTML: ("ascii_", ".html"),
    OutputMode.UNIVERSAL: ("ascii_portrait_", ".png"),
}


def default_output_path(input_path: Path, output: OutputMode) -> Path:
    """Generate default output path next to the input."""
    prefix, suffix = OUTPUT_NAMES[OutputMode(output)]
    return input_path.parent / f"{prefix}{input_path.stem}{suffix}"


def save_result(result: ConversionResult, output_path: Path) -> None:
    """Write a conversion result to disk.

    Text and HTML are written as UTF-8; glyph images are encoded as PNG.
    """
    if result.image is not None:
        result.image.save(str(output_path), format="PNG")
        return
    if result.text is None:
        raise ValueError("Nothing to save")
    output_path.write_text(result.text, encoding="utf-8")
