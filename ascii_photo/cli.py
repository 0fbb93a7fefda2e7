"""Command-line interface for ascii_photo.

Supports both interactive TUI mode and headless/JSON mode for scripting.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ascii_photo.core.charsets import CHARSETS, CharsetName, Palette
from ascii_photo.core.errors import ConversionError
from ascii_photo.core.processor import DitherMode, OutputMode, Settings

DITHER_CHOICES = [m.value for m in DitherMode if m != DitherMode.NONE]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ascii-photo",
        description="Convert images to ASCII art, colored HTML or glyph portraits.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Convert an image to ASCII art.",
    )
    convert.add_argument("input", help="Input image file path or URL.")
    convert.add_argument(
        "-o", "--output",
        help="Output file path. Defaults to ascii_<input>.<ext> next to the input.",
    )
    convert.add_argument(
        "-s", "--scale",
        type=int,
        default=4,
        help="Scaling factor, input pixels per glyph column (default: 4).",
    )
    palette = convert.add_mutually_exclusive_group()
    palette.add_argument(
        "-p", "--palette",
        help='Custom palette, lightest glyph first (e.g. -p " .o*#").',
    )
    palette.add_argument(
        "--charset",
        choices=[c.value for c in CharsetName],
        default="default",
        help="Palette preset (default: default).",
    )
    convert.add_argument(
        "-c", "--color",
        action="store_true",
        help="Annotate text output with HTML color spans.",
    )
    convert.add_argument(
        "-d", "--dither",
        choices=DITHER_CHOICES,
        default=None,
        help="Dithering or matching strategy.",
    )
    convert.add_argument(
        "-b", "--brightness",
        type=int,
        default=0,
        help="Brightness adjustment, -100 to 100 (default: 0).",
    )
    convert.add_argument(
        "-k", "--contrast",
        type=int,
        default=0,
        help="Contrast adjustment, -100 to 100 (default: 0).",
    )
    convert.add_argument(
        "-i", "--invert",
        action="store_true",
        help="Invert colors.",
    )
    convert.add_argument(
        "-q", "--sharpen",
        action="store_true",
        help="Enhance quality with a sharpening filter.",
    )
    mode = convert.add_mutually_exclusive_group()
    mode.add_argument(
        "--html",
        action="store_true",
        help="Export a colored HTML page.",
    )
    mode.add_argument(
        "-u", "--universal",
        action="store_true",
        help="Render a full-color glyph portrait (.png).",
    )
    convert.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly, no TUI).",
    )
    convert.add_argument(
        "--no-tui",
        action="store_true",
        help="Run headless (no interactive TUI).",
    )
    convert.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error (with --json).",
    )

    return parser


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(message: str, code: str, is_json: bool) -> None:
    if is_json:
        _json_error(message, code)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Build conversion settings from parsed arguments.

    Raises:
        EmptyPaletteError: ``-p`` was given an empty string.
    """
    if args.palette is not None:
        palette = Palette.from_user_string(args.palette)
    else:
        palette = CHARSETS[CharsetName(args.charset)]

    if args.html:
        output = OutputMode.HTML
    elif args.universal:
        output = OutputMode.UNIVERSAL
    else:
        output = OutputMode.TEXT

    return Settings(
        scale=args.scale,
        palette=palette,
        color=args.color,
        dither=DitherMode(args.dither) if args.dither else DitherMode.NONE,
        brightness=args.brightness,
        contrast=args.contrast,
        invert=args.invert,
        sharpen=args.sharpen,
        output=output,
    )


def _run_convert(args: argparse.Namespace) -> None:
    """Run the headless convert pipeline."""
    from ascii_photo.core.processor import process_image
    from ascii_photo.core.reader import is_url, open_image
    from ascii_photo.core.writer import default_output_path, save_result

    raw_input = args.input
    is_json = args.json
    is_remote = is_url(raw_input)

    if is_remote:
        if not is_json:
            print(f"Downloading {raw_input}...", file=sys.stderr)
        input_display = raw_input
    else:
        input_path = Path(raw_input).resolve()
        input_display = str(input_path)
        if not input_path.exists():
            _fail(f"File not found: {input_path}", "FILE_NOT_FOUND", is_json)

    try:
        settings = settings_from_args(args)
    except ConversionError as e:
        _fail(str(e), "INVALID_SETTINGS", is_json)

    try:
        loaded = open_image(raw_input)
    except (ValueError, IOError) as e:
        code = "DOWNLOAD_FAILED" if is_remote else "INVALID_INPUT"
        _fail(str(e), code, is_json)

    info = loaded.info
    if not is_json:
        print(
            f"Image '{info.path.name}' loaded ({info.width}x{info.height}). Converting...",
            file=sys.stderr,
        )

    if args.output:
        output_path = Path(args.output).resolve()
    elif is_remote:
        output_path = default_output_path(Path.cwd() / info.path.name, settings.output)
    else:
        output_path = default_output_path(info.path, settings.output)

    try:
        result = process_image(loaded.grid, settings)
        save_result(result, output_path)
    except ConversionError as e:
        _fail(str(e), "INVALID_SETTINGS", is_json)
    except Exception as e:
        if is_json:
            if args.debug:
                import traceback
                traceback.print_exc(file=sys.stderr)
            _json_error(str(e), "PROCESSING_ERROR")
        else:
            print(f"\nError during processing: {e}", file=sys.stderr)
            sys.exit(1)

    if not is_json:
        print(f"Saved to {output_path}", file=sys.stderr)
        if settings.output == OutputMode.TEXT:
            print("--- Conversion result ---")
            print(result.text, end="")
            print("--- End ---")
    else:
        report = {
            "status": "success",
            "input": input_display,
            "output": str(output_path),
            "settings": {
                "scale": settings.scale,
                "palette": "".join(settings.palette.glyphs),
                "color": settings.color,
                "dither": settings.dither.value,
                "brightness": settings.brightness,
                "contrast": settings.contrast,
                "invert": settings.invert,
                "sharpen": settings.sharpen,
                "output": settings.output.value,
            },
            "metadata": {
                "input_format": info.format,
                "input_width": info.width,
                "input_height": info.height,
            },
        }
        if result.image is not None:
            report["metadata"]["output_size"] = list(result.image.size)
        else:
            report["metadata"]["output_lines"] = result.text.count("\n")
        print(json.dumps(report, indent=2))


def main() -> None:
    """Main entry point.

    Routing:
      ascii-photo convert <file> [opts]  → headless conversion
      ascii-photo <file>                 → launch TUI with file
      ascii-photo                        → launch TUI (file prompt)
    """
    raw_args = sys.argv[1:]
    if raw_args and raw_args[0] == "convert":
        parser = _build_parser()
        args = parser.parse_args()
        if args.json or args.no_tui:
            _run_convert(args)
        else:
            from ascii_photo.app import run_app
            try:
                settings = settings_from_args(args)
            except ConversionError as e:
                _fail(str(e), "INVALID_SETTINGS", False)
            run_app(input_path=args.input, settings=settings)
    elif raw_args and not raw_args[0].startswith("-"):
        from ascii_photo.app import run_app
        run_app(input_path=raw_args[0])
    elif raw_args and raw_args[0] in ("-h", "--help"):
        parser = _build_parser()
        parser.parse_args()
    else:
        from ascii_photo.app import run_app
        run_app()
