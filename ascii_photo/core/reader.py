"""Image loading from local files and URLs.

Decodes any format Pillow understands into an RGBA PixelGrid.
"""

from __future__ import annotations

import tempfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Callable
from urllib.parse import urlparse

from PIL import Image, UnidentifiedImageError

from ascii_photo.core.grid import PixelGrid

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".gif", ".webp")


@dataclass
class ImageInfo:
    """Metadata about the input file."""

    path: Path
    format: str  # Pillow format name, e.g. "PNG"
    width: int
    height: int


@dataclass
class LoadedImage:
    info: ImageInfo
    grid: PixelGrid


def detect_format(path: Path) -> str:
    """Detect input type from file extension."""
    suffix = path.suffix.lower()
    if suffix in IMAGE_EXTENSIONS:
        return "image"
    raise ValueError(f"Unsupported format: {suffix}")


def is_url(path: str) -> bool:
    """Check if the input looks like an HTTP(S) URL."""
    try:
        parsed = urlparse(str(path))
        return parsed.scheme in ("http", "https")
    except ValueError:
        return False


def _guess_extension_from_url(url: str) -> str:
    """Extract file extension from a URL path."""
    parsed = urlparse(url)
    suffix = Path(parsed.path).suffix.lower()
    if suffix in IMAGE_EXTENSIONS:
        return suffix
    # Pillow sniffs the real format when decoding
    return ".png"


def download_image(
    url: str,
    on_progress: Callable[[int, int], None] | None = None,
) -> Path:
    """Download an image from a URL to a temp file.

    Args:
        url: HTTP(S) URL to download.
        on_progress: optional callback(bytes_downloaded, total_bytes).

    Returns:
        Path to the downloaded temporary file.

    Raises:
        ValueError: if the URL is unreachable or returns an error.
    """
    ext = _guess_extension_from_url(url)
    tmp = tempfile.NamedTemporaryFile(suffix=ext, delete=False)
    tmp_path = Path(tmp.name)

    try:
        req = urllib.request.Request(url, headers={"User-Agent": "ascii-photo/0.1"})
        with urllib.request.urlopen(req, timeout=30) as resp:
            total = int(resp.headers.get("Content-Length", 0))
            downloaded = 0
            while True:
                chunk = resp.read(65536)
                if not chunk:
                    break
                tmp.write(chunk)
                downloaded += len(chunk)
                if on_progress:
                    on_progress(downloaded, total)
        tmp.close()
    except urllib.error.URLError as e:
        tmp.close()
        tmp_path.unlink(missing_ok=True)
        raise ValueError(f"Failed to download {url}: {e}") from e
    except Exception:
        tmp.close()
        tmp_path.unlink(missing_ok=True)
        raise

    if tmp_path.stat().st_size == 0:
        tmp_path.unlink(missing_ok=True)
        raise ValueError(f"Downloaded file is empty: {url}")

    return tmp_path


def load_image(path: Path) -> LoadedImage:
    """Decode a local image file.

    Raises:
        FileNotFoundError: the file does not exist.
        ValueError: the extension is unsupported or the file is not an image.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    detect_format(path)

    try:
        with Image.open(path) as img:
            info = ImageInfo(
                path=path,
                format=img.format or path.suffix.lstrip(".").upper(),
                width=img.width,
                height=img.height,
            )
            grid = PixelGrid.from_image(img)
    except UnidentifiedImageError as e:
        raise ValueError(f"Cannot decode image: {path}") from e

    return LoadedImage(info=info, grid=grid)


def open_image(path: str | Path) -> LoadedImage:
    """Open an image and decode it to a PixelGrid.

    Accepts local file paths or HTTP(S) URLs. URLs are downloaded
    to a temporary file first.
    """
    path_str = str(path)
    if is_url(path_str):
        return load_image(download_image(path_str))
    return load_image(Path(path_str))
