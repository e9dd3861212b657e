"""
Image file helpers — load an uploaded logo from disk and save the result.
"""

from __future__ import annotations

import io
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from .errors import MissingSourceImage
from .models import ImagePayload

MIME_BY_EXT = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}

# Pillow format name per output suffix
_PIL_FORMAT = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".webp": "WEBP",
    ".gif": "GIF",
}


def guess_mime_type(path: Union[str, Path]) -> Optional[str]:
    return MIME_BY_EXT.get(Path(path).suffix.lower())


def load_image(path: Union[str, Path]) -> ImagePayload:
    """Read a logo file into an ImagePayload, checking Pillow can decode it."""
    path = Path(path)
    if not path.is_file():
        raise MissingSourceImage(f"Logo file not found: {path}")

    mime = guess_mime_type(path)
    if mime is None:
        raise ValueError(
            f"Unsupported image type {path.suffix or '(none)'!r} — "
            f"use one of: {', '.join(sorted(MIME_BY_EXT))}"
        )

    data = path.read_bytes()
    if not data:
        raise MissingSourceImage(f"Logo file is empty: {path}")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValueError(f"{path.name} is not a valid image") from exc

    return ImagePayload(data=data, mime_type=mime)


def save_image(data: bytes, path: Union[str, Path]) -> Path:
    """
    Write image bytes to ``path``.

    Bytes are written as-is when their format already matches the suffix;
    otherwise they are re-encoded with Pillow (JPEG output is flattened
    onto white since it has no alpha channel).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    target = _PIL_FORMAT.get(path.suffix.lower())
    if target is None:
        path.write_bytes(data)
        return path

    with Image.open(io.BytesIO(data)) as img:
        if img.format == target:
            path.write_bytes(data)
            return path

        img.load()
        if target == "JPEG" and img.mode in ("RGBA", "LA", "P"):
            rgba = img.convert("RGBA")
            flat = Image.new("RGB", rgba.size, (255, 255, 255))
            flat.paste(rgba, mask=rgba.split()[-1])
            flat.save(path, format=target)
        else:
            img.save(path, format=target)
    return path


def _slug(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:40] or "logo"


def default_output_path(output_dir: Union[str, Path], brand_name: str = "") -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(output_dir) / f"{_slug(brand_name)}_{stamp}.png"
