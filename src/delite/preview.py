"""Cross-check a serialized preview with Pillow's BMP decoder."""
from __future__ import annotations

import io

from PIL import Image

from .bitmap import parse_bitmap
from .errors import EncodingError


def open_preview(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError) as exc:
        raise EncodingError(f"Pillow could not decode the preview bitmap: {exc}") from exc
    return image


def verify_preview(data: bytes, side: int | None = None) -> Image.Image:
    """Decode ``data`` with Pillow and compare it against our own reader."""

    parsed = parse_bitmap(data)
    image = open_preview(data)

    if image.format != "BMP":
        raise EncodingError(f"Preview decoded as {image.format}, expected BMP")
    if image.size != (parsed.width, parsed.height):
        raise EncodingError(
            f"Pillow reports {image.size[0]}x{image.size[1]}, "
            f"header says {parsed.width}x{parsed.height}"
        )
    if side is not None and image.size != (side, side):
        raise EncodingError(f"Preview is {image.size[0]}x{image.size[1]}, expected {side}x{side}")
    if image.mode not in ("L", "P"):
        raise EncodingError(f"Unexpected preview mode: {image.mode}")
    if image.convert("L").tobytes() != parsed.pixels:
        raise EncodingError("Pillow pixel rows differ from the encoded rows")
    return image
