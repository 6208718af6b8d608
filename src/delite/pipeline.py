"""End-to-end overexposure adjustment: select, downscale, encode."""
from __future__ import annotations

from array import array
from dataclasses import dataclass, field
from typing import Iterable, List

from .bitmap import BitmapImage, build_grayscale_bitmap, serialize
from .downscale import downscale
from .errors import InvalidArgumentError
from .rawio import decode_samples, encode_samples
from .selector import check_adjustment_level, select_and_adjust

DEFAULT_PIXEL_COUNT = 50
DEFAULT_ADJUSTMENT_LEVEL = 50


@dataclass
class AdjustOptions:
    """Parameters for one adjustment run."""

    pixel_count: int = DEFAULT_PIXEL_COUNT
    adjustment_level: int = DEFAULT_ADJUSTMENT_LEVEL

    def validate(self) -> None:
        if self.pixel_count < 0:
            raise InvalidArgumentError(f"Pixel count must not be negative (got {self.pixel_count})")
        check_adjustment_level(self.adjustment_level)


@dataclass
class AdjustmentResult:
    samples: array
    bitmap: bytes
    image: BitmapImage = field(repr=False)
    adjusted_indices: List[int] = field(default_factory=list)
    discarded: int = 0

    def adjusted_bytes(self) -> bytes:
        return encode_samples(self.samples)


def _copy_samples(raw_pixels: Iterable[int] | bytes | bytearray | memoryview) -> array:
    if isinstance(raw_pixels, (bytes, bytearray, memoryview)):
        return decode_samples(raw_pixels)
    try:
        samples = array("H", raw_pixels)
    except (OverflowError, TypeError) as exc:
        raise InvalidArgumentError(f"Input samples must be 16-bit integers: {exc}") from exc
    if not samples:
        raise InvalidArgumentError("Input contains no samples")
    return samples


def run(
    raw_pixels: Iterable[int] | bytes,
    pixel_count: int = DEFAULT_PIXEL_COUNT,
    adjustment_level: int = DEFAULT_ADJUSTMENT_LEVEL,
) -> AdjustmentResult:
    """Adjust the brightest samples and build the 8-bit preview bitmap.

    ``raw_pixels`` is either a sequence of 16-bit samples or the raw
    little-endian byte stream. The caller's data is never modified; the first
    failing stage raises and no result is produced.
    """

    options = AdjustOptions(pixel_count=pixel_count, adjustment_level=adjustment_level)
    options.validate()

    samples = _copy_samples(raw_pixels)
    adjusted_indices = select_and_adjust(samples, options.pixel_count, options.adjustment_level)
    reduced = downscale(samples)
    image = build_grayscale_bitmap(reduced.pixels, reduced.side, reduced.side)
    bitmap = serialize(image)

    return AdjustmentResult(
        samples=samples,
        bitmap=bitmap,
        image=image,
        adjusted_indices=adjusted_indices,
        discarded=reduced.discarded,
    )


def run_options(raw_pixels: Iterable[int] | bytes, options: AdjustOptions) -> AdjustmentResult:
    return run(raw_pixels, options.pixel_count, options.adjustment_level)
