"""Overexposure correction for raw 16-bit grayscale samples.

The brightest samples are scaled down by a percentage and an 8-bit grayscale
BMP preview is built from the result. Use the CLI (``python -m delite``) or
call :func:`run` on an in-memory buffer.
"""

from .bitmap import (
    GRAYSCALE_8,
    BitmapImage,
    ColorEntry,
    FileHeader,
    InfoHeader,
    PixelFormat,
    build_grayscale_bitmap,
    parse_bitmap,
    serialize,
)
from .downscale import Downscaled, downscale, square_side
from .errors import (
    AdjustmentError,
    AllocationError,
    EmptyInputError,
    EncodingError,
    InvalidArgumentError,
    InvalidGeometryError,
)
from .pipeline import AdjustmentResult, AdjustOptions, run, run_options
from .rawio import decode_samples, encode_samples, read_samples, write_samples
from .selector import scale_sample, select_and_adjust

__all__ = [
    "GRAYSCALE_8",
    "AdjustOptions",
    "AdjustmentError",
    "AdjustmentResult",
    "AllocationError",
    "BitmapImage",
    "ColorEntry",
    "Downscaled",
    "EmptyInputError",
    "EncodingError",
    "FileHeader",
    "InfoHeader",
    "InvalidArgumentError",
    "InvalidGeometryError",
    "PixelFormat",
    "build_grayscale_bitmap",
    "decode_samples",
    "downscale",
    "encode_samples",
    "parse_bitmap",
    "read_samples",
    "run",
    "run_options",
    "scale_sample",
    "select_and_adjust",
    "serialize",
    "square_side",
    "write_samples",
]
