"""16-bit to 8-bit reduction for the square preview image."""
from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import islice
from typing import Sequence

from .errors import EmptyInputError

# 8-bit rows must be a multiple of 4 bytes wide
ROW_ALIGNMENT = 4


@dataclass(frozen=True)
class Downscaled:
    """8-bit preview samples laid out as a ``side`` x ``side`` square."""

    pixels: bytes
    side: int
    discarded: int


def square_side(count: int) -> int:
    side = math.isqrt(count)
    return side - side % ROW_ALIGNMENT


def downscale(samples: Sequence[int]) -> Downscaled:
    """Map each sample to its high byte and crop to the largest aligned square.

    Samples past the square are dropped rather than folded back in.
    """

    count = len(samples)
    if count == 0:
        raise EmptyInputError("No samples to downscale")
    side = square_side(count)
    if side == 0:
        raise EmptyInputError(
            f"{count} samples cannot form a preview at least {ROW_ALIGNMENT} pixels wide"
        )

    used = side * side
    pixels = bytes(value >> 8 for value in islice(samples, used))
    return Downscaled(pixels=pixels, side=side, discarded=count - used)
