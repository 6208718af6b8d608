"""Overexposure correction by repeated maximum selection.

The brightest ``pixel_count`` samples are found one at a time with a linear
scan over the samples not yet adjusted, so the buffer never has to be sorted.
Each round picks the first index holding the current maximum, which keeps the
result identical to a stable descending sort of the original buffer.
"""
from __future__ import annotations

import warnings
from typing import List, MutableSequence

from .errors import InvalidArgumentError
from .rawio import SAMPLE_MAX


def check_adjustment_level(adjustment_level: float) -> None:
    if isinstance(adjustment_level, bool) or not 0 <= adjustment_level <= 100:
        raise InvalidArgumentError(
            f"Adjustment level must be a percentage between 0 and 100 (got {adjustment_level})"
        )


def scale_sample(value: int, adjustment_level: float) -> int:
    """Reduce ``value`` by ``adjustment_level`` percent, truncating toward zero."""

    scaled = int(value * (1 - adjustment_level / 100))
    return max(0, min(SAMPLE_MAX, scaled))


def select_and_adjust(
    samples: MutableSequence[int],
    pixel_count: int,
    adjustment_level: float,
) -> List[int]:
    """Scale down the ``pixel_count`` highest samples in place.

    Returns the adjusted indices in the order they were selected. When more
    pixels are requested than the buffer holds, every position is adjusted
    once and a ``RuntimeWarning`` is emitted.
    """

    size = len(samples)
    if size == 0:
        raise InvalidArgumentError("Cannot adjust an empty sample buffer")
    if pixel_count < 0:
        raise InvalidArgumentError(f"Pixel count must not be negative (got {pixel_count})")
    check_adjustment_level(adjustment_level)
    for index, value in enumerate(samples):
        if not 0 <= value <= SAMPLE_MAX:
            raise InvalidArgumentError(f"Sample {index} is not a 16-bit value: {value}")

    if pixel_count > size:
        warnings.warn(
            f"Requested {pixel_count} pixels but only {size} are available; "
            f"adjusting all {size}",
            RuntimeWarning,
            stacklevel=2,
        )

    adjusted = bytearray(size)
    selected: List[int] = []
    for _ in range(pixel_count):
        best_index = -1
        best_value = -1
        for index, value in enumerate(samples):
            if adjusted[index]:
                continue
            # strict comparison keeps the earliest index among equal maxima
            if value > best_value:
                best_value = value
                best_index = index
        if best_index < 0:
            break
        samples[best_index] = scale_sample(best_value, adjustment_level)
        adjusted[best_index] = 1
        selected.append(best_index)

    return selected
