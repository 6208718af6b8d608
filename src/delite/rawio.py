"""Raw 16-bit sample codec.

Input files are headerless streams of unsigned little-endian 16-bit samples.
The adjusted output is written back in exactly the same layout.
"""
from __future__ import annotations

import sys
from array import array
from pathlib import Path
from typing import Iterable

from .errors import InvalidArgumentError

SAMPLE_SIZE = 2
SAMPLE_MAX = 0xFFFF


def decode_samples(data: bytes | bytearray | memoryview) -> array:
    if len(data) == 0:
        raise InvalidArgumentError("Input byte stream is empty")
    if len(data) % SAMPLE_SIZE:
        raise InvalidArgumentError(
            f"Input byte stream must hold whole 16-bit samples (got {len(data)} bytes)"
        )
    samples = array("H")
    samples.frombytes(bytes(data))
    if sys.byteorder == "big":
        samples.byteswap()
    return samples


def encode_samples(samples: Iterable[int]) -> bytes:
    try:
        out = array("H", samples)
    except OverflowError as exc:
        raise InvalidArgumentError("Samples must fit in 16 bits") from exc
    if sys.byteorder == "big":
        out.byteswap()
    return out.tobytes()


def read_samples(path: str | Path) -> array:
    return decode_samples(Path(path).read_bytes())


def write_samples(path: str | Path, samples: Iterable[int]) -> Path:
    target = Path(path)
    data = encode_samples(samples)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    return target
