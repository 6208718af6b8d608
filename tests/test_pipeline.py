import random
import struct

import pytest

from delite import (
    AdjustOptions,
    EmptyInputError,
    InvalidArgumentError,
    encode_samples,
    parse_bitmap,
    run,
    run_options,
)


def _noise(count: int, seed: int = 3):
    rng = random.Random(seed)
    return [rng.randint(0x80, 0xFF) for _ in range(count)]


def test_noise_scenario_produces_square_preview() -> None:
    original = _noise(45000)
    raw = list(original)

    result = run(raw, pixel_count=50, adjustment_level=100)

    assert raw == original
    assert len(result.samples) == 45000
    assert len(result.adjusted_indices) == 50
    assert all(result.samples[i] == 0 for i in result.adjusted_indices)
    assert result.discarded == 45000 - 212 * 212

    width, height = struct.unpack_from("<II", result.bitmap, 18)
    assert (width, height) == (212, 212)
    assert struct.unpack_from("<HH", result.bitmap, 26) == (1, 8)
    assert struct.unpack_from("<I", result.bitmap, 46) == (256,)
    # every sample is below 0x100, so the whole preview is black
    assert parse_bitmap(result.bitmap).pixels == bytes(212 * 212)


def test_preview_reflects_adjusted_samples() -> None:
    samples = [0x4000] * 16
    samples[5] = 0xFF00

    result = run(samples, pixel_count=1, adjustment_level=50)

    assert result.adjusted_indices == [5]
    assert result.samples[5] == 0x7F80
    preview = parse_bitmap(result.bitmap).pixels
    assert preview[5] == 0x7F
    assert preview[0] == 0x40


def test_accepts_raw_bytes_and_round_trips_length() -> None:
    data = encode_samples(range(0, 0x10000, 0x100))

    result = run(data, pixel_count=3, adjustment_level=10)

    assert len(result.adjusted_bytes()) == len(data)
    assert result.image.width == 16


def test_pixel_count_above_sample_count_succeeds() -> None:
    with pytest.warns(RuntimeWarning):
        result = run([0xFFFF] * 16, pixel_count=50, adjustment_level=100)

    assert sorted(result.adjusted_indices) == list(range(16))
    assert list(result.samples) == [0] * 16


def test_run_options_uses_defaults() -> None:
    result = run_options(_noise(100), AdjustOptions())

    assert len(result.adjusted_indices) == 50
    assert result.image.width == 8


def test_invalid_level_is_reported_before_any_work() -> None:
    samples = [1] * 16

    with pytest.raises(InvalidArgumentError):
        run(samples, pixel_count=1, adjustment_level=150)
    assert samples == [1] * 16


def test_empty_and_malformed_input() -> None:
    with pytest.raises(InvalidArgumentError):
        run([])
    with pytest.raises(InvalidArgumentError):
        run(b"\x00\x01\x02")
    with pytest.raises(InvalidArgumentError):
        run([1, -5, 3] * 8)


def test_too_few_samples_for_preview() -> None:
    samples = [0xFFFF] * 10

    with pytest.raises(EmptyInputError):
        run(samples, pixel_count=2, adjustment_level=50)
    assert samples == [0xFFFF] * 10


def test_options_validate() -> None:
    AdjustOptions(pixel_count=0, adjustment_level=0).validate()
    with pytest.raises(InvalidArgumentError):
        AdjustOptions(pixel_count=-1).validate()
    with pytest.raises(InvalidArgumentError):
        AdjustOptions(adjustment_level=101).validate()
