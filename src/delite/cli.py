"""Command line interface for the overexposure adjustment tool."""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path
from typing import List

from .errors import AdjustmentError, InvalidArgumentError
from .pipeline import (
    DEFAULT_ADJUSTMENT_LEVEL,
    DEFAULT_PIXEL_COUNT,
    AdjustmentResult,
    AdjustOptions,
    run_options,
)
from .preview import verify_preview
from .rawio import read_samples

DEFAULT_PREVIEW_PATH = "out.bmp"
DEFAULT_ALTERED_PATH = "altered.bin"


def parse_int(text: str) -> int:
    # accepts 0x / 0o / 0b prefixes as well as plain decimal
    try:
        return int(text, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {text!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delite",
        description=(
            "Reduce the brightest samples of a raw 16-bit grayscale image and write the\n"
            "adjusted samples plus an 8-bit grayscale BMP preview.\n"
            "The input is a headerless stream of little-endian 16-bit samples."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "-f",
        "--file",
        required=True,
        help="Raw pixel data file (must be binary)",
    )
    parser.add_argument(
        "-p",
        "--pixel-count",
        type=parse_int,
        default=DEFAULT_PIXEL_COUNT,
        help=f"Number of brightest pixels to adjust (default: {DEFAULT_PIXEL_COUNT})",
    )
    parser.add_argument(
        "-l",
        "--level",
        type=parse_int,
        default=DEFAULT_ADJUSTMENT_LEVEL,
        help=f"Adjustment level as a percentage (default: {DEFAULT_ADJUSTMENT_LEVEL})",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_PREVIEW_PATH,
        help=f"Preview bitmap path (default: {DEFAULT_PREVIEW_PATH})",
    )
    parser.add_argument(
        "-a",
        "--altered",
        default=DEFAULT_ALTERED_PATH,
        help=f"Adjusted raw pixel data path (default: {DEFAULT_ALTERED_PATH})",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing output files",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Re-open the written preview with Pillow and compare it to the encoded rows",
    )
    return parser


def build_options(args: argparse.Namespace) -> AdjustOptions:
    if args.pixel_count <= 0:
        raise InvalidArgumentError("Invalid pixel count (must be a positive integer).")
    if not 0 <= args.level <= 100:
        raise InvalidArgumentError("Invalid adjustment level (must be a valid percentage).")
    options = AdjustOptions(pixel_count=args.pixel_count, adjustment_level=args.level)
    options.validate()
    return options


def resolve_input(raw: str) -> Path:
    path = Path(raw)
    if not path.is_file():
        raise InvalidArgumentError(f"Invalid input file path: {path}")
    return path


def check_targets(targets: List[Path], force: bool) -> None:
    if len(set(targets)) != len(targets):
        raise InvalidArgumentError("The preview and adjusted output paths must differ")
    conflicts = [str(target) for target in targets if target.exists() and not force]
    if conflicts:
        raise InvalidArgumentError(
            "Output files already exist (use --force to overwrite):\n" + "\n".join(conflicts)
        )


def write_outputs(result: AdjustmentResult, altered: Path, preview: Path) -> None:
    """Write both outputs, or neither if any write fails."""

    pending = [(altered, result.adjusted_bytes()), (preview, result.bitmap)]
    written: List[Path] = []
    try:
        for target, data in pending:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
            written.append(target)
    except OSError:
        for target in written:
            target.unlink(missing_ok=True)
        raise
    for target in written:
        print(f"wrote {target}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = build_options(args)
        source = resolve_input(args.file)
        altered = Path(args.altered)
        preview = Path(args.output)
        check_targets([altered, preview], args.force)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = run_options(read_samples(source), options)
        for warning in caught:
            print(f"Warning: {warning.message}")

        write_outputs(result, altered, preview)
        if args.verify:
            verify_preview(preview.read_bytes(), result.image.width)
            print(f"verified {preview} with Pillow")

        print(
            f"adjusted {len(result.adjusted_indices)} of {len(result.samples)} pixels by "
            f"{options.adjustment_level}%; preview {result.image.width}x{result.image.height}"
            + (f", {result.discarded} trailing samples not shown" if result.discarded else "")
        )
        return 0
    except (AdjustmentError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
