import argparse
from pathlib import Path

import pytest

from delite import encode_samples, parse_bitmap
from delite.cli import main, parse_int


def _write_input(directory: Path, samples) -> Path:
    path = directory / "input.bin"
    path.write_bytes(encode_samples(samples))
    return path


def test_cli_writes_both_outputs(tmp_path, capsys) -> None:
    source = _write_input(tmp_path, [0x2000] * 60 + [0xF000] * 4)
    preview = tmp_path / "out" / "preview.bmp"
    altered = tmp_path / "out" / "altered.bin"

    status = main(
        ["-f", str(source), "-p", "4", "-l", "100", "-o", str(preview), "-a", str(altered), "--verify"]
    )

    assert status == 0
    assert altered.read_bytes() == encode_samples([0x2000] * 60 + [0] * 4)
    image = parse_bitmap(preview.read_bytes())
    assert (image.width, image.height) == (8, 8)
    out = capsys.readouterr().out
    assert f"wrote {altered}" in out
    assert f"wrote {preview}" in out
    assert "verified" in out
    assert "adjusted 4 of 64 pixels by 100%" in out


def test_cli_reports_early_stop_warning(tmp_path, capsys) -> None:
    source = _write_input(tmp_path, [0x1234] * 16)

    status = main(
        [
            "-f", str(source),
            "-p", "0x20",
            "-o", str(tmp_path / "p.bmp"),
            "-a", str(tmp_path / "a.bin"),
        ]
    )

    assert status == 0
    assert "Warning: Requested 32 pixels but only 16 are available" in capsys.readouterr().out


def test_cli_refuses_to_overwrite_without_force(tmp_path, capsys) -> None:
    source = _write_input(tmp_path, [0x1000] * 16)
    preview = tmp_path / "p.bmp"
    altered = tmp_path / "a.bin"
    preview.write_bytes(b"old")
    args = ["-f", str(source), "-o", str(preview), "-a", str(altered)]

    assert main(args) == 1
    assert "already exist" in capsys.readouterr().err
    assert preview.read_bytes() == b"old"
    assert not altered.exists()

    assert main(args + ["--force"]) == 0
    assert preview.read_bytes()[:2] == b"BM"


@pytest.mark.parametrize(
    "extra, message",
    [
        (["-p", "0"], "Invalid pixel count"),
        (["-l", "101"], "Invalid adjustment level"),
    ],
)
def test_cli_rejects_bad_parameters(tmp_path, capsys, extra, message) -> None:
    source = _write_input(tmp_path, [0x1000] * 16)

    status = main(["-f", str(source), "-o", str(tmp_path / "p.bmp"), "-a", str(tmp_path / "a.bin")] + extra)

    assert status == 1
    assert message in capsys.readouterr().err


def test_cli_rejects_missing_input(tmp_path, capsys) -> None:
    status = main(["-f", str(tmp_path / "missing.bin"), "-o", str(tmp_path / "p.bmp")])

    assert status == 1
    assert "Invalid input file path" in capsys.readouterr().err


def test_cli_reports_pipeline_errors_without_writing(tmp_path, capsys) -> None:
    source = _write_input(tmp_path, [0x1000] * 10)
    preview = tmp_path / "p.bmp"
    altered = tmp_path / "a.bin"

    status = main(["-f", str(source), "-o", str(preview), "-a", str(altered)])

    assert status == 1
    assert "cannot form a preview" in capsys.readouterr().err
    assert not preview.exists()
    assert not altered.exists()


def test_cli_requires_input_file() -> None:
    with pytest.raises(SystemExit):
        main([])


def test_parse_int_accepts_prefixes() -> None:
    assert parse_int("50") == 50
    assert parse_int("0x10") == 16
    with pytest.raises(argparse.ArgumentTypeError):
        parse_int("fifty")


def test_cli_removes_altered_output_when_preview_write_fails(tmp_path, capsys) -> None:
    source = _write_input(tmp_path, [0x1000] * 16)
    altered = tmp_path / "a.bin"
    preview = tmp_path / "p.bmp"
    preview.mkdir()

    status = main(["-f", str(source), "-o", str(preview), "-a", str(altered), "--force"])

    assert status == 1
    assert not altered.exists()
    assert preview.is_dir()
    assert "wrote" not in capsys.readouterr().out
