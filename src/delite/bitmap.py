"""Palette-based bitmap (BMP) container for the 8-bit grayscale preview.

File layout written by :func:`serialize` (all integers little-endian):

    Offset | Size | Field
    -------|------|----------------------------------------------
    0      | 2    | signature ("BM")
    2      | 4    | file_size
    6      | 4    | reserved (0)
    10     | 4    | pixel_data_offset
    14     | 4    | header_size (40)
    18     | 4    | width
    22     | 4    | height
    26     | 2    | planes (1)
    28     | 2    | bit_depth (8)
    30     | 4    | compression (0)
    34     | 4    | image_size
    38     | 4    | x_resolution (0)
    42     | 4    | y_resolution (0)
    46     | 4    | colors_used (256)
    50     | 4    | important_colors (0)
    54     | 1024 | color table, 256 x (blue, green, red, reserved)
    1078   | w*h  | pixel rows, bottom row first

Rows are padded to a 4-byte boundary. With an 8-bit depth and a width that is
a multiple of 4 the padding is always empty.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import List

from .errors import AllocationError, EncodingError, InvalidGeometryError

BITMAP_SIGNATURE = 0x4D42  # b"BM" read as a little-endian word
FILE_HEADER_FORMAT = "<HIII"
INFO_HEADER_FORMAT = "<IIIHHIIIIII"
COLOR_ENTRY_FORMAT = "<BBBB"
FILE_HEADER_SIZE = struct.calcsize(FILE_HEADER_FORMAT)
INFO_HEADER_SIZE = struct.calcsize(INFO_HEADER_FORMAT)
COLOR_ENTRY_SIZE = struct.calcsize(COLOR_ENTRY_FORMAT)
COMPRESSION_NONE = 0
ROW_ALIGNMENT = 4


@dataclass(frozen=True)
class ColorEntry:
    """One color table slot, stored blue first as in the file."""

    blue: int
    green: int
    red: int
    reserved: int = 0

    def pack(self) -> bytes:
        return struct.pack(COLOR_ENTRY_FORMAT, self.blue, self.green, self.red, self.reserved)


@dataclass(frozen=True)
class PixelFormat:
    """Bit depth together with the palette that goes with it."""

    bit_depth: int

    @property
    def colors_used(self) -> int:
        return 1 << self.bit_depth

    def palette(self) -> List[ColorEntry]:
        """Return an evenly spaced gray ramp covering every palette index."""

        last = self.colors_used - 1
        entries = []
        for index in range(self.colors_used):
            level = index * 255 // last
            entries.append(ColorEntry(blue=level, green=level, red=level))
        return entries

    def row_stride(self, width: int) -> int:
        bits = width * self.bit_depth
        return (bits + ROW_ALIGNMENT * 8 - 1) // (ROW_ALIGNMENT * 8) * ROW_ALIGNMENT


GRAYSCALE_8 = PixelFormat(bit_depth=8)


@dataclass(frozen=True)
class FileHeader:
    file_size: int
    pixel_data_offset: int
    signature: int = BITMAP_SIGNATURE
    reserved: int = 0

    def pack(self) -> bytes:
        return struct.pack(
            FILE_HEADER_FORMAT,
            self.signature,
            self.file_size,
            self.reserved,
            self.pixel_data_offset,
        )


@dataclass(frozen=True)
class InfoHeader:
    width: int
    height: int
    image_size: int
    bit_depth: int = 8
    colors_used: int = 256
    header_size: int = INFO_HEADER_SIZE
    planes: int = 1
    compression: int = COMPRESSION_NONE
    x_resolution: int = 0
    y_resolution: int = 0
    important_colors: int = 0

    def pack(self) -> bytes:
        return struct.pack(
            INFO_HEADER_FORMAT,
            self.header_size,
            self.width,
            self.height,
            self.planes,
            self.bit_depth,
            self.compression,
            self.image_size,
            self.x_resolution,
            self.y_resolution,
            self.colors_used,
            self.important_colors,
        )


@dataclass(frozen=True)
class BitmapImage:
    """In-memory bitmap. ``pixels`` holds the rows top to bottom."""

    file_header: FileHeader
    info_header: InfoHeader
    color_table: List[ColorEntry] = field(repr=False)
    pixels: bytes = field(repr=False)

    @property
    def width(self) -> int:
        return self.info_header.width

    @property
    def height(self) -> int:
        return self.info_header.height

    @property
    def pixel_format(self) -> PixelFormat:
        return PixelFormat(bit_depth=self.info_header.bit_depth)

    @property
    def color_table_size(self) -> int:
        return len(self.color_table) * COLOR_ENTRY_SIZE

    @property
    def pixel_data_offset(self) -> int:
        return FILE_HEADER_SIZE + INFO_HEADER_SIZE + self.color_table_size

    @property
    def row_stride(self) -> int:
        return self.pixel_format.row_stride(self.width)

    @property
    def file_size(self) -> int:
        return self.pixel_data_offset + self.row_stride * self.height

    def rows(self) -> List[bytes]:
        width = self.width
        return [self.pixels[y * width : (y + 1) * width] for y in range(self.height)]

    def validate(self) -> None:
        """Check that the headers, palette and pixel rows agree."""

        fh = self.file_header
        ih = self.info_header
        if fh.signature != BITMAP_SIGNATURE:
            raise EncodingError(f"Bad bitmap signature: {fh.signature:#06x}")
        if ih.width <= 0 or ih.height <= 0:
            raise EncodingError(f"Bitmap dimensions must be positive ({ih.width}x{ih.height})")
        if ih.width % ROW_ALIGNMENT:
            raise EncodingError(f"Bitmap width {ih.width} is not a multiple of {ROW_ALIGNMENT}")
        if ih.bit_depth != GRAYSCALE_8.bit_depth:
            raise EncodingError(f"Unsupported bit depth: {ih.bit_depth}")
        if ih.compression != COMPRESSION_NONE:
            raise EncodingError(f"Unsupported compression type: {ih.compression}")
        if ih.header_size != INFO_HEADER_SIZE:
            raise EncodingError(f"Unsupported info header size: {ih.header_size}")
        if ih.colors_used != 1 << ih.bit_depth:
            raise EncodingError(
                f"colors_used {ih.colors_used} does not match a {ih.bit_depth}-bit palette"
            )
        if len(self.color_table) != ih.colors_used:
            raise EncodingError(
                f"Color table has {len(self.color_table)} entries, expected {ih.colors_used}"
            )
        if ih.image_size != ih.width * ih.height:
            raise EncodingError(
                f"image_size {ih.image_size} does not match {ih.width}x{ih.height}"
            )
        if len(self.pixels) != ih.image_size:
            raise EncodingError(
                f"Pixel data holds {len(self.pixels)} bytes, expected {ih.image_size}"
            )
        if fh.pixel_data_offset != self.pixel_data_offset:
            raise EncodingError(
                f"pixel_data_offset {fh.pixel_data_offset} should be {self.pixel_data_offset}"
            )
        if fh.file_size != self.file_size:
            raise EncodingError(f"file_size {fh.file_size} should be {self.file_size}")


def build_grayscale_bitmap(pixels: bytes, width: int, height: int) -> BitmapImage:
    """Wrap top-to-bottom 8-bit rows in a bitmap with a 256-shade gray palette."""

    if width <= 0 or height <= 0:
        raise InvalidGeometryError(f"Bitmap dimensions must be positive ({width}x{height})")
    if width % ROW_ALIGNMENT:
        raise InvalidGeometryError(
            f"Bitmap width must be a multiple of {ROW_ALIGNMENT} bytes (got {width})"
        )
    image_size = width * height
    if len(pixels) != image_size:
        raise EncodingError(
            f"Expected {image_size} pixel bytes for {width}x{height}, got {len(pixels)}"
        )

    pixel_format = GRAYSCALE_8
    color_table = pixel_format.palette()
    pixel_data_offset = FILE_HEADER_SIZE + INFO_HEADER_SIZE + len(color_table) * COLOR_ENTRY_SIZE
    file_size = pixel_data_offset + pixel_format.row_stride(width) * height

    return BitmapImage(
        file_header=FileHeader(file_size=file_size, pixel_data_offset=pixel_data_offset),
        info_header=InfoHeader(
            width=width,
            height=height,
            image_size=image_size,
            bit_depth=pixel_format.bit_depth,
            colors_used=pixel_format.colors_used,
        ),
        color_table=color_table,
        pixels=bytes(pixels),
    )


def serialize(image: BitmapImage) -> bytes:
    """Lay the bitmap out as file bytes."""

    image.validate()
    try:
        out = bytearray(image.file_size)
    except MemoryError as exc:
        raise AllocationError(f"Cannot reserve {image.file_size} bytes for the bitmap") from exc

    out[0:FILE_HEADER_SIZE] = image.file_header.pack()
    out[FILE_HEADER_SIZE : FILE_HEADER_SIZE + INFO_HEADER_SIZE] = image.info_header.pack()
    pos = FILE_HEADER_SIZE + INFO_HEADER_SIZE
    for entry in image.color_table:
        out[pos : pos + COLOR_ENTRY_SIZE] = entry.pack()
        pos += COLOR_ENTRY_SIZE

    stride = image.row_stride
    # bottom row is stored first; padding bytes stay zero
    for row in reversed(image.rows()):
        out[pos : pos + len(row)] = row
        pos += stride

    return bytes(out)


def parse_bitmap(data: bytes) -> BitmapImage:
    """Read back a bitmap produced by :func:`serialize`."""

    header_end = FILE_HEADER_SIZE + INFO_HEADER_SIZE
    if len(data) < header_end:
        raise EncodingError(f"Bitmap is truncated ({len(data)} bytes)")

    signature, file_size, reserved, pixel_data_offset = struct.unpack_from(
        FILE_HEADER_FORMAT, data, 0
    )
    if signature != BITMAP_SIGNATURE:
        raise EncodingError(f"Not a bitmap (signature {signature:#06x})")
    (
        header_size,
        width,
        height,
        planes,
        bit_depth,
        compression,
        image_size,
        x_resolution,
        y_resolution,
        colors_used,
        important_colors,
    ) = struct.unpack_from(INFO_HEADER_FORMAT, data, FILE_HEADER_SIZE)

    if bit_depth != GRAYSCALE_8.bit_depth:
        raise EncodingError(f"Unsupported bit depth: {bit_depth}")
    if compression != COMPRESSION_NONE:
        raise EncodingError(f"Unsupported compression type: {compression}")
    if width % ROW_ALIGNMENT:
        raise EncodingError(f"Bitmap width {width} is not a multiple of {ROW_ALIGNMENT}")

    table_start = FILE_HEADER_SIZE + header_size
    table_end = table_start + colors_used * COLOR_ENTRY_SIZE
    if table_end > pixel_data_offset:
        raise EncodingError("Color table overlaps the pixel data")
    if len(data) < table_end:
        raise EncodingError("Bitmap color table is truncated")
    color_table = [
        ColorEntry(*struct.unpack_from(COLOR_ENTRY_FORMAT, data, offset))
        for offset in range(table_start, table_end, COLOR_ENTRY_SIZE)
    ]

    stride = GRAYSCALE_8.row_stride(width)
    if len(data) < pixel_data_offset + stride * height:
        raise EncodingError("Bitmap pixel data is truncated")
    stored_rows = [
        data[pixel_data_offset + y * stride : pixel_data_offset + y * stride + width]
        for y in range(height)
    ]

    image = BitmapImage(
        file_header=FileHeader(
            file_size=file_size,
            pixel_data_offset=pixel_data_offset,
            signature=signature,
            reserved=reserved,
        ),
        info_header=InfoHeader(
            width=width,
            height=height,
            image_size=image_size,
            bit_depth=bit_depth,
            colors_used=colors_used,
            header_size=header_size,
            planes=planes,
            compression=compression,
            x_resolution=x_resolution,
            y_resolution=y_resolution,
            important_colors=important_colors,
        ),
        color_table=color_table,
        pixels=b"".join(reversed(stored_rows)),
    )
    image.validate()
    return image
