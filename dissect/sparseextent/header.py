from __future__ import annotations

import io
import logging
import os
import sys
from typing import BinaryIO, NamedTuple

from dissect.util.stream import RangeStream

from dissect.sparseextent.c_vmdk import (
    SPARSE_DOUBLE_END_LINE_CHAR,
    SPARSE_MAGIC,
    SPARSE_NON_END_LINE_CHAR,
    SPARSE_SINGLE_END_LINE_CHAR,
    c_vmdk,
)
from dissect.sparseextent.exceptions import (
    EncodingError,
    InvalidHeaderError,
    InvalidSignature,
    RangeOverflowError,
    ReadError,
    TruncatedError,
    UnsupportedVersion,
)
from dissect.sparseextent.types import Sectors

log = logging.getLogger(__name__)
log.setLevel(os.getenv("DISSECT_LOG_SPARSEEXTENT", "CRITICAL"))


class ExtentHeader(NamedTuple):
    """The header of a hosted sparse extent.

    All offsets and sizes are in sectors.
    """

    magic_number: bytes
    version: int
    flags: int
    capacity: Sectors
    grain_size: Sectors
    desc_offset: Sectors
    desc_size: Sectors
    gtes_per_gt: int
    rgd_offset: Sectors
    gd_offset: Sectors
    overhead: Sectors
    dirty_shutdown: bool
    single_eol: bytes
    non_eol: bytes
    double_eol: bytes
    compress_method: int

    @property
    def has_newline_detector(self) -> bool:
        """Whether the end of line characters can be used to detect text mode transfer corruption."""
        return bool(self.flags & c_vmdk.SPARSEFLAG_VALID_NEWLINE_DETECTOR)

    @property
    def valid_end_of_line(self) -> bool:
        """Whether the end of line characters are intact."""
        return (
            self.single_eol == SPARSE_SINGLE_END_LINE_CHAR
            and self.non_eol == SPARSE_NON_END_LINE_CHAR
            and self.double_eol == SPARSE_DOUBLE_END_LINE_CHAR
        )

    @property
    def use_redundant(self) -> bool:
        """Whether the redundant grain directory is in use."""
        return bool(self.flags & c_vmdk.SPARSEFLAG_USE_REDUNDANT)

    @property
    def magic_gte(self) -> bool:
        return bool(self.flags & c_vmdk.SPARSEFLAG_MAGIC_GTE)

    @property
    def compressed(self) -> bool:
        """Whether grains are compressed with :attr:`compress_method`."""
        return bool(self.flags & c_vmdk.SPARSEFLAG_COMPRESSED)

    @property
    def embedded_lba(self) -> bool:
        return bool(self.flags & c_vmdk.SPARSEFLAG_EMBEDDED_LBA)


def _read(fh: BinaryIO, size: int) -> bytes:
    try:
        buf = fh.read(size)
    except OSError as e:
        raise ReadError(f"Failed to read extent header: {e}") from e

    if len(buf) != size:
        raise TruncatedError(f"Extent header is truncated, expected {size} bytes but got {len(buf)}")
    return buf


def read_header(fh: BinaryIO) -> ExtentHeader:
    """Read a hosted sparse extent header.

    The file-like object must be positioned at the start of the extent. Only the structured part of the header
    is read, the padding up to the end of the header sector is left alone.

    Args:
        fh: File-like object for the extent.

    Raises:
        InvalidSignature: If the extent doesn't start with the sparse extent signature.
        UnsupportedVersion: If the header has a version other than 1.
        InvalidHeaderError: If the grain size is invalid.
        TruncatedError: If the file ends before the end of the header.
        ReadError: If reading from the file-like object failed.
    """
    magic = _read(fh, len(SPARSE_MAGIC))
    if magic != SPARSE_MAGIC:
        raise InvalidSignature(f"Invalid hosted sparse extent signature: {magic!r}")

    buf = magic + _read(fh, len(c_vmdk.SparseExtentHeader) - len(magic))
    raw = c_vmdk.SparseExtentHeader(buf)

    if raw.version != c_vmdk.SPARSE_VERSION:
        raise UnsupportedVersion(f"Unsupported hosted sparse extent version: {raw.version}")

    header = ExtentHeader(
        magic_number=raw.magic,
        version=raw.version,
        flags=raw.flags,
        capacity=Sectors(raw.capacity),
        grain_size=Sectors(raw.grain_size),
        desc_offset=Sectors(raw.descriptor_offset),
        desc_size=Sectors(raw.descriptor_size),
        gtes_per_gt=raw.num_grain_table_entries,
        rgd_offset=Sectors(raw.secondary_grain_directory_offset),
        gd_offset=Sectors(raw.primary_grain_directory_offset),
        overhead=Sectors(raw.overhead),
        dirty_shutdown=raw.is_dirty != 0,
        single_eol=raw.single_end_line_char,
        non_eol=raw.non_end_line_char,
        double_eol=raw.double_end_line_char,
        compress_method=raw.compress_algorithm,
    )

    grain_size = header.grain_size.count
    if grain_size < c_vmdk.SPARSE_MIN_GRAIN_SIZE or grain_size & (grain_size - 1):
        raise InvalidHeaderError(f"Invalid grain size, must be a power of two and at least 8: {grain_size}")

    if header.has_newline_detector and not header.valid_end_of_line:
        # The extent was most likely transferred in text mode at some point
        log.warning(
            "Unexpected end of line characters in extent header: %r %r %r",
            header.single_eol,
            header.non_eol,
            header.double_eol,
        )

    log.debug(
        "Read extent header: capacity=%d grain_size=%d descriptor=%d+%d flags=%#x",
        header.capacity.count,
        grain_size,
        header.desc_offset.count,
        header.desc_size.count,
        header.flags,
    )
    return header


def read_descriptor(fh: BinaryIO, offset: Sectors, size: Sectors) -> str:
    """Read the embedded descriptor text of an extent.

    The descriptor is zero padded up to a sector boundary, the padding is stripped.

    Args:
        fh: File-like object for the extent.
        offset: The descriptor offset.
        size: The descriptor size.

    Raises:
        RangeOverflowError: If the descriptor range can't be addressed.
        TruncatedError: If the descriptor range is not contained in the file.
        EncodingError: If the descriptor is not valid UTF-8.
        ReadError: If seeking or reading failed.
    """
    start = offset.size_in_bytes
    length = size.size_in_bytes
    if start + length > sys.maxsize:
        raise RangeOverflowError(f"Descriptor range {offset.count}+{size.count} exceeds the addressable range")

    try:
        fh.seek(0, io.SEEK_END)
        file_size = fh.tell()
    except OSError as e:
        raise ReadError(f"Failed to determine extent size: {e}") from e

    if start + length > file_size:
        raise TruncatedError(f"Descriptor range {start:#x}-{start + length:#x} exceeds extent size {file_size:#x}")

    log.debug("Reading descriptor at %#x, %d bytes", start, length)
    try:
        buf = RangeStream(fh, start, length).read()
    except OSError as e:
        raise ReadError(f"Failed to read descriptor: {e}") from e

    if len(buf) != length:
        raise TruncatedError(f"Descriptor is truncated, expected {length} bytes but got {len(buf)}")

    try:
        text = buf.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Descriptor is not valid UTF-8: {e}") from e

    return text.rstrip("\x00")
