from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum

from dissect.sparseextent.c_vmdk import SECTOR_SIZE
from dissect.sparseextent.exceptions import InvalidEnumValue, RangeOverflowError


@dataclass(frozen=True, order=True)
class Sectors:
    """A count of 512 byte sectors.

    Sector counts only compare with other sector counts. Use :attr:`size_in_bytes` to get a byte count.
    """

    count: int

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(f"Sector count can't be negative: {self.count}")

    def __repr__(self) -> str:
        return f"<Sectors {self.count}>"

    def __int__(self) -> int:
        return self.count

    def __bool__(self) -> bool:
        return self.count != 0

    @property
    def size_in_bytes(self) -> int:
        """The size of this amount of sectors in bytes.

        Raises:
            RangeOverflowError: If the byte count can't be addressed on this platform.
        """
        size = self.count * SECTOR_SIZE
        if size > sys.maxsize:
            raise RangeOverflowError(f"{self.count} sectors exceeds the addressable range")
        return size


class DiskType(Enum):
    """The ``createType`` of a VMDK disk."""

    MONOLITHIC_SPARSE = "monolithicSparse"
    VMFS_SPARSE = "vmfsSparse"
    MONOLITHIC_FLAT = "monolithicFlat"
    VMFS = "vmfs"
    TWO_GB_MAX_EXTENT_SPARSE = "twoGbMaxExtentSparse"
    TWO_GB_MAX_EXTENT_FLAT = "twoGbMaxExtentFlat"
    FULL_DEVICE = "fullDevice"
    VMFS_RAW = "vmfsRaw"
    PARTITIONED_DEVICE = "partitionedDevice"
    VMFS_RAW_DEVICE_MAP = "vmfsRawDeviceMap"
    VMFS_PASSTHROUGH_RAW_DEVICE_MAP = "vmfsPassthroughRawDeviceMap"
    STREAM_OPTIMIZED = "streamOptimized"


class ExtentType(Enum):
    """The type of an extent in the extent description."""

    FLAT = "FLAT"
    SPARSE = "SPARSE"
    ZERO = "ZERO"
    VMFS = "VMFS"
    VMFS_SPARSE = "VMFSSPARSE"
    VMFS_RDM = "VMFSRDM"
    VMFS_RAW = "VMFSRAW"


# Tags as they appear in the descriptor text. Only these are accepted when parsing.
DISK_TYPE_TAGS = {
    '"monolithicSparse"': DiskType.MONOLITHIC_SPARSE,
}

EXTENT_TYPE_TAGS = {
    "SPARSE": ExtentType.SPARSE,
}


def parse_disk_type(tag: str) -> DiskType:
    """Parse a quoted ``createType`` tag, e.g. ``"monolithicSparse"``."""
    try:
        return DISK_TYPE_TAGS[tag]
    except KeyError:
        raise InvalidEnumValue(tag, DiskType.__name__) from None


def parse_extent_type(tag: str) -> ExtentType:
    """Parse an unquoted extent type tag, e.g. ``SPARSE``."""
    try:
        return EXTENT_TYPE_TAGS[tag]
    except KeyError:
        raise InvalidEnumValue(tag, ExtentType.__name__) from None
