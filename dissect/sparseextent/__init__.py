from dissect.sparseextent.descriptor import Descriptor, ExtentDescriptor, parse_descriptor
from dissect.sparseextent.exceptions import (
    DescriptorError,
    EncodingError,
    Error,
    FieldParseError,
    InvalidEnumValue,
    InvalidHeaderError,
    InvalidSignature,
    RangeOverflowError,
    ReadError,
    TruncatedError,
    UnknownSectionError,
    UnsupportedVersion,
)
from dissect.sparseextent.extent import HostedSparseExtent
from dissect.sparseextent.header import ExtentHeader, read_descriptor, read_header
from dissect.sparseextent.types import DiskType, ExtentType, Sectors

__all__ = [
    "Descriptor",
    "DescriptorError",
    "DiskType",
    "EncodingError",
    "Error",
    "ExtentDescriptor",
    "ExtentHeader",
    "ExtentType",
    "FieldParseError",
    "HostedSparseExtent",
    "InvalidEnumValue",
    "InvalidHeaderError",
    "InvalidSignature",
    "RangeOverflowError",
    "ReadError",
    "Sectors",
    "TruncatedError",
    "UnknownSectionError",
    "UnsupportedVersion",
    "parse_descriptor",
    "read_descriptor",
    "read_header",
]
