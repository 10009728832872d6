from __future__ import annotations

import io
import struct
from typing import BinaryIO, Callable

import pytest

HEADER_FORMAT = "<4sIIQQQQIQQQB1s1s1sH"

DESCRIPTOR = (
    "# Disk DescriptorFile\n"
    "version=1\n"
    "CID=def0d352\n"
    "parentCID=ffffffff\n"
    'createType="monolithicSparse"\n'
    "\n"
    "# Extent description\n"
    'RW 41943040 SPARSE "disk1.vmdk"\n'
)

DESCRIPTOR_WITH_DDB = """# Disk DescriptorFile
version=1
encoding="UTF-8"
CID=def0d352
parentCID=ffffffff
createType="monolithicSparse"

# Extent description
RW 41943040 SPARSE "OMS CS6250 Course VM-disk1.vmdk"

# The disk Data Base 
#DDB

ddb.virtualHWVersion = "4"
ddb.adapterType="ide"
ddb.geometry.cylinders="16383"
ddb.geometry.heads="16"
ddb.geometry.sectors="63"
ddb.geometry.biosCylinders="1024"
ddb.geometry.biosHeads="255"
ddb.geometry.biosSectors="63"
ddb.uuid.image="2ebfd8e9-9868-4688-8f3f-97e3f9def370"
ddb.uuid.parent="00000000-0000-0000-0000-000000000000"
ddb.uuid.modification="e2b662bc-16ff-478e-8b7f-3323b027087e"
ddb.uuid.parentmodification="00000000-0000-0000-0000-000000000000"
ddb.comment=""
"""  # noqa: W291


def header_bytes(**kwargs) -> bytes:
    fields = {
        "magic": b"KDMV",
        "version": 1,
        "flags": 3,
        "capacity": 41943040,
        "grain_size": 128,
        "desc_offset": 1,
        "desc_size": 5,
        "gtes_per_gt": 512,
        "rgd_offset": 6,
        "gd_offset": 2574,
        "overhead": 5248,
        "dirty_shutdown": 0,
        "single_eol": b"\n",
        "non_eol": b" ",
        "double_eol": b"\r",
        "compress_method": 0,
    }
    fields.update(kwargs)
    return struct.pack(HEADER_FORMAT, *fields.values())


def extent_bytes(descriptor: str = DESCRIPTOR, **kwargs) -> bytes:
    header = header_bytes(**kwargs)
    desc_offset = kwargs.get("desc_offset", 1)
    desc_size = kwargs.get("desc_size", 5)

    buf = header.ljust(512, b"\x00")
    if desc_size:
        buf = buf.ljust(desc_offset * 512, b"\x00")[: desc_offset * 512]
        buf += descriptor.encode().ljust(desc_size * 512, b"\x00")
    return buf


@pytest.fixture
def make_header() -> Callable[..., bytes]:
    return header_bytes


@pytest.fixture
def make_extent() -> Callable[..., bytes]:
    return extent_bytes


@pytest.fixture
def sparse_extent() -> BinaryIO:
    return io.BytesIO(extent_bytes())


@pytest.fixture
def descriptor_text() -> str:
    return DESCRIPTOR


@pytest.fixture
def descriptor_text_with_ddb() -> str:
    return DESCRIPTOR_WITH_DDB
