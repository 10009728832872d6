from __future__ import annotations

import logging
import os
import re
from typing import NamedTuple

from dissect.sparseextent.c_vmdk import CID_NOPARENT
from dissect.sparseextent.exceptions import FieldParseError, UnknownSectionError
from dissect.sparseextent.types import (
    DiskType,
    ExtentType,
    Sectors,
    parse_disk_type,
    parse_extent_type,
)

log = logging.getLogger(__name__)
log.setLevel(os.getenv("DISSECT_LOG_SPARSEEXTENT", "CRITICAL"))


SECTION_HEADER = "Disk DescriptorFile"
SECTION_EXTENT_DESCRIPTION = "Extent description"
SECTION_DISK_DATABASE = ("The disk Data Base", "The Disk Data Base")

ACCESS_MODES = ("RW", "RDONLY", "NOACCESS")

RE_DECIMAL = re.compile(r"[0-9]+")
RE_HEX32 = re.compile(r"[0-9a-fA-F]{1,8}")


class ExtentDescriptor(NamedTuple):
    access: str
    """The access mode of the extent (RW, RDONLY, NOACCESS)."""
    sectors: Sectors
    """The size of the extent."""
    type: ExtentType
    """The type of the extent."""
    path: str
    """The path of the extent file, usually relative to the directory of the descriptor."""

    @property
    def mode(self) -> str:
        """Alias of :attr:`access`."""
        return self.access


class Descriptor(NamedTuple):
    version: int
    """The descriptor version."""
    cid: int
    """The content ID, changes every time the disk is written to."""
    parent_cid: int | None
    """The content ID of the parent disk, or ``None`` if there is no parent."""
    create_type: DiskType
    """The type of the disk."""
    extents: tuple[ExtentDescriptor, ...]
    """The extents of the disk in declaration order."""
    parent_file_name_hint: str | None = None
    """The path of the parent disk, if any."""

    @property
    def extent_descriptors(self) -> tuple[ExtentDescriptor, ...]:
        """Alias of :attr:`extents`."""
        return self.extents

    @property
    def has_parent(self) -> bool:
        return self.parent_cid is not None


def parse_descriptor(text: str) -> Descriptor:
    """Parse the text of a VMDK disk descriptor.

    A descriptor consists of three sections, each introduced by a ``# <label>`` line:

    - ``# Disk DescriptorFile``, ``key=value`` pairs describing the disk.
    - ``# Extent description``, one line per extent.
    - ``# The disk Data Base``, the disk database. This section is skipped.

    Args:
        text: The descriptor text.

    Raises:
        UnknownSectionError: If the descriptor contains an unknown section.
        FieldParseError: If a field is missing or can't be parsed.
        InvalidEnumValue: If the disk type or an extent type is not supported.
    """
    attributes = {}
    extents = []

    for label, lines in _split_sections(text):
        if label.startswith(SECTION_HEADER):
            attributes.update(_parse_header(lines))
        elif label.startswith(SECTION_EXTENT_DESCRIPTION):
            extents.extend(_parse_extent_descriptor(line) for line in lines)
        elif label.startswith(SECTION_DISK_DATABASE):
            log.debug("Skipping disk database with %d entries", len(lines))
        else:
            raise UnknownSectionError(label)

    for key in ("version", "CID", "createType"):
        if key not in attributes:
            raise FieldParseError(f"Missing {key} in descriptor header")

    parent_cid = attributes.get("parentCID", CID_NOPARENT)

    return Descriptor(
        version=attributes["version"],
        cid=attributes["CID"],
        parent_cid=None if parent_cid == CID_NOPARENT else parent_cid,
        create_type=attributes["createType"],
        extents=tuple(extents),
        parent_file_name_hint=attributes.get("parentFileNameHint"),
    )


def _split_sections(text: str) -> list[tuple[str, list[str]]]:
    sections = []
    lines = None

    for line in text.splitlines():
        line = line.strip()

        if line.startswith("# "):
            lines = []
            sections.append((line[2:].strip(), lines))
            log.debug("Found descriptor section %r", sections[-1][0])
            continue

        # Lines like #DDB are comments
        if not line or line.startswith("#"):
            continue

        if lines is None:
            # Content before the first section
            raise UnknownSectionError(line)

        lines.append(line)

    return sections


def _parse_header(lines: list[str]) -> dict:
    attributes = {}

    for line in lines:
        key, sep, value = line.partition("=")
        if not sep:
            raise FieldParseError(f"Invalid line in descriptor header: {line!r}")

        key = key.strip()
        value = value.strip()

        if key == "version":
            attributes[key] = _parse_decimal(key, value)
        elif key in ("CID", "parentCID"):
            if not RE_HEX32.fullmatch(value):
                raise FieldParseError(f"Invalid {key} in descriptor header: {value!r}")
            attributes[key] = int(value, 16)
        elif key == "createType":
            attributes[key] = parse_disk_type(value)
        elif key == "parentFileNameHint":
            attributes[key] = _unquote(key, value)
        else:
            log.debug("Ignoring descriptor header key %r", key)

    return attributes


def _parse_extent_descriptor(line: str) -> ExtentDescriptor:
    # The filename is quoted and may contain whitespace
    parts = line.split(None, 3)
    if len(parts) < 4:
        raise FieldParseError(f"Expected 4 fields in extent description: {line!r}")

    access, sectors, extent_type, path = parts
    if access not in ACCESS_MODES:
        raise FieldParseError(f"Invalid access mode in extent description: {access!r}")

    extent = ExtentDescriptor(
        access=access,
        sectors=Sectors(_parse_decimal("sectors", sectors)),
        type=parse_extent_type(extent_type),
        path=_unquote("path", path),
    )
    if not extent.path:
        raise FieldParseError(f"Empty path in extent description: {line!r}")

    log.debug("Parsed extent description: %r", extent)
    return extent


def _parse_decimal(name: str, value: str) -> int:
    if not RE_DECIMAL.fullmatch(value):
        raise FieldParseError(f"Invalid {name}, expected a decimal number: {value!r}")
    return int(value)


def _unquote(name: str, value: str) -> str:
    if len(value) < 2 or value[0] != '"' or value[-1] != '"':
        raise FieldParseError(f"Invalid {name}, expected a quoted string: {value!r}")
    return value[1:-1]
