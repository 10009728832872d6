import sys

import pytest

from dissect.sparseextent.exceptions import InvalidEnumValue, RangeOverflowError
from dissect.sparseextent.types import DiskType, ExtentType, Sectors, parse_disk_type, parse_extent_type


def test_sectors() -> None:
    sectors = Sectors(5)

    assert sectors.count == 5
    assert int(sectors) == 5
    assert sectors.size_in_bytes == 2560
    assert sectors == Sectors(5)
    assert sectors < Sectors(6)
    assert hash(sectors) == hash(Sectors(5))
    assert not Sectors(0)


def test_sectors_not_comparable_to_bytes() -> None:
    assert Sectors(512) != 512
    assert Sectors(1) != Sectors(1).size_in_bytes

    with pytest.raises(TypeError):
        Sectors(1) < 512


def test_sectors_immutable() -> None:
    sectors = Sectors(1)
    with pytest.raises(AttributeError):
        sectors.count = 2


def test_sectors_negative() -> None:
    with pytest.raises(ValueError):
        Sectors(-1)


def test_sectors_overflow() -> None:
    with pytest.raises(RangeOverflowError):
        Sectors(0xFFFFFFFFFFFFFFFF).size_in_bytes

    with pytest.raises(OverflowError):
        Sectors(sys.maxsize // 512 + 1).size_in_bytes

    assert Sectors(sys.maxsize // 512).size_in_bytes <= sys.maxsize


def test_parse_disk_type() -> None:
    assert parse_disk_type('"monolithicSparse"') is DiskType.MONOLITHIC_SPARSE


@pytest.mark.parametrize(
    "tag",
    [
        pytest.param("monolithicSparse", id="unquoted"),
        pytest.param('"MonolithicSparse"', id="case"),
        pytest.param('"monolithic"', id="partial"),
        pytest.param('"monolithicSparse', id="half-quoted"),
        pytest.param('"streamOptimized"', id="unsupported"),
        pytest.param("", id="empty"),
    ],
)
def test_parse_disk_type_invalid(tag: str) -> None:
    with pytest.raises(InvalidEnumValue) as exc_info:
        parse_disk_type(tag)

    assert exc_info.value.value == tag
    assert exc_info.value.enum == "DiskType"


def test_parse_extent_type() -> None:
    assert parse_extent_type("SPARSE") is ExtentType.SPARSE


@pytest.mark.parametrize(
    "tag",
    [
        pytest.param('"SPARSE"', id="quoted"),
        pytest.param("sparse", id="case"),
        pytest.param("SPARS", id="partial"),
        pytest.param("FLAT", id="unsupported"),
        pytest.param("VMFSSPARSE", id="unsupported-vmfs"),
    ],
)
def test_parse_extent_type_invalid(tag: str) -> None:
    with pytest.raises(InvalidEnumValue) as exc_info:
        parse_extent_type(tag)

    assert exc_info.value.value == tag
    assert exc_info.value.enum == "ExtentType"
    assert tag in str(exc_info.value)
    assert "ExtentType" in str(exc_info.value)
