from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from dissect.sparseextent.descriptor import Descriptor, parse_descriptor
from dissect.sparseextent.exceptions import ReadError
from dissect.sparseextent.header import ExtentHeader, read_descriptor, read_header

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self

log = logging.getLogger(__name__)
log.setLevel(os.getenv("DISSECT_LOG_SPARSEEXTENT", "CRITICAL"))


class HostedSparseExtent:
    """VMware hosted sparse extent (``KDMV``) container.

    Reads the extent header and the embedded disk descriptor. Reading the virtual disk data through the
    grain directory is left to a grain aware reader, which can use :attr:`header` for the grain directory
    offsets and grain size.

    Args:
        fh: File-like object or path for the extent file.
    """

    def __init__(self, fh: BinaryIO | Path):
        if isinstance(fh, Path):
            self.path = fh
            try:
                self.fh = fh.open("rb")
            except OSError as e:
                raise ReadError(f"Failed to open extent {fh}: {e}") from e
            self._opened_fh = True
        else:
            name = getattr(fh, "name", None)
            self.path = Path(name) if isinstance(name, str) else None
            self.fh = fh
            self._opened_fh = False

        try:
            try:
                self.fh.seek(0)
            except OSError as e:
                raise ReadError(f"Failed to seek to the start of the extent: {e}") from e

            self._header = read_header(self.fh)
            self._descriptor = None
            if self._header.desc_size:
                text = read_descriptor(self.fh, self._header.desc_offset, self._header.desc_size)
                self._descriptor = parse_descriptor(text)
        except Exception:
            self.close()
            raise

        log.debug("Opened hosted sparse extent %s", self.path)

    def __repr__(self) -> str:
        return f"<HostedSparseExtent capacity={self._header.capacity!r} path={self.path}>"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        self.close()

    @property
    def header(self) -> ExtentHeader:
        """The extent header."""
        return self._header

    @property
    def descriptor(self) -> Descriptor | None:
        """The embedded disk descriptor, if the extent has one."""
        return self._descriptor

    @property
    def size(self) -> int:
        """The capacity of the extent in bytes."""
        return self._header.capacity.size_in_bytes

    @property
    def grain_size(self) -> int:
        """The grain size in bytes."""
        return self._header.grain_size.size_in_bytes

    def extent_paths(self) -> list[Path]:
        """The paths of the extents in the descriptor.

        Relative paths are resolved against the directory of this extent, if known.
        """
        if self._descriptor is None:
            return []

        result = []
        for extent in self._descriptor.extents:
            path = Path(extent.path.replace("\\", "/"))
            if not path.is_absolute() and self.path is not None:
                path = self.path.parent.joinpath(path)
            result.append(path)
        return result

    def close(self) -> None:
        """Close the extent file if we opened it ourselves."""
        if self._opened_fh:
            self.fh.close()
