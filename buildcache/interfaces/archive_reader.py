"""Abstract base class for archive readers.

An archive reader restores one archive file produced by an
:class:`~buildcache.interfaces.archive_writer.IArchiveWriter` back to the
path encoded in its filename.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class IArchiveReader(ABC):
    """Contract for extracting a single-path archive."""

    @abstractmethod
    async def extract(self, archive_file: Path, skip_failure: bool = False) -> None:
        """Extract *archive_file* to the location its filename encodes.

        Parameters
        ----------
        archive_file:
            An archive file inside a cache entry directory.
        skip_failure:
            When ``True``, a failed extraction is logged and swallowed
            instead of raised.

        Raises
        ------
        DecodeError, EmptyPathError
            If the filename does not decode to a usable path.  Raised
            regardless of *skip_failure*.
        ArchiveError
            If extraction fails and *skip_failure* is ``False``.
        """

    @abstractmethod
    def get_tool_name(self) -> str:
        """Return the name of the external program behind this reader."""
