"""Abstract base class for archive writers.

An archive writer turns one source path (file or directory) into one
compressed archive file.  The cache engine calls it once per cached path
and runs several calls of the same writer concurrently.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from buildcache.utils.process_supervisor import ProcessSupervisor


class IArchiveWriter(ABC):
    """Contract for creating a single-path archive."""

    @abstractmethod
    async def archive(
        self,
        source_path: Path,
        dest_path: Path,
        supervisor: ProcessSupervisor,
    ) -> None:
        """Archive *source_path* into *dest_path*.

        Parameters
        ----------
        source_path:
            Absolute path of the file or directory to archive.
        dest_path:
            Archive file to create.  Overwritten if it already exists.
        supervisor:
            Registry the spawned process must be tracked with before the
            writer waits on it, so a failing sibling can terminate it.

        Raises
        ------
        ArchiveError
            If the archiving process fails to start or exits non-zero.
        """

    @abstractmethod
    def get_tool_name(self) -> str:
        """Return the name of the external program behind this writer."""
