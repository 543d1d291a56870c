"""Archive writer backed by GNU tar with an external compressor.

Each call spawns ``tar -I <compressor> -cf <dest> -C <parent> <name>``.
Running tar from the source's parent directory stores the entry under its
own name rather than its absolute path, so extraction into that same
parent directory puts it back where it came from.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from buildcache.interfaces.archive_writer import IArchiveWriter
from buildcache.utils.errors import ArchiveError
from buildcache.utils.logging import get_logger
from buildcache.utils.path_codec import encode
from buildcache.utils.process_supervisor import ProcessSupervisor

# Upper bound on tar stderr kept on an ArchiveError.
_MAX_DETAILS_CHARS = 2000


class TarArchiveWriter(IArchiveWriter):
    """Creates one compressed tar archive per cached path.

    Parameters
    ----------
    tar_binary:
        Name or path of the tar executable.
    compress_program:
        Program passed to ``tar -I``.  ``pigz`` compresses on every core;
        ``gzip`` is a drop-in fallback.  An empty string writes an
        uncompressed archive.
    """

    def __init__(self, tar_binary: str = "tar", compress_program: str = "pigz") -> None:
        self._tar_binary = tar_binary
        self._compress_program = compress_program
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IArchiveWriter interface
    # ------------------------------------------------------------------

    def get_tool_name(self) -> str:
        return self._tar_binary

    async def archive(
        self,
        source_path: Path,
        dest_path: Path,
        supervisor: ProcessSupervisor,
    ) -> None:
        """Archive *source_path* into *dest_path*, tracking tar with *supervisor*."""
        command = self.build_command(source_path, dest_path)
        self._logger.info(
            "archive_started",
            source=str(source_path),
            archive_name=encode(str(source_path)),
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ArchiveError(
                f"Tar process error: {exc}",
                tool_name=self.get_tool_name(),
                source_path=source_path,
            ) from exc

        # Register before waiting so a failing sibling can terminate us.
        supervisor.track(process)
        _, stderr = await process.communicate()

        if process.returncode != 0:
            details = stderr.decode("utf-8", errors="replace").strip()[:_MAX_DETAILS_CHARS]
            raise ArchiveError(
                f"Tar failed with exit code {process.returncode} for {source_path}. "
                f"Details: {details}",
                tool_name=self.get_tool_name(),
                exit_code=process.returncode,
                source_path=source_path,
                details=details,
            )

        self._logger.info("archive_created", source=str(source_path), archive=str(dest_path))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def build_command(self, source_path: Path, dest_path: Path) -> list[str]:
        """Return the argv for archiving *source_path* into *dest_path*."""
        command = [self._tar_binary]
        if self._compress_program:
            command += ["-I", self._compress_program]
        command += [
            "-cf",
            str(dest_path),
            "-C",
            str(source_path.parent),
            source_path.name or ".",
        ]
        return command
