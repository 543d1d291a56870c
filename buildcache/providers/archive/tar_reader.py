"""Archive reader backed by GNU tar with an external compressor.

The destination is recovered from the archive's own filename (see
:mod:`buildcache.utils.path_codec`).  tar extracts into the parent of that
path; the entry name stored inside the archive supplies the leaf.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path

from buildcache.interfaces.archive_reader import IArchiveReader
from buildcache.utils.errors import ArchiveError
from buildcache.utils.logging import get_logger
from buildcache.utils.path_codec import decode


class TarArchiveReader(IArchiveReader):
    """Extracts archives written by :class:`TarArchiveWriter`.

    Parameters
    ----------
    tar_binary:
        Name or path of the tar executable.
    compress_program:
        Program passed to ``tar -I``; must match the one used to write.
        An empty string reads an uncompressed archive.
    """

    def __init__(self, tar_binary: str = "tar", compress_program: str = "pigz") -> None:
        self._tar_binary = tar_binary
        self._compress_program = compress_program
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IArchiveReader interface
    # ------------------------------------------------------------------

    def get_tool_name(self) -> str:
        return self._tar_binary

    async def extract(self, archive_file: Path, skip_failure: bool = False) -> None:
        """Restore *archive_file* to the path encoded in its name."""
        # Decode errors propagate: a corrupt name gives no safe target.
        target = Path(decode(archive_file.name))
        dest_dir = target.parent

        try:
            stats = await asyncio.to_thread(archive_file.stat)
            self._logger.info(
                "restoring_cache_archive",
                archive=str(archive_file),
                target=str(target),
                created=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc).isoformat(),
                size_bytes=stats.st_size,
            )
            await asyncio.to_thread(dest_dir.mkdir, parents=True, exist_ok=True)
            await self._run_tar(self.build_command(archive_file, dest_dir), target)
        except (ArchiveError, OSError) as exc:
            self._logger.warning(
                "extract_failed",
                archive=str(archive_file),
                target=str(target),
                error=str(exc),
            )
            if skip_failure:
                return
            if isinstance(exc, ArchiveError):
                raise
            raise ArchiveError(
                f"Cannot restore {archive_file}: {exc}",
                tool_name=self.get_tool_name(),
                source_path=target,
            ) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def build_command(self, archive_file: Path, dest_dir: Path) -> list[str]:
        """Return the argv for extracting *archive_file* into *dest_dir*."""
        command = [self._tar_binary]
        if self._compress_program:
            command += ["-I", self._compress_program]
        command += ["-xf", str(archive_file), "-C", str(dest_dir)]
        return command

    async def _run_tar(self, command: list[str], target: Path) -> None:
        """Run tar, relaying its output to the log, and raise on failure."""
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ArchiveError(
                f"Tar process error: {exc}",
                tool_name=self.get_tool_name(),
                source_path=target,
            ) from exc

        stdout, stderr = await process.communicate()

        for line in stdout.decode("utf-8", errors="replace").splitlines():
            if line.strip():
                self._logger.info("tar_output", line=line.strip())
        details = stderr.decode("utf-8", errors="replace").strip()
        for line in details.splitlines():
            if line.strip():
                self._logger.warning("tar_output", line=line.strip())

        if process.returncode != 0:
            raise ArchiveError(
                f"Tar failed with exit code {process.returncode} for {target}. "
                f"Details: {details}",
                tool_name=self.get_tool_name(),
                exit_code=process.returncode,
                source_path=target,
                details=details,
            )
