"""Directory layout of the cache: one directory per key under each root.

    <cache root>/<key>/<encoded source path>

A key's entry lives wholly inside one root.  Lookup walks the roots in
priority order and stops at the first one whose entry holds at least one
archive file; entries are never merged across roots.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Sequence

import structlog

from buildcache.utils.logging import get_logger


class KeyStore:
    """Maps cache keys to entry directories and lists their archive files."""

    def __init__(self) -> None:
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @staticmethod
    def entry_dir(cache_root: Path, key: str) -> Path:
        """Return the entry directory for *key* under *cache_root* (no I/O)."""
        return Path(cache_root) / key

    async def locate_archive_files(self, entry_dir: Path) -> list[Path]:
        """Return the regular files directly under *entry_dir*, sorted by name.

        A directory that is missing or unreadable counts as empty.
        """
        try:
            names = await asyncio.to_thread(_list_regular_files, entry_dir)
        except OSError as exc:
            self._logger.info(
                "cache_dir_unavailable",
                path=str(entry_dir),
                reason=exc.strerror or str(exc),
            )
            return []
        return [entry_dir / name for name in sorted(names)]

    async def files_for(
        self,
        key: str,
        cache_roots: Sequence[Path],
    ) -> tuple[list[Path], Path] | None:
        """Find the first root holding archive files for *key*.

        Returns
        -------
        tuple[list[Path], Path] or None
            The archive files and the root they were found under, or
            ``None`` when no root has a non-empty entry for *key*.
        """
        for root in cache_roots:
            entry = self.entry_dir(root, key)
            files = await self.locate_archive_files(entry)
            if files:
                self._logger.info(
                    "cache_files_found",
                    key=key,
                    count=len(files),
                    path=str(entry),
                )
                return files, Path(root)
        return None


def _list_regular_files(directory: Path) -> list[str]:
    with os.scandir(directory) as entries:
        return [entry.name for entry in entries if entry.is_file()]
