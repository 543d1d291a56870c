"""Interfaces for the external programs the cache engine drives.

The engine never shells out directly: it talks to an
:class:`IArchiveWriter` when saving and an :class:`IArchiveReader` when
restoring.  Concrete adapters live in ``buildcache/providers/`` and are
wired up in ``buildcache/main.py``.  Unit tests inject mocks in their place.

    Interface         →  Concrete implementation
    ─────────────────────────────────────────────
    IArchiveWriter    →  TarArchiveWriter
    IArchiveReader    →  TarArchiveReader
"""

from buildcache.interfaces.archive_reader import IArchiveReader
from buildcache.interfaces.archive_writer import IArchiveWriter

__all__ = ["IArchiveReader", "IArchiveWriter"]
