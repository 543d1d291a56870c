"""Shared pytest fixtures for the buildcache test suite."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from buildcache.interfaces.archive_reader import IArchiveReader
from buildcache.interfaces.archive_writer import IArchiveWriter
from buildcache.models.cache import CacheRoots, EngineConfig

# ---------------------------------------------------------------------------
# Fake process handle
# ---------------------------------------------------------------------------


class FakeProcess:
    """Stand-in for ``asyncio.subprocess.Process``.

    ``terminate()`` records the request, sets a negative return code like a
    signalled process and wakes anything waiting on :meth:`wait_terminated`.
    """

    _next_pid = 1000

    def __init__(self, returncode: int | None = None, terminate_error: Exception | None = None) -> None:
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.returncode = returncode
        self.terminate_calls = 0
        self._terminate_error = terminate_error
        self._terminated = asyncio.Event()

    def terminate(self) -> None:
        self.terminate_calls += 1
        if self._terminate_error is not None:
            raise self._terminate_error
        self.returncode = -15
        self._terminated.set()

    async def wait_terminated(self) -> None:
        await self._terminated.wait()


# ---------------------------------------------------------------------------
# Cache layout fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_roots(tmp_path: Path) -> CacheRoots:
    """Three empty-but-existing cache roots under tmp_path."""
    roots = CacheRoots(
        cache=tmp_path / "cache",
        master_branch=tmp_path / "master-branch-cache",
        default_branch=tmp_path / "default-branch-cache",
    )
    for root in roots.ordered():
        root.mkdir(parents=True)
    return roots


@pytest.fixture
def engine_config(cache_roots: CacheRoots) -> EngineConfig:
    return EngineConfig(enabled=True, skip_failure=False, concurrency_limit=10, cache_roots=cache_roots)


@pytest.fixture
def source_tree(tmp_path: Path) -> dict[str, Path]:
    """A work directory with two files and one sub-directory to cache."""
    work = tmp_path / "work"
    (work / "subdir").mkdir(parents=True)
    (work / "file1.txt").write_text("content1")
    (work / "file2.txt").write_text("content2")
    (work / "subdir" / "file3.txt").write_text("content3")
    return {
        "file1.txt": work / "file1.txt",
        "file2.txt": work / "file2.txt",
        "subdir": work / "subdir",
    }


# ---------------------------------------------------------------------------
# Mock archive providers
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_writer() -> IArchiveWriter:
    """Mock IArchiveWriter whose archive() succeeds immediately."""
    mock = MagicMock(spec=IArchiveWriter)
    mock.get_tool_name.return_value = "mock-tar"
    mock.archive = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def mock_reader() -> IArchiveReader:
    """Mock IArchiveReader whose extract() succeeds immediately."""
    mock = MagicMock(spec=IArchiveReader)
    mock.get_tool_name.return_value = "mock-tar"
    mock.extract = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def make_entry():
    """Return a helper that creates placeholder archive files for a key under a root."""

    def _make(root: Path, key: str, *names: str) -> list[Path]:
        entry = root / key
        entry.mkdir(parents=True, exist_ok=True)
        files = []
        for name in names:
            archive = entry / name
            archive.write_bytes(b"archive")
            files.append(archive)
        return files

    return _make


@pytest.fixture
def fake_process() -> type[FakeProcess]:
    """The FakeProcess class, for tests that need several handles."""
    return FakeProcess
