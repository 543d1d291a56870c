"""Unit tests for KeyStore directory layout and lookup."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildcache.models.cache import CacheRoots
from buildcache.services.key_store import KeyStore


@pytest.fixture()
def store() -> KeyStore:
    return KeyStore()


class TestEntryDir:
    def test_joins_root_and_key(self) -> None:
        assert KeyStore.entry_dir(Path("/cache"), "linux-deps") == Path("/cache/linux-deps")

    def test_does_not_touch_disk(self, tmp_path: Path) -> None:
        entry = KeyStore.entry_dir(tmp_path / "missing", "key")
        assert not entry.exists()


class TestLocateArchiveFiles:
    @pytest.mark.asyncio
    async def test_missing_directory_is_empty(self, store: KeyStore, tmp_path: Path) -> None:
        assert await store.locate_archive_files(tmp_path / "nope") == []

    @pytest.mark.asyncio
    async def test_lists_only_regular_files_sorted(
        self, store: KeyStore, tmp_path: Path, make_entry
    ) -> None:
        make_entry(tmp_path, "key", "b-archive", "a-archive")
        (tmp_path / "key" / "nested-dir").mkdir()

        files = await store.locate_archive_files(tmp_path / "key")

        assert files == [tmp_path / "key" / "a-archive", tmp_path / "key" / "b-archive"]

    @pytest.mark.asyncio
    async def test_path_that_is_a_file_is_empty(self, store: KeyStore, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "plain-file"
        not_a_dir.write_text("x")
        assert await store.locate_archive_files(not_a_dir) == []


class TestFilesFor:
    @pytest.mark.asyncio
    async def test_first_non_empty_root_wins(
        self, store: KeyStore, cache_roots: CacheRoots, make_entry
    ) -> None:
        make_entry(cache_roots.master_branch, "key", "from-master")
        make_entry(cache_roots.default_branch, "key", "from-default")

        found = await store.files_for("key", cache_roots.ordered())

        assert found is not None
        files, root = found
        assert root == cache_roots.master_branch
        assert [f.name for f in files] == ["from-master"]

    @pytest.mark.asyncio
    async def test_empty_entry_directory_is_skipped(
        self, store: KeyStore, cache_roots: CacheRoots, make_entry
    ) -> None:
        (cache_roots.cache / "key").mkdir()
        make_entry(cache_roots.default_branch, "key", "archive")

        found = await store.files_for("key", cache_roots.ordered())

        assert found is not None
        assert found[1] == cache_roots.default_branch

    @pytest.mark.asyncio
    async def test_missing_root_is_not_an_error(
        self, store: KeyStore, tmp_path: Path, make_entry
    ) -> None:
        present = tmp_path / "present"
        make_entry(present, "key", "archive")

        found = await store.files_for("key", [tmp_path / "absent", present])

        assert found is not None
        assert found[1] == present

    @pytest.mark.asyncio
    async def test_unknown_key_returns_none(self, store: KeyStore, cache_roots: CacheRoots) -> None:
        assert await store.files_for("unknown", cache_roots.ordered()) is None
