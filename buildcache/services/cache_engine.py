"""Save and restore orchestration for the build-artifact cache.

# ─── DESIGN ────────────────────────────────────────────────────────────
#
# save(paths, key)
#   1. Feature gate  -- disabled engine returns 0 without touching disk
#   2. Validation    -- key and path list checked before any I/O
#   3. Entry dir     -- <cache root>/<key>/ created (parents, idempotent)
#   4. Batches       -- paths sliced into groups of concurrency_limit;
#                       one archiver process per path inside a group,
#                       groups run strictly one after another
#   5. Failure       -- default: terminate every tracked tar process and
#                       re-raise; skip-failure: warn and stop saving
#
# restore(primary, fallbacks, roots)
#   Keys are tried one at a time in order; the first root holding
#   archive files for a key wins.  Lookup-only stops at "it exists".
#   A miss is a normal ``None`` return, never an exception.
#
# The engine reads no environment.  Everything it needs arrives through
# EngineConfig at construction (see buildcache/main.py for the wiring).
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterator, Sequence

import structlog

from buildcache.interfaces.archive_reader import IArchiveReader
from buildcache.interfaces.archive_writer import IArchiveWriter
from buildcache.models.cache import CopyOptions, EngineConfig
from buildcache.services.key_store import KeyStore
from buildcache.utils.errors import (
    ArchiveError,
    CacheStorageError,
    ReservationError,
    ValidationError,
)
from buildcache.utils.logging import get_logger
from buildcache.utils.path_codec import encode
from buildcache.utils.process_supervisor import ProcessSupervisor

MAX_KEY_LENGTH = 255

_DISABLED_MESSAGE = (
    "The cache function is disabled in this environment. "
    "Set BUILDCACHE_AVAILABLE=true to enable it."
)


def check_key(key: str) -> None:
    """Raise :class:`ValidationError` unless *key* is a usable cache key."""
    if not key:
        raise ValidationError("Key Validation Error: key cannot be empty.")
    if len(key) > MAX_KEY_LENGTH:
        raise ValidationError(
            f"Key Validation Error: {key} cannot be larger than {MAX_KEY_LENGTH} characters."
        )
    if "," in key:
        raise ValidationError(f"Key Validation Error: {key} cannot contain commas.")


def check_paths(paths: Sequence[str] | None) -> None:
    """Raise :class:`ValidationError` if *paths* is ``None`` or empty."""
    if not paths:
        raise ValidationError(
            "Path Validation Error: At least one directory or file path is required"
        )


def _batched(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class CacheEngine:
    """Archives paths under a key and restores them by key with fallbacks.

    Parameters
    ----------
    config:
        Feature gate, failure policy, concurrency limit and cache roots.
    writer:
        Creates one archive per cached path.
    reader:
        Extracts one archive back to its original location.
    key_store:
        Directory layout helper.  A default :class:`KeyStore` is built
        when omitted.
    """

    def __init__(
        self,
        config: EngineConfig,
        writer: IArchiveWriter,
        reader: IArchiveReader,
        key_store: KeyStore | None = None,
    ) -> None:
        self._config = config
        self._writer = writer
        self._reader = reader
        self._key_store = key_store or KeyStore()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    async def save(
        self,
        paths: Sequence[str],
        key: str,
        concurrency_limit: int | None = None,
    ) -> int:
        """Archive every path in *paths* into the entry for *key*.

        Parameters
        ----------
        paths:
            Absolute paths of files or directories to cache.
        key:
            Cache key.  An existing entry with the same key is overwritten
            path by path.
        concurrency_limit:
            Maximum number of archiver processes alive at once.  Defaults
            to the configured limit.

        Returns
        -------
        int
            Number of archives written.  ``0`` when caching is disabled.

        Raises
        ------
        ValidationError
            On an invalid key, an empty path list or a limit below 1.
        CacheStorageError
            If the entry directory cannot be created under the cache root.
        ArchiveError
            When an archive fails and skip-failure is off.  Archives
            written before the failure stay on disk.
        """
        if not self._config.enabled:
            self._logger.warning("cache_disabled", message=_DISABLED_MESSAGE)
            return 0

        check_key(key)
        check_paths(paths)
        # One archive per distinct path; order of first appearance is kept.
        paths = list(dict.fromkeys(paths))

        limit = self._config.concurrency_limit if concurrency_limit is None else concurrency_limit
        if limit < 1:
            raise ValidationError(f"Concurrency limit must be at least 1, got {limit}")

        entry_dir = self._key_store.entry_dir(self._config.cache_roots.cache, key)
        try:
            await asyncio.to_thread(entry_dir.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheStorageError(
                f"Cannot create cache entry {entry_dir}: {exc.strerror or exc}",
                path=entry_dir,
            ) from exc

        supervisor = ProcessSupervisor()
        written = 0

        for batch_number, batch in enumerate(_batched(paths, limit), start=1):
            self._logger.info(
                "save_batch_started",
                key=key,
                batch=batch_number,
                batch_size=len(batch),
                total_paths=len(paths),
            )
            tasks = [
                asyncio.create_task(
                    self._writer.archive(Path(path), entry_dir / encode(path), supervisor)
                )
                for path in batch
            ]
            try:
                await asyncio.gather(*tasks)
            except Exception as exc:
                self._logger.warning("save_failed", key=key, **_failure_fields(exc))
                if not self._config.skip_failure:
                    self._logger.info("killing_archive_processes", tracked=len(supervisor))
                    supervisor.kill_all()
                    # Siblings must settle so none of their errors go unobserved.
                    await asyncio.gather(*tasks, return_exceptions=True)
                    raise
                results = await asyncio.gather(*tasks, return_exceptions=True)
                written += sum(1 for result in results if not isinstance(result, BaseException))
                break
            written += len(batch)

        self._logger.info("cache_saved", key=key, archives=written, path=str(entry_dir))
        return written

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    async def restore(
        self,
        primary_key: str,
        fallback_keys: Sequence[str] | None,
        cache_roots: Sequence[Path],
        options: CopyOptions | None = None,
    ) -> str | None:
        """Restore the first entry found for *primary_key* or a fallback key.

        Parameters
        ----------
        primary_key:
            Key tried first.
        fallback_keys:
            Keys tried next, in order, when the primary key misses.
        cache_roots:
            Roots to search, highest priority first.
        options:
            Per-call options; ``lookup_only`` skips extraction.

        Returns
        -------
        str or None
            The key whose entry was found, or ``None`` on a miss.

        Raises
        ------
        ValidationError
            If *primary_key* is invalid.
        ReservationError
            If *cache_roots* is empty.
        """
        if not self._config.enabled:
            self._logger.warning("cache_disabled", message=_DISABLED_MESSAGE)
            return None

        check_key(primary_key)
        if not cache_roots:
            raise ReservationError()

        fallback_keys = list(fallback_keys or [])
        for key in [primary_key, *fallback_keys]:
            restored = await self.try_restore_from_key(key, cache_roots, options)
            if restored is not None:
                return restored

        self._logger.info(
            "cache_not_found",
            keys=", ".join([primary_key, *fallback_keys]),
        )
        return None

    async def try_restore_from_key(
        self,
        key: str,
        cache_roots: Sequence[Path],
        options: CopyOptions | None = None,
    ) -> str | None:
        """Restore the entry for a single *key*.

        A key counts as found as soon as some root holds archive files for
        it, even when extracting them fails; the failure is logged.
        """
        found = await self._key_store.files_for(key, cache_roots)
        if found is None:
            return None
        archive_files, root = found

        self._logger.info("restoring_cache", key=key, root=str(root))

        if options is not None and options.lookup_only:
            self._logger.info("lookup_only_hit", key=key)
            return key

        results = await asyncio.gather(
            *(
                self._reader.extract(archive_file, skip_failure=self._config.skip_failure)
                for archive_file in archive_files
            ),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            self._logger.warning(
                "restore_failed",
                key=key,
                failed=len(failures),
                total=len(archive_files),
                **_failure_fields(failures[0]),
            )

        return key


def _failure_fields(exc: BaseException) -> dict[str, object]:
    """Structured log fields describing an archive failure."""
    fields: dict[str, object] = {"error": str(exc)}
    if isinstance(exc, ArchiveError):
        fields["exit_code"] = exc.exit_code
        fields["source"] = str(exc.source_path) if exc.source_path else None
        fields["details"] = exc.details
    return fields
