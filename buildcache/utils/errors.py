"""Custom exception hierarchy for buildcache.

All package exceptions inherit from :class:`BuildCacheError`, which carries
an optional ``tool_name`` so error handlers can tell which external program
(e.g. "tar", "pigz") caused the failure.

The hierarchy is organized by the stage that raises it:

    BuildCacheError  (base -- catch-all for any buildcache error)
    +-- ValidationError      (malformed key / empty path list)
    +-- ReservationError     (no cache roots to search)
    +-- CacheStorageError    (entry directory cannot be created)
    +-- ArchiveError         (archiver or extractor process failed)
    +-- DecodeError          (archive filename is not valid encoded data)
    +-- EmptyPathError       (archive filename decodes to an empty path)
    +-- ConfigurationError   (invalid settings or config file)

Validation and reservation errors are the caller's fault and always
propagate.  CacheStorageError means the cache volume itself is unusable.
ArchiveError is downgraded to a warning when the skip-failure switch is
on.  DecodeError and EmptyPathError abandon restoration of a single
archive file.
"""

from __future__ import annotations

from pathlib import Path


class BuildCacheError(Exception):
    """Base exception for all buildcache errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``tool_name`` identifying which external program triggered the error.
    ``__str__`` prefixes the tool name in brackets, e.g. ``[tar] exit 2``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        tool_name: str | None = None,
    ) -> None:
        self._message = message
        self._tool_name = tool_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def tool_name(self) -> str | None:
        return self._tool_name

    def __str__(self) -> str:
        if self._tool_name:
            return f"[{self._tool_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------

class ValidationError(BuildCacheError):
    """Raised when a cache key or the path list fails validation."""

    def __init__(
        self,
        message: str = "Validation failed",
        tool_name: str | None = None,
    ) -> None:
        super().__init__(message=message, tool_name=tool_name)


class ReservationError(BuildCacheError):
    """Raised when restore is called without any cache root to search."""

    def __init__(
        self,
        message: str = "Cache directories not provided. Unable to restore cache.",
        tool_name: str | None = None,
    ) -> None:
        super().__init__(message=message, tool_name=tool_name)


# ---------------------------------------------------------------------------
# Cache volume errors
# ---------------------------------------------------------------------------

class CacheStorageError(BuildCacheError):
    """Raised when an entry directory cannot be created under a cache root.

    ``path`` is the directory that could not be created.
    """

    def __init__(
        self,
        message: str = "Cache entry directory cannot be created",
        tool_name: str | None = None,
        path: Path | str | None = None,
    ) -> None:
        super().__init__(message=message, tool_name=tool_name)
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path | None:
        return self._path


# ---------------------------------------------------------------------------
# Archive process errors
# ---------------------------------------------------------------------------

class ArchiveError(BuildCacheError):
    """Raised when an archive or extract process exits non-zero or cannot start.

    ``exit_code`` is ``None`` when the process never started (missing
    binary, permission error).  ``details`` holds the captured stderr.
    """

    def __init__(
        self,
        message: str = "Archive process failed",
        tool_name: str | None = "tar",
        exit_code: int | None = None,
        source_path: Path | str | None = None,
        details: str = "",
    ) -> None:
        super().__init__(message=message, tool_name=tool_name)
        self._exit_code = exit_code
        self._source_path = Path(source_path) if source_path is not None else None
        self._details = details

    @property
    def exit_code(self) -> int | None:
        return self._exit_code

    @property
    def source_path(self) -> Path | None:
        return self._source_path

    @property
    def details(self) -> str:
        return self._details


# ---------------------------------------------------------------------------
# Archive filename errors
# ---------------------------------------------------------------------------

class DecodeError(BuildCacheError):
    """Raised when an archive filename is not valid encoded path data."""

    def __init__(
        self,
        message: str = "Archive name is not a valid encoded path",
        tool_name: str | None = None,
    ) -> None:
        super().__init__(message=message, tool_name=tool_name)


class EmptyPathError(BuildCacheError):
    """Raised when an archive filename decodes to an empty path."""

    def __init__(
        self,
        message: str = "Archive name decodes to an empty path",
        tool_name: str | None = None,
    ) -> None:
        super().__init__(message=message, tool_name=tool_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(BuildCacheError):
    """Raised when settings or the YAML config file are invalid."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        tool_name: str | None = None,
    ) -> None:
        super().__init__(message=message, tool_name=tool_name)
