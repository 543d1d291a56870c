"""Utility modules for buildcache.

Available utility modules (all re-exported here for convenience):

- **errors** -- Exception hierarchy rooted at BuildCacheError; validation,
  reservation, storage, archive and decode failures each get their own subclass so
  callers can tell a caller mistake from a broken archive.
- **path_codec** -- Reversible path <-> archive filename encoding.
- **process_supervisor** -- Per-call registry of tar processes that can be
  terminated together when one archive in a batch fails.
- **inputs** -- Key comparison and user path normalisation used by the CLI.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output interactively, structured JSON in production.
"""

# -- Exception hierarchy ---------------------------------------------------
from buildcache.utils.errors import (
    ArchiveError,
    BuildCacheError,
    CacheStorageError,
    ConfigurationError,
    DecodeError,
    EmptyPathError,
    ReservationError,
    ValidationError,
)

# -- Key and path input helpers --------------------------------------------
from buildcache.utils.inputs import is_exact_key_match, parse_cache_paths, split_multiline

# -- Structured logging setup ----------------------------------------------
from buildcache.utils.logging import configure_logging, get_logger

# -- Archive filename encoding ---------------------------------------------
from buildcache.utils.path_codec import decode, encode

# -- Process tracking ------------------------------------------------------
from buildcache.utils.process_supervisor import ProcessSupervisor

__all__ = [
    "ArchiveError",
    "BuildCacheError",
    "CacheStorageError",
    "ConfigurationError",
    "DecodeError",
    "EmptyPathError",
    "ProcessSupervisor",
    "ReservationError",
    "ValidationError",
    "configure_logging",
    "decode",
    "encode",
    "get_logger",
    "is_exact_key_match",
    "parse_cache_paths",
    "split_multiline",
]
