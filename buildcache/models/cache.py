"""Value objects passed into and out of the cache engine.

All models are frozen: the engine receives its configuration once at
construction and never mutates it, and per-call options are plain values.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class CopyOptions(BaseModel):
    """Options that control a single restore call."""

    model_config = ConfigDict(frozen=True)

    # When True, restore only confirms that an entry exists for a key and
    # returns that key; nothing is extracted.
    lookup_only: bool = False


class CacheRoots(BaseModel):
    """The three directories a key is searched under, highest priority first."""

    model_config = ConfigDict(frozen=True)

    # Current-branch cache. Saves always write here.
    cache: Path = Path("/.buildcache/cache")
    # Shared main-line cache, populated by runs on the master branch.
    master_branch: Path = Path("/.buildcache/master-branch-cache")
    # Repository default-branch cache.
    default_branch: Path = Path("/.buildcache/default-branch-cache")

    def ordered(self) -> list[Path]:
        """Return the roots in restore search order."""
        return [self.cache, self.master_branch, self.default_branch]


class EngineConfig(BaseModel):
    """Everything the cache engine needs to know about its environment."""

    model_config = ConfigDict(frozen=True)

    # Feature gate. When False, save and restore are no-ops.
    enabled: bool = True
    # Downgrade archive/extract failures from errors to warnings.
    skip_failure: bool = False
    # Maximum number of archiver processes running at once during save.
    concurrency_limit: int = Field(default=10, ge=1)
    cache_roots: CacheRoots = Field(default_factory=CacheRoots)
