"""Application settings loaded from environment variables via pydantic-settings.

Settings come from two sources, in priority order:

  1. Environment variables prefixed ``BUILDCACHE_``, e.g.
     ``BUILDCACHE_CACHE_DIR=/mnt/cache``
  2. A ``.env`` file in the working directory

Field ``cache_dir`` maps to ``BUILDCACHE_CACHE_DIR``, ``skip_failure`` to
``BUILDCACHE_SKIP_FAILURE`` and so on.  Defaults apply when neither source
sets a value.  ``log_level`` and ``app_env`` are shared with the logging
setup and are read without the prefix; ``log_format`` is
``BUILDCACHE_LOG_FORMAT`` (``auto``, ``console`` or ``json``).
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from buildcache.models.cache import CacheRoots, EngineConfig


class Settings(BaseSettings):
    """buildcache settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUILDCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Feature gate ===
    # Off unless the runner environment explicitly provides a cache volume.
    available: bool = False

    # === Failure policy ===
    skip_failure: bool = False
    concurrency_limit: int = Field(default=10, ge=1)

    # === Cache roots (searched in this order) ===
    cache_dir: Path = Path("/.buildcache/cache")
    master_branch_cache_dir: Path = Path("/.buildcache/master-branch-cache")
    default_branch_cache_dir: Path = Path("/.buildcache/default-branch-cache")

    # === Archive tool ===
    tar_binary: str = "tar"
    compress_program: str = "pigz"

    # === App Config ===
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("BUILDCACHE_LOG_LEVEL", "LOG_LEVEL", "log_level"),
    )
    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
    )
    # "auto" renders JSON unless stderr is a terminal.
    log_format: Literal["auto", "console", "json"] = "auto"

    def cache_roots(self) -> CacheRoots:
        """Return the configured roots as a :class:`CacheRoots`."""
        return CacheRoots(
            cache=self.cache_dir,
            master_branch=self.master_branch_cache_dir,
            default_branch=self.default_branch_cache_dir,
        )

    def engine_config(self, skip_failure: bool | None = None) -> EngineConfig:
        """Build the engine configuration, optionally overriding skip-failure."""
        return EngineConfig(
            enabled=self.available,
            skip_failure=self.skip_failure if skip_failure is None else skip_failure,
            concurrency_limit=self.concurrency_limit,
            cache_roots=self.cache_roots(),
        )
