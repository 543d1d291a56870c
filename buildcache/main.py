"""Wiring for the cache engine.

Builds a :class:`CacheEngine` from :class:`Settings`: tar-backed writer and
reader, the key store, and an :class:`EngineConfig` snapshot of the
settings.  The CLI and any embedding script go through :func:`build_engine`
so the engine itself never reads the environment.
"""

from __future__ import annotations

from buildcache.config.settings import Settings
from buildcache.providers.archive.tar_reader import TarArchiveReader
from buildcache.providers.archive.tar_writer import TarArchiveWriter
from buildcache.services.cache_engine import CacheEngine
from buildcache.services.key_store import KeyStore
from buildcache.utils.logging import configure_logging, use_json_output


def build_engine(
    custom_settings: Settings | None = None,
    skip_failure: bool | None = None,
) -> CacheEngine:
    """Assemble a ready-to-use engine.

    Args:
        custom_settings: Settings to use instead of reading the environment.
        skip_failure: Overrides ``Settings.skip_failure`` when not None.

    Returns:
        A CacheEngine wired to the system tar.
    """
    app_settings = custom_settings or Settings()
    configure_logging(
        app_settings.log_level,
        json_output=use_json_output(app_settings.log_format, app_settings.app_env),
    )

    return CacheEngine(
        config=app_settings.engine_config(skip_failure=skip_failure),
        writer=TarArchiveWriter(
            tar_binary=app_settings.tar_binary,
            compress_program=app_settings.compress_program,
        ),
        reader=TarArchiveReader(
            tar_binary=app_settings.tar_binary,
            compress_program=app_settings.compress_program,
        ),
        key_store=KeyStore(),
    )
