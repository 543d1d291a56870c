"""Pydantic models shared between the engine, the config layer and the CLI."""

from buildcache.models.cache import CacheRoots, CopyOptions, EngineConfig

__all__ = ["CacheRoots", "CopyOptions", "EngineConfig"]
