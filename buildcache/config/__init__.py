"""Configuration module: exports Settings and load_settings."""

from buildcache.config.loader import load_settings
from buildcache.config.settings import Settings

__all__ = ["Settings", "load_settings"]
