"""buildcache - local-filesystem build-artifact cache for CI runners."""

__version__ = "0.1.0"
