"""Command-line entry points for buildcache.

- ``python -m buildcache.cli save``: archive paths under a key.
- ``python -m buildcache.cli restore``: restore the first matching entry
  for a primary key and its fallback keys.

Settings come from ``BUILDCACHE_*`` environment variables, optionally
layered over a YAML file passed with ``--config``.  Each command prints a
JSON summary on stdout; logs go to stderr.
"""
