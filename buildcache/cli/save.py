"""``buildcache save``: archive paths into the cache under a key.

Usage::

    python -m buildcache.cli save --key node-modules-$HASH \\
        --path node_modules --path ~/.npm

    # Skip the save when the restore step already hit the primary key.
    python -m buildcache.cli save --key node-modules-$HASH \\
        --path node_modules --matched-key "$MATCHED_KEY"

``--path`` may be repeated and may hold several newline-separated entries.
Relative entries resolve against the working directory; ``~/`` expands
against ``HOME``.  Patterns are not globbed here: expand them in the shell.
"""

from __future__ import annotations

import argparse
import json

from buildcache.services.cache_engine import CacheEngine
from buildcache.utils.errors import BuildCacheError
from buildcache.utils.inputs import is_exact_key_match, parse_cache_paths, split_multiline
from buildcache.utils.logging import get_logger

logger = get_logger(__name__)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Register ``save`` options on *parser*."""
    parser.add_argument("--key", required=True, help="Cache key to save under")
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        required=True,
        help="File or directory to cache (repeatable, newline-separated allowed)",
    )
    parser.add_argument(
        "--matched-key",
        default=None,
        help="Key the restore step matched; saving is skipped on an exact match",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum parallel archive processes (default: BUILDCACHE_CONCURRENCY_LIMIT)",
    )


async def run_save(args: argparse.Namespace, engine: CacheEngine) -> int:
    """Execute the save command.  Returns the process exit code."""
    primary_key: str = args.key

    if is_exact_key_match(primary_key, args.matched_key):
        logger.info("save_skipped_exact_hit", key=primary_key)
        print(json.dumps({"key": primary_key, "saved": False, "archives_written": 0}, indent=2))
        return 0

    raw_paths: list[str] = []
    for value in args.path:
        raw_paths.extend(split_multiline(value))
    cache_paths = parse_cache_paths(raw_paths)

    try:
        written = await engine.save(cache_paths, primary_key, concurrency_limit=args.concurrency)
    except BuildCacheError as exc:
        logger.error("save_command_failed", key=primary_key, error=str(exc))
        return 1

    saved = engine.config.enabled
    if saved:
        logger.info("cache_saved_with_key", key=primary_key)
    print(
        json.dumps(
            {"key": primary_key, "saved": saved, "archives_written": written},
            indent=2,
        )
    )
    return 0
