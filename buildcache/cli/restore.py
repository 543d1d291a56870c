"""``buildcache restore``: restore a cache entry by key with fallbacks.

Usage::

    python -m buildcache.cli restore --key node-modules-$HASH \\
        --restore-key node-modules-

    python -m buildcache.cli restore --key node-modules-$HASH --lookup-only

The configured cache roots are searched in order: current branch, master
branch, default branch.  A JSON summary is printed to stdout::

    {"primary_key": "...", "matched_key": "...", "cache_hit": true}

``cache_hit`` is true only when the matched key is the primary key
(case-insensitively).  A miss exits 0 unless ``--fail-on-cache-miss``.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from buildcache.models.cache import CopyOptions
from buildcache.services.cache_engine import CacheEngine
from buildcache.utils.errors import BuildCacheError
from buildcache.utils.inputs import is_exact_key_match, split_multiline
from buildcache.utils.logging import get_logger

logger = get_logger(__name__)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Register ``restore`` options on *parser*."""
    parser.add_argument("--key", required=True, help="Primary cache key")
    parser.add_argument(
        "--restore-key",
        action="append",
        default=[],
        help="Fallback key tried after the primary key (repeatable, ordered)",
    )
    parser.add_argument(
        "--lookup-only",
        action="store_true",
        help="Only check that an entry exists; do not extract it",
    )
    parser.add_argument(
        "--fail-on-cache-miss",
        action="store_true",
        help="Exit with status 1 when no key matches",
    )


async def run_restore(
    args: argparse.Namespace,
    engine: CacheEngine,
    cache_roots: Sequence[Path],
) -> int:
    """Execute the restore command.  Returns the process exit code."""
    primary_key: str = args.key
    restore_keys: list[str] = []
    for value in args.restore_key:
        restore_keys.extend(split_multiline(value))

    try:
        matched_key = await engine.restore(
            primary_key,
            restore_keys,
            cache_roots,
            CopyOptions(lookup_only=args.lookup_only),
        )
    except BuildCacheError as exc:
        logger.error("restore_command_failed", key=primary_key, error=str(exc))
        return 1

    if matched_key is None:
        if args.fail_on_cache_miss and engine.config.enabled:
            logger.error(
                "cache_miss_failure",
                message=(
                    "Failed to restore cache entry. Exiting as fail-on-cache-miss is set. "
                    f"Input key: {primary_key}"
                ),
            )
            return 1
        logger.info("cache_not_found_for_input_keys", keys=", ".join([primary_key, *restore_keys]))
        _print_summary(primary_key, None)
        return 0

    if args.lookup_only:
        logger.info("cache_found", key=matched_key)
    else:
        logger.info("cache_restored", key=matched_key)
    _print_summary(primary_key, matched_key)
    return 0


def _print_summary(primary_key: str, matched_key: str | None) -> None:
    print(
        json.dumps(
            {
                "primary_key": primary_key,
                "matched_key": matched_key,
                "cache_hit": is_exact_key_match(primary_key, matched_key),
            },
            indent=2,
        )
    )
