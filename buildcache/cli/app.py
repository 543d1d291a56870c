"""Top-level argument parser and dispatch for the buildcache CLI."""

from __future__ import annotations

import argparse
import asyncio
import sys

from buildcache.cli import restore, save
from buildcache.config.loader import load_settings
from buildcache.main import build_engine
from buildcache.utils.errors import ConfigurationError


def _common_options(default: object) -> argparse.ArgumentParser:
    """Options accepted both before and after the subcommand name."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=default,
        help="YAML settings file; BUILDCACHE_* environment variables override it",
    )
    common.add_argument(
        "--skip-failure",
        action="store_true",
        default=default,
        help="Log archive/extract failures as warnings instead of failing",
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    """Build the ``buildcache`` parser with ``save`` and ``restore`` subcommands.

    ``--config`` and ``--skip-failure`` may appear on either side of the
    subcommand.  The subcommand copies default to ``SUPPRESS`` so they only
    overwrite a value given before the subcommand when given themselves.
    """
    parser = argparse.ArgumentParser(
        prog="buildcache",
        description="Save and restore build artifacts on a shared cache volume.",
        parents=[_common_options(None)],
    )

    subcommand_options = _common_options(argparse.SUPPRESS)
    subparsers = parser.add_subparsers(dest="command", required=True)
    save.add_arguments(
        subparsers.add_parser(
            "save", help="Archive paths under a key", parents=[subcommand_options]
        )
    )
    restore.add_arguments(
        subparsers.add_parser(
            "restore",
            help="Restore an entry by key with fallbacks",
            parents=[subcommand_options],
        )
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse *argv*, run the chosen command and return its exit code."""
    args = build_parser().parse_args(argv)

    try:
        app_settings = load_settings(args.config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    engine = build_engine(app_settings, skip_failure=args.skip_failure)

    if args.command == "save":
        return asyncio.run(save.run_save(args, engine))
    return asyncio.run(
        restore.run_restore(args, engine, app_settings.cache_roots().ordered())
    )
