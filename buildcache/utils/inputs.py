"""Helpers that turn raw user input into keys and absolute paths.

These sit between the CLI and the engine: the engine only ever sees
validated keys and absolute paths, and the CLI only ever sees raw strings.
"""

from __future__ import annotations

import os
import re
import unicodedata
from pathlib import Path

_NEGATION_SPACING = re.compile(r"^!\s+")


def is_exact_key_match(key: str, cache_key: str | None) -> bool:
    """Return ``True`` if *cache_key* is the same key as *key*.

    Comparison ignores case but not accents, so ``"linux-rust"`` matches
    ``"LINUX-RUST"`` while ``"linux-áccent"`` does not match
    ``"linux-accent"``.  Composed and decomposed spellings of the same
    accented character are equal.  A missing or empty *cache_key* never
    matches.
    """
    if not cache_key:
        return False
    return _comparable(cache_key) == _comparable(key)


def _comparable(key: str) -> str:
    return unicodedata.normalize("NFC", key).casefold()


def split_multiline(value: str | None) -> list[str]:
    """Split a newline-separated input into trimmed, non-empty entries.

    ``"! pattern"`` is normalised to ``"!pattern"``.
    """
    if not value:
        return []
    entries = (_NEGATION_SPACING.sub("!", line).strip() for line in value.split("\n"))
    return [entry for entry in entries if entry]


def parse_cache_paths(lines: list[str] | None) -> list[str]:
    """Normalise user-supplied cache paths to absolute paths.

    Blank lines and ``#`` comments are dropped, ``~/`` expands against
    ``HOME`` (``/home/runner`` when unset) and relative paths resolve
    against the current working directory.  A path listed more than once
    is kept only at its first position.
    """
    if not lines:
        return []

    home = os.environ.get("HOME") or "/home/runner"
    paths: list[str] = []
    for line in lines:
        if not line or line.startswith("#"):
            continue
        if line.startswith("~/"):
            paths.append(os.path.join(home, line[2:]))
        elif not os.path.isabs(line):
            paths.append(str(Path(line).resolve()))
        else:
            paths.append(line)
    return list(dict.fromkeys(paths))
