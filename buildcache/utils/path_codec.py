"""Reversible encoding between absolute paths and archive filenames.

An archive file is named after the path it was created from, so restore
needs nothing but the filename to know where the content goes back.  The
token is the standard base64 of the path's UTF-8 bytes with ``/`` swapped
for ``_``, which keeps it a single filename segment.  ``_`` never appears
in standard base64, so the swap is lossless.
"""

from __future__ import annotations

import base64
import binascii

from buildcache.utils.errors import DecodeError, EmptyPathError


def encode(path: str) -> str:
    """Return the filename-safe token for *path*."""
    token = base64.b64encode(path.encode("utf-8")).decode("ascii")
    return token.replace("/", "_")


def decode(token: str) -> str:
    """Return the path encoded in *token*.

    Raises
    ------
    DecodeError
        If *token* is not valid base64 or does not hold UTF-8 text.
    EmptyPathError
        If *token* decodes to an empty string.
    """
    try:
        raw = base64.b64decode(token.replace("_", "/"), validate=True)
        path = raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(f"Cannot decode archive name {token!r}: {exc}") from exc

    if not path:
        raise EmptyPathError(f"Archive name {token!r} decodes to an empty path")
    return path
