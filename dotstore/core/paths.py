"""Key parsing: dot-delimited keys to root segment plus sub-path."""

from __future__ import annotations

import re

from dotstore.core.exceptions import InvalidPathError
from dotstore.core.models import KeyPath

SEPARATOR = "."

_INDEX = re.compile(r"0|[1-9][0-9]*")


def parse(key: str) -> KeyPath:
    """Parse a dot-delimited key into a KeyPath.

    Raises InvalidPathError for an empty key, a leading or trailing
    separator, or two separators in a row.
    """
    if not key:
        raise InvalidPathError("Key must not be empty")
    segments = tuple(key.split(SEPARATOR))
    if any(segment == "" for segment in segments):
        raise InvalidPathError(f"Key '{key}' contains an empty segment")
    return KeyPath(segments)


def split(path: KeyPath) -> tuple[str, tuple[str, ...]]:
    """Split a path into (root segment, sub-path). The sub-path may be empty."""
    return path.root, path.sub_path


def parse_index(segment: str) -> int | None:
    """Array index named by a segment, or None if it is not a canonical index."""
    if _INDEX.fullmatch(segment) is None:
        return None
    return int(segment)
