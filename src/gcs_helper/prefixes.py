"""
Prefix fan-out and filter selection.

A logical prefix such as ``videos/2024/asset123`` is queried at its own location
and at every configured alternate location, joined with the last path segment:
``subtitles/`` gives ``subtitles/asset123``. A ``__HD`` marker anywhere in a
physical prefix selects the HD filename filter and is removed before listing.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Iterable
from dataclasses import dataclass

HD_MARKER = "__HD"


@dataclass(frozen=True)
class FilterPatterns:
    """Standard and HD filename filters; matched against the base filename only."""

    standard: re.Pattern[str]
    hd: re.Pattern[str]


def _join(*parts: str) -> str:
    """Join path parts and clean the result; empty parts are ignored."""
    joined = "/".join(p for p in parts if p)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    if cleaned.startswith("//"):
        cleaned = cleaned[1:]
    return cleaned


def last_segment(prefix: str) -> str:
    """Return everything after the final slash (empty if prefix ends with one)."""
    return prefix.rsplit("/", 1)[-1]


def base_name(key: str) -> str:
    """Return the last element of an object key, ignoring trailing slashes."""
    stripped = key.rstrip("/")
    if not stripped:
        return "/" if key else "."
    return stripped.rsplit("/", 1)[-1]


def physical_prefixes(prefix: str, extra_prefixes: Iterable[str]) -> list[str]:
    """Return the prefixes to list, primary first, then alternates in config order.

    No deduplication is done.
    """
    tail = last_segment(prefix)
    return [prefix] + [_join(extra, tail) for extra in extra_prefixes]


def select_filter(prefix: str, patterns: FilterPatterns) -> tuple[str, re.Pattern[str]]:
    """Return (listing prefix, pattern) for one physical prefix.

    The first ``__HD`` occurrence is removed and selects the HD pattern.
    """
    if HD_MARKER in prefix:
        return prefix.replace(HD_MARKER, "", 1), patterns.hd
    return prefix, patterns.standard


def matches(pattern: re.Pattern[str], key: str) -> bool:
    """True if the base filename of key contains a match for pattern (case-sensitive)."""
    return pattern.search(base_name(key)) is not None
