"""Helpers over a flat list of slash-delimited server paths."""

from __future__ import annotations

from typing import Sequence

SEPARATOR = "/"


def segment_count(path: str) -> int:
    return len(path.split(SEPARATOR))


def last_segment(path: str) -> str:
    """Return the display name of *path* (its final segment)."""
    return path.split(SEPARATOR)[-1]


def has_descendants(path: str, all_paths: Sequence[str]) -> bool:
    """Return True if another path in *all_paths* starts with *path*.

    This is a plain string-prefix test, so ``"abc"`` is reported as having
    descendants when ``"abcx"`` is listed. A node flagged this way by mistake
    still ends up without children, because :func:`direct_children_of`
    compares whole segments.
    """
    return any(other != path and other.startswith(path) for other in all_paths)


def direct_children_of(parent: str | None, all_paths: Sequence[str]) -> list[str]:
    """Return the paths directly below *parent*, in listing order.

    ``parent=None`` stands for the server root: every path without a
    separator is returned.
    """
    if parent is None:
        return [p for p in all_paths if SEPARATOR not in p]

    prefix = parent + SEPARATOR
    depth = segment_count(parent) + 1
    return [
        p
        for p in all_paths
        if p != parent and p.startswith(prefix) and segment_count(p) == depth
    ]
