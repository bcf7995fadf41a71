# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Path helpers for matching directory fragments against target paths."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Iterator
from pathlib import PurePosixPath


def iter_segments_leaf_first(path: str) -> Iterator[str]:
    """Yield the segments of ``path`` from its final component toward the root.

    Args:
        path: Slash-separated path as emitted by a lister command.

    Yields:
        str: Path segments, leaf first. The root anchor of an absolute path is
        never yielded.
    """

    parts = PurePosixPath(path).parts
    for part in reversed(parts):
        if part == "/":
            continue
        yield part


def merge_fragments(first: Iterable[str], second: Iterable[str]) -> tuple[str, ...]:
    """Return the ordered union of two fragment collections, first occurrence wins."""

    merged: dict[str, None] = dict.fromkeys(first)
    merged.update(dict.fromkeys(second))
    return tuple(merged)


def contains_fragment(path: str, fragments: Collection[str]) -> bool:
    """Return ``True`` when any segment of ``path`` equals one of ``fragments``.

    Matching is segment-exact: ``"abcd"`` matches ``testing/abcd/test.go`` but
    not ``testing/abcde/test.go``.

    Args:
        path: Candidate path to inspect.
        fragments: Directory names that exclude a path.

    Returns:
        bool: ``True`` if the path contains an excluded segment.
    """

    if not fragments:
        return False
    return any(segment in fragments for segment in iter_segments_leaf_first(path))


__all__ = ["contains_fragment", "iter_segments_leaf_first", "merge_fragments"]
