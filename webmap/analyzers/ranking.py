"""Shared counting, ranking and truncation helpers for aggregators."""

from __future__ import annotations

from collections import Counter
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Sequence, Tuple, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def tally(keys: Iterable[K]) -> Counter[K]:
    """Count keys; iteration order of the result is first-seen order."""
    counts: Counter[K] = Counter()
    for key in keys:
        counts[key] += 1
    return counts


def rank_counts(counts: Mapping[K, int]) -> List[Tuple[K, int]]:
    """Return ``(key, count)`` pairs by descending count.

    ``sorted`` is stable, so equal counts keep the mapping's insertion order,
    which for ``tally`` output is the order keys were first seen.
    """
    return sorted(counts.items(), key=lambda item: -item[1])


def truncate(items: Sequence[T], limit: int) -> List[T]:
    """Return at most ``limit`` leading items; never raises for short input."""
    if limit <= 0:
        return []
    return list(items[:limit])


def unique(items: Iterable[T]) -> List[T]:
    """De-duplicate while keeping first occurrence order."""
    return list(dict.fromkeys(items))


def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Group items by key, keeping first-seen key order and item order within groups."""
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def preview(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def line_of(text: str, index: int) -> int:
    """Return 1-based line number for a character index."""
    return text.count("\n", 0, index) + 1


__all__ = [
    "group_by",
    "line_of",
    "preview",
    "rank_counts",
    "tally",
    "truncate",
    "unique",
]
