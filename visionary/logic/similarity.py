"""Edit-distance based text similarity."""

from __future__ import annotations

from typing import List

from visionary.config import TEXT_SIMILARITY_THRESHOLD


def levenshtein(a: str, b: str) -> int:
    """Character-level edit distance with unit insert/delete/substitute costs."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)
    previous: List[int] = list(range(len(b) + 1))
    for i, ch_a in enumerate(a, start=1):
        current = [i]
        for j, ch_b in enumerate(b, start=1):
            if ch_a == ch_b:
                current.append(previous[j - 1])
            else:
                current.append(
                    1 + min(previous[j], current[j - 1], previous[j - 1])
                )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - levenshtein(a, b)) / max_len


def similar(a: str, b: str, threshold: float = TEXT_SIMILARITY_THRESHOLD) -> bool:
    return similarity(a, b) >= threshold
