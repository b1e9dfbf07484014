"""Nearest-command suggestions by Levenshtein edit distance."""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_SUGGESTION_COUNT = 4
MAX_DISTANCE = 4


def levenshtein(a: str, b: str) -> int:
    """Minimum number of single-character edits turning *a* into *b*.

    Single-row dynamic programming over the shorter string.
    """
    if len(a) > len(b):
        a, b = b, a
    if not a:
        return len(b)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        curr = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            curr.append(min(prev[j] + 1, curr[j - 1] + 1, prev[j - 1] + cost))
        prev = curr
    return prev[-1]


def max_threshold(text: str) -> int:
    """Adaptive distance cap: ``min(len // 2, 4)``."""
    return min(len(text) // 2, MAX_DISTANCE)


def normalize_count(n: int | None) -> int:
    """Non-positive or missing counts fall back to the default."""
    if n is None or n <= 0:
        return DEFAULT_SUGGESTION_COUNT
    return n


def rank(text: str, candidates: Iterable[str], n: int) -> list[tuple[str, int]]:
    """Rank *candidates* by closeness to *text*.

    Comparison is case-insensitive. Exact matches (distance 0) and
    candidates beyond the adaptive threshold are excluded. Results are
    ordered by ``(distance, name)`` and truncated to *n*.
    """
    needle = text.lower()
    if not needle or n <= 0:
        return []
    threshold = max_threshold(needle)
    scored: list[tuple[str, int]] = []
    for name in candidates:
        dist = levenshtein(needle, name.lower())
        if 0 < dist <= threshold:
            scored.append((name, dist))
    scored.sort(key=lambda pair: (pair[1], pair[0]))
    return scored[:n]


def format_suggestions(suggestions: list[str]) -> str:
    """Render `` Did you mean: a, b?`` or the empty string."""
    if not suggestions:
        return ""
    return " Did you mean: " + ", ".join(suggestions) + "?"
