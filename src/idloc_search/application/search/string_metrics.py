"""
String metrics used by ranking: Levenshtein distance and name initials.

Both functions are pure. Case folding is the caller's job: rankers
lowercase both sides before measuring distance.
"""

from __future__ import annotations

import re

_NAME_SPLIT = re.compile(r"[,\s]+")


def edit_distance(a: str, b: str) -> int:
    """
    Classic Levenshtein distance over code points.

    O(len(a) * len(b)) time; keeps only two rows of the table.

    Example:
        >>> edit_distance("kitten", "sitting")
        3
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current[j] = min(
                current[j - 1] + 1,  # insertion
                previous[j] + 1,  # deletion
                previous[j - 1] + cost,  # substitution
            )
        previous = current
    return previous[-1]


def initials(name: str | None) -> str:
    """
    Two-letter initials for a ``"Last, First"`` name, in ``FL`` order.

    A single-part name yields one letter; an empty name yields ``""``.

    Example:
        >>> initials("Smith, John")
        'JS'
    """
    if not name:
        return ""
    parts = [part for part in _NAME_SPLIT.split(name) if part]
    if not parts:
        return ""
    if len(parts) >= 2:
        return (parts[1][0] + parts[0][0]).upper()
    return parts[0][0].upper()
