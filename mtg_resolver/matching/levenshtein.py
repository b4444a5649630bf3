"""
Edit distance primitives shared by the matchers.

Callers decide case sensitivity (they lowercase or normalize first).
"""

import Levenshtein


def distance(a: str, b: str) -> int:
    """Classic Levenshtein distance (unit cost insert/delete/substitute)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Length-normalized similarity in [0, 1].

    ``(max_len - distance) / max_len``; two empty strings are identical (1.0).

    Examples:
        >>> similarity("MKN", "MKM")
        0.6666666666666666
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0

    score = (longest - distance(a, b)) / longest
    return min(1.0, max(0.0, score))
