"""
Quotebook Backend: Similarity Engine
=====================================

What:  Normalized edit-distance similarity between two strings.
How:   similarity(a, b) = (L - levenshtein(a, b)) / L with L = max(len(a), len(b)).
       Two empty strings are identical (L == 0 → 1.0).

The score is symmetric and case-sensitive. Callers that want
case-insensitive matching (the duplicate detector) lowercase first.

Example:
    >>> similarity("The quick brown fox", "The quick brown dog")
    0.8947368421052632
"""

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Character-level edit distance with unit insert/delete/substitute costs."""
    return Levenshtein.distance(a, b, weights=(1, 1, 1))


def similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest
