"""
Lexical similarity primitives shared by every scorer.

- String similarity: exact / substring shortcuts, then the better of
  normalized Levenshtein and word-set Jaccard
- Array similarity: case-folded Jaccard index
"""

from typing import Iterable, Optional, Set

from rapidfuzz.distance import Levenshtein

SUBSTRING_SCORE = 0.9


def normalize_text(value: Optional[str]) -> str:
    """Trim and case-fold a string; None becomes empty."""
    if not value:
        return ""
    return value.strip().casefold()


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum single-character edits turning a into b."""
    return Levenshtein.distance(a, b)


def jaccard(left: Set[str], right: Set[str]) -> float:
    """Intersection over union; 0.0 if either set is empty."""
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


def string_similarity(
    a: Optional[str], b: Optional[str], fuzzy: bool = True
) -> float:
    """
    Similarity of two free-text values in [0, 1].

    Args:
        a: First string
        b: Second string
        fuzzy: When False, only exact and substring matches score

    Returns:
        1.0 for equal strings (after trim + case-fold), 0.9 when one
        contains the other, otherwise max(edit-distance score, word Jaccard)
    """
    s1 = normalize_text(a)
    s2 = normalize_text(b)

    if not s1 or not s2:
        return 0.0

    if s1 == s2:
        return 1.0

    if s1 in s2 or s2 in s1:
        return SUBSTRING_SCORE

    if not fuzzy:
        return 0.0

    edit_score = 1 - levenshtein_distance(s1, s2) / max(len(s1), len(s2))
    word_score = jaccard(set(s1.split()), set(s2.split()))

    return max(edit_score, word_score)


def array_similarity(
    a: Optional[Iterable[str]], b: Optional[Iterable[str]]
) -> float:
    """Case-folded Jaccard index of two string collections."""
    left = {normalize_text(item) for item in a or ()} - {""}
    right = {normalize_text(item) for item in b or ()} - {""}
    return jaccard(left, right)


def weighted_ratio(total: float, weight: float) -> float:
    """Weighted average guard: 0.0 when no weight was accumulated."""
    if weight <= 0:
        return 0.0
    return total / weight
