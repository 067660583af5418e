"""
Jaccard similarity and LZJD distance between two sorted sketches.

Both arguments must be ascending sequences of distinct integers (an LZDict
or any list satisfying the same invariants).
"""

import math
from typing import Sequence


def intersection_len(a: Sequence[int], b: Sequence[int]) -> int:
    """Count common values with a single linear merge over both sequences."""
    i = 0
    j = 0
    common = 0
    len_a = len(a)
    len_b = len(b)
    while i < len_a and j < len_b:
        x = a[i]
        y = b[j]
        if x <= y:
            i += 1
        if x >= y:
            j += 1
        if x == y:
            common += 1
    return common


def jaccard_similarity(a: Sequence[int], b: Sequence[int]) -> float:
    """
    |a ∩ b| / |a ∪ b|.

    Two empty sketches carry no shared content, so their similarity is 0.0
    rather than the undefined 0/0.
    """
    common = intersection_len(a, b)
    union = len(a) + len(b) - common
    if union == 0:
        return 0.0
    return common / union


def similarity(a: Sequence[int], b: Sequence[int]) -> float:
    """LZ similarity in [0, 1]."""
    return jaccard_similarity(a, b)


def distance(a: Sequence[int], b: Sequence[int]) -> float:
    """LZJD distance, 1 - similarity."""
    return 1.0 - jaccard_similarity(a, b)


def similarity_score(a: Sequence[int], b: Sequence[int]) -> int:
    """Similarity as an integer percentage, rounding halves up."""
    return int(math.floor(jaccard_similarity(a, b) * 100.0 + 0.5))
