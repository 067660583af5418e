"""
Tests for Jaccard similarity and LZJD distance.
"""

import pytest
from hypothesis import given, strategies as st, settings

from lzjd.core.similarity import (
    intersection_len,
    jaccard_similarity,
    similarity,
    distance,
    similarity_score,
)
from lzjd.core.sketch import LZDict


A = LZDict([0, 1, 2, 3])
B = LZDict([0, 1, 2])
C = LZDict([1, 2, 3, 4])
D = LZDict([])
E = LZDict([4, 5, 6, 7])
F = LZDict([0, 1, 2, 3, 5])


class TestIntersection:
    """Test the merge-based intersection count."""

    @pytest.mark.parametrize("other, expected", [
        (A, 4),
        (B, 3),
        (C, 3),
        (D, 0),
        (E, 0),
        (F, 4),
    ])
    def test_intersection_len(self, other, expected):
        assert intersection_len(A, other) == expected
        assert intersection_len(other, A) == expected

    def test_plain_lists(self):
        """Any ascending sequence works, not only LZDict."""
        assert intersection_len([1, 3, 5, 7], [2, 3, 4, 7, 9]) == 2


class TestJaccardSimilarity:
    """Test similarity values."""

    @pytest.mark.parametrize("other, expected", [
        (A, 4 / 4),
        (B, 3 / 4),
        (C, 3 / 5),
        (D, 0 / 4),
        (E, 0 / 8),
        (F, 4 / 5),
    ])
    def test_against_reference_sets(self, other, expected):
        assert jaccard_similarity(A, other) == pytest.approx(expected)

    def test_subset_similarity(self):
        """A={0,1,2,3}, B={0,1,2}: intersection 3, union 4."""
        assert jaccard_similarity(A, B) == 0.75

    def test_disjoint(self):
        assert jaccard_similarity(A, E) == 0.0
        assert distance(A, E) == 1.0

    def test_reflexive(self):
        assert similarity(F, F) == 1.0
        assert distance(F, F) == 0.0

    def test_symmetric(self):
        for x in (A, B, C, D, E, F):
            for y in (A, B, C, D, E, F):
                assert distance(x, y) == distance(y, x)

    def test_empty_pair_is_dissimilar(self):
        """Two empty sketches are defined as similarity 0, not NaN."""
        assert jaccard_similarity(D, D) == 0.0
        assert distance(D, D) == 1.0

    def test_lzdict_methods(self):
        assert A.similarity(B) == 0.75
        assert A.dist(B) == pytest.approx(0.25)


class TestSimilarityScore:
    """Test integer percentage rounding."""

    def test_score(self):
        assert similarity_score(A, B) == 75
        assert similarity_score(A, A) == 100
        assert similarity_score(A, E) == 0

    def test_half_rounds_up(self):
        """1/8 = 12.5% rounds to 13."""
        eight = LZDict(range(8))
        assert similarity_score(eight, LZDict([0])) == 13

    def test_bounds(self):
        for x in (A, B, C, D, E, F):
            for y in (A, B, C, D, E, F):
                assert 0 <= similarity_score(x, y) <= 100


U64_SETS = st.sets(st.integers(min_value=0, max_value=2 ** 64 - 1), max_size=100)


class TestSimilarityProperties:
    """Properties over arbitrary sketches."""

    @given(a=U64_SETS, b=U64_SETS)
    @settings(max_examples=100)
    def test_intersection_matches_set_semantics(self, a, b):
        assert intersection_len(LZDict(sorted(a)), LZDict(sorted(b))) == len(a & b)

    @given(a=U64_SETS, b=U64_SETS)
    @settings(max_examples=100)
    def test_symmetric_and_bounded(self, a, b):
        x = LZDict(sorted(a))
        y = LZDict(sorted(b))
        assert jaccard_similarity(x, y) == jaccard_similarity(y, x)
        assert 0.0 <= distance(x, y) <= 1.0
        assert similarity_score(x, y) == similarity_score(y, x)

    @given(a=U64_SETS.filter(bool))
    @settings(max_examples=50)
    def test_self_distance_is_zero(self, a):
        sketch = LZDict(sorted(a))
        assert distance(sketch, sketch) == 0.0
        assert similarity_score(sketch, sketch) == 100

    @given(a=U64_SETS.filter(bool), b=U64_SETS.filter(bool))
    @settings(max_examples=50)
    def test_disjoint_distance_is_one(self, a, b):
        b = b - a
        if b:
            assert distance(LZDict(sorted(a)), LZDict(sorted(b))) == 1.0
