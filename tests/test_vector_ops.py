"""Tests for the numeric vector helpers."""

import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from cluster_engine.domain import vector_ops

finite_floats = st.floats(min_value=-1e3, max_value=1e3, allow_nan=False, allow_infinity=False)


class TestMagnitude:
    def test_pythagorean(self):
        assert vector_ops.magnitude([3.0, 4.0]) == pytest.approx(5.0)

    def test_empty(self):
        assert vector_ops.magnitude([]) == 0.0


class TestNormalize:
    def test_unit_length(self):
        assert vector_ops.normalize([3.0, 4.0]) == pytest.approx((0.6, 0.8))

    def test_zero_vector_unchanged(self):
        assert vector_ops.normalize([0.0, 0.0]) == (0.0, 0.0)

    def test_returns_plain_floats(self):
        result = vector_ops.normalize([1, 1])

        assert isinstance(result, tuple)
        assert all(type(x) is float for x in result)


class TestRescale:
    def test_within_limit_is_kept(self):
        assert vector_ops.rescale_if_exceeds([3.0, 4.0], 5.0) == (3.0, 4.0)

    def test_over_limit_is_normalized(self):
        assert vector_ops.rescale_if_exceeds([30.0, 40.0], 10.0) == pytest.approx((0.6, 0.8))

    @given(st.lists(finite_floats, min_size=1, max_size=64))
    @settings(max_examples=100)
    def test_never_exceeds_limit(self, values):
        """
        Property: after rescaling, magnitude is at most the limit.
        """
        result = vector_ops.rescale_if_exceeds(values, 10.0)

        assert vector_ops.magnitude(result) <= 10.0 + 1e-9
        assert len(result) == len(values)


class TestCosineSimilarity:
    def test_identical(self):
        assert vector_ops.cosine_similarity([1.0, 2.0], [1.0, 2.0]) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert vector_ops.cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite(self):
        assert vector_ops.cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_zero_vector(self):
        assert vector_ops.cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="lengths differ"):
            vector_ops.cosine_similarity([1.0], [1.0, 0.0])

    @given(st.lists(finite_floats, min_size=2, max_size=16), st.lists(finite_floats, min_size=2, max_size=16))
    @settings(max_examples=100)
    def test_bounded(self, a, b):
        size = min(len(a), len(b))

        similarity = vector_ops.cosine_similarity(a[:size], b[:size])

        assert -1.0 <= similarity <= 1.0
        assert not math.isnan(similarity)


class TestHelpers:
    @pytest.mark.parametrize("value,expected", [(-0.5, 0.0), (0.25, 0.25), (3.0, 1.0)])
    def test_clamp(self, value, expected):
        assert vector_ops.clamp(value) == expected

    def test_is_finite(self):
        assert vector_ops.is_finite([0.0, 1.5])
        assert not vector_ops.is_finite([0.0, math.inf])
        assert not vector_ops.is_finite([math.nan])

    def test_mean_vector(self):
        assert vector_ops.mean_vector([[1.0, 3.0], [3.0, 5.0]]) == (2.0, 4.0)

    def test_mean_vector_requires_vectors(self):
        with pytest.raises(ValueError):
            vector_ops.mean_vector([])
