"""
Tests for distance metrics.

These tests verify the metrics with known point pairs:
- Euclidean distance values, symmetry and identity
- Squared Euclidean ordering
- Cosine distance edge cases
- Metric lookup by name
"""

import numpy as np
import pytest
from tracehnsw.errors import InvalidArgument
from tracehnsw.hnsw.graph import Point
from tracehnsw.hnsw.distance import (
    available_metrics,
    cosine_distance,
    cosine_similarity,
    euclidean_distance,
    get_metric,
    squared_euclidean_distance,
)


def test_euclidean_known_value():
    """3-4-5 triangle"""
    assert np.isclose(euclidean_distance([0.0, 0.0], [3.0, 4.0]), 5.0)


def test_euclidean_is_symmetric():
    a = [160.0, 60.0]
    b = [75.0, 200.0]
    assert euclidean_distance(a, b) == euclidean_distance(b, a)


def test_euclidean_zero_for_identical_coordinates():
    """Distance is zero for identical coordinates, even on different points"""
    p1 = Point(1, (2.5, -1.0))
    p2 = Point(2, (2.5, -1.0))
    assert euclidean_distance(p1, p2) == 0.0


def test_euclidean_accepts_points_and_arrays():
    point = Point(0, (200, 150))
    query = np.array([160.0, 60.0])
    assert np.isclose(euclidean_distance(query, point), np.sqrt(40**2 + 90**2))


def test_euclidean_higher_dimension():
    assert np.isclose(euclidean_distance([1, 2, 3], [4, 6, 3]), 5.0)


def test_squared_euclidean_matches_square():
    a = [1.0, 2.0]
    b = [4.0, 6.0]
    assert np.isclose(squared_euclidean_distance(a, b), 25.0)
    assert np.isclose(squared_euclidean_distance(a, b), euclidean_distance(a, b) ** 2)


def test_cosine_distance_identical_direction():
    assert np.isclose(cosine_distance([1.0, 0.0], [3.0, 0.0]), 0.0)


def test_cosine_distance_opposite_vectors():
    assert np.isclose(cosine_distance([1.0, 2.0], [-1.0, -2.0]), 2.0)


def test_cosine_similarity_zero_vector():
    """Zero vectors have no direction and score 0.0"""
    assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0


class TestGetMetric:
    def test_default_is_euclidean(self):
        assert get_metric() is euclidean_distance
        assert get_metric(None) is euclidean_distance

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("euclidean", euclidean_distance),
            ("l2", euclidean_distance),
            ("L2", euclidean_distance),
            ("squared_euclidean", squared_euclidean_distance),
            ("sqeuclidean", squared_euclidean_distance),
            ("cosine", cosine_distance),
        ],
    )
    def test_lookup_by_name(self, name, expected):
        assert get_metric(name) is expected

    def test_callable_passes_through(self):
        def manhattan(a, b):
            return float(np.abs(np.asarray(a) - np.asarray(b)).sum())

        assert get_metric(manhattan) is manhattan

    def test_unknown_name_rejected(self):
        with pytest.raises(InvalidArgument):
            get_metric("hamming")

    def test_available_metrics_lists_names(self):
        assert "euclidean" in available_metrics()
        assert "cosine" in available_metrics()
