"""
Tests for search quality metrics.
"""

import math

import pytest
from tracehnsw.metrics import (
    brute_force_knn,
    compute_query_difficulty,
    compute_recall_at_k,
    nearest_reachable,
    reachable_points,
)


def test_brute_force_knn(simple_graph):
    ids, dists = brute_force_knn(simple_graph, [160.0, 60.0], k=3)

    assert ids == [4, 1, 5]
    assert dists[0] == pytest.approx(200 ** 0.5)
    assert dists == sorted(dists)


def test_brute_force_ties_keep_insertion_order(chain_graph):
    ids, _ = brute_force_knn(chain_graph, [2.5, 0.0], k=2)
    assert ids == [2, 3]


def test_brute_force_k_above_size(chain_graph):
    ids, _ = brute_force_knn(chain_graph, [0.0, 0.0], k=50)
    assert ids == [0, 1, 2, 3, 4, 5]


def test_recall():
    assert compute_recall_at_k([1, 2, 3, 99, 98], [1, 2, 3, 4, 5], k=5) == pytest.approx(0.6)
    assert compute_recall_at_k([1], [1], k=10) == 1.0
    assert compute_recall_at_k([1], [], k=3) == 0.0


def test_query_difficulty(chain_graph):
    assert compute_query_difficulty(chain_graph, [0.0, 0.0], k=3) == pytest.approx(2.0)
    assert math.isinf(compute_query_difficulty(chain_graph, [0.0, 0.0], k=7))


def test_reachable_points(simple_graph):
    assert reachable_points(simple_graph, 4, layer=0) == {1, 2, 3, 4, 5, 6, 7, 8}
    assert reachable_points(simple_graph, 0, layer=0) == {0}
    assert reachable_points(simple_graph, 7, layer=2) == set()


def test_nearest_reachable_skips_unreachable(simple_graph):
    """Point 0 is the closest overall but has no layer-0 edges"""
    assert brute_force_knn(simple_graph, [210.0, 160.0], k=1)[0] == [0]
    assert nearest_reachable(simple_graph, [210.0, 160.0], start=4, k=3) == [2, 5, 8]
