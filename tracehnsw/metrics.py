"""
Metrics for evaluating layered graph search quality.

This module provides functions to:
- Compute exact ground truth via brute force over every point of a graph
- Compute recall@k (fraction of ground truth neighbors retrieved)
- Compute query difficulty (k-th nearest neighbor distance)
- List the points a layer search could possibly reach from an entry point
"""

import numpy as np
from typing import List, Optional, Set, Tuple, Union

from tracehnsw.graph_validator import LayerConnectivity
from tracehnsw.hnsw.distance import Metric, as_vector, get_metric
from tracehnsw.hnsw.graph import LayeredGraph


def brute_force_knn(
    graph: LayeredGraph,
    query,
    k: int,
    metric: Union[str, Metric, None] = None,
) -> Tuple[List[int], List[float]]:
    """
    Compute exact k-NN over every point in the graph (slow but exact).

    Ties are broken by the order points were given to the graph.

    Args:
        graph: Graph whose points to rank
        query: Query coordinates
        k: Number of neighbors to find
        metric: Distance metric name or callable (default: Euclidean)

    Returns:
        Tuple of (point_ids, distances), both sorted by distance ascending

    Example:
        >>> ids, dists = brute_force_knn(load_fixture("simple"), [160, 60], k=2)
        >>> ids
        [4, 1]
    """
    distance = get_metric(metric)
    query_vector = as_vector(query)

    point_ids = list(graph.points.keys())
    if not point_ids or k < 1:
        return [], []

    distances = np.array([distance(query_vector, graph.points[pid].vector) for pid in point_ids])

    # Stable sort keeps insertion order among equal distances
    order = np.argsort(distances, kind="stable")[:k]

    return [point_ids[i] for i in order], distances[order].tolist()


def compute_recall_at_k(
    retrieved_ids: List[int],
    ground_truth_ids: List[int],
    k: int = 10
) -> float:
    """
    Compute recall@k: fraction of ground truth neighbors retrieved.

    Args:
        retrieved_ids: IDs returned by search (ordered by relevance)
        ground_truth_ids: True k-nearest neighbor IDs
        k: Number of neighbors to consider

    Returns:
        Recall@k value between 0.0 (no correct neighbors) and 1.0 (all correct).
        When the graph holds fewer than k points, recall is measured against
        the ground truth that exists.

    Example:
        >>> retrieved = [1, 2, 3, 99, 98]
        >>> ground_truth = [1, 2, 3, 4, 5]
        >>> compute_recall_at_k(retrieved, ground_truth, k=5)
        0.6  # Found 3 out of 5 correct neighbors
    """
    retrieved_set = set(retrieved_ids[:k])
    ground_truth_set = set(ground_truth_ids[:k])

    if not ground_truth_set:
        return 0.0

    correct_retrievals = len(retrieved_set & ground_truth_set)

    return correct_retrievals / len(ground_truth_set)


def compute_query_difficulty(
    graph: LayeredGraph,
    query,
    k: int = 3,
    metric: Union[str, Metric, None] = None,
) -> float:
    """
    Compute query difficulty as the exact k-th nearest neighbor distance.

    A larger k-th distance means the neighborhood is sparse and a narrow
    layer-0 search is more likely to stop early.

    Returns:
        Distance to the k-th nearest point, or inf if the graph has fewer than k points
    """
    _, distances = brute_force_knn(graph, query, k, metric=metric)

    if len(distances) == k:
        return float(distances[-1])
    else:
        return float('inf')


def reachable_points(graph: LayeredGraph, start: int, layer: int = 0) -> Set[int]:
    """
    Points reachable from start using only edges of one layer.

    This is an upper bound on what a layer search from start can return.

    Args:
        graph: Graph to inspect
        start: Entry point id
        layer: Layer to walk

    Returns:
        Set of reachable ids (start included), empty if start isn't visible at layer
    """
    return LayerConnectivity.from_graph(graph, layer).reachable_from(start)


def nearest_reachable(
    graph: LayeredGraph,
    query,
    start: int,
    k: int,
    layer: int = 0,
    metric: Optional[Union[str, Metric]] = None,
) -> List[int]:
    """
    Exact k nearest points among those reachable from start at one layer.

    Ties are broken by the order points were given to the graph.
    """
    distance = get_metric(metric)
    query_vector = as_vector(query)
    reachable = reachable_points(graph, start, layer)

    candidates = [pid for pid in graph.points if pid in reachable]
    candidates.sort(key=lambda pid: distance(query_vector, graph.points[pid].vector))
    return candidates[:k]
