"""
Pytest configuration and shared fixtures for tracehnsw tests
"""

import pytest
from typing import List

from tracehnsw.hnsw.graph import Point, Edge, LayeredGraph
from tracehnsw.hnsw.builder import build_graph
from tracehnsw.fixtures import load_fixture


@pytest.fixture
def simple_graph() -> LayeredGraph:
    """The 9-point, 3-layer sample graph (entry 0, hubs 1-2, leaves 3-8)."""
    return load_fixture("simple")


@pytest.fixture
def chain_points() -> List[Point]:
    """Six points on the x axis at x = 0..5, all on layer 0 only."""
    return [Point(i, (float(i), 0.0)) for i in range(6)]


@pytest.fixture
def chain_graph(chain_points) -> LayeredGraph:
    """Single-layer path 0 - 1 - 2 - 3 - 4 - 5."""
    edges = [Edge(i, i + 1, 0) for i in range(5)]
    return build_graph(chain_points, edges, layer_count=1, entry_point_id=0)


@pytest.fixture
def detour_graph() -> LayeredGraph:
    """
    Single-layer graph where the best point hides behind a poor candidate.

    Query (0, 0): entry 0 at x=5, neighbors 1 (x=6) and 2 (x=4); 2 leads to
    3 (x=1), and only 1 leads to 4 (x=0.5).
    """
    points = [
        Point(0, (5.0, 0.0)),
        Point(1, (6.0, 0.0)),
        Point(2, (4.0, 0.0)),
        Point(3, (1.0, 0.0)),
        Point(4, (0.5, 0.0)),
    ]
    edges = [Edge(0, 1, 0), Edge(0, 2, 0), Edge(2, 3, 0), Edge(1, 4, 0)]
    return build_graph(points, edges, layer_count=1, entry_point_id=0)
