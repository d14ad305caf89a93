"""
Sample layered graphs for demos and tests.

Three small hand-built graphs in the plane, each with three layers:
- "simple": 9 points, one entry point, two hubs, six leaves
- "clusters": 13 points in three clusters with one representative each
- "uniform": 17 points spread evenly with four hubs

Each point is recorded with the layer it was inserted at. Hubs are linked
from the layer above their own (and leaves from the hubs one layer up), so
load_fixture() derives every max_layer from the edges before validating.
"""

from typing import Any, Dict, List

from tracehnsw.hnsw.builder import build_graph, infer_max_layers
from tracehnsw.hnsw.graph import LayeredGraph


def _p(point_id: int, x: float, y: float, layer: int, label: str = "") -> Dict[str, Any]:
    return {"id": point_id, "x": x, "y": y, "layer": layer, "label": label}


def _e(a: int, b: int, layer: int) -> Dict[str, int]:
    return {"a": a, "b": b, "layer": layer}


SIMPLE_MODEL: Dict[str, Any] = {
    "name": "Simple Model",
    "description": "A small, easy to follow graph showing how a layered search descends",
    "layer_count": 3,
    "entry_point_id": 0,
    "points": [
        _p(0, 200, 150, 2, "Entry"),
        _p(1, 100, 100, 1, "Hub A"),
        _p(2, 300, 100, 1, "Hub B"),
        _p(3, 50, 50, 0, "Node 1"),
        _p(4, 150, 50, 0, "Node 2"),
        _p(5, 250, 50, 0, "Node 3"),
        _p(6, 350, 50, 0, "Node 4"),
        _p(7, 75, 200, 0, "Node 5"),
        _p(8, 325, 200, 0, "Node 6"),
    ],
    "edges": [
        # Layer 2: long links
        _e(0, 1, 2),
        _e(0, 2, 2),
        # Layer 1: medium links
        _e(1, 2, 1),
        _e(1, 3, 1),
        _e(1, 4, 1),
        _e(2, 5, 1),
        _e(2, 6, 1),
        # Layer 0: short links
        _e(3, 4, 0),
        _e(4, 5, 0),
        _e(5, 6, 0),
        _e(3, 7, 0),
        _e(6, 8, 0),
        _e(1, 7, 0),
        _e(2, 8, 0),
    ],
}

CLUSTERS_MODEL: Dict[str, Any] = {
    "name": "Clusters Model",
    "description": "Shows how a layered graph handles data grouped in clusters",
    "layer_count": 3,
    "entry_point_id": 9,
    "points": [
        _p(9, 200, 125, 2, "Center"),
        _p(10, 100, 75, 1, "Rep. A"),
        _p(11, 300, 75, 1, "Rep. B"),
        _p(12, 200, 200, 1, "Rep. C"),
        _p(13, 80, 60, 0, "A1"),
        _p(14, 120, 60, 0, "A2"),
        _p(15, 100, 100, 0, "A3"),
        _p(16, 280, 60, 0, "B1"),
        _p(17, 320, 60, 0, "B2"),
        _p(18, 300, 100, 0, "B3"),
        _p(19, 180, 180, 0, "C1"),
        _p(20, 220, 180, 0, "C2"),
        _p(21, 200, 220, 0, "C3"),
    ],
    "edges": [
        _e(9, 10, 2),
        _e(9, 11, 2),
        _e(9, 12, 2),
        _e(10, 11, 1),
        _e(10, 12, 1),
        _e(11, 12, 1),
        # Cluster A
        _e(13, 14, 0),
        _e(13, 15, 0),
        _e(14, 15, 0),
        _e(10, 13, 0),
        _e(10, 15, 0),
        # Cluster B
        _e(16, 17, 0),
        _e(16, 18, 0),
        _e(17, 18, 0),
        _e(11, 16, 0),
        _e(11, 18, 0),
        # Cluster C
        _e(19, 20, 0),
        _e(19, 21, 0),
        _e(20, 21, 0),
        _e(12, 19, 0),
        _e(12, 21, 0),
        # Between clusters
        _e(10, 11, 0),
        _e(11, 12, 0),
        _e(12, 10, 0),
    ],
}

UNIFORM_MODEL: Dict[str, Any] = {
    "name": "Uniform Model",
    "description": "Evenly spread points under a hierarchy of four hubs",
    "layer_count": 3,
    "entry_point_id": 16,
    "points": [
        _p(16, 400, 300, 2),
        _p(17, 250, 250, 1),
        _p(18, 550, 250, 1),
        _p(19, 400, 150, 1),
        _p(20, 400, 450, 1),
        _p(21, 150, 200, 0),
        _p(22, 300, 100, 0),
        _p(23, 500, 120, 0),
        _p(24, 650, 180, 0),
        _p(25, 180, 350, 0),
        _p(26, 320, 380, 0),
        _p(27, 480, 400, 0),
        _p(28, 620, 350, 0),
        _p(29, 350, 250, 0),
        _p(30, 450, 280, 0),
        _p(31, 200, 450, 0),
        _p(32, 600, 480, 0),
    ],
    "edges": [
        _e(16, 17, 2),
        _e(16, 18, 2),
        _e(16, 19, 2),
        _e(16, 20, 2),
        _e(17, 18, 1),
        _e(17, 19, 1),
        _e(17, 20, 1),
        _e(18, 19, 1),
        _e(18, 20, 1),
        _e(19, 20, 1),
        _e(21, 17, 0),
        _e(21, 25, 0),
        _e(22, 19, 0),
        _e(22, 29, 0),
        _e(23, 19, 0),
        _e(23, 30, 0),
        _e(24, 18, 0),
        _e(24, 28, 0),
        _e(25, 17, 0),
        _e(25, 31, 0),
        _e(26, 20, 0),
        _e(26, 29, 0),
        _e(27, 20, 0),
        _e(27, 30, 0),
        _e(28, 18, 0),
        _e(28, 32, 0),
        _e(29, 30, 0),
        _e(29, 17, 0),
        _e(30, 18, 0),
        _e(31, 32, 0),
        _e(31, 26, 0),
        _e(32, 27, 0),
    ],
}

FIXTURES: Dict[str, Dict[str, Any]] = {
    "simple": SIMPLE_MODEL,
    "clusters": CLUSTERS_MODEL,
    "uniform": UNIFORM_MODEL,
}


def list_fixtures() -> List[str]:
    """Names accepted by load_fixture."""
    return list(FIXTURES)


def load_fixture(name: str) -> LayeredGraph:
    """
    Build one of the sample graphs.

    Args:
        name: Fixture name (see list_fixtures)

    Returns:
        The validated LayeredGraph

    Raises:
        KeyError: If the name is unknown
    """
    if name not in FIXTURES:
        raise KeyError(f"Unknown fixture '{name}', expected one of {list_fixtures()}")

    data = FIXTURES[name]
    return build_graph(
        infer_max_layers(data["points"], data["edges"]),
        data["edges"],
        layer_count=data["layer_count"],
        entry_point_id=data["entry_point_id"],
    )
