"""Graph validation and connectivity checks for layered graphs.

GraphValidator checks the structural invariants a layered graph must satisfy
before it can be searched. LayerConnectivity answers reachability questions
about a single layer, which is how the result size bounds of a search are
reasoned about (a search can never return more points than are reachable
from its entry point).
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple
from collections import deque

from tracehnsw.hnsw.graph import Edge, LayeredGraph, Point


class LayerConnectivity:
    """Undirected adjacency of one layer, restricted to points visible there."""

    def __init__(self, layer: int = 0) -> None:
        """Initialize an empty layer view.

        Args:
            layer: Layer index this view describes
        """
        self.layer = layer
        self.graph: Dict[int, Set[int]] = {}

    @classmethod
    def from_graph(cls, layered_graph: LayeredGraph, layer: int) -> "LayerConnectivity":
        """Build the adjacency of one layer of a LayeredGraph.

        Every point visible at the layer becomes a node (possibly isolated),
        and every edge tagged with the layer whose endpoints are both visible
        becomes an undirected edge.
        """
        view = cls(layer)
        for point in layered_graph.points_at_layer(layer):
            view.graph.setdefault(point.id, set())

        for point_id in list(view.graph):
            for neighbor_id in layered_graph.get_neighbors(point_id, layer):
                view.add_edge(point_id, neighbor_id)

        return view

    def add_edge(self, node_u: int, node_v: int) -> None:
        """Add an undirected edge to the layer.

        Args:
            node_u: First node ID
            node_v: Second node ID
        """
        if node_u not in self.graph:
            self.graph[node_u] = set()
        if node_v not in self.graph:
            self.graph[node_v] = set()

        self.graph[node_u].add(node_v)
        self.graph[node_v].add(node_u)

    def is_connected(self, node_u: int, node_v: int) -> bool:
        """Check if two nodes are connected via any path.

        Args:
            node_u: Start node
            node_v: Target node

        Returns:
            True if there exists a path from node_u to node_v
        """
        if node_u not in self.graph or node_v not in self.graph:
            return False

        return node_v in self.reachable_from(node_u)

    def reachable_from(self, start: int) -> Set[int]:
        """All nodes reachable from start (start included) using BFS.

        Returns:
            Set of reachable node IDs, empty if start is not in this layer
        """
        if start not in self.graph:
            return set()

        visited: Set[int] = {start}
        queue: deque = deque([start])

        while queue:
            current = queue.popleft()
            for neighbor in self.graph.get(current, set()):
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)

        return visited

    def get_node_degree(self, node_id: int) -> int:
        """Get the degree (number of neighbors) of a node."""
        return len(self.graph.get(node_id, set()))

    def get_all_nodes(self) -> Set[int]:
        """Get all node IDs in the layer."""
        return set(self.graph.keys())

    def get_neighbors(self, node_id: int) -> Set[int]:
        """Get all neighbors of a node (a copy)."""
        return self.graph.get(node_id, set()).copy()

    def get_graph_statistics(self) -> Dict[str, float]:
        """Compute overall layer statistics.

        Returns:
            Dictionary with layer metrics (node_count, avg_degree, etc.)
        """
        if not self.graph:
            return {
                "layer": self.layer,
                "node_count": 0,
                "edge_count": 0,
                "avg_degree": 0.0,
                "min_degree": 0,
                "max_degree": 0,
            }

        degrees = [self.get_node_degree(node) for node in self.graph.keys()]
        total_edges = sum(degrees) // 2  # Each edge counted twice

        return {
            "layer": self.layer,
            "node_count": len(self.graph),
            "edge_count": total_edges,
            "avg_degree": sum(degrees) / len(degrees),
            "min_degree": min(degrees),
            "max_degree": max(degrees),
        }


class GraphValidator:
    """Checks the structural invariants of a layered graph.

    The validator never raises; it reports every problem it finds so the
    caller can decide whether to fail (build_graph) or inspect them.
    """

    def __init__(self, layer_count: int, entry_point_id: int) -> None:
        self.layer_count = layer_count
        self.entry_point_id = entry_point_id

    def check_points(self, points: List[Point]) -> List[str]:
        """Check ids, dimensions and layer tags of the points."""
        problems: List[str] = []
        seen: Set[int] = set()
        dimension: Optional[int] = None

        for point in points:
            if point.id in seen:
                problems.append(f"Duplicate point id {point.id}")
            seen.add(point.id)

            if dimension is None:
                dimension = point.dimension
            elif point.dimension != dimension:
                problems.append(
                    f"Point {point.id} has dimension {point.dimension}, expected {dimension}"
                )

            if point.dimension == 0:
                problems.append(f"Point {point.id} has no coordinates")

            if not 0 <= point.max_layer < self.layer_count:
                problems.append(
                    f"Point {point.id} max_layer {point.max_layer} outside 0..{self.layer_count - 1}"
                )
            if not 0 <= point.native_layer <= point.max_layer:
                problems.append(
                    f"Point {point.id} native_layer {point.native_layer} outside 0..{point.max_layer}"
                )

        return problems

    def check_entry_point(self, points: List[Point]) -> List[str]:
        """Check that the entry point exists and reaches the top layer."""
        top_layer = self.layer_count - 1
        for point in points:
            if point.id == self.entry_point_id:
                if point.max_layer != top_layer:
                    return [
                        f"Entry point {point.id} has max_layer {point.max_layer}, "
                        f"expected top layer {top_layer}"
                    ]
                return []
        return [f"Entry point {self.entry_point_id} is not among the points"]

    def check_edge(self, edge: Edge, points_by_id: Dict[int, Point]) -> Tuple[List[str], bool]:
        """Check one edge.

        Returns:
            (structural problems, visibility_ok) where visibility_ok is False
            when an endpoint does not reach the edge's layer
        """
        problems: List[str] = []

        if not 0 <= edge.layer < self.layer_count:
            problems.append(f"Edge {edge.a}-{edge.b} layer {edge.layer} outside 0..{self.layer_count - 1}")
        if edge.a == edge.b:
            problems.append(f"Edge {edge.a}-{edge.b} at layer {edge.layer} is a self-loop")

        visibility_ok = True
        for endpoint in (edge.a, edge.b):
            point = points_by_id.get(endpoint)
            if point is None:
                problems.append(f"Edge {edge.a}-{edge.b} references missing point {endpoint}")
            elif not point.visible_at(edge.layer):
                visibility_ok = False

        return problems, visibility_ok

    def validate(self, points: Iterable[Point], edges: Iterable[Edge]) -> List[str]:
        """Collect every invariant violation, including edge visibility ones."""
        point_list = list(points)
        if self.layer_count < 1:
            return [f"layer_count must be >= 1, got {self.layer_count}"]

        problems = self.check_points(point_list)
        problems.extend(self.check_entry_point(point_list))

        points_by_id = {p.id: p for p in point_list}
        for edge in edges:
            edge_problems, visibility_ok = self.check_edge(edge, points_by_id)
            problems.extend(edge_problems)
            if not visibility_ok:
                problems.append(describe_invisible_edge(edge, points_by_id))

        return problems


def describe_invisible_edge(edge: Edge, points_by_id: Dict[int, Point]) -> str:
    """Message for an edge whose endpoints don't both reach its layer."""
    low = [
        f"{pid} (max_layer {points_by_id[pid].max_layer})"
        for pid in (edge.a, edge.b)
        if pid in points_by_id and not points_by_id[pid].visible_at(edge.layer)
    ]
    return f"Edge {edge.a}-{edge.b} at layer {edge.layer} connects points below that layer: {', '.join(low)}"
