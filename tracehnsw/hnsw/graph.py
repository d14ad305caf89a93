"""
Layered graph data structures.

This module defines the read-only structures a search runs over:
- Point: a vertex with coordinates and the highest layer it takes part in
- Edge: an unordered pair of point ids tagged with exactly one layer
- LayeredGraph: the immutable container of points, edges and the entry point

Layers are numbered 0 .. layer_count - 1. Layer 0 holds every point; higher
layers hold progressively fewer points and longer edges. A point is visible at
layer L iff its max_layer >= L, and an edge only exists at the layer it is
tagged with (it is not implicitly present at lower layers).

LayeredGraph does not check invariants itself; build_graph() in
tracehnsw.hnsw.builder is the validating constructor.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple
import numpy as np
import numpy.typing as npt

Vector = npt.NDArray[np.float64]


@dataclass(frozen=True)
class Point:
    """
    A single vertex of the layered graph.

    Attributes:
        id: Identifier, unique within a graph
        coordinates: Fixed-dimension coordinates
        native_layer: Layer the point was notionally inserted at (informational)
        max_layer: Highest layer the point participates in
        label: Display label (informational)
    """

    id: int
    coordinates: Tuple[float, ...]
    native_layer: int = 0
    max_layer: int = 0
    label: str = ""
    _vector: Vector = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        coords = tuple(float(c) for c in self.coordinates)
        object.__setattr__(self, "coordinates", coords)

        # Cached read-only array so distance calls don't re-convert each time
        vector = np.array(coords, dtype=np.float64)
        vector.flags.writeable = False
        object.__setattr__(self, "_vector", vector)

    @property
    def vector(self) -> Vector:
        """Coordinates as a read-only numpy array."""
        return self._vector

    @property
    def dimension(self) -> int:
        return len(self.coordinates)

    def visible_at(self, layer: int) -> bool:
        """Whether this point exists at the given layer."""
        return self.max_layer >= layer


@dataclass(frozen=True, eq=False)
class Edge:
    """
    An undirected connection between two points at exactly one layer.

    Edge(1, 2, 0) and Edge(2, 1, 0) are the same edge.
    """

    a: int
    b: int
    layer: int

    @property
    def endpoints(self) -> FrozenSet[int]:
        return frozenset((self.a, self.b))

    def other(self, point_id: int) -> int:
        """
        Get the endpoint opposite to point_id.

        Raises:
            ValueError: If point_id is not an endpoint of this edge
        """
        if point_id == self.a:
            return self.b
        if point_id == self.b:
            return self.a
        raise ValueError(f"Point {point_id} is not an endpoint of {self}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self.layer == other.layer and self.endpoints == other.endpoints

    def __hash__(self) -> int:
        return hash((self.endpoints, self.layer))


class LayeredGraph:
    """
    Immutable container for a precomputed layered proximity graph.

    Holds the points (by id), the edges, the number of layers and the
    designated entry point. Per-layer adjacency is indexed once at
    construction; nothing changes afterwards, so one instance can be
    searched from many threads at once.
    """

    __slots__ = ("_points", "_edges", "_layer_count", "_entry_point_id", "_adjacency", "_frozen")

    def __init__(
        self,
        points: Iterable[Point],
        edges: Iterable[Edge],
        layer_count: int,
        entry_point_id: int,
    ) -> None:
        """
        Create a graph from already-built points and edges.

        Args:
            points: Graph vertices (later duplicates of an id replace earlier ones)
            edges: Graph edges, each tagged with its layer
            layer_count: Number of layers (topmost is layer_count - 1)
            entry_point_id: Id of the point where every query starts
        """
        point_map: Dict[int, Point] = {}
        for point in points:
            point_map[point.id] = point

        edge_tuple = tuple(edges)

        # Adjacency by layer: {layer: {point_id: [neighbor_id, ...]}}, in edge order
        adjacency: Dict[int, Dict[int, List[int]]] = {}
        for edge in edge_tuple:
            layer_adj = adjacency.setdefault(edge.layer, {})
            for u, v in ((edge.a, edge.b), (edge.b, edge.a)):
                neighbors = layer_adj.setdefault(u, [])
                if v not in neighbors:
                    neighbors.append(v)

        frozen_adjacency = {
            layer: MappingProxyType({pid: tuple(ns) for pid, ns in layer_adj.items()})
            for layer, layer_adj in adjacency.items()
        }

        object.__setattr__(self, "_points", MappingProxyType(point_map))
        object.__setattr__(self, "_edges", edge_tuple)
        object.__setattr__(self, "_layer_count", int(layer_count))
        object.__setattr__(self, "_entry_point_id", entry_point_id)
        object.__setattr__(self, "_adjacency", MappingProxyType(frozen_adjacency))
        object.__setattr__(self, "_frozen", True)

    def __setattr__(self, name: str, value) -> None:
        raise AttributeError(f"LayeredGraph is immutable (cannot set '{name}')")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"LayeredGraph is immutable (cannot delete '{name}')")

    @property
    def points(self) -> Mapping[int, Point]:
        """Read-only mapping of point id to Point, in insertion order."""
        return self._points

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def layer_count(self) -> int:
        return self._layer_count

    @property
    def entry_point_id(self) -> int:
        return self._entry_point_id

    @property
    def top_layer(self) -> int:
        return self._layer_count - 1

    @property
    def dimension(self) -> Optional[int]:
        """Coordinate dimension of the points, or None for an empty graph."""
        for point in self._points.values():
            return point.dimension
        return None

    def get_point(self, point_id: int) -> Optional[Point]:
        """
        Retrieve a point by its id.

        Returns:
            The Point, or None if not found
        """
        return self._points.get(point_id)

    def has_point(self, point_id: int) -> bool:
        return point_id in self._points

    def is_entry_point(self, point_id: int) -> bool:
        """Whether point_id is the designated entry point."""
        return point_id == self._entry_point_id

    def get_neighbors(self, point_id: int, layer: int) -> List[int]:
        """
        Get the neighbors of a point at one layer.

        Only edges tagged with exactly this layer count, and only neighbors
        that exist in the graph and are visible at this layer are returned.

        Args:
            point_id: Point whose neighbors to fetch
            layer: Layer to look at

        Returns:
            Neighbor ids in edge declaration order
        """
        layer_adj = self._adjacency.get(layer)
        if layer_adj is None:
            return []

        neighbors = []
        for neighbor_id in layer_adj.get(point_id, ()):
            neighbor = self._points.get(neighbor_id)
            if neighbor is not None and neighbor.visible_at(layer):
                neighbors.append(neighbor_id)
        return neighbors

    def points_at_layer(self, layer: int) -> List[Point]:
        """All points visible at the given layer."""
        return [p for p in self._points.values() if p.visible_at(layer)]

    def edges_at_layer(self, layer: int) -> List[Edge]:
        """All edges tagged with the given layer."""
        return [e for e in self._edges if e.layer == layer]

    def size(self) -> int:
        """Number of points in the graph."""
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"LayeredGraph(points={self.size()}, edges={len(self._edges)}, "
            f"layers={self._layer_count}, entry_point={self._entry_point_id})"
        )
