"""
Layered graph assembly and validation.

Graphs are never grown by insertion here: a graph supplier hands over every
point and edge at once, and this module checks the invariants before
returning an immutable LayeredGraph:
1. Point ids are unique and all points share one dimension
2. Every point's layers fit inside 0 .. layer_count - 1
3. The entry point exists and reaches the top layer
4. Every edge joins two existing, distinct points at a valid layer
5. Both endpoints of an edge are visible at the edge's layer

Points and edges may be given as Point/Edge objects or as plain dicts, in
either of the two spellings used by the sample data (x/y or coordinates for
points, a/b or from/to for edges).
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Union

from tracehnsw.errors import InvalidGraph
from tracehnsw.graph_validator import GraphValidator, describe_invisible_edge
from tracehnsw.hnsw.graph import Edge, LayeredGraph, Point

logger = logging.getLogger(__name__)

PointLike = Union[Point, Mapping[str, Any]]
EdgeLike = Union[Edge, Mapping[str, Any]]


def to_point(data: PointLike) -> Point:
    """
    Coerce a dict into a Point (Points pass through unchanged).

    Accepted keys: id, coordinates or x/y[/z], native_layer (alias layer),
    max_layer (alias maxLayer), label. A missing max_layer defaults to the
    native layer.
    """
    if isinstance(data, Point):
        return data

    try:
        if "coordinates" in data:
            coordinates = tuple(data["coordinates"])
        else:
            coordinates = tuple(data[axis] for axis in ("x", "y", "z") if axis in data)

        native_layer = int(data.get("native_layer", data.get("layer", 0)))
        max_layer = int(data.get("max_layer", data.get("maxLayer", native_layer)))

        return Point(
            id=int(data["id"]),
            coordinates=coordinates,
            native_layer=native_layer,
            max_layer=max_layer,
            label=str(data.get("label", "")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidGraph(f"Malformed point record {dict(data)!r}: {e}") from e


def to_edge(data: EdgeLike) -> Edge:
    """Coerce a dict into an Edge; accepts a/b or from/to endpoint keys."""
    if isinstance(data, Edge):
        return data

    try:
        a = data["a"] if "a" in data else data["from"]
        b = data["b"] if "b" in data else data["to"]
        return Edge(int(a), int(b), int(data["layer"]))
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidGraph(f"Malformed edge record {dict(data)!r}: {e}") from e


def infer_max_layers(points: Iterable[PointLike], edges: Iterable[EdgeLike]) -> List[Point]:
    """
    Raise each point's max_layer to the highest layer it has an edge on.

    For suppliers whose records only carry the layer a point was inserted at:
    a hub inserted at layer 1 but linked from the entry point at layer 2
    takes part in layer 2, so it must be visible there.

    Returns:
        New Point objects (max_layer never lowered)
    """
    point_list = [to_point(p) for p in points]

    highest: Dict[int, int] = {}
    for edge in (to_edge(e) for e in edges):
        for endpoint in (edge.a, edge.b):
            highest[endpoint] = max(highest.get(endpoint, edge.layer), edge.layer)

    return [
        replace(p, max_layer=max(p.max_layer, highest.get(p.id, p.max_layer)))
        for p in point_list
    ]


class GraphBuilder:
    """
    Collects points and edges, then validates them into a LayeredGraph.

    Validation collects every problem before failing, so a supplier sees
    all broken invariants at once.
    """

    def __init__(self, layer_count: int, entry_point_id: int) -> None:
        """
        Args:
            layer_count: Number of layers (topmost is layer_count - 1)
            entry_point_id: Id of the point every query starts from
        """
        self.layer_count = layer_count
        self.entry_point_id = entry_point_id
        self.points: List[Point] = []
        self.edges: List[Edge] = []

    def add_point(self, point: PointLike) -> "GraphBuilder":
        self.points.append(to_point(point))
        return self

    def add_points(self, points: Iterable[PointLike]) -> "GraphBuilder":
        for point in points:
            self.add_point(point)
        return self

    def add_edge(self, edge: EdgeLike) -> "GraphBuilder":
        self.edges.append(to_edge(edge))
        return self

    def add_edges(self, edges: Iterable[EdgeLike]) -> "GraphBuilder":
        for edge in edges:
            self.add_edge(edge)
        return self

    def build(self) -> LayeredGraph:
        """
        Validate the collected parts and freeze them into a graph.

        Returns:
            The immutable LayeredGraph

        Raises:
            InvalidGraph: Listing every violated invariant
        """
        if self.layer_count < 1:
            raise InvalidGraph(f"layer_count must be >= 1, got {self.layer_count}")

        validator = GraphValidator(self.layer_count, self.entry_point_id)
        problems = validator.check_points(self.points)
        problems.extend(validator.check_entry_point(self.points))

        points_by_id = {p.id: p for p in self.points}
        kept_edges: List[Edge] = []
        seen_edges = set()

        for edge in self.edges:
            edge_problems, visibility_ok = validator.check_edge(edge, points_by_id)
            problems.extend(edge_problems)
            if not visibility_ok:
                problems.append(describe_invisible_edge(edge, points_by_id))

            # Repeated edges collapse into one
            if edge not in seen_edges:
                seen_edges.add(edge)
                kept_edges.append(edge)

        if problems:
            raise InvalidGraph(
                f"Invalid layered graph ({len(problems)} problem(s)): {problems[0]}",
                problems,
            )

        graph = LayeredGraph(self.points, kept_edges, self.layer_count, self.entry_point_id)
        logger.info(
            "Built layered graph: %d points, %d edges, %d layers, entry point %s",
            graph.size(),
            len(kept_edges),
            graph.layer_count,
            graph.entry_point_id,
        )
        return graph


def build_graph(
    points: Iterable[PointLike],
    edges: Iterable[EdgeLike],
    layer_count: int,
    entry_point_id: int,
) -> LayeredGraph:
    """
    Validate points and edges and return an immutable LayeredGraph.

    Args:
        points: Points (or point dicts)
        edges: Edges (or edge dicts)
        layer_count: Number of layers
        entry_point_id: Id of the designated entry point

    Returns:
        The validated graph

    Raises:
        InvalidGraph: If any invariant is violated
    """
    builder = GraphBuilder(layer_count, entry_point_id)
    builder.add_points(points)
    builder.add_edges(edges)
    return builder.build()
