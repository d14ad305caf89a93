"""
Tests for validating graph assembly.

These tests verify build_graph accepts well-formed graphs and rejects every
invariant violation with InvalidGraph:
- Record coercion from dicts (both edge spellings)
- Entry point presence and level
- Duplicate ids, dimension mismatches, layer ranges
- Edges to missing points or points below the edge's layer
"""

import logging

import pytest
from tracehnsw.errors import InvalidGraph
from tracehnsw.hnsw.graph import Point, Edge, LayeredGraph
from tracehnsw.hnsw.builder import GraphBuilder, build_graph, infer_max_layers, to_edge, to_point


def two_layer_points():
    return [
        Point(0, (0.0, 0.0), native_layer=1, max_layer=1),
        Point(1, (1.0, 0.0)),
        Point(2, (2.0, 0.0)),
    ]


def test_build_valid_graph():
    edges = [Edge(0, 1, 0), Edge(1, 2, 0)]
    graph = build_graph(two_layer_points(), edges, layer_count=2, entry_point_id=0)

    assert isinstance(graph, LayeredGraph)
    assert graph.size() == 3
    assert graph.get_neighbors(1, 0) == [0, 2]


def test_build_from_dicts_with_from_to_edges():
    points = [
        {"id": 0, "x": 200, "y": 150, "layer": 1, "maxLayer": 1},
        {"id": 1, "x": 100, "y": 100, "layer": 0, "maxLayer": 0},
    ]
    edges = [{"from": 0, "to": 1, "layer": 0}]
    graph = build_graph(points, edges, layer_count=2, entry_point_id=0)

    assert graph.get_point(0).coordinates == (200.0, 150.0)
    assert graph.get_point(0).max_layer == 1
    assert graph.get_neighbors(1, 0) == [0]


def test_to_point_defaults_max_layer_to_native_layer():
    point = to_point({"id": 3, "coordinates": [1, 2, 3], "native_layer": 1, "label": "x"})
    assert point.max_layer == 1
    assert point.native_layer == 1
    assert point.dimension == 3
    assert point.label == "x"


def test_to_edge_accepts_both_spellings():
    assert to_edge({"a": 1, "b": 2, "layer": 0}) == Edge(1, 2, 0)
    assert to_edge({"from": 2, "to": 1, "layer": 0}) == Edge(1, 2, 0)


def test_malformed_records_raise_invalid_graph():
    with pytest.raises(InvalidGraph):
        to_point({"x": 1.0, "y": 2.0})  # no id
    with pytest.raises(InvalidGraph):
        to_edge({"a": 1, "layer": 0})  # no second endpoint


def test_builder_is_chainable():
    graph = (
        GraphBuilder(layer_count=1, entry_point_id=0)
        .add_point(Point(0, (0.0, 0.0)))
        .add_point({"id": 1, "x": 1.0, "y": 0.0})
        .add_edge({"a": 0, "b": 1, "layer": 0})
        .build()
    )
    assert graph.get_neighbors(0, 0) == [1]


def test_repeated_edges_collapse():
    edges = [Edge(0, 1, 0), Edge(1, 0, 0), Edge(0, 1, 0)]
    graph = build_graph(two_layer_points(), edges, layer_count=2, entry_point_id=0)
    assert len(graph.edges) == 1


class TestInvalidGraphs:
    def test_missing_entry_point(self):
        with pytest.raises(InvalidGraph, match="Entry point 9"):
            build_graph(two_layer_points(), [], layer_count=2, entry_point_id=9)

    def test_entry_point_below_top_layer(self):
        with pytest.raises(InvalidGraph, match="expected top layer"):
            build_graph(two_layer_points(), [], layer_count=2, entry_point_id=1)

    def test_zero_layers(self):
        with pytest.raises(InvalidGraph):
            build_graph(two_layer_points(), [], layer_count=0, entry_point_id=0)

    def test_duplicate_point_ids(self):
        points = two_layer_points() + [Point(2, (5.0, 5.0))]
        with pytest.raises(InvalidGraph, match="Duplicate point id 2"):
            build_graph(points, [], layer_count=2, entry_point_id=0)

    def test_dimension_mismatch(self):
        points = two_layer_points() + [Point(3, (1.0, 2.0, 3.0))]
        with pytest.raises(InvalidGraph, match="dimension"):
            build_graph(points, [], layer_count=2, entry_point_id=0)

    def test_max_layer_out_of_range(self):
        points = two_layer_points() + [Point(3, (1.0, 2.0), native_layer=0, max_layer=4)]
        with pytest.raises(InvalidGraph, match="max_layer 4"):
            build_graph(points, [], layer_count=2, entry_point_id=0)

    def test_native_layer_above_max_layer(self):
        points = two_layer_points() + [Point(3, (1.0, 2.0), native_layer=1, max_layer=0)]
        with pytest.raises(InvalidGraph, match="native_layer"):
            build_graph(points, [], layer_count=2, entry_point_id=0)

    def test_edge_to_missing_point(self):
        with pytest.raises(InvalidGraph, match="missing point 7"):
            build_graph(two_layer_points(), [Edge(0, 7, 0)], layer_count=2, entry_point_id=0)

    def test_edge_layer_out_of_range(self):
        with pytest.raises(InvalidGraph, match="layer 3"):
            build_graph(two_layer_points(), [Edge(0, 1, 3)], layer_count=2, entry_point_id=0)

    def test_self_loop(self):
        with pytest.raises(InvalidGraph, match="self-loop"):
            build_graph(two_layer_points(), [Edge(1, 1, 0)], layer_count=2, entry_point_id=0)

    def test_edge_above_endpoint_layer(self):
        """An edge at layer L needs both endpoints visible at L"""
        with pytest.raises(InvalidGraph, match="below that layer"):
            build_graph(two_layer_points(), [Edge(0, 1, 1)], layer_count=2, entry_point_id=0)

    def test_all_problems_reported(self):
        points = two_layer_points() + [Point(1, (9.0, 9.0))]
        edges = [Edge(0, 8, 0), Edge(2, 2, 0)]

        with pytest.raises(InvalidGraph) as excinfo:
            build_graph(points, edges, layer_count=2, entry_point_id=0)

        problems = excinfo.value.problems
        assert len(problems) == 3
        assert any("Duplicate" in p for p in problems)
        assert any("missing point 8" in p for p in problems)
        assert any("self-loop" in p for p in problems)

    def test_invalid_graph_is_value_error(self):
        with pytest.raises(ValueError):
            build_graph(two_layer_points(), [], layer_count=2, entry_point_id=9)


def test_infer_max_layers_raises_linked_points():
    points = [
        {"id": 0, "x": 0, "y": 0, "layer": 2},
        {"id": 1, "x": 1, "y": 0, "layer": 1},
        {"id": 2, "x": 2, "y": 0, "layer": 0},
    ]
    edges = [{"a": 0, "b": 1, "layer": 2}, {"a": 1, "b": 2, "layer": 1}]

    inferred = {p.id: p for p in infer_max_layers(points, edges)}

    assert inferred[0].max_layer == 2
    assert inferred[1].max_layer == 2
    assert inferred[1].native_layer == 1
    assert inferred[2].max_layer == 1
    assert inferred[2].native_layer == 0

    graph = build_graph(inferred.values(), edges, layer_count=3, entry_point_id=0)
    assert graph.get_neighbors(0, 2) == [1]


def test_infer_max_layers_never_lowers():
    points = [Point(0, (0.0,), native_layer=0, max_layer=2)]
    assert infer_max_layers(points, [])[0].max_layer == 2


def test_build_logs_summary(caplog):
    with caplog.at_level(logging.INFO, logger="tracehnsw.hnsw.builder"):
        build_graph(two_layer_points(), [Edge(0, 1, 0)], layer_count=2, entry_point_id=0)

    assert "3 points" in caplog.text
