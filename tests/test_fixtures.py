"""
Tests for the bundled sample graphs.
"""

import pytest
from tracehnsw.fixtures import FIXTURES, list_fixtures, load_fixture
from tracehnsw.graph_validator import LayerConnectivity


def test_list_fixtures():
    assert list_fixtures() == ["simple", "clusters", "uniform"]


@pytest.mark.parametrize("name", ["simple", "clusters", "uniform"])
def test_fixture_loads(name):
    graph = load_fixture(name)
    data = FIXTURES[name]

    assert graph.size() == len(data["points"])
    assert graph.layer_count == 3
    assert graph.get_point(data["entry_point_id"]).max_layer == graph.top_layer


@pytest.mark.parametrize("name", ["simple", "clusters", "uniform"])
def test_top_layer_connected_to_entry(name):
    graph = load_fixture(name)
    top = LayerConnectivity.from_graph(graph, graph.top_layer)

    assert top.reachable_from(graph.entry_point_id) == top.get_all_nodes()


def test_hub_max_layers_derived_from_edges():
    graph = load_fixture("simple")

    assert graph.get_point(1).native_layer == 1
    assert graph.get_point(1).max_layer == 2
    assert graph.get_point(3).max_layer == 1
    assert graph.get_point(7).max_layer == 0


def test_labels_kept():
    assert load_fixture("clusters").get_point(9).label == "Center"


def test_unknown_fixture():
    with pytest.raises(KeyError, match="Unknown fixture"):
        load_fixture("nope")
