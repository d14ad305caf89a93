"""
tracehnsw - Traced k-NN search over layered proximity graphs

Runs HNSW-style nearest neighbor queries over a fixed, precomputed layered
graph and records a snapshot of the search on every layer, so the descent
can be replayed step by step.
"""

import logging

__version__ = "0.1.0"

from tracehnsw.errors import HNSWError, InvalidGraph, EntryPointNotFound, InvalidArgument
from tracehnsw.hnsw import (
    Point,
    Edge,
    LayeredGraph,
    build_graph,
    HNSWSearcher,
    knn_search,
    TraceStep,
)
from tracehnsw.config import (
    SearchConfig,
    get_default_config,
    get_greedy_config,
    get_wide_config,
)
from tracehnsw.fixtures import load_fixture, list_fixtures

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "HNSWError",
    "InvalidGraph",
    "EntryPointNotFound",
    "InvalidArgument",
    "SearchConfig",
    "get_default_config",
    "get_greedy_config",
    "get_wide_config",
    "Point",
    "Edge",
    "LayeredGraph",
    "build_graph",
    "HNSWSearcher",
    "knn_search",
    "TraceStep",
    "load_fixture",
    "list_fixtures",
]
