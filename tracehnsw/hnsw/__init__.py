"""
Layered graph search implementation module.

This module contains the core components for answering nearest neighbor
queries over a precomputed, immutable layered proximity graph, recording
what the search did on every layer.

Components:
- distance: Distance metrics (Euclidean, squared Euclidean, cosine)
- graph: Point, Edge and LayeredGraph data structures
- builder: Validating graph assembly (build_graph)
- searcher: SEARCH-LAYER and the top-down K-NN search
- trace: TraceStep snapshots and the recorder that collects them
"""

from tracehnsw.hnsw.distance import euclidean_distance, squared_euclidean_distance, cosine_distance, get_metric
from tracehnsw.hnsw.graph import Point, Edge, LayeredGraph
from tracehnsw.hnsw.builder import GraphBuilder, build_graph, infer_max_layers
from tracehnsw.hnsw.trace import LayerSearchResult, TraceStep, TraceRecorder, trace_to_dicts, trace_to_json
from tracehnsw.hnsw.searcher import HNSWSearcher, knn_search

__all__ = [
    "euclidean_distance",
    "squared_euclidean_distance",
    "cosine_distance",
    "get_metric",
    "Point",
    "Edge",
    "LayeredGraph",
    "GraphBuilder",
    "build_graph",
    "infer_max_layers",
    "LayerSearchResult",
    "TraceStep",
    "TraceRecorder",
    "trace_to_dicts",
    "trace_to_json",
    "HNSWSearcher",
    "knn_search",
]
