"""
Layered graph search with a per-layer trace.

This module answers k-nearest-neighbor queries over a LayeredGraph:
1. Starts at the graph's entry point on the top layer
2. Greedily descends (ef=1) through every layer above 0, each layer's
   winner becoming the next layer's entry point
3. At layer 0, runs a width-ef search from that entry point
4. Returns the k nearest points found, plus one TraceStep per layer

The ef parameter controls the accuracy-speed tradeoff at layer 0:
- Higher ef = more points examined, better recall
- Lower ef = fewer distance computations, may stop at a local minimum

Ties on distance are broken by discovery order everywhere (the earlier
discovered point counts as nearer), so identical queries produce identical
traces.
"""

import heapq
import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Tuple, Union

from tracehnsw.config import SearchConfig, get_default_config
from tracehnsw.errors import EntryPointNotFound, InvalidArgument, InvalidGraph
from tracehnsw.hnsw.distance import Metric, Vector, as_vector, get_metric
from tracehnsw.hnsw.graph import LayeredGraph
from tracehnsw.hnsw.trace import LayerSearchResult, TraceRecorder, TraceStep

logger = logging.getLogger(__name__)


class HNSWSearcher:
    """
    Runs traced searches on one LayeredGraph.

    A searcher only binds a graph to a metric and default parameters; every
    call allocates its own working sets, so one searcher can serve
    concurrent queries.
    """

    def __init__(
        self,
        graph: LayeredGraph,
        metric: Union[str, Metric, None] = None,
        config: Optional[SearchConfig] = None,
    ) -> None:
        """
        Initialize searcher with a graph.

        Args:
            graph: The LayeredGraph to search in
            metric: Distance metric name or callable (default: config.metric)
            config: Default k/ef and metric (default: get_default_config())
        """
        self.graph = graph
        self.config = config if config is not None else get_default_config()
        self.metric = get_metric(metric if metric is not None else self.config.metric)

    def search(
        self, query, k: Optional[int] = None, ef: Optional[int] = None
    ) -> List[Tuple[int, float]]:
        """
        Search for the k nearest neighbors, without the trace.

        Returns:
            List of (point_id, distance) tuples, sorted by distance (closest first)
        """
        steps = self.knn_search(query, k=k, ef=ef)
        return steps[-1].result_with_distances()

    def knn_search(
        self, query, k: Optional[int] = None, ef: Optional[int] = None
    ) -> Tuple[TraceStep, ...]:
        """
        Find the k nearest neighbors of query, recording one step per layer.

        Args:
            query: Query coordinates (same dimension as the graph's points)
            k: Number of neighbors to return (default: config.default_k)
            ef: Result-set width at layer 0 (default: config.default_ef), raised
                to k when config.widen_ef_to_k is set

        Returns:
            Trace steps, top layer first. The last step is layer 0 and its
            result holds up to k ids, nearest first.

        Raises:
            InvalidArgument: If k < 1, ef < 1 or the query has the wrong dimension
            InvalidGraph: If the graph has no layers
            EntryPointNotFound: If the graph's entry point is not one of its points
        """
        k = self.config.default_k if k is None else k
        ef = self.config.default_ef if ef is None else ef
        if k < 1:
            raise InvalidArgument(f"k must be >= 1, got {k}")
        if ef < 1:
            raise InvalidArgument(f"ef must be >= 1, got {ef}")

        graph = self.graph
        if graph.layer_count < 1:
            raise InvalidGraph(f"layer_count must be >= 1, got {graph.layer_count}")

        entry_point = graph.get_point(graph.entry_point_id)
        if entry_point is None:
            raise EntryPointNotFound(graph.entry_point_id)

        query_vector = self._prepare_query(query)
        recorder = TraceRecorder()
        entry_id = entry_point.id

        # Greedy descent: keep only the single closest point per layer
        for layer in range(graph.top_layer, 0, -1):
            layer_result = self.search_layer(query_vector, [entry_id], ef=1, layer=layer)

            # An empty result keeps the previous anchor
            nearest = layer_result.nearest()
            if nearest is not None:
                entry_id = nearest

            recorder.record(
                layer=layer,
                current_point=entry_id,
                layer_result=layer_result,
                ef=1,
                k=k,
                description=self._describe_descent(layer, entry_id, layer_result),
            )
            logger.debug(
                "Layer %d: greedy winner %s after visiting %d point(s)",
                layer,
                entry_id,
                len(layer_result.visited),
            )

        # Base layer: ef applies fresh here, regardless of the greedy width above
        if self.config.widen_ef_to_k:
            ef = max(ef, k)
        layer_result = self.search_layer(query_vector, [entry_id], ef=ef, layer=0)
        ranked = sorted(layer_result.result, key=lambda pid: layer_result.distances[pid])
        nearest_k = ranked[:k]

        recorder.record(
            layer=0,
            current_point=entry_id,
            layer_result=layer_result,
            ef=ef,
            k=k,
            result=nearest_k,
            description=(
                f"Layer 0: final search with ef={ef} from entry point {entry_id}. "
                f"Found {len(nearest_k)} of {k} requested nearest neighbors."
            ),
        )
        logger.debug(
            "Layer 0: kept %d of %d result(s) after visiting %d point(s)",
            len(nearest_k),
            len(layer_result.result),
            len(layer_result.visited),
        )

        return recorder.steps

    def search_layer(
        self,
        query,
        entry_points: Iterable[int],
        ef: int,
        layer: int,
    ) -> LayerSearchResult:
        """
        Bounded-width best-first search within a single layer (SEARCH-LAYER).

        Keeps a candidate min-queue C and a result set W of at most ef points.
        The nearest candidate is popped each round; once it is farther than
        the farthest point in W nothing left can improve W and the search stops.

        Args:
            query: Query coordinates
            entry_points: Ids to start from (must exist at this layer)
            ef: Maximum size of the result set
            layer: Which layer to search on

        Returns:
            LayerSearchResult with the kept ids (nearest first), the candidate
            pop history, the discovery history and every computed distance

        Raises:
            InvalidArgument: If entry_points is empty, ef < 1, layer < 0, or an
                entry point is unknown or not visible at layer
        """
        if ef < 1:
            raise InvalidArgument(f"ef must be >= 1, got {ef}")
        if layer < 0:
            raise InvalidArgument(f"layer must be >= 0, got {layer}")

        # Duplicates collapse, first occurrence wins
        entry_ids = list(dict.fromkeys(entry_points))
        if not entry_ids:
            raise InvalidArgument("entry_points must not be empty")

        query_vector = self._prepare_query(query)

        distances: Dict[int, float] = {}
        discovery: Dict[int, int] = {}
        visited: List[int] = []

        for point_id in entry_ids:
            point = self.graph.get_point(point_id)
            if point is None:
                raise InvalidArgument(f"Entry point {point_id} is not in the graph")
            if not point.visible_at(layer):
                raise InvalidArgument(
                    f"Entry point {point_id} (max_layer {point.max_layer}) does not exist at layer {layer}"
                )
            discovery[point_id] = len(visited)
            visited.append(point_id)
            distances[point_id] = self.metric(query_vector, point.vector)

        # C: min-heap of (distance, discovery, id)
        # W: max-heap of (-distance, -discovery, id), W[0] is the farthest kept point
        candidates = [(distances[pid], discovery[pid], pid) for pid in entry_ids]
        heapq.heapify(candidates)
        results = [(-distances[pid], -discovery[pid], pid) for pid in entry_ids]
        heapq.heapify(results)
        while len(results) > ef:
            heapq.heappop(results)

        explored: List[int] = []

        while candidates:
            current_dist, _, current_id = heapq.heappop(candidates)
            explored.append(current_id)

            # Nothing closer can come out of C once its best is beyond W's worst
            farthest_dist = -results[0][0]
            if current_dist > farthest_dist:
                break

            for neighbor_id in self.graph.get_neighbors(current_id, layer):
                if neighbor_id in distances:
                    continue

                neighbor = self.graph.get_point(neighbor_id)
                dist = self.metric(query_vector, neighbor.vector)
                discovery[neighbor_id] = len(visited)
                visited.append(neighbor_id)
                distances[neighbor_id] = dist

                farthest_dist = -results[0][0]
                if dist < farthest_dist or len(results) < ef:
                    heapq.heappush(candidates, (dist, discovery[neighbor_id], neighbor_id))
                    heapq.heappush(results, (-dist, -discovery[neighbor_id], neighbor_id))
                    if len(results) > ef:
                        heapq.heappop(results)

        kept = sorted(results, key=lambda item: (-item[0], -item[1]))

        return LayerSearchResult(
            result=tuple(pid for _, _, pid in kept),
            candidates_explored=tuple(explored),
            visited=tuple(visited),
            distances=MappingProxyType(distances),
        )

    def _prepare_query(self, query) -> Vector:
        """Coerce the query to a vector and check its dimension."""
        query_vector = as_vector(query)
        dimension = self.graph.dimension

        if query_vector.ndim != 1:
            raise InvalidArgument(f"Query must be a 1D vector, got shape {query_vector.shape}")
        if dimension is not None and query_vector.shape[0] != dimension:
            raise InvalidArgument(
                f"Query dimension {query_vector.shape[0]} doesn't match graph dimension {dimension}"
            )

        return query_vector

    def _describe_descent(self, layer: int, entry_id: int, layer_result: LayerSearchResult) -> str:
        point = self.graph.get_point(entry_id)
        name = f'"{point.label}"' if point.label else f"point {entry_id}"
        coords = ", ".join(f"{c:g}" for c in point.coordinates)
        return (
            f"Layer {layer}: greedy search with ef=1. Local minimum: {name} at ({coords}), "
            f"distance {layer_result.distances[entry_id]:.2f} from the query."
        )


def knn_search(
    graph: LayeredGraph,
    query,
    k: int,
    ef: int,
    metric: Union[str, Metric, None] = None,
) -> Tuple[TraceStep, ...]:
    """
    Run one traced k-NN query against a graph.

    Args:
        graph: Graph to search
        query: Query coordinates
        k: Number of neighbors to return
        ef: Result-set width at layer 0
        metric: Distance metric name or callable (default: Euclidean)

    Returns:
        One TraceStep per layer, top layer first
    """
    return HNSWSearcher(graph, metric=metric).knn_search(query, k=k, ef=ef)
