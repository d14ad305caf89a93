"""Step through a traced search, one layer at a time.

Prints every TraceStep of a query over each sample graph: the layer, the
point the layer settled on, the candidates popped, the points discovered,
and the kept result. Optionally dumps the trace as JSON.

Usage:
    python examples/trace_walkthrough.py [fixture] [x] [y] [--json]
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

from tracehnsw import HNSWSearcher, list_fixtures, load_fixture
from tracehnsw.hnsw.trace import trace_to_json


def print_step(step, graph):
    """Print one trace step."""
    print(f"\nStep {step.step} | layer {step.layer} | ef={step.ef}")
    print("-"*60)
    print(f"  {step.description}")
    print(f"  Current point:       {step.current_point}")
    print(f"  Candidates explored: {list(step.candidates_explored)}")
    print(f"  Visited:             {list(step.visited)}")
    print("  Result:")
    for point_id, distance in step.result_with_distances():
        label = graph.get_point(point_id).label or "-"
        print(f"      {point_id:>3}  {label:<8} {distance:8.2f}")


def main():
    args = [a for a in sys.argv[1:] if a != "--json"]
    as_json = "--json" in sys.argv[1:]

    name = args[0] if args else "simple"
    query = [float(args[1]), float(args[2])] if len(args) >= 3 else [160.0, 60.0]

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if name not in list_fixtures():
        print(f"Unknown fixture '{name}'. Choose one of: {', '.join(list_fixtures())}")
        sys.exit(1)

    graph = load_fixture(name)
    searcher = HNSWSearcher(graph)
    steps = searcher.knn_search(query, k=3, ef=3)

    print("="*60)
    print(f"Traced search on '{name}' for query {query}")
    print("="*60)

    for step in steps:
        print_step(step, graph)

    if as_json:
        print("\nTrace as JSON:")
        print(trace_to_json(steps))


if __name__ == "__main__":
    main()
