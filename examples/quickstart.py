"""Quick start guide for tracehnsw - traced layered graph search.

This example shows the minimal code needed to:
1. Load a sample layered graph
2. Run a k-NN query
3. Walk through what the search did on every layer
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tracehnsw import HNSWSearcher, load_fixture
from tracehnsw.metrics import brute_force_knn, compute_recall_at_k


def main():
    print("="*60)
    print("tracehnsw Quick Start")
    print("="*60)

    # Step 1: Load a sample graph
    print("\n1. Loading the 'simple' sample graph...")
    graph = load_fixture("simple")
    print(f"   {graph}")

    # Step 2: Search
    print("\n2. Searching...")
    query = [160.0, 60.0]
    k = 2

    searcher = HNSWSearcher(graph)
    results = searcher.search(query, k=k, ef=3)

    print(f"   Top {k} results for query {query}:")
    for rank, (point_id, distance) in enumerate(results, 1):
        label = graph.get_point(point_id).label
        print(f"      {rank}. Point {point_id} '{label}' (distance: {distance:.2f})")

    # Step 3: Compare with exact search
    print("\n3. Comparing with brute force...")
    truth, _ = brute_force_knn(graph, query, k=k)
    recall = compute_recall_at_k([pid for pid, _ in results], truth, k=k)
    print(f"   Exact top {k}: {truth}")
    print(f"   Recall@{k}: {recall:.2f}")

    # Step 4: Try a wider search
    print("\n4. Searching again with ef=10...")
    wide = searcher.search(query, k=k, ef=10)
    print(f"   Result: {[pid for pid, _ in wide]}")

    print("\n" + "="*60)
    print("Done! See trace_walkthrough.py for the per-layer trace.")
    print("="*60)


if __name__ == "__main__":
    main()
