"""Configuration for traced layered-graph search.

Usage:
    from tracehnsw import HNSWSearcher, SearchConfig, load_fixture

    graph = load_fixture("simple")

    # Default config (k=3, ef=3, Euclidean distance)
    searcher = HNSWSearcher(graph)

    # Custom config
    config = SearchConfig(default_k=5, default_ef=8)
    searcher = HNSWSearcher(graph, config=config)

    # From file
    config = SearchConfig.from_json("my_config.json")
"""

from typing import Dict, Any
import json
from dataclasses import dataclass, asdict

from tracehnsw.hnsw.distance import available_metrics


@dataclass
class SearchConfig:
    """Configuration for HNSWSearcher.

    Search defaults:
        default_k: Neighbors returned when a query doesn't pass k
        default_ef: Layer-0 result-set width when a query doesn't pass ef
        metric: Distance metric name (see tracehnsw.hnsw.distance.get_metric)
        widen_ef_to_k: Search layer 0 with max(ef, k) so a narrow ef still
            leaves room for k results
    """

    # Search defaults (the demo UI starts at k=3, ef=3)
    default_k: int = 3
    default_ef: int = 3
    metric: str = "euclidean"
    widen_ef_to_k: bool = True

    # Metadata
    config_name: str = "default"

    def __post_init__(self):
        """Validate configuration."""
        if self.default_k < 1:
            raise ValueError("default_k must be >= 1")

        if self.default_ef < 1:
            raise ValueError("default_ef must be >= 1")

        valid_metrics = available_metrics()
        if self.metric not in valid_metrics:
            raise ValueError(f"metric must be one of {valid_metrics}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def to_json(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SearchConfig':
        """Load configuration from dictionary."""
        return cls(**config_dict)

    @classmethod
    def from_json(cls, filepath: str) -> 'SearchConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"SearchConfig("
            f"{self.config_name}, "
            f"k={self.default_k}, ef={self.default_ef}, "
            f"{self.metric})"
        )


# Preset configurations

def get_default_config() -> SearchConfig:
    """Default configuration (recommended)."""
    return SearchConfig(config_name="default")


def get_greedy_config() -> SearchConfig:
    """Pure greedy search: ef=1 on every layer, one neighbor returned, no widening.

    Note: ef=1 at layer 0 can stop at a local minimum; use for comparison only.
    """
    return SearchConfig(config_name="greedy", default_k=1, default_ef=1, widen_ef_to_k=False)


def get_wide_config(ef: int = 8) -> SearchConfig:
    """Wider layer-0 beam for better recall at the cost of more distance calls.

    Args:
        ef: Layer-0 result-set width
    """
    return SearchConfig(config_name="wide", default_ef=ef)
