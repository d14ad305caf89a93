"""
Search trace recording.

A k-NN search produces one TraceStep per layer it processes. Each step is a
frozen snapshot of that layer's search: where it started, which candidates
were popped, which points were discovered, the distances computed and the
result kept. Viewers replay the steps in order to animate the descent.
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class LayerSearchResult:
    """
    Output of one SEARCH-LAYER call.

    Attributes:
        result: Kept point ids, nearest first
        candidates_explored: Ids popped from the candidate queue, in pop order
        visited: Every distinct id touched, in discovery order
        distances: Distance from the query for every visited id
    """

    result: Tuple[int, ...]
    candidates_explored: Tuple[int, ...]
    visited: Tuple[int, ...]
    distances: Mapping[int, float] = field(hash=False)

    def nearest(self) -> Optional[int]:
        """Closest kept id, or None if the result is empty."""
        return self.result[0] if self.result else None


@dataclass(frozen=True)
class TraceStep:
    """
    One layer's worth of recorded search state.

    Attributes:
        step: 1-based position of this step in the trace
        layer: Layer that was searched
        current_point: Representative point of the step (the greedy winner on
            upper layers, the layer-0 entry point on the last step)
        result: Result ids at the end of the layer (truncated to k on layer 0)
        candidates_explored: Candidate extraction history
        visited: Visited-node history
        distances: Visited id -> distance from the query
        ef: Result-set width used on this layer
        k: Number of neighbors requested
        description: One-line human-readable summary
    """

    step: int
    layer: int
    current_point: int
    result: Tuple[int, ...]
    candidates_explored: Tuple[int, ...]
    visited: Tuple[int, ...]
    distances: Mapping[int, float] = field(default_factory=dict, hash=False)
    ef: int = 1
    k: int = 1
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "result", tuple(self.result))
        object.__setattr__(self, "candidates_explored", tuple(self.candidates_explored))
        object.__setattr__(self, "visited", tuple(self.visited))
        object.__setattr__(self, "distances", MappingProxyType(dict(self.distances)))

    def result_with_distances(self) -> List[Tuple[int, float]]:
        """(id, distance) pairs of the result, in result order."""
        return [(pid, self.distances[pid]) for pid in self.result]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe dictionary (distance keys become strings)."""
        return {
            "step": self.step,
            "layer": self.layer,
            "current_point": self.current_point,
            "result": list(self.result),
            "candidates_explored": list(self.candidates_explored),
            "visited": list(self.visited),
            "distances": {str(pid): dist for pid, dist in self.distances.items()},
            "ef": self.ef,
            "k": self.k,
            "description": self.description,
        }


class TraceRecorder:
    """
    Accumulates TraceSteps in call order.

    One recorder belongs to one query; the finished trace is handed out as a
    tuple so the caller can't append to it.
    """

    def __init__(self) -> None:
        self._steps: List[TraceStep] = []

    def record(
        self,
        layer: int,
        current_point: int,
        layer_result: LayerSearchResult,
        ef: int,
        k: int,
        result: Optional[Sequence[int]] = None,
        description: str = "",
    ) -> TraceStep:
        """
        Append a step built from one layer search.

        Args:
            layer: Layer that was searched
            current_point: Representative point for the step
            layer_result: What the layer search returned
            ef: Width used on this layer
            k: Neighbors requested by the query
            result: Result ids to store instead of layer_result.result
                (the truncated top-k on layer 0)
            description: Human-readable summary

        Returns:
            The recorded step
        """
        step = TraceStep(
            step=len(self._steps) + 1,
            layer=layer,
            current_point=current_point,
            result=tuple(layer_result.result if result is None else result),
            candidates_explored=layer_result.candidates_explored,
            visited=layer_result.visited,
            distances=layer_result.distances,
            ef=ef,
            k=k,
            description=description,
        )
        self._steps.append(step)
        return step

    @property
    def steps(self) -> Tuple[TraceStep, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[TraceStep]:
        return iter(tuple(self._steps))


def trace_to_dicts(steps: Iterable[TraceStep]) -> List[Dict[str, Any]]:
    """Convert a finished trace into a list of plain dicts."""
    return [step.to_dict() for step in steps]


def trace_to_json(steps: Iterable[TraceStep], indent: Optional[int] = 2) -> str:
    """Serialize a finished trace to a JSON string."""
    return json.dumps(trace_to_dicts(steps), indent=indent)
