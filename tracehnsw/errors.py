"""Error taxonomy for layered graph search.

All errors derive from ValueError so callers that already guard graph and
search calls with ``except ValueError`` keep working.
"""

from typing import Iterable, List, Optional


class HNSWError(ValueError):
    """Base class for every error raised by tracehnsw."""


class InvalidGraph(HNSWError):
    """A layered graph violates one or more structural invariants.

    Attributes:
        problems: Every violated invariant found, in the order detected
    """

    def __init__(self, message: str, problems: Optional[Iterable[str]] = None) -> None:
        self.problems: List[str] = list(problems) if problems is not None else [message]
        super().__init__(message)


class EntryPointNotFound(HNSWError):
    """The graph's declared entry point id is not in its point set."""

    def __init__(self, entry_point_id: int) -> None:
        self.entry_point_id = entry_point_id
        super().__init__(f"Entry point {entry_point_id} not found in graph")


class InvalidArgument(HNSWError):
    """A search was called with an argument outside its contract (k, ef, entry points, query)."""
