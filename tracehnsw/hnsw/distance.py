"""
Distance metrics for comparing points and queries.

The search only ever asks one question of a metric: how far is this point
from the query? Any function taking two coordinate vectors and returning a
non-negative, symmetric float works. Euclidean (L2) distance is the default
since the sample graphs live in the plane.

Metrics accept either raw coordinates (lists, tuples, numpy arrays) or
anything exposing a ``vector`` attribute, such as a graph Point.
"""

from typing import Callable, Dict, Union
import numpy as np
import numpy.typing as npt

from tracehnsw.errors import InvalidArgument

Vector = npt.NDArray[np.float64]
Metric = Callable[..., float]


def as_vector(p) -> Vector:
    """
    Coerce a point-like value into a 1D float64 numpy array.

    Args:
        p: A Point (anything with a ``vector`` attribute) or a coordinate sequence

    Returns:
        The coordinates as a numpy array
    """
    vector = getattr(p, "vector", p)
    return np.asarray(vector, dtype=np.float64)


def euclidean_distance(a, b) -> float:
    """
    Compute Euclidean (L2) distance between two points.

    Args:
        a: First point or coordinate vector
        b: Second point or coordinate vector

    Returns:
        sqrt(sum((a_i - b_i)^2)), zero only for identical coordinates

    Example:
        >>> euclidean_distance([0.0, 0.0], [3.0, 4.0])
        5.0
    """
    diff = as_vector(a) - as_vector(b)
    return float(np.sqrt(np.dot(diff, diff)))


def squared_euclidean_distance(a, b) -> float:
    """
    Compute squared Euclidean distance.

    Orders points exactly like euclidean_distance but skips the square root,
    so searches visit the same points and only the reported distances differ.
    """
    diff = as_vector(a) - as_vector(b)
    return float(np.dot(diff, diff))


def cosine_similarity(a, b) -> float:
    """
    Compute cosine similarity between two vectors.

    Ranges from -1 (opposite directions) to 1 (same direction).

    Args:
        a: First point or coordinate vector
        b: Second point or coordinate vector

    Returns:
        Similarity score between -1 and 1 (higher means more similar)
    """
    v1 = as_vector(a)
    v2 = as_vector(b)

    norm_v1 = np.linalg.norm(v1)
    norm_v2 = np.linalg.norm(v2)

    # Zero vectors have no direction
    if norm_v1 == 0.0 or norm_v2 == 0.0:
        return 0.0

    return float(np.dot(v1, v2) / (norm_v1 * norm_v2))


def cosine_distance(a, b) -> float:
    """
    Compute cosine distance (1 - cosine similarity), ranging from 0 to 2.

    Note that two distinct coordinates pointing the same way are at distance 0,
    so this metric only suits data where magnitude carries no meaning.
    """
    return max(0.0, 1.0 - cosine_similarity(a, b))


_METRICS: Dict[str, Metric] = {
    "euclidean": euclidean_distance,
    "l2": euclidean_distance,
    "squared_euclidean": squared_euclidean_distance,
    "sqeuclidean": squared_euclidean_distance,
    "cosine": cosine_distance,
}


def available_metrics() -> list:
    """Names accepted by get_metric."""
    return sorted(_METRICS)


def get_metric(metric: Union[str, Metric, None] = None) -> Metric:
    """
    Resolve a metric name (or pass a callable through).

    Args:
        metric: A registered metric name, a callable, or None for Euclidean

    Returns:
        The distance function

    Raises:
        InvalidArgument: If the name is not registered
    """
    if metric is None:
        return euclidean_distance
    if callable(metric):
        return metric
    try:
        return _METRICS[str(metric).lower()]
    except KeyError:
        raise InvalidArgument(
            f"Unknown metric '{metric}', expected one of {available_metrics()}"
        ) from None
