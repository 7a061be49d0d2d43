"""
Distance Metrics for Clustering

A metric is any callable ``metric(samples, centroids) -> distances`` where
``samples`` has shape (N, D), ``centroids`` has shape (K, D) and the result
has shape (N, K). The clusterer only ever compares distances, so a metric
does not need to be a true distance (squared Euclidean is the default).
"""

from typing import Callable, Dict, Union
import numpy as np
from scipy.spatial.distance import cdist

from ..exceptions import InvalidParameterError


DistanceMetric = Callable[[np.ndarray, np.ndarray], np.ndarray]


def squared_euclidean(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Sum of squared component differences, no square root taken.

    Ordering by squared distance equals ordering by distance, so this is
    the cheapest metric that yields the same assignments as Euclidean.

    Args:
        samples: Array of shape (N, D)
        centroids: Array of shape (K, D)

    Returns:
        distances: Array of shape (N, K)
    """
    return cdist(samples, centroids, metric='sqeuclidean')


def euclidean(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Straight-line distance."""
    return cdist(samples, centroids, metric='euclidean')


def manhattan(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Sum of absolute component differences (city block)."""
    return cdist(samples, centroids, metric='cityblock')


def chebyshev(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Largest absolute component difference."""
    return cdist(samples, centroids, metric='chebyshev')


METRICS: Dict[str, DistanceMetric] = {
    'squared_euclidean': squared_euclidean,
    'euclidean': euclidean,
    'manhattan': manhattan,
    'chebyshev': chebyshev,
}


def get_metric(metric: Union[str, DistanceMetric]) -> DistanceMetric:
    """
    Resolve a metric given by name or pass a callable through.

    Args:
        metric: One of the names in METRICS, or a callable

    Returns:
        The metric callable

    Raises:
        InvalidParameterError: If the name is unknown or the value is not callable
    """
    if isinstance(metric, str):
        try:
            return METRICS[metric]
        except KeyError:
            raise InvalidParameterError(
                f"Unknown metric '{metric}', expected one of {sorted(METRICS)}"
            ) from None

    if not callable(metric):
        raise InvalidParameterError(f"metric must be a name or a callable, got {metric!r}")

    return metric
