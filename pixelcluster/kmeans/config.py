"""
K-Means Configuration

Parameters for Lloyd's K-Means on pixel samples.
"""

from dataclasses import dataclass
from numbers import Integral
from typing import Optional, Union

from ..exceptions import InvalidParameterError
from .metrics import DistanceMetric, get_metric


INIT_METHODS = ('k-means++', 'random')


@dataclass
class KMeansConfig:
    """
    Configuration for K-Means clustering.

    Attributes:
        n_clusters: Number of clusters to form (k >= 1)
        tol: Convergence threshold on the largest centroid displacement
        max_iter: Maximum number of iterations before giving up
        metric: Distance metric name or callable (see metrics.METRICS)
        init: Centroid seeding method ('k-means++' or 'random')
        random_state: Seed for the seeding RNG
        max_time: Optional wall-clock budget in seconds, checked between iterations
    """
    n_clusters: int = 4
    """Number of clusters (k parameter)."""

    tol: float = 1e-4
    """Stop once no centroid moves more than this (Euclidean distance)."""

    max_iter: int = 100
    """Maximum number of assignment/update iterations."""

    metric: Union[str, DistanceMetric] = 'squared_euclidean'
    """Distance used for assignment and k-means++ seeding."""

    init: str = 'k-means++'
    """Centroid initialization method.
    Options: 'k-means++' (spread out), 'random' (distinct samples)."""

    random_state: Optional[int] = 42
    """Random seed for reproducibility. None draws fresh OS entropy."""

    max_time: Optional[float] = None
    """Deadline in seconds. None means no deadline."""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not isinstance(self.n_clusters, Integral) or isinstance(self.n_clusters, bool):
            raise InvalidParameterError(f"n_clusters must be an integer, got {self.n_clusters!r}")
        if self.n_clusters < 1:
            raise InvalidParameterError(f"n_clusters must be >= 1, got {self.n_clusters}")
        # NaN fails every comparison
        if not self.tol >= 0:
            raise InvalidParameterError(f"tol must be >= 0, got {self.tol}")
        if not isinstance(self.max_iter, Integral) or isinstance(self.max_iter, bool):
            raise InvalidParameterError(f"max_iter must be an integer, got {self.max_iter!r}")
        if self.max_iter < 1:
            raise InvalidParameterError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.init not in INIT_METHODS:
            raise InvalidParameterError(
                f"init must be 'k-means++' or 'random', got '{self.init}'"
            )
        if self.max_time is not None and not self.max_time > 0:
            raise InvalidParameterError(f"max_time must be positive, got {self.max_time}")

        # Fail early on unknown metric names
        get_metric(self.metric)
