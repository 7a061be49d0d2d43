"""
K-Means Clustering for Pixel Quantization

Lloyd's algorithm over a dataset of pixel samples:
1. Seed k centroids (k-means++ or random distinct samples)
2. Assign each sample to its nearest centroid under the configured metric
3. Move each centroid to the mean of its assigned samples
4. Repeat until no centroid moves more than `tol`, or `max_iter` is hit

Objective Function: J(V) = Σ Σ d(xn, vl), with d = squared Euclidean by default.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple, Union
import logging
import time

import numpy as np
from sklearn.cluster import KMeans as SklearnKMeansAlgorithm

from ..exceptions import DimensionMismatchError, InvalidParameterError
from .config import KMeansConfig
from .metrics import DistanceMetric, get_metric, squared_euclidean

logger = logging.getLogger(__name__)


IterationCallback = Callable[[int, np.ndarray, float], None]
"""Called as callback(iteration, centroids, displacement) after every iteration."""


# ============================================================================
# Results
# ============================================================================

@dataclass
class Cluster:
    """
    One cluster of a finished run.

    Attributes:
        id: Cluster identifier, in [0, k)
        centroid: Representative vector, shape (D,)
        size: Number of samples assigned to this cluster
    """
    id: int
    centroid: np.ndarray
    size: int


@dataclass
class KMeansResult:
    """
    Results from k-means clustering.

    Contains all relevant outputs for the quantization pipeline.
    """
    labels: np.ndarray
    """Cluster id for each sample. Shape: (N,)"""

    centroids: np.ndarray
    """Cluster centroids. Shape: (k, D)"""

    inertia: float
    """Objective J(V): sum of metric distances from each sample to its centroid."""

    n_iter: int
    """Number of iterations run."""

    converged: bool
    """Whether centroid movement fell within tolerance before the cap/deadline."""

    displacements: List[float] = field(default_factory=list)
    """Largest centroid shift of every iteration, in order."""

    @property
    def n_clusters(self) -> int:
        return len(self.centroids)

    @property
    def clusters(self) -> List[Cluster]:
        """Clusters with their id, centroid and member count."""
        sizes = np.bincount(self.labels, minlength=self.n_clusters)
        return [
            Cluster(id=k, centroid=self.centroids[k].copy(), size=int(sizes[k]))
            for k in range(self.n_clusters)
        ]

    def reshape_labels(self, shape: Tuple[int, int]) -> np.ndarray:
        """
        Reshape flat labels to 2D image shape.

        Args:
            shape: (H, W) image dimensions

        Returns:
            labels_2d: (H, W) cluster labels
        """
        return self.labels.reshape(shape)


# ============================================================================
# Input validation and seeding
# ============================================================================

def as_samples(data: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
    """
    Convert a dataset to a float (N, D) array, checking its shape.

    Args:
        data: Array of shape (N, D) or a sequence of equal-length vectors

    Returns:
        samples: float64 array of shape (N, D)

    Raises:
        InvalidParameterError: If the dataset is empty
        DimensionMismatchError: If samples have inconsistent lengths
    """
    if not isinstance(data, np.ndarray):
        rows = list(data)
        if not rows:
            raise InvalidParameterError("dataset must not be empty")
        lengths = set()
        for row in rows:
            if np.ndim(row) != 1:
                raise DimensionMismatchError(
                    f"every sample must be a 1D vector, got {np.ndim(row)}D"
                )
            lengths.add(len(row))
        if len(lengths) > 1:
            raise DimensionMismatchError(
                f"samples have inconsistent lengths: {sorted(lengths)}"
            )
        data = np.asarray(rows)

    if data.ndim != 2:
        raise DimensionMismatchError(
            f"Data must be 2D array (N, features), got shape {data.shape}"
        )
    if data.shape[0] == 0:
        raise InvalidParameterError("dataset must not be empty")
    if data.shape[1] == 0:
        raise DimensionMismatchError("samples must have at least one component")

    return data.astype(np.float64, copy=False)


def init_centroids(
    samples: np.ndarray,
    n_clusters: int,
    method: str,
    metric: DistanceMetric,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Pick initial centroids from the dataset.

    'random' draws k distinct sample indices without replacement.
    'k-means++' draws the first index uniformly and every next one with
    probability proportional to its distance to the closest centroid picked
    so far. When all remaining distances are zero (duplicated samples) it
    falls back to a uniform draw among the indices not yet picked.

    Args:
        samples: Dataset, shape (N, D)
        n_clusters: Number of centroids to pick, 1 <= k <= N
        method: 'k-means++' or 'random'
        metric: Distance used for k-means++ weights
        rng: Random generator (owns reproducibility)

    Returns:
        centroids: New array of shape (k, D)
    """
    n = len(samples)

    if method == 'random':
        indices = rng.choice(n, size=n_clusters, replace=False)
        return samples[indices]

    chosen = [int(rng.integers(n))]
    closest = metric(samples, samples[chosen]).ravel()

    for _ in range(1, n_clusters):
        weights = np.clip(closest, 0.0, None)
        weights[chosen] = 0.0
        total = weights.sum()

        if total > 0 and np.isfinite(total):
            index = int(rng.choice(n, p=weights / total))
        else:
            remaining = np.setdiff1d(np.arange(n), chosen)
            index = int(rng.choice(remaining))

        chosen.append(index)
        closest = np.minimum(closest, metric(samples, samples[[index]]).ravel())

    return samples[chosen]


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseKMeans(ABC):
    """
    Abstract base class for k-means clustering implementations.

    - LloydKMeans: From-scratch Lloyd iteration with pluggable metrics
    - SklearnKMeans: Wrapper around scikit-learn, used for cross-checking

    Example:
        >>> kmeans = LloydKMeans(KMeansConfig(n_clusters=4))
        >>> result = kmeans.fit_predict(pixels)  # pixels shape: (N, 3)
        >>> result.labels, result.centroids
    """

    def __init__(self, config: Optional[KMeansConfig] = None):
        """
        Initialize k-means clusterer.

        Args:
            config: Configuration parameters. If None, uses defaults.
        """
        self.config = config or KMeansConfig()
        self.metric = get_metric(self.config.metric)
        self._result: Optional[KMeansResult] = None

    @abstractmethod
    def fit_predict(self, pixels, initial_centroids: Optional[np.ndarray] = None) -> KMeansResult:
        """
        Fit k-means and return complete results.

        Args:
            pixels: Samples, shape (N, D)
            initial_centroids: Optional explicit seeds, shape (k, D)

        Returns:
            result: KMeansResult with labels, centroids, inertia, etc.
        """

    def fit(self, pixels, initial_centroids: Optional[np.ndarray] = None) -> 'BaseKMeans':
        """
        Fit k-means on 2D data array.

        Returns:
            self: For method chaining
        """
        self.fit_predict(pixels, initial_centroids)
        return self

    def fit_image(self, image: np.ndarray) -> 'BaseKMeans':
        """
        Fit k-means on an (H, W, C) image.

        Convenience method that reshapes the image to (H*W, C) samples.

        Raises:
            DimensionMismatchError: If image is not 3D
        """
        if image.ndim != 3:
            raise DimensionMismatchError(f"Image must be (H, W, C), got shape {image.shape}")

        return self.fit(image.reshape(-1, image.shape[2]))

    def predict(self, pixels) -> np.ndarray:
        """
        Assign samples to the nearest fitted centroid.

        Args:
            pixels: Samples, shape (M, D)

        Returns:
            labels: Cluster assignments, shape (M,)

        Raises:
            RuntimeError: If called before fit()
        """
        centroids = self.centroids
        samples = as_samples(pixels)
        if samples.shape[1] != centroids.shape[1]:
            raise DimensionMismatchError(
                f"samples have {samples.shape[1]} components, "
                f"centroids have {centroids.shape[1]}"
            )
        return np.argmin(self.metric(samples, centroids), axis=1)

    @property
    def result(self) -> KMeansResult:
        if self._result is None:
            raise RuntimeError("Must call fit() or fit_predict() before accessing results")
        return self._result

    @property
    def labels(self) -> np.ndarray:
        """Cluster assignments of the fitted data, shape (N,)."""
        return self.result.labels

    @property
    def centroids(self) -> np.ndarray:
        """Cluster centers, shape (n_clusters, features)."""
        return self.result.centroids

    @property
    def inertia(self) -> float:
        return self.result.inertia

    def compute_inertia(
        self,
        pixels: np.ndarray,
        labels: np.ndarray,
        centroids: Optional[np.ndarray] = None
    ) -> float:
        """
        Compute k-means objective function J(V).

        Args:
            pixels: Samples, shape (N, D)
            labels: Cluster assignments, shape (N,)
            centroids: Cluster centers, shape (K, D).
                      If None, uses fitted centroids.

        Returns:
            inertia: Sum of metric distances to the assigned centroid
        """
        if centroids is None:
            centroids = self.centroids

        distances = self.metric(pixels, centroids)
        return float(distances[np.arange(len(pixels)), labels].sum())

    def _check_inputs(
        self,
        pixels,
        initial_centroids: Optional[np.ndarray]
    ) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        samples = as_samples(pixels)
        k = self.config.n_clusters

        if k > len(samples):
            raise InvalidParameterError(
                f"n_clusters ({k}) must be <= number of samples ({len(samples)})"
            )

        if initial_centroids is not None:
            initial_centroids = np.array(initial_centroids, dtype=np.float64)
            if initial_centroids.shape != (k, samples.shape[1]):
                raise DimensionMismatchError(
                    f"initial_centroids must have shape {(k, samples.shape[1])}, "
                    f"got {initial_centroids.shape}"
                )

        return samples, initial_centroids


# ============================================================================
# Lloyd Implementation
# ============================================================================

class LloydKMeans(BaseKMeans):
    """
    Lloyd's k-means with a pluggable distance metric.

    The dataset is never written to. The working centroid array is owned
    by the run and replaced (not updated in place) on every iteration.

    Empty clusters keep their previous centroid. Ties in the assignment
    step go to the lowest cluster id.
    """

    def __init__(
        self,
        config: Optional[KMeansConfig] = None,
        callback: Optional[IterationCallback] = None
    ):
        """
        Initialize Lloyd k-means.

        Args:
            config: K-means configuration
            callback: Optional per-iteration hook, see IterationCallback
        """
        super().__init__(config)
        self.callback = callback

    def fit_predict(self, pixels, initial_centroids: Optional[np.ndarray] = None) -> KMeansResult:
        """
        Run Lloyd's algorithm until convergence, iteration cap or deadline.

        Args:
            pixels: Samples, shape (N, D)
            initial_centroids: Optional explicit seeds, shape (k, D).
                              If None, seeds with config.init.

        Returns:
            result: KMeansResult. converged is False when the cap or the
                    deadline stopped the run; the result is still usable.

        Raises:
            InvalidParameterError: Empty dataset or k > N
            DimensionMismatchError: Ragged samples or wrong seed shape

        Example:
            >>> config = KMeansConfig(n_clusters=2, tol=0.01)
            >>> result = LloydKMeans(config).fit_predict([[0, 0], [0, 0], [10, 10], [10, 10]])
            >>> sorted(result.centroids.tolist())
            [[0.0, 0.0], [10.0, 10.0]]
        """
        samples, centroids = self._check_inputs(pixels, initial_centroids)
        config = self.config

        if centroids is None:
            rng = np.random.default_rng(config.random_state)
            centroids = init_centroids(samples, config.n_clusters, config.init, self.metric, rng)

        start = time.monotonic()
        displacements: List[float] = []
        converged = False
        n_iter = 0

        for iteration in range(1, config.max_iter + 1):
            labels = self._assign(samples, centroids)
            new_centroids = self._update(samples, labels, centroids)

            displacement = float(np.max(np.linalg.norm(new_centroids - centroids, axis=1)))
            centroids = new_centroids
            n_iter = iteration
            displacements.append(displacement)

            logger.debug(f"Iteration {iteration}: max centroid displacement {displacement:.6g}")

            if self.callback is not None:
                self.callback(iteration, centroids.copy(), displacement)

            if displacement <= config.tol:
                converged = True
                break

            if config.max_time is not None and time.monotonic() - start >= config.max_time:
                logger.warning(
                    f"K-Means deadline of {config.max_time}s reached after {iteration} iterations"
                )
                break

        if not converged and n_iter == config.max_iter:
            logger.info(f"K-Means hit max_iter={config.max_iter} without converging")

        # Final assignment against the final centroids
        distances = self.metric(samples, centroids)
        labels = np.argmin(distances, axis=1)
        inertia = float(distances[np.arange(len(samples)), labels].sum())

        self._result = KMeansResult(
            labels=labels,
            centroids=centroids,
            inertia=inertia,
            n_iter=n_iter,
            converged=converged,
            displacements=displacements
        )

        logger.info(
            f"K-Means finished: k={config.n_clusters}, n_samples={len(samples)}, "
            f"iterations={n_iter}, converged={converged}, inertia={inertia:.4f}"
        )

        return self._result

    def _assign(self, samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        # argmin returns the first minimum, so ties go to the lowest id
        return np.argmin(self.metric(samples, centroids), axis=1)

    @staticmethod
    def _update(samples: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        k, n_features = centroids.shape
        counts = np.bincount(labels, minlength=k)

        sums = np.empty((k, n_features))
        for d in range(n_features):
            sums[:, d] = np.bincount(labels, weights=samples[:, d], minlength=k)

        new_centroids = centroids.copy()
        filled = counts > 0
        new_centroids[filled] = sums[filled] / counts[filled, None]

        return new_centroids


# ============================================================================
# Sklearn Implementation
# ============================================================================

class SklearnKMeans(BaseKMeans):
    """
    K-means clustering using scikit-learn.

    Wraps sklearn.cluster.KMeans behind the BaseKMeans interface. Only the
    squared Euclidean metric is supported, and sklearn scales `tol` by the
    data variance, so iteration counts are not comparable with LloydKMeans.
    """

    def __init__(self, config: Optional[KMeansConfig] = None):
        super().__init__(config)
        if self.metric is not squared_euclidean:
            raise InvalidParameterError(
                "SklearnKMeans only supports the 'squared_euclidean' metric"
            )
        self._sklearn_kmeans: Optional[SklearnKMeansAlgorithm] = None

    def fit_predict(self, pixels, initial_centroids: Optional[np.ndarray] = None) -> KMeansResult:
        """
        Fit k-means using sklearn and return complete results.

        Args:
            pixels: Samples, shape (N, D)
            initial_centroids: Optional explicit seeds, shape (k, D)

        Returns:
            result: KMeansResult (displacements are not tracked)
        """
        samples, centroids = self._check_inputs(pixels, initial_centroids)
        config = self.config

        self._sklearn_kmeans = SklearnKMeansAlgorithm(
            n_clusters=config.n_clusters,
            max_iter=config.max_iter,
            tol=config.tol,
            n_init=1,
            init=centroids if centroids is not None else config.init,
            random_state=config.random_state
        )
        labels = self._sklearn_kmeans.fit_predict(samples)
        n_iter = int(self._sklearn_kmeans.n_iter_)
        centers = self._sklearn_kmeans.cluster_centers_

        # n_iter_ == max_iter both when sklearn gave up and when it converged
        # on the last allowed iteration; one more update step tells them apart
        converged = n_iter < config.max_iter
        if not converged:
            shift = np.linalg.norm(LloydKMeans._update(samples, labels, centers) - centers, axis=1)
            converged = bool(np.max(shift) <= config.tol)

        self._result = KMeansResult(
            labels=labels,
            centroids=centers,
            inertia=float(self._sklearn_kmeans.inertia_),
            n_iter=n_iter,
            converged=converged
        )

        logger.info(
            f"sklearn K-Means finished: k={config.n_clusters}, iterations={n_iter}, "
            f"inertia={self._result.inertia:.4f}"
        )

        return self._result


# ============================================================================
# Functional interface
# ============================================================================

def cluster(
    dataset,
    k: int,
    tolerance: float = 1e-4,
    metric: Union[str, DistanceMetric] = squared_euclidean,
    max_iter: int = 100,
    init: str = 'k-means++',
    random_state: Optional[int] = 42,
    max_time: Optional[float] = None,
    callback: Optional[IterationCallback] = None
) -> KMeansResult:
    """
    Cluster a dataset into k groups with Lloyd's k-means.

    Pure function: no state survives the call. `result.clusters` and
    `result.labels` are the per-cluster centroids and per-sample
    assignments.

    Args:
        dataset: Samples, shape (N, D) or sequence of equal-length vectors
        k: Number of clusters, 1 <= k <= N
        tolerance: Convergence threshold on centroid movement (>= 0)
        metric: Metric name or callable(samples, centroids) -> (N, K)
        max_iter: Iteration cap
        init: 'k-means++' or 'random'
        random_state: Seed for centroid seeding
        max_time: Optional deadline in seconds
        callback: Optional per-iteration hook

    Returns:
        result: KMeansResult

    Example:
        >>> result = cluster([[0, 0], [0, 0], [10, 10], [10, 10]], k=2, tolerance=0.01)
        >>> result.labels[0] == result.labels[1] != result.labels[2] == result.labels[3]
        True
    """
    config = KMeansConfig(
        n_clusters=k,
        tol=tolerance,
        max_iter=max_iter,
        metric=metric,
        init=init,
        random_state=random_state,
        max_time=max_time
    )
    return LloydKMeans(config, callback=callback).fit_predict(dataset)
