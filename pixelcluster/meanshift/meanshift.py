"""
Mean-Shift Clustering for Pixel Quantization

Wraps sklearn's MeanShift (flat kernel). Unlike k-means the number of
clusters is not given: every sample climbs to a density mode, and samples
ending at the same mode form one cluster. The kernel bandwidth controls
how many modes survive.
"""

from dataclasses import dataclass
from typing import Optional
import logging

import numpy as np
from sklearn.cluster import MeanShift, estimate_bandwidth

from ..exceptions import InvalidParameterError
from ..kmeans import as_samples

logger = logging.getLogger(__name__)


@dataclass
class MeanShiftConfig:
    """
    Configuration for Mean-Shift clustering.

    Attributes:
        bandwidth: Kernel radius. None estimates it from the data
        quantile: Quantile of pairwise distances used by the estimate
        n_samples: Samples used by the estimate (None uses all)
        bin_seeding: Seed from a coarse grid instead of every sample
        cluster_all: Assign orphan samples to the nearest mode
        max_iter: Maximum shift iterations per seed
        random_state: Seed for the bandwidth estimate subsampling
    """
    bandwidth: Optional[float] = None
    quantile: float = 0.3
    n_samples: Optional[int] = 500
    bin_seeding: bool = True
    cluster_all: bool = True
    max_iter: int = 300
    random_state: Optional[int] = 42

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.bandwidth is not None and self.bandwidth <= 0:
            raise InvalidParameterError(f"bandwidth must be positive, got {self.bandwidth}")
        if not 0 < self.quantile <= 1:
            raise InvalidParameterError(f"quantile must be in (0, 1], got {self.quantile}")
        if self.n_samples is not None and self.n_samples < 1:
            raise InvalidParameterError(f"n_samples must be >= 1, got {self.n_samples}")
        if self.max_iter < 1:
            raise InvalidParameterError(f"max_iter must be >= 1, got {self.max_iter}")


@dataclass
class MeanShiftResult:
    """
    Results from Mean-Shift clustering.
    """
    labels: np.ndarray
    """Mode index for each sample. Shape: (N,). -1 marks orphans when cluster_all=False."""

    modes: np.ndarray
    """Density modes (cluster representatives). Shape: (n_modes, D)"""

    n_iter: int
    """Largest number of shift iterations over all seeds."""

    bandwidth: float
    """Bandwidth actually used."""

    @property
    def n_clusters(self) -> int:
        return len(self.modes)


class MeanShiftClusterer:
    """
    Mean-Shift clustering over pixel samples.

    Example:
        >>> clusterer = MeanShiftClusterer(MeanShiftConfig(bandwidth=0.3))
        >>> result = clusterer.fit_predict(pixels)  # pixels shape: (N, 3)
        >>> result.modes.shape
        (n_modes, 3)
    """

    def __init__(self, config: Optional[MeanShiftConfig] = None):
        self.config = config or MeanShiftConfig()
        self._result: Optional[MeanShiftResult] = None

    def estimate_bandwidth(self, samples: np.ndarray) -> float:
        """
        Estimate a bandwidth from the configured quantile.

        Raises:
            InvalidParameterError: If the estimate collapses to zero
                                   (e.g. a single-color image)
        """
        config = self.config
        n_samples = None
        if config.n_samples is not None:
            n_samples = min(config.n_samples, len(samples))

        bandwidth = float(estimate_bandwidth(
            samples,
            quantile=config.quantile,
            n_samples=n_samples,
            random_state=config.random_state
        ))

        if bandwidth <= 0:
            raise InvalidParameterError(
                "Estimated bandwidth is zero; pass an explicit bandwidth"
            )

        logger.debug(f"Estimated bandwidth {bandwidth:.4f} (quantile={config.quantile})")
        return bandwidth

    def fit_predict(self, pixels) -> MeanShiftResult:
        """
        Find density modes and assign every sample to one.

        Args:
            pixels: Samples, shape (N, D)

        Returns:
            result: MeanShiftResult with labels and modes
        """
        samples = as_samples(pixels)
        config = self.config

        bandwidth = config.bandwidth
        if bandwidth is None:
            bandwidth = self.estimate_bandwidth(samples)

        model = MeanShift(
            bandwidth=bandwidth,
            bin_seeding=config.bin_seeding,
            cluster_all=config.cluster_all,
            max_iter=config.max_iter
        )
        labels = model.fit_predict(samples)

        self._result = MeanShiftResult(
            labels=labels,
            modes=model.cluster_centers_,
            n_iter=int(model.n_iter_),
            bandwidth=float(bandwidth)
        )

        logger.info(
            f"Mean-Shift finished: bandwidth={bandwidth:.4f}, "
            f"modes={self._result.n_clusters}, n_samples={len(samples)}"
        )

        return self._result

    @property
    def result(self) -> MeanShiftResult:
        if self._result is None:
            raise RuntimeError("Must call fit_predict() before accessing results")
        return self._result
