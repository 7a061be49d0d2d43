"""
Gaussian Naive Bayes Classification

Wraps sklearn's GaussianNB and exposes the fitted model the way it is
inspected: one univariate normal distribution per (class, feature) pair,
plus class priors. Samples can be drawn from the fitted distributions to
show what the model believes each class looks like.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np
from sklearn.naive_bayes import GaussianNB

from ..exceptions import DimensionMismatchError
from ..kmeans import as_samples

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalDistribution:
    """Univariate normal distribution N(mean, variance)."""
    mean: float
    variance: float

    @property
    def std(self) -> float:
        return float(np.sqrt(self.variance))

    def generate(self, n: int, rng: np.random.Generator) -> np.ndarray:
        """Draw n samples."""
        return rng.normal(self.mean, self.std, size=n)

    def __str__(self) -> str:
        return f"N(x; μ = {self.mean:.4g}, σ² = {self.variance:.4g})"


class NaiveBayesClassifier:
    """
    Gaussian Naive Bayes classifier.

    Example:
        >>> bayes = NaiveBayesClassifier().fit(inputs, outputs)
        >>> bayes.distributions[0][1]  # class 0, feature 1
        NormalDistribution(mean=..., variance=...)
        >>> predicted = bayes.predict(inputs)
    """

    def __init__(self, var_smoothing: float = 1e-9):
        """
        Args:
            var_smoothing: Fraction of the largest feature variance added to
                           every variance for numerical stability
        """
        self.var_smoothing = var_smoothing
        self._model: Optional[GaussianNB] = None

    def fit(self, inputs, outputs: Sequence[int]) -> 'NaiveBayesClassifier':
        """
        Estimate one normal distribution per class and feature.

        Args:
            inputs: Feature vectors, shape (N, D)
            outputs: Class label per vector, shape (N,)

        Returns:
            self: For method chaining

        Raises:
            DimensionMismatchError: If inputs and outputs disagree in length
        """
        samples = as_samples(inputs)
        outputs = np.asarray(outputs)

        if outputs.ndim != 1 or len(outputs) != len(samples):
            raise DimensionMismatchError(
                f"outputs must have shape ({len(samples)},), got {outputs.shape}"
            )

        self._model = GaussianNB(var_smoothing=self.var_smoothing)
        self._model.fit(samples, outputs)

        logger.info(
            f"Naive Bayes fitted: {len(samples)} samples, "
            f"{samples.shape[1]} features, classes={self.classes.tolist()}"
        )
        return self

    @property
    def model(self) -> GaussianNB:
        if self._model is None:
            raise RuntimeError("Must call fit() before using the classifier")
        return self._model

    @property
    def classes(self) -> np.ndarray:
        return self.model.classes_

    @property
    def priors(self) -> np.ndarray:
        """Class prior probabilities, shape (n_classes,)."""
        return self.model.class_prior_

    @property
    def distributions(self) -> List[List[NormalDistribution]]:
        """Grid of fitted distributions indexed [class][feature]."""
        means = self.model.theta_
        variances = self.model.var_
        return [
            [NormalDistribution(float(m), float(v)) for m, v in zip(class_means, class_vars)]
            for class_means, class_vars in zip(means, variances)
        ]

    def predict(self, inputs) -> np.ndarray:
        return self.model.predict(as_samples(inputs))

    def predict_proba(self, inputs) -> np.ndarray:
        return self.model.predict_proba(as_samples(inputs))

    def describe(self, feature_names: Optional[Sequence[str]] = None) -> List[Dict]:
        """
        One row per class with its prior and per-feature distribution.

        Args:
            feature_names: Column names; defaults to 'x0', 'x1', ...

        Returns:
            rows: [{'class': c, 'prior': p, name: NormalDistribution, ...}, ...]
        """
        distributions = self.distributions
        n_features = len(distributions[0])

        if feature_names is None:
            feature_names = [f"x{i}" for i in range(n_features)]
        elif len(feature_names) != n_features:
            raise DimensionMismatchError(
                f"Expected {n_features} feature names, got {len(feature_names)}"
            )

        rows = []
        for label, prior, row in zip(self.classes, self.priors, distributions):
            entry = {'class': label.item(), 'prior': float(prior)}
            entry.update(zip(feature_names, row))
            rows.append(entry)
        return rows

    def sample(self, n: int = 1000, random_state: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Draw n points per class from the fitted per-feature normals.

        Args:
            n: Points per class
            random_state: Seed for the generator

        Returns:
            points: Shape (n * n_classes, D), grouped by class
            labels: Class label of each point, shape (n * n_classes,)
        """
        rng = np.random.default_rng(random_state)

        points = []
        for row in self.distributions:
            points.append(np.column_stack([dist.generate(n, rng) for dist in row]))

        labels = np.repeat(self.classes, n)
        return np.vstack(points), labels
