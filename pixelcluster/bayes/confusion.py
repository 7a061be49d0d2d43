"""
Binary Confusion Matrix Statistics

Counts come from sklearn.metrics.confusion_matrix; the derived ratios
report 0.0 when their denominator is zero.
"""

from typing import Dict
import numpy as np
from sklearn.metrics import confusion_matrix

from ..exceptions import DimensionMismatchError, InvalidParameterError


def _ratio(numerator: float, denominator: float) -> float:
    return float(numerator / denominator) if denominator else 0.0


class ConfusionMatrix:
    """
    Two-class confusion matrix.

    Labels other than `positive` and `negative` are ignored.

    Example:
        >>> cm = ConfusionMatrix(predicted=[1, 0, 1, 1], expected=[1, 0, 0, 1])
        >>> cm.true_positives, cm.false_positives
        (2, 1)
        >>> cm.accuracy
        0.75
    """

    def __init__(self, predicted, expected, positive=1, negative=0):
        predicted = np.asarray(predicted)
        expected = np.asarray(expected)

        if predicted.shape != expected.shape or predicted.ndim != 1:
            raise DimensionMismatchError(
                f"predicted and expected must be 1D of equal length, "
                f"got {predicted.shape} and {expected.shape}"
            )
        if positive == negative:
            raise InvalidParameterError("positive and negative labels must differ")

        self.positive = positive
        self.negative = negative

        # Rows are expected, columns predicted: [[TN, FP], [FN, TP]]
        self.matrix = confusion_matrix(expected, predicted, labels=[negative, positive])
        (self.true_negatives, self.false_positives), \
            (self.false_negatives, self.true_positives) = self.matrix.tolist()

    @property
    def samples(self) -> int:
        return int(self.matrix.sum())

    @property
    def actual_positives(self) -> int:
        return self.true_positives + self.false_negatives

    @property
    def actual_negatives(self) -> int:
        return self.true_negatives + self.false_positives

    @property
    def accuracy(self) -> float:
        return _ratio(self.true_positives + self.true_negatives, self.samples)

    @property
    def error(self) -> float:
        return 1.0 - self.accuracy if self.samples else 0.0

    @property
    def sensitivity(self) -> float:
        """True positive rate (recall)."""
        return _ratio(self.true_positives, self.actual_positives)

    @property
    def specificity(self) -> float:
        """True negative rate."""
        return _ratio(self.true_negatives, self.actual_negatives)

    @property
    def false_positive_rate(self) -> float:
        return _ratio(self.false_positives, self.actual_negatives)

    @property
    def precision(self) -> float:
        """Positive predictive value."""
        return _ratio(self.true_positives, self.true_positives + self.false_positives)

    @property
    def negative_predictive_value(self) -> float:
        return _ratio(self.true_negatives, self.true_negatives + self.false_negatives)

    @property
    def f_score(self) -> float:
        return _ratio(2 * self.precision * self.sensitivity, self.precision + self.sensitivity)

    @property
    def matthews_correlation(self) -> float:
        tp, tn = self.true_positives, self.true_negatives
        fp, fn = self.false_positives, self.false_negatives
        denominator = np.sqrt(float((tp + fp) * (tp + fn) * (tn + fp) * (tn + fn)))
        return _ratio(tp * tn - fp * fn, denominator)

    def as_dict(self) -> Dict[str, float]:
        """All counts and statistics, keyed by name."""
        return {
            'samples': self.samples,
            'true_positives': self.true_positives,
            'false_positives': self.false_positives,
            'true_negatives': self.true_negatives,
            'false_negatives': self.false_negatives,
            'accuracy': self.accuracy,
            'error': self.error,
            'sensitivity': self.sensitivity,
            'specificity': self.specificity,
            'false_positive_rate': self.false_positive_rate,
            'precision': self.precision,
            'negative_predictive_value': self.negative_predictive_value,
            'f_score': self.f_score,
            'matthews_correlation': self.matthews_correlation,
        }

    def __repr__(self) -> str:
        return (
            f"ConfusionMatrix(TP={self.true_positives}, FP={self.false_positives}, "
            f"TN={self.true_negatives}, FN={self.false_negatives})"
        )


def split_hits_and_misses(inputs, expected, predicted, positive=1, negative=0) -> Dict[str, np.ndarray]:
    """
    Group points by outcome for a results scatterplot.

    'G1' is the negative class and 'G2' the positive one. A miss is listed
    under the class that was predicted.

    Args:
        inputs: Points, shape (N, D)
        expected: True labels, shape (N,)
        predicted: Predicted labels, shape (N,)

    Returns:
        {'G1 Hits', 'G2 Hits', 'G1 Miss', 'G2 Miss'} -> arrays of points
    """
    inputs = np.asarray(inputs)
    expected = np.asarray(expected)
    predicted = np.asarray(predicted)

    if not len(inputs) == len(expected) == len(predicted):
        raise DimensionMismatchError(
            f"inputs, expected and predicted must have equal lengths, got "
            f"{len(inputs)}, {len(expected)} and {len(predicted)}"
        )

    return {
        'G1 Hits': inputs[(predicted == negative) & (expected == negative)],
        'G2 Hits': inputs[(predicted == positive) & (expected == positive)],
        'G1 Miss': inputs[(predicted == negative) & (expected == positive)],
        'G2 Miss': inputs[(predicted == positive) & (expected == negative)],
    }
