"""
Naive Bayes classification with confusion-matrix statistics.

Example:
    >>> from pixelcluster.bayes import NaiveBayesClassifier, ConfusionMatrix
    >>>
    >>> bayes = NaiveBayesClassifier().fit(inputs, outputs)
    >>> predicted = bayes.predict(inputs)
    >>> cm = ConfusionMatrix(predicted, outputs, positive=1, negative=0)
    >>> print(f"Accuracy: {cm.accuracy:.4f}")
"""

from .confusion import ConfusionMatrix, split_hits_and_misses
from .naive_bayes import NaiveBayesClassifier, NormalDistribution

__all__ = [
    'ConfusionMatrix',
    'NaiveBayesClassifier',
    'NormalDistribution',
    'split_hits_and_misses',
]
