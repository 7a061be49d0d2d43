"""
K-Means clustering module for pixel quantization.
"""

from .config import KMeansConfig
from .kmeans import (
    BaseKMeans,
    Cluster,
    KMeansResult,
    LloydKMeans,
    SklearnKMeans,
    as_samples,
    cluster,
    init_centroids,
)
from .metrics import METRICS, chebyshev, euclidean, get_metric, manhattan, squared_euclidean

__all__ = [
    'BaseKMeans',
    'Cluster',
    'KMeansConfig',
    'KMeansResult',
    'LloydKMeans',
    'METRICS',
    'SklearnKMeans',
    'as_samples',
    'chebyshev',
    'cluster',
    'euclidean',
    'get_metric',
    'init_centroids',
    'manhattan',
    'squared_euclidean',
]
