"""
Color quantization: replace every pixel by its cluster representative.

    image -> ImageToArray -> clusterer -> recolor -> ArrayToImage -> image
"""

from dataclasses import dataclass
from typing import Optional, Union
import logging

import numpy as np
from PIL import Image

from ..exceptions import DimensionMismatchError, InvalidParameterError
from ..kmeans import KMeansConfig, KMeansResult, LloydKMeans
from ..meanshift import MeanShiftClusterer, MeanShiftConfig, MeanShiftResult
from .converters import ArrayToImage, ImageToArray

logger = logging.getLogger(__name__)


def recolor(labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Replace each sample by the centroid of its cluster.

    output[i] = centroids[labels[i]]

    Args:
        labels: Cluster id per sample, shape (N,)
        centroids: Cluster representatives, shape (K, D)

    Returns:
        recolored: New array of shape (N, D)

    Raises:
        InvalidParameterError: If a label is outside [0, K)
    """
    labels = np.asarray(labels)
    centroids = np.asarray(centroids)

    if labels.ndim != 1:
        raise DimensionMismatchError(f"labels must be 1D, got shape {labels.shape}")
    if labels.size and (labels.min() < 0 or labels.max() >= len(centroids)):
        raise InvalidParameterError(
            f"labels must be in [0, {len(centroids)}), "
            f"got range [{labels.min()}, {labels.max()}]"
        )

    return centroids[labels]


@dataclass
class QuantizationResult:
    """
    Output of a quantization run.

    Attributes:
        image: Recolored image
        labels: Cluster id per pixel, shape (H, W)
        palette: Cluster colors as uint8, shape (K, C)
        result: Raw clustering result (KMeansResult or MeanShiftResult)
    """
    image: Image.Image
    labels: np.ndarray
    palette: np.ndarray
    result: Union[KMeansResult, MeanShiftResult]

    @property
    def n_colors(self) -> int:
        return len(self.palette)


def _image_size(image: Union[Image.Image, np.ndarray]):
    if isinstance(image, Image.Image):
        return image.width, image.height
    image = np.asarray(image)
    if image.ndim not in (2, 3):
        raise DimensionMismatchError(
            f"Image must be (H, W) or (H, W, C), got shape {image.shape}"
        )
    return image.shape[1], image.shape[0]


def _quantize(image, cluster_fn, min_value: float, max_value: float) -> QuantizationResult:
    width, height = _image_size(image)
    to_array = ImageToArray(min=min_value, max=max_value)
    to_image = ArrayToImage(width, height, min=min_value, max=max_value)

    pixels = to_array.convert(image)
    labels, representatives, result = cluster_fn(pixels)

    recolored = recolor(labels, representatives)

    return QuantizationResult(
        image=to_image.convert(recolored),
        labels=labels.reshape(height, width),
        palette=to_image.denormalize(representatives),
        result=result
    )


def quantize_image(
    image: Union[Image.Image, np.ndarray],
    config: Optional[KMeansConfig] = None,
    min: float = -1.0,
    max: float = 1.0
) -> QuantizationResult:
    """
    Reduce an image to k colors with k-means.

    Args:
        image: PIL Image or uint8 array (H, W, C)
        config: K-means configuration (n_clusters, tol, metric...)
        min: Lower bound of the normalized sample range
        max: Upper bound of the normalized sample range

    Returns:
        QuantizationResult with the recolored image and its palette

    Example:
        >>> image = load_image('leaf.png')
        >>> quantized = quantize_image(image, KMeansConfig(n_clusters=4, tol=0.05))
        >>> quantized.image.save('leaf_4colors.png')
    """
    kmeans = LloydKMeans(config)

    def run(pixels):
        result = kmeans.fit_predict(pixels)
        return result.labels, result.centroids, result

    quantized = _quantize(image, run, min, max)
    logger.info(f"Quantized image to {quantized.n_colors} colors with K-Means")
    return quantized


def quantize_image_meanshift(
    image: Union[Image.Image, np.ndarray],
    config: Optional[MeanShiftConfig] = None,
    min: float = -1.0,
    max: float = 1.0
) -> QuantizationResult:
    """
    Reduce an image to its Mean-Shift density modes.

    The number of colors depends on the bandwidth. With
    config.cluster_all=False orphan pixels have no mode and recoloring
    fails with InvalidParameterError.
    """
    clusterer = MeanShiftClusterer(config)

    def run(pixels):
        result = clusterer.fit_predict(pixels)
        return result.labels, result.modes, result

    quantized = _quantize(image, run, min, max)
    logger.info(f"Quantized image to {quantized.n_colors} colors with Mean-Shift")
    return quantized
